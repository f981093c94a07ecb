"""Reading parameter files and whitespace-separated matrix files."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Callable, TypeVar

import numpy as np

from medoidtemper.display import log_banner

T = TypeVar("T")

_INT_PREFIX = re.compile(r"[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class MissingParameterError(LookupError):
    """A required parameter is not present in the parameter map."""

    def __init__(self, name: str) -> None:
        super().__init__(f"PARAMETER {name} DOES NOT EXIST IN PARAM FILE")
        self.name = name


def file_stem(path: str) -> str:
    """Return the file name without its directories and its last extension."""
    no_path = re.split(r"[\\/]", path)[-1]
    dot = no_path.rfind(".")
    return no_path if dot < 0 else no_path[:dot]


def check_file(path: str | Path) -> Path:
    """Raise FileNotFoundError unless ``path`` exists; report it otherwise."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"FILE {path} DOES NOT EXIST!")
    print(f"FILE {path} EXISTS!")
    return file_path


def read_matrix(
    path: str | Path,
    rows: int,
    cols: int,
    dtype: Any = np.float32,
) -> np.ndarray:
    """Read a ``rows`` x ``cols`` matrix, one whitespace-separated row per line.

    Extra lines and extra values on a line are ignored.
    """
    file_path = check_file(path)
    matrix = np.empty((rows, cols), dtype=dtype)
    with file_path.open() as stream:
        lines = iter(stream)
        for row_index in range(rows):
            line = next(lines, None)
            if line is None:
                raise ValueError(f"{path}: expected {rows} rows, found {row_index}")
            tokens = line.split()
            if len(tokens) < cols:
                raise ValueError(
                    f"{path}: row {row_index} has {len(tokens)} values, expected {cols}"
                )
            matrix[row_index] = np.asarray(tokens[:cols]).astype(dtype)
    return matrix


def parse_params(lines: Iterable[str]) -> dict[str, str]:
    """Parse ``name value`` lines into a dict.

    Blank lines and lines whose first word contains ``/`` are skipped; only the
    first word after the name is kept as the value.
    """
    params: dict[str, str] = {}
    for line in lines:
        tokens = line.split()
        if not tokens or "/" in tokens[0]:
            continue
        params[tokens[0]] = tokens[1] if len(tokens) > 1 else ""
    return params


def read_params(path: str | Path) -> dict[str, str]:
    """Read a parameter file, echoing each parameter as it is loaded."""
    log_banner("LOADING PARAMETERS...", "\\")
    file_path = check_file(path)
    with file_path.open() as stream:
        params = parse_params(stream)
    for name, value in params.items():
        print(f"{name} {value}")
    log_banner("FINISHED LOADING PARAMETERS...", "/")
    return params


def _convert(text: str, kind: Callable[[str], T]) -> T:
    token = text.split()[0] if text.split() else ""
    if kind is str:
        return token  # type: ignore[return-value]
    try:
        return kind(token)
    except ValueError:
        pattern = {int: _INT_PREFIX, float: _FLOAT_PREFIX}.get(kind)  # type: ignore[call-overload]
        match = pattern.match(token) if pattern is not None else None
        if match is None:
            raise ValueError(f"cannot read {text!r} as {getattr(kind, '__name__', kind)}") from None
        return kind(match.group())


def get_param(params: dict[str, str], name: str, kind: Callable[[str], T] = str) -> T:
    """Return parameter ``name`` converted with ``kind``.

    Like a stream extraction, a numeric value is read from the leading part of
    the text. Raises MissingParameterError if the parameter is absent.
    """
    if name not in params:
        raise MissingParameterError(name)
    return _convert(params[name], kind)