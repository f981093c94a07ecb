"""Terminal output helpers: banners and plain-text tables."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

BANNER_LENGTH = 80


def banner(symbol: str, length: int = BANNER_LENGTH) -> str:
    """Return ``symbol`` repeated ``length`` times."""
    return symbol * length


def print_banner(symbol: str, length: int = BANNER_LENGTH) -> None:
    """Print a banner line."""
    print(banner(symbol, length))


def log_banner(message: str, symbol: str = "/") -> None:
    """Print ``message`` framed by two banners and surrounded by blank lines."""
    print()
    print_banner(symbol)
    print(message)
    print_banner(symbol)
    print()


def format_row(values: Iterable[Any]) -> str:
    """Join values on one line, separated by spaces."""
    return " ".join(str(value) for value in values)


def format_grid(values: Sequence[Any], dim: int) -> str:
    """Lay out a flat sequence of ``dim * dim`` values as a square grid of integers."""
    if dim < 0 or len(values) != dim * dim:
        raise ValueError(f"expected {dim * dim} values for a {dim}x{dim} grid, got {len(values)}")
    rows = (values[start:start + dim] for start in range(0, len(values), dim))
    return "\n".join(format_row(int(value) for value in row) for row in rows)


def format_matrix(rows: Iterable[Iterable[Any]]) -> str:
    """Format a two-dimensional collection, one row per line."""
    return "\n".join(format_row(row) for row in rows)


def show(name: str, value: Any) -> None:
    """Print a named value as ``name is value``."""
    print(f"{name} is {value}")