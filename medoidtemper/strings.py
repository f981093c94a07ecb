"""Small string helpers used when reading parameter and problem files."""

from __future__ import annotations

DEFAULT_WHITESPACE = " \t\n"


def strip(text: str, whitespace: str = DEFAULT_WHITESPACE) -> str:
    """Remove any of the characters in ``whitespace`` from both ends of ``text``."""
    return text.strip(whitespace)


def pop_delim(text: str, delim: str) -> tuple[str, str]:
    """Split ``text`` at the first ``delim``.

    Returns ``(head, rest)`` where ``head`` is everything before the delimiter
    and ``rest`` everything after it. When the delimiter is absent the whole
    text is the head, and the rest is the text less ``len(delim) - 1`` leading
    characters.
    """
    pos = text.find(delim)
    if pos < 0:
        return text, text[max(len(delim) - 1, 0):]
    return text[:pos], text[pos + len(delim):]


def get_filename(path: str) -> str:
    """Return the part of ``path`` after its last forward slash."""
    return path.rsplit("/", 1)[-1]