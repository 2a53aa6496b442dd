"""String helpers: splitting, escaping and list formatting."""

from __future__ import annotations

from collections.abc import Iterable

_ESCAPES = {
    "\0": "\\0",
    "\a": "\\a",
    "\b": "\\b",
    "\x1b": "\\e",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}

_UNESCAPES = {raw[1]: char for char, raw in _ESCAPES.items()}


def split_trimmed(text: str, delim: str) -> list[str]:
    """Split ``text`` on ``delim`` and strip spaces from both ends of every part."""
    if not delim:
        raise ValueError("delimiter must not be empty")
    return [part.strip(" ") for part in text.split(delim)]


def to_raw_string(data: str) -> str:
    """Replace special characters (newline, tab, ...) with their escape sequences."""
    return "".join(_ESCAPES.get(char, char) for char in data)


def from_raw_string(data: str) -> str:
    """Turn escape sequences back into the characters they stand for.

    A backslash before an unknown character is dropped and the character kept;
    a trailing backslash is left alone.
    """
    out: list[str] = []
    chars = iter(data)
    for char in chars:
        if char != "\\":
            out.append(char)
            continue
        following = next(chars, None)
        if following is None:
            out.append(char)
            break
        out.append(_UNESCAPES.get(following, following))
    return "".join(out)


def list_to_str(items: Iterable[str]) -> str:
    """Format items as ``[a, b, c]``."""
    return "[" + ", ".join(items) + "]"