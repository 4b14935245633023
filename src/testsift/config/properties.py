"""Java-style properties parsing.

Supported syntax:
- ``key=value``, ``key: value`` and ``key value`` separators
- ``#`` and ``!`` comment lines, blank lines
- a trailing odd run of backslashes continues the logical line; leading
  whitespace of the continuation is dropped
- escapes ``\\t \\n \\r \\f \\uXXXX``; any other escaped character stands for itself
- only ``\\n``, ``\\r`` and ``\\r\\n`` end a line; form feed is whitespace and other
  Unicode separators are ordinary characters

Later duplicates win. Values are kept exactly as written after the separator.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _logical_lines(text: str) -> Iterator[str]:
    pending: str | None = None
    for raw in _LINE_BREAK.split(text):
        line = raw.lstrip(_WHITESPACE)
        if pending is None:
            if not line or line[0] in "#!":
                continue
        else:
            line = pending + line

        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = line[:-1]
            continue
        pending = None
        yield line

    if pending is not None:
        yield pending


def _unescape(text: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 >= len(text):
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt == "u":
            digits = text[i + 2 : i + 6]
            if len(digits) != 4 or any(c not in "0123456789abcdefABCDEF" for c in digits):
                raise ValueError(f"Malformed \\uxxxx encoding: {text[i : i + 6]!r}")
            out.append(chr(int(digits, 16)))
            i += 6
            continue
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _split_entry(line: str) -> tuple[str, str]:
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in _SEPARATORS or ch in _WHITESPACE:
            break
        i += 1
    key = line[:i]

    # Skip whitespace, then at most one separator, then whitespace again
    while i < n and line[i] in _WHITESPACE:
        i += 1
    if i < n and line[i] in _SEPARATORS:
        i += 1
    while i < n and line[i] in _WHITESPACE:
        i += 1
    return key, line[i:]


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties text into an insertion-ordered dict.

    Raises:
        ValueError: On a malformed ``\\uXXXX`` escape.
    """
    entries: dict[str, str] = {}
    for line in _logical_lines(text):
        raw_key, raw_value = _split_entry(line)
        entries[_unescape(raw_key)] = _unescape(raw_value)
    return entries


def load_properties(path: Path) -> dict[str, str]:
    """Read and parse a UTF-8 properties file.

    Raises:
        OSError: When the file cannot be read.
        UnicodeDecodeError: When the file is not valid UTF-8.
        ValueError: On malformed escapes.
    """
    with path.open(encoding="utf-8") as f:
        return parse_properties(f.read())
