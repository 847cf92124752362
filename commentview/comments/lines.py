"""Line splitting shared by extraction and splicing.

Only ``\\r\\n``, ``\\r`` and ``\\n`` count as line breaks, so line numbers
agree with what editors show (``str.splitlines`` also splits on form feeds
and Unicode separators).
"""

from __future__ import annotations

import re

BYTE_ORDER_MARK = "\ufeff"

_LINE_RE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+\Z")
_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


def split_lines_keepends(text: str) -> list[str]:
    """Split ``text`` into lines that keep their terminators."""
    return _LINE_RE.findall(text)


def split_lines(text: str) -> list[str]:
    """Split ``text`` into lines without terminators.

    A trailing line break does not produce an extra empty line, and a leading
    byte-order mark is dropped from the first line.
    """
    lines = [line.rstrip("\r\n") for line in split_lines_keepends(text)]
    if lines and lines[0].startswith(BYTE_ORDER_MARK):
        lines[0] = lines[0][len(BYTE_ORDER_MARK) :]
    return lines


def first_newline(text: str) -> str:
    """Return the line break sequence used by the first line of ``text``."""
    match = _NEWLINE_RE.search(text)
    return match.group(0) if match else "\n"
