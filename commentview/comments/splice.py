"""Text edits that add or remove comment blocks.

Every helper is a pure ``str -> str`` transform that expects positions from
the latest parse of the same text. Stale positions are not detected: indices
are clamped to the document, but the wrong lines may be edited.
"""

from __future__ import annotations

from dataclasses import dataclass

from .lines import first_newline, split_lines_keepends
from .timestamps import sanitize_name
from .types import Comment


@dataclass(frozen=True)
class SpliceResult:
    """Edited document text plus the 1-based line where typing should start."""

    text: str
    content_line_number: int


def format_header(name: str, timestamp_text: str | None = None) -> str:
    """Build header text (without markers) for a new comment."""
    label = sanitize_name(name)
    stamp = (timestamp_text or "").strip()
    if stamp:
        return f"[!comment] {label} | {stamp}"
    return f"[!comment] {label}"


def _markers(depth: int) -> str:
    return ">" * max(1, depth)


def _insert_lines(text: str, index: int, new_lines: list[str]) -> tuple[str, int]:
    """Insert ``new_lines`` before line ``index``; return text and clamped index."""
    lines = split_lines_keepends(text)
    newline = first_newline(text)
    index = max(0, min(index, len(lines)))
    if index == len(lines) and lines and not lines[-1].endswith(("\n", "\r")):
        lines[-1] += newline
    lines[index:index] = [line + newline for line in new_lines]
    return "".join(lines), index


def splice_insert_child(
    text: str,
    parent: Comment,
    author_name: str,
    timestamp_text: str | None = None,
) -> SpliceResult:
    """Append an empty reply to ``parent``, after any existing replies.

    Three lines go in directly after the parent block: a blank continuation
    line, the reply header one marker deeper, and a blank content line.
    """
    outer = _markers(parent.depth)
    inner = _markers(parent.depth + 1)
    new_text, index = _insert_lines(
        text,
        max(parent.end_pos.line, parent.start_pos.line + 1),
        [
            outer,
            f"{inner} {format_header(author_name, timestamp_text)}",
            f"{inner} ",
        ],
    )
    return SpliceResult(new_text, index + 3)


def splice_remove(text: str, comment: Comment) -> str:
    """Delete the lines of ``comment`` including all of its replies."""
    lines = split_lines_keepends(text)
    start = max(0, min(comment.start_pos.line, len(lines)))
    end = max(start, min(comment.end_pos.line, len(lines)))
    del lines[start:end]
    return "".join(lines)


def splice_insert_at_cursor(
    text: str,
    cursor_line: int,
    author_name: str,
    timestamp_text: str | None = None,
) -> SpliceResult:
    """Insert a new top-level comment above the 0-based ``cursor_line``.

    The block is a header plus one blank content line, so it annotates the
    line the cursor was on.
    """
    new_text, index = _insert_lines(
        text,
        cursor_line,
        [f"> {format_header(author_name, timestamp_text)}", "> "],
    )
    return SpliceResult(new_text, index + 2)
