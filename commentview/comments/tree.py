"""Traversal and addressing helpers for comment trees."""

from __future__ import annotations

from collections.abc import Iterator

from .types import Comment


class CommentNotFoundError(LookupError):
    """Raised when an index path does not address a comment."""


def iter_comments(comments: list[Comment], level: int = 0) -> Iterator[tuple[int, Comment]]:
    """Yield ``(level, comment)`` pairs depth-first in document order."""
    for comment in comments:
        yield level, comment
        yield from iter_comments(comment.children, level + 1)


def count_comments(comments: list[Comment]) -> int:
    return sum(1 for _ in iter_comments(comments))


def parse_index_path(value: str) -> tuple[int, ...]:
    """Parse a dotted 1-based path such as ``"2.1"``.

    Raises ``ValueError`` for empty, non-numeric, or non-positive parts.
    """
    parts = [part.strip() for part in value.strip().split(".")]
    if not parts or any(not part for part in parts):
        raise ValueError(f"invalid comment path: {value!r}")
    indexes = tuple(int(part) for part in parts)
    if any(index <= 0 for index in indexes):
        raise ValueError(f"comment path parts must be >= 1: {value!r}")
    return indexes


def comment_at_index_path(comments: list[Comment], path: tuple[int, ...]) -> Comment:
    """Return the comment addressed by a 1-based index path."""
    if not path:
        raise CommentNotFoundError("empty comment path")
    siblings = comments
    found: Comment | None = None
    for depth, index in enumerate(path):
        if index < 1 or index > len(siblings):
            shown = ".".join(str(part) for part in path[: depth + 1])
            raise CommentNotFoundError(f"no comment at {shown}")
        found = siblings[index - 1]
        siblings = found.children
    assert found is not None
    return found


def find_comment_at_line(comments: list[Comment], line: int) -> Comment | None:
    """Return the innermost comment whose block covers the 0-based ``line``."""
    for comment in comments:
        if comment.start_pos.line <= line < comment.end_pos.line:
            inner = find_comment_at_line(comment.children, line)
            return inner if inner is not None else comment
    return None
