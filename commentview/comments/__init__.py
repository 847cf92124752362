"""Comment parsing core: extraction, reconciliation, and edit splicing.

Turns Markdown text containing ``[!comment]`` callouts into a tree of
``Comment`` records and maps tree actions back onto text edits.
"""

from __future__ import annotations

from .extract import extract, extract_comments
from .reconcile import reconcile
from .splice import (
    SpliceResult,
    format_header,
    splice_insert_at_cursor,
    splice_insert_child,
    splice_remove,
)
from .timestamps import format_timestamp, parse_timestamp, split_header
from .tree import (
    CommentNotFoundError,
    comment_at_index_path,
    count_comments,
    find_comment_at_line,
    iter_comments,
    parse_index_path,
)
from .types import Comment, LinePos

__all__ = [
    "Comment",
    "LinePos",
    "extract",
    "extract_comments",
    "reconcile",
    "SpliceResult",
    "format_header",
    "splice_insert_child",
    "splice_remove",
    "splice_insert_at_cursor",
    "parse_timestamp",
    "format_timestamp",
    "split_header",
    "CommentNotFoundError",
    "comment_at_index_path",
    "count_comments",
    "find_comment_at_line",
    "iter_comments",
    "parse_index_path",
]
