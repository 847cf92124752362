"""Public package surface for commentview.

Exports the comment-parsing core and ``main`` for programmatic CLI use.
Host-side helpers (config, watching, rendering) live in submodules.
"""

from __future__ import annotations

from .comments import (
    Comment,
    LinePos,
    SpliceResult,
    extract_comments,
    reconcile,
    splice_insert_at_cursor,
    splice_insert_child,
    splice_remove,
)
from .index import CommentIndex


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = [
    "Comment",
    "CommentIndex",
    "LinePos",
    "SpliceResult",
    "extract_comments",
    "main",
    "reconcile",
    "splice_insert_at_cursor",
    "splice_insert_child",
    "splice_remove",
]
