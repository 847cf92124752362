"""Last-known comment tree per open document.

``CommentIndex`` is the only stateful piece around the parser. An entry is
created on the first parse of a document, replaced wholesale on every later
parse, and dropped with ``forget`` once the document is closed.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable

from .comments import Comment, extract_comments, reconcile
from .comments.timestamps import DEFAULT_DATE_FORMAT

logger = logging.getLogger(__name__)


class CommentIndex:
    """Map document ids to their most recent comment tree."""

    def __init__(
        self,
        *,
        date_format: str = DEFAULT_DATE_FORMAT,
        collapse_by_default: bool = False,
        recursive_reconcile: bool = True,
    ) -> None:
        self.date_format = date_format
        self.collapse_by_default = collapse_by_default
        self.recursive_reconcile = recursive_reconcile
        self._trees: dict[Hashable, list[Comment]] = {}

    def __contains__(self, document_id: Hashable) -> bool:
        return document_id in self._trees

    def __len__(self) -> int:
        return len(self._trees)

    def parse(self, document_id: Hashable, text: str) -> list[Comment]:
        """Extract comments from ``text`` and carry over prior view state."""
        fresh = extract_comments(
            text,
            date_format=self.date_format,
            hidden_by_default=self.collapse_by_default,
        )
        tree = reconcile(self._trees.get(document_id), fresh, recursive=self.recursive_reconcile)
        self._trees[document_id] = tree
        logger.debug("Parsed %d top-level comments for %s", len(tree), document_id)
        return tree

    def get(self, document_id: Hashable) -> list[Comment] | None:
        return self._trees.get(document_id)

    def forget(self, document_id: Hashable) -> None:
        """Discard the cached tree for a document that is no longer open."""
        self._trees.pop(document_id, None)

    def set_children_hidden(self, comment: Comment, hidden: bool) -> None:
        comment.children_hidden = bool(hidden)

    def toggle_children_hidden(self, comment: Comment) -> bool:
        """Flip the collapsed state of ``comment`` and return the new value."""
        comment.children_hidden = not comment.children_hidden
        return comment.children_hidden
