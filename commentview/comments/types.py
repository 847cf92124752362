"""Comment tree datatypes shared by extraction, reconciliation, and splicing."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class LinePos:
    """Line-granular document position (0-based line, column always 0)."""

    line: int
    ch: int = 0


@dataclass
class Comment:
    """One parsed ``[!comment]`` callout block.

    ``start_pos`` is the header line and ``end_pos`` the first line after the
    whole block, both in top-level document coordinates. ``content_pos`` is
    the document line the comment annotates and is shared by every node of
    one ancestor chain. ``content`` excludes nested replies.

    ``children_hidden`` is view state only: it is not derived from text and
    takes no part in equality.
    """

    name: str
    content: str
    start_pos: LinePos
    end_pos: LinePos
    content_pos: LinePos
    timestamp: datetime | None = None
    depth: int = 1
    children: list[Comment] = field(default_factory=list)
    children_hidden: bool = field(default=False, compare=False)

    @property
    def line_count(self) -> int:
        """Number of document lines covered by the block, replies included."""
        return self.end_pos.line - self.start_pos.line

    def match_key(self) -> tuple[str, str, int]:
        """Identity-free key used to carry view state across re-parses."""
        return (self.name, self.content, len(self.children))
