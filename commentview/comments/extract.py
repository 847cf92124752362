"""Comment extraction from Markdown callout blocks.

A comment is a run of consecutive ``>``-prefixed lines whose first line is a
``[!comment]`` callout header. The body of each block is re-scanned with the
header's own markers removed, which yields nested replies. Positions are always
reported in the coordinates of the top-level document.
"""

from __future__ import annotations

import logging
import re

from .lines import split_lines
from .timestamps import DEFAULT_DATE_FORMAT, split_header
from .types import Comment, LinePos

logger = logging.getLogger(__name__)

MAX_NESTING_DEPTH = 32

_MARKER_LINE_RE = re.compile(r"^\s*>")
_HEADER_RE = re.compile(
    r"^\s*(?P<markers>(?:>\s*)+)\[!comment\][+-]?(?:\s+(?P<rest>.*))?$",
    re.IGNORECASE,
)


def _strip_markers(line: str, depth: int) -> str:
    """Remove up to ``depth`` leading ``>`` markers and trim the remainder."""
    remaining = line.lstrip()
    for _ in range(depth):
        if not remaining.startswith(">"):
            break
        remaining = remaining[1:].lstrip()
    return remaining.strip()


def _header_depth(match: re.Match[str]) -> int:
    return match.group("markers").count(">")


def _block_end(lines: list[str], start: int, depth: int) -> int:
    """Return the index of the first line after the block headed at ``start``.

    The block continues over consecutive marker lines. A header at the same or
    a shallower depth begins a sibling block instead.
    """
    end = start + 1
    while end < len(lines):
        line = lines[end]
        if _MARKER_LINE_RE.match(line) is None:
            break
        header = _HEADER_RE.match(line)
        if header is not None and _header_depth(header) <= depth:
            break
        end += 1
    return end


def extract(
    text: str,
    line_offset: int = 0,
    inherited_content_pos: LinePos | None = None,
    *,
    date_format: str = DEFAULT_DATE_FORMAT,
    hidden_by_default: bool = False,
    _nesting: int = 0,
    _base_depth: int = 0,
) -> list[Comment]:
    """Extract comment blocks from ``text`` in document order.

    ``line_offset`` maps local line numbers onto the top-level document.
    Nested calls pass ``inherited_content_pos`` so a whole reply chain points
    at the same annotated line; top-level comments annotate the line right
    after their block.
    """
    lines = split_lines(text)
    comments: list[Comment] = []
    idx = 0
    while idx < len(lines):
        header = _HEADER_RE.match(lines[idx])
        if header is None:
            idx += 1
            continue

        depth = _header_depth(header)
        end = _block_end(lines, idx, depth)
        name, timestamp = split_header(header.group("rest") or "", date_format)
        start_pos = LinePos(line_offset + idx)
        end_pos = LinePos(line_offset + end)
        content_pos = inherited_content_pos if inherited_content_pos is not None else end_pos

        body = [_strip_markers(line, depth) for line in lines[idx + 1 : end]]
        if _nesting >= MAX_NESTING_DEPTH:
            logger.debug("Not descending into replies below line %d: nesting limit reached", start_pos.line)
            children: list[Comment] = []
        else:
            children = extract(
                "\n".join(body),
                line_offset + idx + 1,
                content_pos,
                date_format=date_format,
                hidden_by_default=hidden_by_default,
                _nesting=_nesting + 1,
                _base_depth=_base_depth + depth,
            )

        own_lines = body
        for body_idx, body_line in enumerate(body):
            if _HEADER_RE.match(body_line) is not None:
                own_lines = body[:body_idx]
                break

        comments.append(
            Comment(
                name=name,
                content="\n".join(own_lines).strip(),
                start_pos=start_pos,
                end_pos=end_pos,
                content_pos=content_pos,
                timestamp=timestamp,
                depth=_base_depth + depth,
                children=children,
                children_hidden=hidden_by_default,
            )
        )
        idx = end
    return comments


def extract_comments(
    text: str,
    *,
    date_format: str = DEFAULT_DATE_FORMAT,
    hidden_by_default: bool = False,
) -> list[Comment]:
    """Extract the comment tree of a full document."""
    return extract(text, 0, None, date_format=date_format, hidden_by_default=hidden_by_default)
