"""Carry view state across re-parses of the same document.

Comments carry no persistent identifiers, so nodes are matched by
``(name, content, len(children))``. This is a best-effort heuristic: an edit
below a node changes its child count or its replies and resets its collapsed
state, and distinct siblings with identical text can share state. Swap
``match_key`` for a content hash if that ever matters.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable

from .types import Comment

MatchKey = Callable[[Comment], Hashable]


def _default_match_key(comment: Comment) -> Hashable:
    return comment.match_key()


def reconcile(
    previous: list[Comment] | None,
    fresh: list[Comment],
    *,
    recursive: bool = True,
    match_key: MatchKey = _default_match_key,
) -> list[Comment]:
    """Copy ``children_hidden`` from ``previous`` onto matching ``fresh`` nodes.

    ``fresh`` is updated in place and returned. Each previous node picks the
    first fresh sibling with an equal key. With ``recursive`` the reply lists
    of matched pairs are reconciled the same way.
    """
    if not previous:
        return fresh

    for old in previous:
        key = match_key(old)
        for new in fresh:
            if match_key(new) != key:
                continue
            new.children_hidden = old.children_hidden
            if recursive and old.children:
                reconcile(old.children, new.children, recursive=True, match_key=match_key)
            break
    return fresh
