"""Poll-based change detection for open documents.

Stat signatures decide whether a document changed since its last parse.
Changed documents are re-parsed through ``CommentIndex`` at most once per
debounce window; a change dropped by the limiter stays pending and is picked
up by a later poll.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .comments import Comment
from .debounce import Debouncer
from .index import CommentIndex
from .source import read_text

logger = logging.getLogger(__name__)

Signature = tuple[str, int, int]


def document_signature(path: Path) -> Signature:
    """Return a stable stat tuple describing ``path`` existence and metadata."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0)
    except OSError:
        return ("error", 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size)


class DocumentWatcher:
    """Track open documents and re-parse the ones that changed on disk."""

    def __init__(
        self,
        index: CommentIndex,
        debouncer: Debouncer,
        *,
        read: Callable[[Path], str] = read_text,
        signature: Callable[[Path], Signature] = document_signature,
    ) -> None:
        self.index = index
        self.debouncer = debouncer
        self._read = read
        self._signature = signature
        self._signatures: dict[Path, Signature] = {}

    @staticmethod
    def _key(path: Path) -> Path:
        try:
            return path.resolve()
        except OSError:
            return path

    @property
    def paths(self) -> list[Path]:
        return list(self._signatures)

    def open(self, path: Path) -> list[Comment]:
        """Parse ``path`` right away and start watching it."""
        key = self._key(path)
        self._signatures[key] = self._signature(key)
        self.debouncer.should_run(key)
        return self.index.parse(key, self._read(key))

    def close(self, path: Path) -> None:
        key = self._key(path)
        self._signatures.pop(key, None)
        self.debouncer.forget(key)
        self.index.forget(key)

    def poll(self) -> dict[Path, list[Comment]]:
        """Re-parse changed documents and return their fresh trees."""
        updated: dict[Path, list[Comment]] = {}
        for key, previous in list(self._signatures.items()):
            current = self._signature(key)
            if current == previous:
                continue
            if current[0] != "ok":
                logger.debug("Skipping %s: %s", key, current[0])
                continue
            if not self.debouncer.should_run(key):
                continue
            try:
                text = self._read(key)
            except OSError as exc:
                logger.warning("Could not read %s: %s", key, exc)
                continue
            self._signatures[key] = current
            updated[key] = self.index.parse(key, text)
            logger.info("Re-parsed %s after change", key)
        return updated
