"""Document loading and saving for the command-line host."""

from __future__ import annotations

import codecs
import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


@dataclass(frozen=True)
class Document:
    """Decoded document text plus the encoding needed to write it back."""

    text: str
    encoding: str = "utf-8"


def read_document(path: Path) -> Document:
    """Read ``path`` using tolerant encoding fallback order.

    A UTF-8 byte-order mark selects ``utf-8-sig`` so the mark is neither part
    of the text nor lost on save. Otherwise UTF-8 is tried, then latin-1.
    Line endings are kept as-is.
    """
    raw = path.read_bytes()
    if raw.startswith(codecs.BOM_UTF8):
        return Document(raw.decode("utf-8-sig", errors="replace"), "utf-8-sig")
    try:
        return Document(raw.decode("utf-8"), "utf-8")
    except UnicodeDecodeError:
        return Document(raw.decode("latin-1"), "latin-1")


def read_text(path: Path) -> str:
    return read_document(path).text


def write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """Replace the contents of ``path`` with ``text`` without newline translation.

    Text that cannot be represented in ``encoding`` is written as UTF-8.
    """
    try:
        data = text.encode(encoding)
    except UnicodeEncodeError:
        logger.warning("%s cannot hold the new text as %s; writing UTF-8", path, encoding)
        data = text.encode("utf-8")
    path.write_bytes(data)
    logger.info("Wrote %s", path)


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)
