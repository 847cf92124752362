"""Terminal outline of a comment tree.

Headers show the index path, author, timestamp, and 1-based line range.
Comment bodies are highlighted as Markdown with Pygments unless color is off.
"""

from __future__ import annotations

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import MarkdownLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .comments import Comment
from .source import sanitize_terminal_text

DEFAULT_STYLE = "monokai"
INDENT = "  "
TIMESTAMP_DISPLAY_FORMAT = "%Y-%m-%d %H:%M"

_FORMATTERS: dict[str, Terminal256Formatter] = {}

BOLD = "\033[1m"
RESET = "\033[0m"


def _normalize_style(style: str) -> str:
    """Fall back to the default style for unknown Pygments style names."""
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def highlight_markdown(text: str, style: str = DEFAULT_STYLE) -> str:
    """Return ``text`` with ANSI Markdown highlighting."""
    if not text:
        return text
    formatter = _formatter_for_style(_normalize_style(style))
    return highlight(text, MarkdownLexer(), formatter).rstrip("\n")


def format_comment_header(comment: Comment, label: str, no_color: bool = True) -> str:
    """Render the one-line summary for ``comment``."""
    parts = [sanitize_terminal_text(comment.name) or "(anonymous)"]
    if comment.timestamp is not None:
        parts.append(comment.timestamp.strftime(TIMESTAMP_DISPLAY_FORMAT))
    start = comment.start_pos.line + 1
    end = comment.end_pos.line
    parts.append(f"L{start}-{end}" if end > start else f"L{start}")
    summary = " · ".join(parts)
    if comment.children and comment.children_hidden:
        summary += f" [+{len(comment.children)} hidden]"
    if no_color:
        return f"{label} {summary}"
    return f"{BOLD}{label}{RESET} {summary}"


def render_comment_tree(
    comments: list[Comment],
    *,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
    expand_all: bool = False,
) -> str:
    """Render a nested outline; collapsed replies are skipped unless ``expand_all``."""
    out: list[str] = []

    def walk(nodes: list[Comment], prefix: str, level: int) -> None:
        indent = INDENT * level
        for position, comment in enumerate(nodes, start=1):
            label = f"{prefix}{position}"
            out.append(indent + format_comment_header(comment, label, no_color))
            body = sanitize_terminal_text(comment.content)
            if body:
                rendered = body if no_color else highlight_markdown(body, style)
                for line in rendered.split("\n"):
                    out.append(f"{indent}{INDENT}{line}")
            if comment.children and (expand_all or not comment.children_hidden):
                walk(comment.children, f"{label}.", level + 1)

    walk(comments, "", 0)
    if not out:
        return "No comments.\n"
    text = "\n".join(out) + "\n"
    if not no_color:
        text += RESET
    return text
