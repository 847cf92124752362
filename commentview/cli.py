"""Command-line front door for commentview.

Lists the ``[!comment]`` callouts of a Markdown file as a tree, adds new
comments or replies, removes comment blocks, watches files for changes, and
shows or changes saved settings.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path

from . import config
from .comments import (
    Comment,
    CommentNotFoundError,
    comment_at_index_path,
    find_comment_at_line,
    format_timestamp,
    parse_index_path,
    splice_insert_at_cursor,
    splice_insert_child,
    splice_remove,
)
from .comments.lines import first_newline, split_lines, split_lines_keepends
from .config import Settings, load_settings
from .debounce import Debouncer
from .index import CommentIndex
from .render import render_comment_tree
from .source import Document, read_document, write_text
from .watch import DocumentWatcher

logger = logging.getLogger(__name__)

WATCH_POLL_SECONDS = 0.2


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid float value: {value!r}") from exc
    if not parsed > 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def _index_path(value: str) -> tuple[int, ...]:
    """argparse type for dotted comment paths such as ``2.1``."""
    try:
        return parse_index_path(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _require_file(path: Path) -> Path:
    if not path.is_file():
        raise SystemExit(f"File not found: {path}")
    return path


def _parse_document(path: Path, settings: Settings) -> tuple[Document, list[Comment]]:
    index = CommentIndex(
        date_format=settings.date_format,
        collapse_by_default=settings.collapse_by_default,
    )
    document = read_document(path)
    return document, index.parse(path, document.text)


def _lookup(comments: list[Comment], path: tuple[int, ...]) -> Comment:
    try:
        return comment_at_index_path(comments, path)
    except CommentNotFoundError as exc:
        raise SystemExit(str(exc)) from exc


def fill_content_line(text: str, line_number: int, body: str) -> str:
    """Write ``body`` into the marker-only content line at 1-based ``line_number``.

    Extra body lines are inserted below it with the same marker prefix, so the
    whole body stays inside the comment block.
    """
    body_lines = split_lines(body.strip())
    if not body_lines:
        return text
    lines = split_lines_keepends(text)
    idx = line_number - 1
    if not 0 <= idx < len(lines):
        return text
    line = lines[idx]
    ending = line[len(line.rstrip("\r\n")) :] or first_newline(text)
    markers = line.rstrip()
    filled = [f"{markers} {body_line.strip()}".rstrip() + ending for body_line in body_lines]
    if not line.endswith(("\n", "\r")):
        filled[-1] = filled[-1][: -len(ending)]
    lines[idx : idx + 1] = filled
    return "".join(lines)


def _timestamp_text(settings: Settings, no_timestamp: bool) -> str | None:
    if no_timestamp:
        return None
    return format_timestamp(datetime.now(), settings.date_format)


def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    path = _require_file(Path(args.path))
    _document, comments = _parse_document(path, settings)
    no_color = args.no_color or not sys.stdout.isatty()
    sys.stdout.write(
        render_comment_tree(
            comments,
            style=args.style or settings.style,
            no_color=no_color,
            expand_all=args.expand_all,
        )
    )
    return 0


def _cmd_add(args: argparse.Namespace, settings: Settings) -> int:
    path = _require_file(Path(args.path))
    document, comments = _parse_document(path, settings)
    line_count = len(split_lines(document.text))
    if args.line > line_count + 1:
        raise SystemExit(f"Line {args.line} is past the end of {path} ({line_count} lines)")

    cursor = args.line - 1
    covering = find_comment_at_line(comments, cursor)
    # Inserting inside a block would split it; only a top-level header line is a safe anchor.
    if covering is not None and not (cursor == covering.start_pos.line and any(c is covering for c in comments)):
        raise SystemExit(
            f"Line {args.line} is inside the comment by {covering.name or '(anonymous)'} "
            f"(lines {covering.start_pos.line + 1}-{covering.end_pos.line}); use 'reply' instead"
        )

    result = splice_insert_at_cursor(
        document.text,
        cursor,
        args.author or settings.author_name,
        _timestamp_text(settings, args.no_timestamp),
    )
    new_text = fill_content_line(result.text, result.content_line_number, args.text or "")
    write_text(path, new_text, document.encoding)
    print(f"Added comment at line {result.content_line_number}")
    return 0


def _cmd_reply(args: argparse.Namespace, settings: Settings) -> int:
    path = _require_file(Path(args.path))
    document, comments = _parse_document(path, settings)
    parent = _lookup(comments, args.comment)
    result = splice_insert_child(
        document.text,
        parent,
        args.author or settings.author_name,
        _timestamp_text(settings, args.no_timestamp),
    )
    new_text = fill_content_line(result.text, result.content_line_number, args.text or "")
    write_text(path, new_text, document.encoding)
    print(f"Added reply at line {result.content_line_number}")
    return 0


def _cmd_remove(args: argparse.Namespace, settings: Settings) -> int:
    path = _require_file(Path(args.path))
    document, comments = _parse_document(path, settings)
    target = _lookup(comments, args.comment)
    write_text(path, splice_remove(document.text, target), document.encoding)
    print(f"Removed {target.line_count} lines")
    return 0


def _cmd_config(args: argparse.Namespace, settings: Settings) -> int:
    changed = False
    if args.author is not None:
        config.save_author_name(args.author)
        changed = True
    if args.date_format is not None:
        if "%" not in args.date_format:
            raise SystemExit(f"Date format needs at least one strftime directive: {args.date_format!r}")
        config.save_date_format(args.date_format)
        changed = True
    if args.collapse_by_default is not None:
        config.save_collapse_by_default(args.collapse_by_default)
        changed = True
    if changed:
        settings = load_settings()

    print(f"config file: {config.CONFIG_PATH}")
    print(f"author_name: {settings.author_name}")
    print(f"date_format: {settings.date_format}")
    print(f"collapse_by_default: {str(settings.collapse_by_default).lower()}")
    print(f"debounce_seconds: {settings.debounce_seconds}")
    print(f"style: {settings.style}")
    return 0


def _cmd_watch(args: argparse.Namespace, settings: Settings) -> int:
    paths = [_require_file(Path(raw)) for raw in args.paths]
    index = CommentIndex(
        date_format=settings.date_format,
        collapse_by_default=settings.collapse_by_default,
    )
    watcher = DocumentWatcher(index, Debouncer(settings.debounce_seconds))
    no_color = args.no_color or not sys.stdout.isatty()
    style = args.style or settings.style

    def show(path: Path, comments: list[Comment]) -> None:
        sys.stdout.write(f"== {path}\n")
        sys.stdout.write(render_comment_tree(comments, style=style, no_color=no_color))
        sys.stdout.flush()

    for path in paths:
        show(path, watcher.open(path))
    try:
        while True:
            time.sleep(args.interval)
            for path, comments in watcher.poll().items():
                show(path, comments)
    except KeyboardInterrupt:
        return 0


def _add_author_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--author", default=None, help="Author label (default: configured author name).")
    parser.add_argument("--text", default=None, help="First line of the comment body.")
    parser.add_argument("--no-timestamp", action="store_true", help="Omit the timestamp from the header.")


def _add_render_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--style", default=None, help="Pygments style name for comment bodies.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commentview",
        description="Inspect and edit [!comment] callouts in Markdown files.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log more (repeat for debug).")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Print the comment tree of a file.")
    list_parser.add_argument("path", help="Markdown file.")
    list_parser.add_argument("--expand-all", action="store_true", help="Show replies of collapsed comments.")
    _add_render_options(list_parser)
    list_parser.set_defaults(handler=_cmd_list)

    add_parser = subparsers.add_parser("add", help="Insert a new comment above a line.")
    add_parser.add_argument("path", help="Markdown file.")
    add_parser.add_argument("--line", type=_positive_int, required=True, help="1-based line to annotate.")
    _add_author_options(add_parser)
    add_parser.set_defaults(handler=_cmd_add)

    reply_parser = subparsers.add_parser("reply", help="Append a reply to a comment.")
    reply_parser.add_argument("path", help="Markdown file.")
    reply_parser.add_argument("comment", type=_index_path, help="Comment path as shown by 'list', e.g. 2.1.")
    _add_author_options(reply_parser)
    reply_parser.set_defaults(handler=_cmd_reply)

    remove_parser = subparsers.add_parser("remove", help="Delete a comment and its replies.")
    remove_parser.add_argument("path", help="Markdown file.")
    remove_parser.add_argument("comment", type=_index_path, help="Comment path as shown by 'list', e.g. 2.1.")
    remove_parser.set_defaults(handler=_cmd_remove)

    watch_parser = subparsers.add_parser("watch", help="Reprint comment trees whenever files change.")
    watch_parser.add_argument("paths", nargs="+", help="Markdown files.")
    watch_parser.add_argument(
        "--interval",
        type=_positive_float,
        default=WATCH_POLL_SECONDS,
        help="Seconds between change checks.",
    )
    _add_render_options(watch_parser)
    watch_parser.set_defaults(handler=_cmd_watch)

    config_parser = subparsers.add_parser("config", help="Show or change saved settings.")
    config_parser.add_argument("--author", default=None, help="Default author name for new comments.")
    config_parser.add_argument("--date-format", default=None, help="strftime format for header dates.")
    collapse = config_parser.add_mutually_exclusive_group()
    collapse.add_argument(
        "--collapse-by-default",
        dest="collapse_by_default",
        action="store_const",
        const=True,
        default=None,
        help="Hide replies until expanded.",
    )
    collapse.add_argument(
        "--expand-by-default",
        dest="collapse_by_default",
        action="store_const",
        const=False,
        help="Show replies by default.",
    )
    config_parser.set_defaults(handler=_cmd_config)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and run the selected command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return args.handler(args, load_settings())


if __name__ == "__main__":
    raise SystemExit(main())
