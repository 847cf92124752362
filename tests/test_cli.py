"""CLI command behavior tests.

Runs ``commentview.cli.main`` against temporary Markdown files.
"""

from __future__ import annotations

import codecs
import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from commentview import cli
from commentview.comments import extract_comments
from commentview.config import Settings

DOC = (
    "Intro\n"
    "> [!comment] A\n"
    "> x\n"
    ">> [!comment] B\n"
    ">> y\n"
    "Target line\n"
)


class CliCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch("commentview.cli.load_settings", return_value=Settings(author_name="Tester"))
        patcher.start()
        self.addCleanup(patcher.stop)
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "note.md"
        self.path.write_text(DOC, encoding="utf-8")

    def _run(self, *argv: str) -> tuple[int, str]:
        with mock.patch("sys.stdout", new_callable=io.StringIO) as stdout:
            code = cli.main(list(argv))
        return code, stdout.getvalue()

    def test_list_prints_outline(self) -> None:
        code, output = self._run("list", str(self.path))

        self.assertEqual(code, 0)
        self.assertIn("1 A · L2-5", output)
        self.assertIn("1.1 B · L4-5", output)
        self.assertNotIn("\033[", output)

    def test_add_inserts_comment_above_line(self) -> None:
        code, output = self._run("add", str(self.path), "--line", "6", "--text", "check this", "--no-timestamp")

        self.assertEqual(code, 0)
        self.assertIn("line 7", output)
        text = self.path.read_text(encoding="utf-8")
        self.assertIn("> [!comment] Tester\n> check this\nTarget line\n", text)
        comments = extract_comments(text)
        self.assertEqual([c.name for c in comments], ["A", "Tester"])
        self.assertEqual(comments[1].content, "check this")

    def test_reply_appends_nested_comment_with_timestamp(self) -> None:
        code, _output = self._run("reply", str(self.path), "1", "--author", "Bob", "--text", "agreed")

        self.assertEqual(code, 0)
        parent = extract_comments(self.path.read_text(encoding="utf-8"))[0]
        self.assertEqual([c.name for c in parent.children], ["B", "Bob"])
        self.assertEqual(parent.children[1].content, "agreed")
        self.assertIsNotNone(parent.children[1].timestamp)

    def test_remove_deletes_reply(self) -> None:
        code, output = self._run("remove", str(self.path), "1.1")

        self.assertEqual(code, 0)
        self.assertIn("Removed 2 lines", output)
        self.assertEqual(self.path.read_text(encoding="utf-8"), "Intro\n> [!comment] A\n> x\nTarget line\n")

    def test_unknown_comment_path_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self._run("remove", str(self.path), "3")

        self.assertEqual(str(ctx.exception), "no comment at 3")
        self.assertEqual(self.path.read_text(encoding="utf-8"), DOC)

    def test_missing_file_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self._run("list", str(self.path.with_name("missing.md")))

        self.assertIn("File not found", str(ctx.exception))

    def test_add_past_end_exits(self) -> None:
        with self.assertRaises(SystemExit):
            self._run("add", str(self.path), "--line", "99")

    def test_add_inside_comment_block_exits_without_editing(self) -> None:
        for line in ("3", "4", "5"):
            with self.subTest(line=line):
                with self.assertRaises(SystemExit) as ctx:
                    self._run("add", str(self.path), "--line", line, "--text", "oops")

                self.assertIn("inside the comment", str(ctx.exception))
                self.assertEqual(self.path.read_text(encoding="utf-8"), DOC)

    def test_add_at_top_level_header_line_goes_above_block(self) -> None:
        code, _output = self._run("add", str(self.path), "--line", "2", "--text", "before", "--no-timestamp")

        self.assertEqual(code, 0)
        comments = extract_comments(self.path.read_text(encoding="utf-8"))
        self.assertEqual([c.name for c in comments], ["Tester", "A"])
        self.assertEqual(comments[0].content, "before")
        self.assertEqual([c.name for c in comments[1].children], ["B"])

    def test_multi_line_text_stays_inside_block(self) -> None:
        code, _output = self._run("add", str(self.path), "--line", "6", "--text", "first\nsecond", "--no-timestamp")

        self.assertEqual(code, 0)
        text = self.path.read_text(encoding="utf-8")
        self.assertIn("> [!comment] Tester\n> first\n> second\nTarget line\n", text)
        self.assertEqual(extract_comments(text)[1].content, "first\nsecond")

    def test_multi_line_reply_uses_reply_markers(self) -> None:
        self._run("reply", str(self.path), "1.1", "--author", "Bob", "--text", "one\n\ntwo", "--no-timestamp")

        text = self.path.read_text(encoding="utf-8")
        self.assertIn(">>> [!comment] Bob\n>>> one\n>>>\n>>> two\nTarget line\n", text)
        reply = extract_comments(text)[0].children[0].children[0]
        self.assertEqual(reply.content, "one\n\ntwo")

    def test_byte_order_mark_is_parsed_and_preserved(self) -> None:
        self.path.write_bytes(codecs.BOM_UTF8 + b"> [!comment] A\n> x\nText\n")

        _code, output = self._run("list", str(self.path))
        self.assertIn("1 A", output)

        self._run("remove", str(self.path), "1")
        self.assertEqual(self.path.read_bytes(), codecs.BOM_UTF8 + b"Text\n")

    def test_latin1_document_keeps_its_encoding(self) -> None:
        self.path.write_bytes(b"Caf\xe9\n> [!comment] A\n> x\nEnd\n")

        code, _output = self._run("reply", str(self.path), "1", "--author", "Bob", "--text", "ok", "--no-timestamp")

        self.assertEqual(code, 0)
        raw = self.path.read_bytes()
        self.assertTrue(raw.startswith(b"Caf\xe9\n"))
        parent = extract_comments(raw.decode("latin-1"))[0]
        self.assertEqual([c.name for c in parent.children], ["Bob"])
        self.assertEqual(parent.children[0].content, "ok")

    def test_watch_interval_must_be_positive(self) -> None:
        for interval in ("0", "-1", "nan", "soon"):
            with self.subTest(interval=interval):
                with mock.patch("sys.stderr", new_callable=io.StringIO):
                    with self.assertRaises(SystemExit) as ctx:
                        self._run("watch", str(self.path), "--interval", interval)

                self.assertEqual(ctx.exception.code, 2)


class CliConfigCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.config_path = Path(self._tmp.name) / "config.json"
        patcher = mock.patch("commentview.config.CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, *argv: str) -> tuple[int, str]:
        with mock.patch("sys.stdout", new_callable=io.StringIO) as stdout:
            code = cli.main(list(argv))
        return code, stdout.getvalue()

    def test_config_saves_given_settings(self) -> None:
        code, output = self._run("config", "--author", "Zed", "--date-format", "%d.%m.%Y", "--collapse-by-default")

        self.assertEqual(code, 0)
        self.assertIn("author_name: Zed", output)
        self.assertIn("date_format: %d.%m.%Y", output)
        self.assertIn("collapse_by_default: true", output)
        saved = json.loads(self.config_path.read_text(encoding="utf-8"))
        self.assertEqual(saved["author_name"], "Zed")
        self.assertEqual(saved["date_format"], "%d.%m.%Y")
        self.assertIs(saved["collapse_by_default"], True)

    def test_expand_by_default_clears_collapse(self) -> None:
        self._run("config", "--collapse-by-default")
        _code, output = self._run("config", "--expand-by-default")

        self.assertIn("collapse_by_default: false", output)
        self.assertIs(json.loads(self.config_path.read_text(encoding="utf-8"))["collapse_by_default"], False)

    def test_config_without_options_only_prints(self) -> None:
        code, output = self._run("config")

        self.assertEqual(code, 0)
        self.assertIn(f"config file: {self.config_path}", output)
        self.assertFalse(self.config_path.exists())

    def test_date_format_without_directive_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            self._run("config", "--date-format", "today")

        self.assertIn("strftime", str(ctx.exception))
        self.assertFalse(self.config_path.exists())


if __name__ == "__main__":
    unittest.main()
