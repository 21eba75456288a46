from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from linesense.core.history import collect_history, history_path, parse_history_line


class HistoryPathTests(unittest.TestCase):
    def test_histfile_override_wins(self) -> None:
        path = history_path("zsh", environ={"HISTFILE": "/tmp/custom_history"}, home=Path("/home/u"))
        self.assertEqual(path, Path("/tmp/custom_history"))

    def test_shell_specific_defaults(self) -> None:
        home = Path("/home/u")
        self.assertEqual(history_path("bash", environ={}, home=home), home / ".bash_history")
        self.assertEqual(history_path("zsh", environ={}, home=home), home / ".zsh_history")
        self.assertEqual(history_path("fish", environ={}, home=home), home / ".bash_history")

    def test_empty_override_is_ignored(self) -> None:
        home = Path("/home/u")
        self.assertEqual(history_path("zsh", environ={"HISTFILE": ""}, home=home), home / ".zsh_history")

    def test_home_from_environment(self) -> None:
        self.assertEqual(history_path("bash", environ={"HOME": "/home/v"}), Path("/home/v/.bash_history"))

    def test_unresolvable_home_gives_no_path(self) -> None:
        with patch("linesense.core.history.Path.home", side_effect=RuntimeError("Could not determine home directory.")):
            self.assertIsNone(history_path("bash", environ={}))


class ParseHistoryLineTests(unittest.TestCase):
    def test_zsh_extended_line(self) -> None:
        entry = parse_history_line("zsh", ": 1700000000:0;git status")
        assert entry is not None
        self.assertEqual(entry.command, "git status")
        self.assertIsNone(entry.timestamp)
        self.assertIsNone(entry.exit_code)

    def test_zsh_command_keeps_later_semicolons(self) -> None:
        entry = parse_history_line("zsh", ": 1700000000:0;cd src; make")
        assert entry is not None
        self.assertEqual(entry.command, "cd src; make")

    def test_malformed_zsh_line_is_dropped(self) -> None:
        self.assertIsNone(parse_history_line("zsh", ": malformed"))

    def test_zsh_line_without_prefix_is_verbatim(self) -> None:
        entry = parse_history_line("zsh", "  ls -la  ")
        assert entry is not None
        self.assertEqual(entry.command, "ls -la")

    def test_bash_keeps_colon_lines(self) -> None:
        entry = parse_history_line("bash", ": 1700000000:0;git status")
        assert entry is not None
        self.assertEqual(entry.command, ": 1700000000:0;git status")

    def test_blank_and_empty_command_lines(self) -> None:
        self.assertIsNone(parse_history_line("bash", "   "))
        self.assertIsNone(parse_history_line("zsh", ": 1700000000:0;   "))


class CollectHistoryTests(unittest.TestCase):
    def _write(self, root: Path, name: str, text: str) -> Path:
        path = root / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_missing_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            entries = collect_history("bash", 10, environ={}, home=Path(tmp))
        self.assertEqual(entries, [])

    def test_blank_only_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self._write(Path(tmp), ".bash_history", "\n   \n\t\n")
            entries = collect_history("bash", 10, environ={}, home=Path(tmp))
        self.assertEqual(entries, [])

    def test_limit_takes_tail_in_file_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            lines = "".join(f"echo {i}\n" for i in range(100))
            self._write(Path(tmp), ".bash_history", lines)
            entries = collect_history("bash", 5, environ={}, home=Path(tmp))
        self.assertEqual([entry.command for entry in entries], [f"echo {i}" for i in range(95, 100)])

    def test_limit_counts_lines_before_filtering(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self._write(Path(tmp), ".zsh_history", ": 1:0;ls\n: 2:0;pwd\n: broken\n\n")
            entries = collect_history("zsh", 3, environ={}, home=Path(tmp))
        self.assertEqual([entry.command for entry in entries], ["pwd"])

    def test_histfile_override_is_read(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(Path(tmp), "custom", ": 1700000000:0;git status\nplain command\n")
            entries = collect_history("zsh", 10, environ={"HISTFILE": str(path)}, home=Path(tmp) / "nowhere")
        self.assertEqual([entry.command for entry in entries], ["git status", "plain command"])

    def test_zero_limit_reads_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self._write(Path(tmp), ".bash_history", "ls\n")
            self.assertEqual(collect_history("bash", 0, environ={}, home=Path(tmp)), [])

    def test_unreadable_path_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / ".bash_history").mkdir()
            with self.assertRaises(OSError):
                collect_history("bash", 10, environ={}, home=Path(tmp))

    def test_unresolvable_home_returns_empty(self) -> None:
        with patch("linesense.core.history.Path.home", side_effect=RuntimeError("Could not determine home directory.")):
            self.assertEqual(collect_history("zsh", 10, environ={}), [])

    def test_only_newlines_separate_entries(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self._write(Path(tmp), ".bash_history", "printf 'a\x0cb'\necho \x1c done\nls\x85 -la\n")
            entries = collect_history("bash", 10, environ={}, home=Path(tmp))
        self.assertEqual(
            [entry.command for entry in entries],
            ["printf 'a\x0cb'", "echo \x1c done", "ls\x85 -la"],
        )

    def test_crlf_line_endings(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / ".bash_history").write_bytes(b"ls\r\npwd\r\n")
            entries = collect_history("bash", 1, environ={}, home=Path(tmp))
        self.assertEqual([entry.command for entry in entries], ["pwd"])

    def test_invalid_utf8_is_replaced(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / ".zsh_history").write_bytes(b": 1:0;echo caf\xc3\n: 2:0;ls\n")
            entries = collect_history("zsh", 10, environ={}, home=Path(tmp))
        self.assertEqual([entry.command for entry in entries], ["echo caf\ufffd", "ls"])


if __name__ == "__main__":
    unittest.main()
