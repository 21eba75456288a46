from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path
from typing import Sequence
from unittest.mock import patch

from linesense.core.git import collect_git_info
from linesense.errors import GitCommandError
from linesense.runtime_logging import configure_runtime_logging, parse_level


class RuntimeLoggingTests(unittest.TestCase):
    def tearDown(self) -> None:
        configure_runtime_logging(level="off")

    def test_writes_jsonl_and_filters_by_level(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "runtime.jsonl"
            logger = configure_runtime_logging(level="info", log_file=path)
            logger.debug("debug.hidden", foo="bar")
            logger.info("info.visible", foo="bar")

            payloads = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        events = [item["event"] for item in payloads]
        self.assertIn("logging.configured", events)
        self.assertIn("info.visible", events)
        self.assertNotIn("debug.hidden", events)

    def test_uses_environment_variables(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "from-env.jsonl"
            with patch.dict(
                os.environ,
                {"LINESENSE_LOG_LEVEL": "debug", "LINESENSE_LOG_FILE": str(path)},
                clear=False,
            ):
                logger = configure_runtime_logging()
                logger.debug("env.debug", alpha=1)

            payloads = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        self.assertTrue(any(item["event"] == "env.debug" for item in payloads))

    def test_skipped_signals_are_logged(self) -> None:
        def runner(cwd: Path, args: Sequence[str]) -> str:
            if args[0] == "rev-parse" and args[1] == "--is-inside-work-tree":
                return "true\n"
            raise GitCommandError(tuple(args), 1, "boom")

        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "runtime.jsonl"
            configure_runtime_logging(level="debug", log_file=path)
            collect_git_info(Path(tmp), runner)
            events = [json.loads(line)["event"] for line in path.read_text(encoding="utf-8").splitlines()]
        self.assertIn("context.git.branch.skipped", events)
        self.assertIn("context.git.status.skipped", events)

    def test_bound_fields_are_stamped_on_events(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "runtime.jsonl"
            root = configure_runtime_logging(level="info", log_file=path)
            child = root.bind(provider="openrouter")
            child.info("provider.ready", model="m")
            root.info("plain.event")

            payloads = {item["event"]: item for item in map(json.loads, path.read_text(encoding="utf-8").splitlines())}
        self.assertEqual(payloads["provider.ready"]["provider"], "openrouter")
        self.assertEqual(payloads["provider.ready"]["model"], "m")
        self.assertNotIn("provider", payloads["plain.event"])
        self.assertEqual(child.sink_path, root.sink_path)

    def test_off_level_has_no_sink(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "runtime.jsonl"
            logger = configure_runtime_logging(level="off", log_file=path)
            logger.warning("never.written")
            logger.bind(provider="x").warning("never.written")
            self.assertIsNone(logger.sink_path)
            self.assertFalse(logger.enabled("warning"))
            self.assertFalse(path.exists())

    def test_parse_level_aliases(self) -> None:
        self.assertEqual(parse_level("WARN"), "warning")
        self.assertEqual(parse_level("disabled"), "off")
        self.assertEqual(parse_level("loud", default="info"), "info")


if __name__ == "__main__":
    unittest.main()
