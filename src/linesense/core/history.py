"""Shell history readers for bash and zsh history files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Mapping

from linesense.core.models import HistoryEntry

HISTFILE_ENV = "HISTFILE"

_DEFAULT_FILES: dict[str, str] = {
    "bash": ".bash_history",
    "zsh": ".zsh_history",
}

LineParser = Callable[[str], "str | None"]


def _parse_plain(line: str) -> str | None:
    return line or None


def _parse_zsh(line: str) -> str | None:
    # Extended history: ": <start>:<elapsed>;<command>"
    if not line.startswith(":"):
        return _parse_plain(line)
    parts = line[1:].split(";", 1)
    if len(parts) != 2:
        return None
    return parts[1].strip() or None


_PARSERS: dict[str, LineParser] = {
    "bash": _parse_plain,
    "zsh": _parse_zsh,
}


def _home_dir(env: Mapping[str, str]) -> Path | None:
    if env.get("HOME"):
        return Path(env["HOME"])
    try:
        return Path.home()
    except RuntimeError:
        return None


def history_path(
    shell: str,
    *,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Path | None:
    """Resolve the history file, or ``None`` when no home directory is known."""
    env = os.environ if environ is None else environ
    override = env.get(HISTFILE_ENV, "")
    if override:
        return Path(override).expanduser()
    base = home if home is not None else _home_dir(env)
    if base is None:
        return None
    return base / _DEFAULT_FILES.get(shell, _DEFAULT_FILES["bash"])


def parse_history_line(shell: str, line: str) -> HistoryEntry | None:
    """Parse one raw history line; ``None`` means the line carries no command."""
    stripped = line.strip()
    if not stripped:
        return None
    parser = _PARSERS.get(shell, _parse_plain)
    command = parser(stripped)
    if not command:
        return None
    return HistoryEntry(command=command)


def collect_history(
    shell: str,
    limit: int,
    *,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> list[HistoryEntry]:
    """Return up to ``limit`` commands from the tail of the shell history, oldest first.

    A missing history file yields an empty list. Other read failures
    (permissions, a directory in place of the file) raise ``OSError``.
    """
    if limit <= 0:
        return []

    path = history_path(shell, environ=environ, home=home)
    if path is None:
        return []
    try:
        # zsh metafies non-ASCII bytes, so decoding must not be strict.
        with path.open("r", encoding="utf-8", errors="replace", newline="") as handle:
            raw = handle.read()
    except FileNotFoundError:
        return []

    # Only "\n" separates entries; form feeds and similar stay inside a command.
    lines = raw.split("\n")
    if lines and not lines[-1]:
        lines.pop()
    entries: list[HistoryEntry] = []
    for line in lines[-limit:]:
        entry = parse_history_line(shell, line.removesuffix("\r"))
        if entry is not None:
            entries.append(entry)
    return entries
