"""Exception types surfaced by LineSense."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class LinesenseError(Exception):
    """Base class for errors the CLI reports to the user."""


class ConfigError(LinesenseError):
    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"failed to load {path}: {message}")
        self.path = path


class ProviderError(LinesenseError):
    """Model transport or API failure."""


@dataclass(slots=True)
class GitCommandError(Exception):
    command: tuple[str, ...]
    returncode: int
    stderr: str = ""

    def __str__(self) -> str:
        rendered = " ".join(("git", *self.command))
        detail = f": {self.stderr.strip()}" if self.stderr.strip() else ""
        return f"{rendered} exited with {self.returncode}{detail}"


class ShellDisabledError(LinesenseError):
    def __init__(self, shell: str) -> None:
        super().__init__(f"{shell} support is disabled in config.toml ([shell] enable_{shell} = false)")
        self.shell = shell
