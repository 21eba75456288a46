"""Domain records exchanged between context collection, prompting and parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

RiskLevel = Literal["low", "medium", "high"]
OSFamily = Literal["linux", "darwin", "windows"]

RISK_LOW: RiskLevel = "low"
RISK_MEDIUM: RiskLevel = "medium"
RISK_HIGH: RiskLevel = "high"

_RISK_ORDER: dict[str, int] = {RISK_LOW: 0, RISK_MEDIUM: 1, RISK_HIGH: 2}


def max_risk(*levels: RiskLevel) -> RiskLevel:
    return max(levels, key=lambda level: _RISK_ORDER[level])


@dataclass(slots=True)
class HistoryEntry:
    command: str
    # Reserved for producers that know them; shell history files do not.
    timestamp: str | None = None
    exit_code: int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"command": self.command}
        if self.timestamp is not None:
            payload["timestamp"] = self.timestamp
        if self.exit_code is not None:
            payload["exit_code"] = self.exit_code
        return payload


@dataclass(slots=True)
class GitInfo:
    """Repository facts for the working directory.

    ``is_repo=False`` only ever appears with every other field at its default;
    :func:`linesense.core.git.collect_git_info` returns ``None`` instead of
    such an instance.
    """

    is_repo: bool
    branch: str = ""
    status_summary: str = ""
    remotes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"is_repo": self.is_repo}
        if self.branch:
            payload["branch"] = self.branch
        if self.status_summary:
            payload["status_summary"] = self.status_summary
        if self.remotes:
            payload["remotes"] = list(self.remotes)
        return payload


@dataclass(slots=True)
class UsageSummary:
    frequently_used_commands: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"frequently_used_commands": list(self.frequently_used_commands)}


@dataclass(slots=True)
class ContextEnvelope:
    shell: str
    line: str
    cwd: str
    os: str
    distribution: str = ""
    package_manager: str = ""
    git: GitInfo | None = None
    env: dict[str, str] = field(default_factory=dict)
    history: list[HistoryEntry] = field(default_factory=list)
    project_context: str = ""
    global_context: str = ""
    usage_summary: UsageSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "shell": self.shell,
            "line": self.line,
            "cwd": self.cwd,
            "os": self.os,
        }
        if self.distribution:
            payload["distribution"] = self.distribution
        if self.package_manager:
            payload["package_manager"] = self.package_manager
        if self.git is not None:
            payload["git"] = self.git.to_dict()
        if self.env:
            payload["env"] = dict(self.env)
        if self.history:
            payload["history"] = [entry.to_dict() for entry in self.history]
        if self.usage_summary is not None:
            payload["usage_summary"] = self.usage_summary.to_dict()
        if self.project_context:
            payload["project_context"] = self.project_context
        if self.global_context:
            payload["global_context"] = self.global_context
        return payload


@dataclass(slots=True)
class Suggestion:
    command: str
    risk: RiskLevel
    explanation: str
    source: str = "llm"

    def to_dict(self) -> dict[str, Any]:
        return {
            "command": self.command,
            "risk": self.risk,
            "explanation": self.explanation,
            "source": self.source,
        }


@dataclass(slots=True)
class Explanation:
    summary: str
    risk: RiskLevel = RISK_MEDIUM
    notes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"summary": self.summary, "risk": self.risk}
        if self.notes:
            payload["notes"] = list(self.notes)
        return payload
