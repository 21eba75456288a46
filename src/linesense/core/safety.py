"""Pattern-based risk tiers and denylist filtering for shell commands."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Iterable, Iterator, Sequence

from linesense.config.models import SafetySettings
from linesense.core.models import RISK_HIGH, RISK_LOW, RISK_MEDIUM, RiskLevel, Suggestion
from linesense.runtime_logging import get_runtime_logger

BUILTIN_HIGH_RISK_PATTERNS = (
    r"rm\s+-rf\s+/",
    r"dd\s+if=",
    r"mkfs",
    r">\s*/dev/",
    r"chmod\s+777",
    r"chmod\s+-r\s+777",
    r"curl.*\|\s*bash",
    r"wget.*\|\s*sh",
    r":\(\)\{.*\};:",
    r"killall\s+-9",
)

BUILTIN_MEDIUM_RISK_PATTERNS = (
    r"sudo",
    r"rm\s+",
    r"mv\s+",
    r"chmod",
    r"chown",
    r"kill",
    r"pkill",
    r"systemctl",
    r"reboot",
    r"shutdown",
    r"iptables",
    r"apt-get\s+remove",
    r"yum\s+remove",
)


@dataclass(slots=True, frozen=True)
class RiskRule:
    pattern: str
    level: RiskLevel
    origin: str


@dataclass(slots=True)
class CommandRisk:
    level: RiskLevel
    reason: str


@lru_cache(maxsize=512)
def _compile(pattern: str) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern)
    except re.error:
        get_runtime_logger().warning("safety.invalid_pattern", pattern=pattern)
        return None


def _matches(pattern: str, command_lower: str) -> bool:
    compiled = _compile(pattern)
    return compiled is not None and compiled.search(command_lower) is not None


def risk_rules(safety: SafetySettings | None) -> Iterator[RiskRule]:
    """Yield rules in precedence order; the first match decides the tier."""
    for pattern in BUILTIN_HIGH_RISK_PATTERNS:
        yield RiskRule(pattern, RISK_HIGH, "builtin")
    if safety is not None:
        for pattern in safety.require_confirm_patterns:
            yield RiskRule(pattern, RISK_HIGH, "require_confirm")
    for pattern in BUILTIN_MEDIUM_RISK_PATTERNS:
        yield RiskRule(pattern, RISK_MEDIUM, "builtin")


def assess_risk(command: str, safety: SafetySettings | None = None) -> CommandRisk:
    lowered = command.lower()
    for rule in risk_rules(safety):
        if _matches(rule.pattern, lowered):
            return CommandRisk(level=rule.level, reason=f"matches {rule.origin} pattern '{rule.pattern}'")
    return CommandRisk(level=RISK_LOW, reason="no risk pattern matched")


def classify_risk(command: str, safety: SafetySettings | None = None) -> RiskLevel:
    return assess_risk(command, safety).level


def _first_match(patterns: Sequence[str], command: str) -> str | None:
    lowered = command.lower()
    for pattern in patterns:
        if _matches(pattern, lowered):
            return pattern
    return None


def is_blocked(command: str, safety: SafetySettings | None) -> bool:
    if safety is None:
        return False
    return _first_match(safety.denylist, command) is not None


def apply_safety_filters(
    suggestions: Iterable[Suggestion],
    safety: SafetySettings | None,
) -> list[Suggestion]:
    """Drop denylisted suggestions and overwrite the rest with the classified tier."""
    logger = get_runtime_logger()
    filtered: list[Suggestion] = []
    for suggestion in suggestions:
        if is_blocked(suggestion.command, safety):
            logger.info("safety.blocked", command=suggestion.command)
            continue
        filtered.append(replace(suggestion, risk=classify_risk(suggestion.command, safety)))
    return filtered
