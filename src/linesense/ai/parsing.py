"""Turn free-text model replies into suggestions and explanations."""

from __future__ import annotations

import re

from linesense.core.models import RISK_MEDIUM, Explanation, RiskLevel, Suggestion

MAX_SUGGESTIONS = 5
EMPTY_RESPONSE_SUMMARY = "The model returned an empty explanation."

# Longer tags first so "```shell" is not read as "```sh" plus "ell".
_FENCE_OPENERS = ("```bash", "```shell", "```zsh", "```sh", "```")
_FENCE_CLOSER = "```"
_ORDINAL_PREFIX = re.compile(r"^[1-5]\. ")

_RISK_WORDS: dict[str, RiskLevel] = {"low": "low", "medium": "medium", "high": "high"}


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    for opener in _FENCE_OPENERS:
        if cleaned.startswith(opener):
            cleaned = cleaned[len(opener) :]
            break
    if cleaned.endswith(_FENCE_CLOSER):
        cleaned = cleaned[: -len(_FENCE_CLOSER)]
    return cleaned.strip()


def parse_suggestion_line(line: str, original_line: str) -> Suggestion | None:
    text = _ORDINAL_PREFIX.sub("", line.strip(), count=1).strip()
    if not text:
        return None

    command, _, explanation = text.partition("|")
    command = command.strip()
    if not command:
        return None

    explanation = explanation.strip() or f"Suggested based on: {original_line}"
    # Risk is provisional until the classifier has seen the command.
    return Suggestion(command=command, risk="low", explanation=explanation, source="llm")


def parse_suggestions(text: str, original_line: str) -> list[Suggestion]:
    """Parse ``COMMAND | explanation`` lines, keeping at most five."""
    suggestions: list[Suggestion] = []
    for line in strip_code_fence(text).splitlines():
        suggestion = parse_suggestion_line(line, original_line)
        if suggestion is None:
            continue
        suggestions.append(suggestion)
        if len(suggestions) >= MAX_SUGGESTIONS:
            break
    return suggestions


def parse_explanation(text: str) -> Explanation:
    summary = ""
    risk: RiskLevel = RISK_MEDIUM
    notes: list[str] = []

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith("Summary:"):
            summary = line[len("Summary:") :].strip()
        elif line.startswith("Risk:"):
            risk = _RISK_WORDS.get(line[len("Risk:") :].strip().lower(), risk)
        elif line.startswith("Details:"):
            detail = line[len("Details:") :].strip()
            if detail:
                notes.append(detail)
        else:
            notes.append(line)

    if not summary:
        summary = text.strip() or EMPTY_RESPONSE_SUMMARY
    return Explanation(summary=summary, risk=risk, notes=notes)
