"""Prompt text for suggestion and explanation requests."""

from __future__ import annotations

from linesense.core.models import ContextEnvelope

RECENT_HISTORY_IN_PROMPT = 5

SUGGEST_SYSTEM_PROMPT = """\
You are an expert shell command assistant. Your job is to suggest 3-5 complete, correct shell commands based on the user's partial input and context.

IMPORTANT RULES:
1. Provide 3-5 alternative command suggestions
2. Order suggestions from most likely to least likely
3. Make commands safe and appropriate
4. Use the context (git info, history, cwd) to make intelligent suggestions
5. If the input is already complete, suggest improvements or alternatives
6. For ambiguous or typo inputs, interpret user intent and suggest corrections
7. Prefer commands available on the user's OS and package manager
8. Keep commands concise but complete

RESPONSE FORMAT:
One suggestion per line in this exact format:
COMMAND | brief explanation (5-10 words max)

Example:
ls -la | List all files with details
find . -type f -name "*.txt" | Find all text files recursively
tree -L 2 | Show directory tree 2 levels deep"""

EXPLAIN_SYSTEM_PROMPT = """\
You are an expert shell command explainer. Your job is to explain what a command does, its risks, and potential side effects.

IMPORTANT RULES:
1. Be concise but thorough
2. Explain what the command does in plain English
3. Identify potential risks (low/medium/high)
4. Warn about destructive operations
5. Mention important flags and options
6. Note common pitfalls or mistakes

RESPONSE FORMAT:
Summary: [one-sentence explanation]
Risk: [low|medium|high]
Details: [detailed explanation]"""


def _system_lines(envelope: ContextEnvelope) -> list[str]:
    lines = [f"OS: {envelope.os}"]
    if envelope.distribution:
        lines.append(f"Distribution: {envelope.distribution}")
    if envelope.package_manager:
        lines.append(f"Package manager: {envelope.package_manager}")
    return lines


def build_suggest_user_prompt(envelope: ContextEnvelope) -> str:
    parts = [
        f"Current input: {envelope.line}",
        "",
        f"Shell: {envelope.shell}",
        f"Working directory: {envelope.cwd}",
        *_system_lines(envelope),
    ]

    git = envelope.git
    if git is not None and git.is_repo:
        parts += ["", "Git context:", f"- Branch: {git.branch}", f"- Status: {git.status_summary}"]
        if git.remotes:
            parts.append(f"- Remotes: {', '.join(git.remotes)}")

    if envelope.history:
        parts += ["", f"Recent commands (last {RECENT_HISTORY_IN_PROMPT}):"]
        parts += [f"- {entry.command}" for entry in envelope.history[-RECENT_HISTORY_IN_PROMPT:]]

    if envelope.global_context.strip():
        parts += ["", "User instructions:", envelope.global_context.strip()]
    if envelope.project_context.strip():
        parts += ["", "Project instructions:", envelope.project_context.strip()]

    parts += ["", "Suggest the complete command:"]
    return "\n".join(parts)


def build_explain_user_prompt(envelope: ContextEnvelope) -> str:
    parts = [
        f"Explain this command: {envelope.line}",
        "",
        f"Shell: {envelope.shell}",
        f"Working directory: {envelope.cwd}",
    ]
    git = envelope.git
    if git is not None and git.is_repo:
        parts += ["", f"Git repository: branch={git.branch}, status={git.status_summary}"]
    return "\n".join(parts)
