"""Git repository facts for the working directory."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Sequence

from linesense.core.collect import collect
from linesense.core.models import GitInfo
from linesense.errors import GitCommandError

GitRunner = Callable[[Path, Sequence[str]], str]

# Evaluation order is also the output order of the summary.
_STATUS_CATEGORIES = ("modified", "added", "deleted", "untracked")


def run_git(cwd: Path, args: Sequence[str]) -> str:
    """Run ``git`` in ``cwd`` and return stdout, raising on a non-zero exit."""
    completed = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )
    if completed.returncode != 0:
        raise GitCommandError(tuple(args), completed.returncode, completed.stderr)
    return completed.stdout


def _status_category(code: str) -> str | None:
    if code.startswith("??"):
        return "untracked"
    for category, letter in (("added", "A"), ("deleted", "D"), ("modified", "M")):
        if code.startswith(letter) or code.startswith(f" {letter}"):
            return category
    return None


def summarize_git_status(porcelain: str) -> str:
    """Summarize ``git status --porcelain`` output.

    >>> summarize_git_status("")
    'clean'
    >>> summarize_git_status(" M a.py\\n?? b.py\\n")
    'modified, untracked'
    """
    stripped = porcelain.strip("\n")
    if not stripped.strip():
        return "clean"

    counts = dict.fromkeys(_STATUS_CATEGORIES, 0)
    for line in stripped.splitlines():
        if len(line) < 2:
            continue
        category = _status_category(line[:2])
        if category is not None:
            counts[category] += 1

    parts = [name for name in _STATUS_CATEGORIES if counts[name] > 0]
    if not parts:
        return "uncommitted changes"
    return ", ".join(parts)


def parse_git_remotes(output: str) -> list[str]:
    remotes: list[str] = []
    seen: set[str] = set()
    for line in output.strip().splitlines():
        fields = line.split()
        if len(fields) < 2:
            continue
        url = fields[1]
        if url in seen:
            continue
        seen.add(url)
        remotes.append(url)
    return remotes


def collect_git_info(cwd: Path, runner: GitRunner = run_git) -> GitInfo | None:
    """Collect branch, status and remotes, or ``None`` outside a work tree.

    Each query after the membership check fails independently and leaves
    its field at the default.
    """
    membership = collect("git.inside_work_tree", lambda: runner(cwd, ["rev-parse", "--is-inside-work-tree"]))
    if membership.or_default("").strip() != "true":
        return None

    branch = collect("git.branch", lambda: runner(cwd, ["rev-parse", "--abbrev-ref", "HEAD"]))
    status = collect("git.status", lambda: runner(cwd, ["status", "--porcelain"]))
    remotes = collect("git.remotes", lambda: runner(cwd, ["remote", "-v"]))

    return GitInfo(
        is_repo=True,
        branch=branch.or_default("").strip(),
        status_summary=summarize_git_status(status.value or "") if status.ok else "",
        remotes=parse_git_remotes(remotes.or_default("")),
    )
