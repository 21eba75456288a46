"""Assemble the per-request context envelope."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable, Mapping

from linesense.config.models import ContextSettings
from linesense.core.collect import collect
from linesense.core.git import GitRunner, collect_git_info, run_git
from linesense.core.history import collect_history
from linesense.core.models import ContextEnvelope
from linesense.core.osdetect import (
    FileReader,
    Which,
    detect_distribution,
    detect_os,
    detect_package_manager,
    read_text_file,
)
from linesense.paths import project_context_path
from linesense.runtime_logging import get_runtime_logger

# Substring match on the upper-cased key. MY_KEYBOARD_LAYOUT is dropped too.
SENSITIVE_ENV_TERMS = (
    "KEY",
    "SECRET",
    "PASSWORD",
    "PASS",
    "TOKEN",
    "AUTH",
    "CREDENTIAL",
    "PRIVATE",
    "API_KEY",
)


def _split_entries(environ: Mapping[str, str] | Iterable[str]) -> Iterable[tuple[str, str]]:
    if isinstance(environ, Mapping):
        yield from environ.items()
        return
    for entry in environ:
        key, sep, value = entry.partition("=")
        if sep:
            yield key, value


def filter_environment(environ: Mapping[str, str] | Iterable[str]) -> dict[str, str]:
    """Drop variables whose names look like they hold credentials.

    Accepts a mapping or an iterable of ``KEY=VALUE`` strings; entries
    without ``=`` are ignored.
    """
    filtered: dict[str, str] = {}
    for key, value in _split_entries(environ):
        upper = key.upper()
        if any(term in upper for term in SENSITIVE_ENV_TERMS):
            continue
        filtered[key] = value
    return filtered


def read_project_context(cwd: Path) -> str:
    path = project_context_path(cwd)
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return ""


def build_context(
    shell: str,
    line: str,
    cwd: str | Path,
    settings: ContextSettings,
    *,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
    platform_id: str | None = None,
    git_runner: GitRunner = run_git,
    which: Which = shutil.which,
    reader: FileReader = read_text_file,
) -> ContextEnvelope:
    """Collect every enabled signal for one request.

    Optional signals are best effort: a failing collector leaves its field
    empty and the envelope is still returned.
    """
    env = dict(os.environ) if environ is None else dict(environ)
    cwd_path = Path(cwd)
    os_family = detect_os(platform_id)
    logger = get_runtime_logger()

    envelope = ContextEnvelope(
        shell=shell,
        line=line,
        cwd=str(cwd_path),
        os=os_family,
        distribution=detect_distribution(os_family, reader=reader),
        package_manager=detect_package_manager(os_family, which=which),
    )

    if settings.include_git:
        envelope.git = collect("git", lambda: collect_git_info(cwd_path, git_runner)).or_default(None)

    if settings.history_length > 0:
        envelope.history = collect(
            "history",
            lambda: collect_history(shell, settings.history_length, environ=env, home=home),
        ).or_default([])

    if settings.include_env:
        envelope.env = filter_environment(env)

    envelope.global_context = settings.global_instructions
    envelope.project_context = collect("project_context", lambda: read_project_context(cwd_path)).or_default("")

    logger.debug(
        "context.built",
        shell=shell,
        os=envelope.os,
        has_git=envelope.git is not None,
        history_entries=len(envelope.history),
        env_entries=len(envelope.env),
        has_project_context=bool(envelope.project_context),
    )
    return envelope
