"""Request pipeline: context, model call, safety filtering."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping

from linesense.ai.provider import Provider
from linesense.config.models import AppSettings
from linesense.core.context import build_context
from linesense.core.models import ContextEnvelope, Explanation, Suggestion, max_risk
from linesense.core.safety import apply_safety_filters, classify_risk
from linesense.errors import ShellDisabledError
from linesense.runtime_logging import get_runtime_logger


class Engine:
    def __init__(
        self,
        settings: AppSettings,
        provider: Provider,
        *,
        environ: Mapping[str, str] | None = None,
        **context_options: Any,
    ) -> None:
        self.settings = settings
        self.provider = provider
        self.environ = environ
        self.context_options = context_options
        self.logger = get_runtime_logger().bind(provider=provider.name)

    def context(self, shell: str, line: str, cwd: str | Path) -> ContextEnvelope:
        if not self.settings.shell.allows(shell):
            raise ShellDisabledError(shell)
        return build_context(
            shell,
            line,
            cwd,
            self.settings.context,
            environ=self.environ,
            **self.context_options,
        )

    def suggest(self, shell: str, line: str, cwd: str | Path, model_id: str = "") -> list[Suggestion]:
        envelope = self.context(shell, line, cwd)
        raw = self.provider.suggest(envelope, model_id)
        suggestions = apply_safety_filters(raw, self.settings.safety)
        self.logger.info(
            "engine.suggest",
            received=len(raw),
            returned=len(suggestions),
        )
        return suggestions

    def explain(self, shell: str, line: str, cwd: str | Path, model_id: str = "") -> Explanation:
        envelope = self.context(shell, line, cwd)
        explanation = self.provider.explain(envelope, model_id)
        # The model may understate risk; never report below the local classification.
        floor = classify_risk(line, self.settings.safety)
        self.logger.info("engine.explain", model_risk=explanation.risk, local_risk=floor)
        return replace(explanation, risk=max_risk(explanation.risk, floor))
