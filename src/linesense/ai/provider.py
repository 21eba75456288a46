"""Chat-completion providers used to generate suggestions and explanations."""

from __future__ import annotations

import os
from typing import Any, Mapping, Protocol

import httpx

from linesense.ai.parsing import parse_explanation, parse_suggestions
from linesense.ai.prompts import (
    EXPLAIN_SYSTEM_PROMPT,
    SUGGEST_SYSTEM_PROMPT,
    build_explain_user_prompt,
    build_suggest_user_prompt,
)
from linesense.config.models import OpenRouterSettings, ProfileSettings, ProvidersSettings
from linesense.core.models import ContextEnvelope, Explanation, Suggestion
from linesense.errors import ProviderError
from linesense.runtime_logging import get_runtime_logger


class Provider(Protocol):
    name: str

    def suggest(self, envelope: ContextEnvelope, model_id: str = "") -> list[Suggestion]: ...

    def explain(self, envelope: ContextEnvelope, model_id: str = "") -> Explanation: ...


class OpenRouterProvider:
    name = "openrouter"

    def __init__(
        self,
        settings: OpenRouterSettings,
        profile: ProfileSettings,
        api_key: str,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings
        self.profile = profile
        self._api_key = api_key
        self._client = client
        self.logger = get_runtime_logger().bind(provider=self.name)

    def suggest(self, envelope: ContextEnvelope, model_id: str = "") -> list[Suggestion]:
        text = self.complete(SUGGEST_SYSTEM_PROMPT, build_suggest_user_prompt(envelope), model_id)
        return parse_suggestions(text, envelope.line)

    def explain(self, envelope: ContextEnvelope, model_id: str = "") -> Explanation:
        text = self.complete(EXPLAIN_SYSTEM_PROMPT, build_explain_user_prompt(envelope), model_id)
        return parse_explanation(text)

    def complete(self, system_prompt: str, user_prompt: str, model_id: str = "") -> str:
        model = model_id or self.profile.model
        payload: dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.profile.temperature,
            "max_tokens": self.profile.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        url = f"{self.settings.base_url}/chat/completions"

        self.logger.debug("provider.request", model=model)
        try:
            if self._client is not None:
                response = self._client.post(url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=self.settings.timeout_ms / 1000) as client:
                    response = client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise ProviderError(f"HTTP request failed: {exc}") from exc

        return self._extract_content(response)

    def _extract_content(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError(f"failed to parse response (HTTP {response.status_code})") from exc

        if not isinstance(body, dict):
            raise ProviderError(f"unexpected response payload (HTTP {response.status_code})")

        error = body.get("error")
        if error:
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ProviderError(f"API error: {message}")
        if response.is_error:
            raise ProviderError(f"API returned HTTP {response.status_code}")

        choices = body.get("choices") or []
        if not isinstance(choices, list):
            raise ProviderError("unexpected response payload: choices is not a list")
        if not choices:
            raise ProviderError("no response choices returned")

        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            raise ProviderError("unexpected response payload: choice has no message object")
        content = message.get("content") or ""
        if not isinstance(content, str):
            raise ProviderError("unexpected response payload: message content is not text")
        self.logger.debug("provider.response", chars=len(content))
        return content


def create_provider(
    providers: ProvidersSettings,
    profile_name: str,
    *,
    environ: Mapping[str, str] | None = None,
    client: httpx.Client | None = None,
) -> Provider:
    env = os.environ if environ is None else environ
    try:
        profile = providers.get_profile(profile_name)
    except KeyError as exc:
        raise ProviderError(f"failed to get profile {profile_name!r}: {exc.args[0]}") from exc

    if profile.provider not in {"openrouter", ""}:
        raise ProviderError(f"unsupported provider: {profile.provider}")

    api_key = env.get(providers.openrouter.api_key_env, "")
    if not api_key:
        raise ProviderError(f"API key not found in environment variable {providers.openrouter.api_key_env}")
    return OpenRouterProvider(providers.openrouter, profile, api_key, client=client)
