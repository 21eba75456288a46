"""Settings schema for LineSense."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ShellSettings(BaseModel):
    enable_bash: bool = Field(default=True)
    enable_zsh: bool = Field(default=True)

    def allows(self, shell: str) -> bool:
        """Other shells are read with the bash dialect and are always allowed."""
        if shell == "zsh":
            return self.enable_zsh
        if shell == "bash":
            return self.enable_bash
        return True


class KeybindingSettings(BaseModel):
    """Read by the shell integration scripts, not by the Python package."""

    suggest: str = Field(default="ctrl+space")
    explain: str = Field(default="ctrl+e")
    alternatives: str = Field(default="alt+a")


class ContextSettings(BaseModel):
    history_length: int = Field(default=100, ge=0, description="Recent commands to include; 0 disables")
    include_git: bool = Field(default=True)
    include_files: bool = Field(default=False, description="Reserved; directory listings are not collected yet")
    include_env: bool = Field(default=False)
    global_instructions: str = Field(default="")


class SafetySettings(BaseModel):
    require_confirm_patterns: list[str] = Field(default_factory=list)
    denylist: list[str] = Field(default_factory=list)
    default_execution: Literal["paste_only"] = Field(
        default="paste_only",
        description="Reserved; suggestions are only ever pasted, never executed",
    )


class AISettings(BaseModel):
    provider_profile: str = Field(default="default")

    @field_validator("provider_profile")
    @classmethod
    def default_when_blank(cls, value: str) -> str:
        return value.strip() or "default"


class AppSettings(BaseModel):
    shell: ShellSettings = Field(default_factory=ShellSettings)
    keybindings: KeybindingSettings = Field(default_factory=KeybindingSettings)
    context: ContextSettings = Field(default_factory=ContextSettings)
    safety: SafetySettings = Field(default_factory=SafetySettings)
    ai: AISettings = Field(default_factory=AISettings)

    def setting_items(self) -> list[tuple[str, str]]:
        """Flatten key/value pairs for ``config show``."""

        result: list[tuple[str, str]] = []

        def walk(prefix: str, value: object) -> None:
            if isinstance(value, dict):
                for key, nested in value.items():
                    walk(f"{prefix}.{key}" if prefix else key, nested)
            else:
                result.append((prefix, str(value)))

        walk("", self.model_dump())
        return result


class ProfileSettings(BaseModel):
    provider: str = Field(default="openrouter")
    model: str = Field(default="openai/gpt-4.1-mini")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=256, ge=1)


class OpenRouterSettings(BaseModel):
    type: str = Field(default="openrouter")
    api_key_env: str = Field(default="OPENROUTER_API_KEY")
    base_url: str = Field(default="https://openrouter.ai/api/v1")
    timeout_ms: int = Field(default=30000, gt=0)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class ProvidersSettings(BaseModel):
    default: ProfileSettings = Field(default_factory=ProfileSettings)
    profile: dict[str, ProfileSettings] = Field(default_factory=dict)
    openrouter: OpenRouterSettings = Field(default_factory=OpenRouterSettings)

    def get_profile(self, name: str) -> ProfileSettings:
        if name in {"", "default"}:
            return self.default
        try:
            return self.profile[name]
        except KeyError:
            raise KeyError(f"profile {name!r} not found") from None
