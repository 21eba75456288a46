"""Load and save application and provider settings."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Mapping, TypeVar

import tomli_w
from dotenv import dotenv_values, set_key
from pydantic import BaseModel, ValidationError

from linesense.config.models import AppSettings, ProvidersSettings
from linesense.errors import ConfigError
from linesense.paths import env_path, providers_path, settings_path
from linesense.runtime_logging import get_runtime_logger

ModelT = TypeVar("ModelT", bound=BaseModel)


def _load_toml(path: Path, model: type[ModelT]) -> ModelT:
    if not path.exists():
        get_runtime_logger().debug("config.defaults", path=str(path))
        return model()

    raw = path.read_text(encoding="utf-8")
    try:
        return model.model_validate(tomllib.loads(raw))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(path, f"invalid TOML: {exc}") from exc
    except ValidationError as exc:
        raise ConfigError(path, str(exc)) from exc


def _save_toml(path: Path, settings: BaseModel) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(settings.model_dump(mode="json")), encoding="utf-8")


class SettingsStore:
    def __init__(
        self,
        path: Path | None = None,
        providers: Path | None = None,
        env_file: Path | None = None,
    ) -> None:
        self.path = path or settings_path()
        self.providers_path = providers or providers_path()
        self.env_path = env_file or env_path()

    def load(self) -> AppSettings:
        return _load_toml(self.path, AppSettings)

    def load_providers(self) -> ProvidersSettings:
        return _load_toml(self.providers_path, ProvidersSettings)

    def save(self, settings: AppSettings) -> None:
        _save_toml(self.path, settings)

    def save_providers(self, providers: ProvidersSettings) -> None:
        _save_toml(self.providers_path, providers)

    def write_defaults(self, *, force: bool = False) -> list[Path]:
        """Write default ``config.toml`` and ``providers.toml``.

        Raises ``FileExistsError`` naming the first existing file unless ``force``.
        """
        targets = [self.path, self.providers_path]
        if not force:
            for target in targets:
                if target.exists():
                    raise FileExistsError(str(target))
        self.save(AppSettings())
        self.save_providers(ProvidersSettings())
        get_runtime_logger().info("config.initialized", paths=[str(target) for target in targets])
        return targets

    def update_providers(self, dotted_key: str, value: Any) -> ProvidersSettings:
        providers = self.load_providers()
        data = providers.model_dump(mode="json")

        keys = dotted_key.split(".")
        cursor: dict[str, Any] = data
        for key in keys[:-1]:
            nested = cursor.get(key)
            if not isinstance(nested, dict):
                raise KeyError(f"Unknown setting path: {dotted_key}")
            cursor = nested
        if keys[-1] not in cursor:
            raise KeyError(f"Unknown setting path: {dotted_key}")
        cursor[keys[-1]] = value

        try:
            updated = ProvidersSettings.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(self.providers_path, str(exc)) from exc
        self.save_providers(updated)
        return updated

    def set_secret(self, name: str, value: str) -> Path:
        """Store ``name=value`` in the ``.env`` file, creating it owner-readable only."""
        self.env_path.parent.mkdir(parents=True, exist_ok=True)
        self.env_path.touch(mode=0o600, exist_ok=True)
        set_key(str(self.env_path), name, value)
        get_runtime_logger().info("config.secret_stored", name=name, path=str(self.env_path))
        return self.env_path

    def environ(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        """Process environment layered over the ``.env`` file; the process wins."""
        process = os.environ if base is None else base
        if not self.env_path.exists():
            return dict(process)
        file_values = {key: value for key, value in dotenv_values(self.env_path).items() if value is not None}
        return {**file_values, **process}
