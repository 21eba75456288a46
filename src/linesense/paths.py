"""XDG path helpers for configuration and runtime state."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs

APP_NAME = "linesense"
PROJECT_CONTEXT_FILENAME = ".linesense_context"


def dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=False, roaming=False)


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_root() -> Path:
    return Path(dirs().user_config_path)


def state_root() -> Path:
    return ensure_dir(Path(dirs().user_state_path))


def settings_path() -> Path:
    return config_root() / "config.toml"


def providers_path() -> Path:
    return config_root() / "providers.toml"


def project_context_path(cwd: Path) -> Path:
    return cwd / PROJECT_CONTEXT_FILENAME


def env_path() -> Path:
    return config_root() / ".env"
