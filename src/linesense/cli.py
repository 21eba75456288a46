"""CLI entrypoint for LineSense."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Mapping

import click
from rich.console import Console
from rich.text import Text

from linesense.ai.provider import create_provider
from linesense.config.models import AppSettings
from linesense.config.store import SettingsStore
from linesense.core.models import Explanation, Suggestion
from linesense.engine import Engine
from linesense.errors import LinesenseError
from linesense.paths import project_context_path
from linesense.runtime_logging import configure_runtime_logging
from linesense.version import __version__

RISK_STYLES = {"low": "green", "medium": "yellow", "high": "bold red"}

PROJECT_CONTEXT_TEMPLATE = """\
# LineSense Project Context
# Add project-specific instructions here.
# The AI will use this context when generating suggestions in this directory.

# Example:
# - Use 'npm run build' instead of 'make'
# - The main branch is 'develop'
# - Always run tests with '--race'
"""


def detect_shell(environ: Mapping[str, str] | None = None) -> str:
    env = os.environ if environ is None else environ
    shell = env.get("SHELL", "")
    if "zsh" in shell:
        return "zsh"
    return "bash"


def _request_options(func: Callable[..., Any]) -> Callable[..., Any]:
    options = [
        click.option("--line", required=True, help="Command line to complete or explain"),
        click.option("--shell", default="", help="Shell type (bash, zsh); auto-detected when omitted"),
        click.option("--cwd", default="", help="Working directory; defaults to the current directory"),
        click.option("--model", "model_id", default="", help="Override the model ID from the profile"),
        click.option(
            "--format",
            "output_format",
            type=click.Choice(["pretty", "json"]),
            default="pretty",
            show_default=True,
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _engine(store: SettingsStore) -> Engine:
    settings = store.load()
    # .env values only feed the provider lookup, never the context envelope.
    provider = create_provider(store.load_providers(), settings.ai.provider_profile, environ=store.environ())
    return Engine(settings, provider)


def _resolve(shell: str, cwd: str) -> tuple[str, Path]:
    return shell or detect_shell(), Path(cwd or os.getcwd()).expanduser().resolve()


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2))


def _print_suggestions(suggestions: list[Suggestion]) -> None:
    console = Console(highlight=False)
    if not suggestions:
        console.print("No suggestions.")
        return
    for index, suggestion in enumerate(suggestions, start=1):
        line = Text(f"{index}. ")
        line.append(suggestion.command, style="bold")
        line.append(f"  [{suggestion.risk}]", style=RISK_STYLES[suggestion.risk])
        console.print(line)
        console.print(Text(f"   {suggestion.explanation}", style="dim"))


def _print_explanation(explanation: Explanation) -> None:
    console = Console(highlight=False)
    console.print(Text(explanation.summary, style="bold"))
    console.print(Text(f"Risk: {explanation.risk}", style=RISK_STYLES[explanation.risk]))
    for note in explanation.notes:
        console.print(Text(note))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--log-level", default=None, help="off, error, warning, info or debug")
@click.option("--log-file", default=None, type=click.Path(dir_okay=False))
@click.option(
    "--config-dir",
    envvar="LINESENSE_CONFIG_DIR",
    default=None,
    type=click.Path(file_okay=False),
    help="Directory holding config.toml, providers.toml and .env",
)
@click.pass_context
def main(ctx: click.Context, log_level: str | None, log_file: str | None, config_dir: str | None) -> None:
    """LineSense: AI-powered shell command assistant."""
    configure_runtime_logging(level=log_level, log_file=log_file)
    if config_dir is None:
        ctx.obj = SettingsStore()
        return
    root = Path(config_dir).expanduser()
    ctx.obj = SettingsStore(root / "config.toml", root / "providers.toml", root / ".env")


@main.command()
@_request_options
@click.pass_obj
def suggest(store: SettingsStore, line: str, shell: str, cwd: str, model_id: str, output_format: str) -> None:
    """Generate command suggestions for a partial command line."""
    shell, cwd_path = _resolve(shell, cwd)
    try:
        suggestions = _engine(store).suggest(shell, line, cwd_path, model_id)
    except LinesenseError as exc:
        raise click.ClickException(str(exc)) from exc

    if output_format == "json":
        _echo_json({"suggestions": [item.to_dict() for item in suggestions]})
        return
    _print_suggestions(suggestions)


@main.command()
@_request_options
@click.pass_obj
def explain(store: SettingsStore, line: str, shell: str, cwd: str, model_id: str, output_format: str) -> None:
    """Explain what a command does and how risky it is."""
    shell, cwd_path = _resolve(shell, cwd)
    try:
        explanation = _engine(store).explain(shell, line, cwd_path, model_id)
    except LinesenseError as exc:
        raise click.ClickException(str(exc)) from exc

    if output_format == "json":
        _echo_json(explanation.to_dict())
        return
    _print_explanation(explanation)


@main.group()
def config() -> None:
    """Inspect and edit configuration."""


@config.command("show")
@click.pass_obj
def config_show(store: SettingsStore) -> None:
    """Print the effective settings."""
    try:
        settings = store.load()
    except LinesenseError as exc:
        raise click.ClickException(str(exc)) from exc
    for key, value in settings.setting_items():
        click.echo(f"{key} = {value}")


@config.command("path")
@click.pass_obj
def config_path(store: SettingsStore) -> None:
    """Print configuration file paths."""
    click.echo(str(store.path))
    click.echo(str(store.providers_path))
    click.echo(str(store.env_path))


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing configuration files")
@click.pass_obj
def config_init(store: SettingsStore, force: bool) -> None:
    """Write default config.toml and providers.toml."""
    try:
        written = store.write_defaults(force=force)
    except FileExistsError as exc:
        raise click.ClickException(f"Configuration file already exists at {exc} (use --force to overwrite)") from exc
    for path in written:
        click.echo(f"Wrote {path}")


@config.command("set-model")
@click.argument("model")
@click.pass_obj
def config_set_model(store: SettingsStore, model: str) -> None:
    """Set the model of the default provider profile."""
    try:
        store.update_providers("default.model", model)
    except LinesenseError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Default model set to {model}")


@config.command("set-key")
@click.argument("key", required=False)
@click.pass_obj
def config_set_key(store: SettingsStore, key: str | None) -> None:
    """Store the provider API key in the .env file."""
    try:
        name = store.load_providers().openrouter.api_key_env
    except LinesenseError as exc:
        raise click.ClickException(str(exc)) from exc
    if not key:
        key = click.prompt(f"{name}", hide_input=True)
    path = store.set_secret(name, key.strip())
    click.echo(f"Saved {name} to {path}")


@config.command("edit")
@click.pass_obj
def config_edit(store: SettingsStore) -> None:
    """Open config.toml in $EDITOR, writing defaults first if it is missing."""
    if not store.path.exists():
        store.save(AppSettings())
    click.edit(filename=str(store.path))
    try:
        store.load()
    except LinesenseError as exc:
        raise click.ClickException(str(exc)) from exc


@config.command("init-project")
@click.argument("project_dir", required=False, default=".")
@click.option("--force", is_flag=True, help="Overwrite an existing context file")
def config_init_project(project_dir: str, force: bool) -> None:
    """Create a project context file in PROJECT_DIR."""
    path = project_context_path(Path(project_dir).expanduser().resolve())
    if path.exists() and not force:
        raise click.ClickException(f"Project context file already exists at {path} (use --force to overwrite)")
    path.write_text(PROJECT_CONTEXT_TEMPLATE, encoding="utf-8")
    click.echo(f"Created project context file at {path}")


@main.command()
def version() -> None:
    """Show version information."""
    click.echo(f"linesense version {__version__}")


if __name__ == "__main__":
    main()
