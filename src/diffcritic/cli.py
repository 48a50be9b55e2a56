"""Typer CLI for diffcritic."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

import diffcritic
from diffcritic.exceptions import ConfigurationError
from diffcritic.models import DeliveryMode, Provider, ReviewState

app = typer.Typer(
    name="diffcritic",
    help="LLM code review of the working-tree diff of a single file.",
)
config_app = typer.Typer(name="config", help="Configuration management.")

app.add_typer(config_app)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"diffcritic {diffcritic.__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> logging.Logger:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    return logging.getLogger("diffcritic")


def _mask(key: str) -> str:
    if len(key) > 12:
        return key[:8] + "..." + key[-4:]
    return "***"


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """LLM code review of the working-tree diff of a single file."""


@app.command()
def review(
    file: Annotated[str, typer.Argument(help="File to review.")],
    workspace: Annotated[
        str | None,
        typer.Option("--workspace", "-w", help="Project root (defaults to the current directory)."),
    ] = None,
    line: Annotated[
        int, typer.Option("--line", "-l", help="Cursor line to insert the review at.")
    ] = 1,
    mode: Annotated[
        DeliveryMode | None,
        typer.Option("--mode", help="Delivery mode: buffer or automation."),
    ] = None,
    target_app: Annotated[
        str | None,
        typer.Option("--app", help="Application to type into in automation mode."),
    ] = None,
    provider: Annotated[
        Provider | None,
        typer.Option("--provider", "-p", help="Review service provider."),
    ] = None,
    model: Annotated[str | None, typer.Option("--model", "-m", help="Override model.")] = None,
    preview: Annotated[
        bool | None,
        typer.Option("--preview/--no-preview", help="Offer a preview before injecting."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Debug logging.")] = False,
) -> None:
    """Review the uncommitted changes of FILE and inject the result."""
    from diffcritic.config import load_env, load_settings
    from diffcritic.host import TerminalHost
    from diffcritic.review.orchestrator import ReviewCommand

    logger = _configure_logging(verbose)
    load_env()
    try:
        settings = load_settings(
            provider=provider,
            model=model,
            delivery=mode,
            target_app=target_app,
            ask_preview=preview,
        )
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    host = TerminalHost(file, workspace=workspace, line=line, console=console)
    outcome = ReviewCommand(settings, logger).run(host)
    if outcome.state == ReviewState.FAILED:
        raise typer.Exit(1)


@app.command()
def status() -> None:
    """Show version, provider, model, and API key status."""
    from diffcritic.config import load_env, load_settings

    env_path = load_env()
    try:
        settings = load_settings()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    console.print(f"[bold]diffcritic[/bold] {diffcritic.__version__}")
    console.print(f"Provider: [cyan]{settings.provider.value}[/cyan]")
    console.print(f"Model: [cyan]{settings.resolved_model}[/cyan]")
    console.print(f"Delivery: [cyan]{settings.delivery.value}[/cyan]")
    if settings.api_key:
        console.print(f"API Key: [green]{_mask(settings.api_key)}[/green]")
    else:
        console.print("API Key: [red]not set[/red]")
    console.print(f".env: {env_path or 'none found'}")


# --- Config commands ---


@config_app.command("init")
def config_init() -> None:
    """Create default config file."""
    from diffcritic.config import init_config

    try:
        path = init_config()
        console.print(f"[green]Config created at {path}[/green]")
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Config key to set.")],
    value: Annotated[str, typer.Argument(help="Value to set.")],
) -> None:
    """Set a config value."""
    from diffcritic.config import set_value

    try:
        set_value(key, value)
        shown = _mask(value) if key == "api_key" else value
        console.print(f"[green]Set {key} = {shown}[/green]")
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    from diffcritic.config import get_config

    try:
        config = get_config()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    for k, v in sorted(config.items()):
        if k == "api_key" and v:
            console.print(f"  {k}: {_mask(str(v))}")
        else:
            console.print(f"  {k}: {v}")
