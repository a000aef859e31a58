"""Typer application for inspecting and maintaining the generated cache."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from devspace_cache.cli.errorhandler import handle_cli_errors
from devspace_cache.logging_setup import configure_logging
from devspace_cache.models import GeneratedCache, ProfileCache
from devspace_cache.settings import CacheSettings
from devspace_cache.store import load_generated_cache_from_path, save_generated_cache_to_path

app = typer.Typer(
    name="devspace-cache",
    help="Inspect and maintain the per-project build/deploy cache (.devspace/generated.yaml)",
    add_completion=False,
)

console = Console()
logger = logging.getLogger(__name__)

_HASH_WIDTH = 12


@dataclass(slots=True)
class _CliState:
    path: Path
    profile: str | None
    debug: bool


@app.callback()
def _initialize_cli(
    ctx: typer.Context,
    path: Annotated[
        Path | None,
        typer.Option("--path", help="Cache file to operate on (default: DEVSPACE_CACHE_PATH or .devspace/generated.yaml)"),
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Show full tracebacks on errors")] = False,
) -> None:
    """Resolve settings and logging shared by all commands."""
    settings = CacheSettings()
    configure_logging(settings.log_level)
    ctx.obj = _CliState(
        path=path if path is not None else settings.cache_path,
        profile=settings.profile,
        debug=debug,
    )


def _state(ctx: typer.Context) -> _CliState:
    return ctx.find_root().obj


def _short(value: str) -> str:
    if len(value) <= _HASH_WIDTH:
        return value
    return value[:_HASH_WIDTH]


def _images_table(profile: ProfileCache) -> Table:
    table = Table(title="Images", show_header=True, header_style="bold magenta")
    table.add_column("Image", style="cyan")
    table.add_column("Image name")
    table.add_column("Tag", style="green")
    table.add_column("Config hash", style="dim")
    for name, image in sorted(profile.images.items()):
        table.add_row(name, image.image_name, image.tag, _short(image.image_config_hash))
    return table


def _deployments_table(profile: ProfileCache) -> Table:
    table = Table(title="Deployments", show_header=True, header_style="bold magenta")
    table.add_column("Deployment", style="cyan")
    table.add_column("Config hash", style="dim")
    table.add_column("Helm chart", style="dim")
    table.add_column("Manifests", style="dim")
    for name, deployment in sorted(profile.deployments.items()):
        table.add_row(
            name,
            _short(deployment.deployment_config_hash),
            _short(deployment.helm_chart_hash),
            _short(deployment.kubectl_manifests_hash),
        )
    return table


def _dependencies_table(profile: ProfileCache) -> Table:
    table = Table(title="Dependencies", show_header=True, header_style="bold magenta")
    table.add_column("Dependency", style="cyan")
    table.add_column("Version", style="green")
    for name, version in sorted(profile.dependencies.items()):
        table.add_row(name, version)
    return table


def _save(cache: GeneratedCache, state: _CliState) -> None:
    written = save_generated_cache_to_path(cache, state.path)
    logger.debug("Wrote %s", written)


@app.command()
def show(
    ctx: typer.Context,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-p", help="Profile to show instead of the active one"),
    ] = None,
) -> None:
    """Show the cached images, deployments and dependencies of a profile."""
    state = _state(ctx)
    with handle_cli_errors(debug=state.debug):
        cache = load_generated_cache_from_path(state.path, profile_override=profile or state.profile)

    active = cache.get_active()
    name = cache.active_profile_name or "(default)"
    console.print(f"[bold]Profile:[/bold] {escape(name)}")

    if active.last_context is not None:
        console.print(
            f"[bold]Last context:[/bold] {escape(active.last_context.context or '-')} "
            f"(namespace {escape(active.last_context.namespace or '-')})"
        )

    if active.images:
        console.print(_images_table(active))
    else:
        console.print("[dim]No images cached[/dim]")

    if active.deployments:
        console.print(_deployments_table(active))
    else:
        console.print("[dim]No deployments cached[/dim]")

    if active.dependencies:
        console.print(_dependencies_table(active))


@app.command()
def profiles(ctx: typer.Context) -> None:
    """List the profiles that have cache entries."""
    state = _state(ctx)
    with handle_cli_errors(debug=state.debug):
        cache = load_generated_cache_from_path(state.path, profile_override=state.profile)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Profile", style="cyan")
    table.add_column("Images", justify="right")
    table.add_column("Deployments", justify="right")
    table.add_column("State")
    for name, entry in sorted(cache.profiles.items()):
        markers = []
        if name == cache.active_profile:
            markers.append("active")
        if name == cache.override_profile:
            markers.append("override")
        table.add_row(
            name or "(default)",
            str(len(entry.images)),
            str(len(entry.deployments)),
            ", ".join(markers),
        )
    console.print(table)


@app.command()
def use(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile to make active")],
) -> None:
    """Persist NAME as the active profile."""
    state = _state(ctx)
    with handle_cli_errors(debug=state.debug):
        cache = load_generated_cache_from_path(state.path)
        cache.active_profile = name
        cache.ensure_profile(name)
        _save(cache, state)

    console.print(f"[green]Active profile set to[/green] {escape(name)}")


@app.command("vars")
def list_vars(ctx: typer.Context) -> None:
    """Show the cached variable values."""
    state = _state(ctx)
    with handle_cli_errors(debug=state.debug):
        cache = load_generated_cache_from_path(state.path)

    if not cache.vars:
        console.print("[dim]No variables cached[/dim]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Variable", style="cyan")
    table.add_column("Value")
    for key, value in sorted(cache.vars.items()):
        table.add_row(key, value)
    console.print(table)


@app.command("set-var")
def set_var(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Variable name")],
    value: Annotated[str, typer.Argument(help="Variable value")],
) -> None:
    """Store a variable value in the cache."""
    state = _state(ctx)
    with handle_cli_errors(debug=state.debug):
        cache = load_generated_cache_from_path(state.path)
        cache.vars[key] = value
        _save(cache, state)

    console.print(f"[green]Saved[/green] {escape(key)}")


@app.command()
def clear(
    ctx: typer.Context,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-p", help="Only clear this profile"),
    ] = None,
) -> None:
    """Remove cached entries so the next run rebuilds and redeploys."""
    state = _state(ctx)
    with handle_cli_errors(debug=state.debug):
        cache = load_generated_cache_from_path(state.path)
        if profile is not None:
            cache.remove_profile(profile)
            message = f"Cleared profile {escape(profile)}"
        else:
            cache.profiles.clear()
            message = "Cleared all profiles"
        _save(cache, state)

    console.print(f"[green]{message}[/green]")


__all__ = ["app", "console"]
