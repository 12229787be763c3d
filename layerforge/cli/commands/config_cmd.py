"""Config command: show, set and reset the layerforge tool config."""

from typing import Callable

import typer

from ..app import app, console
from ...config import (
    CONFIG_FILE,
    VALID_LOG_LEVELS,
    VALID_NETWORKS,
    get_config,
    reset_config,
)


def _positive_int(raw: str) -> int:
    try:
        parsed = int(raw)
    except ValueError:
        raise ValueError(f"Invalid integer: {raw}") from None
    if parsed < 1:
        raise ValueError(f"Value must be >= 1: {raw}")
    return parsed


def _network(raw: str) -> str:
    if raw not in VALID_NETWORKS:
        raise ValueError(f"Invalid network: {raw} (expected eth or sol)")
    return raw


def _log_level(raw: str) -> str:
    level = raw.upper()
    if level not in VALID_LOG_LEVELS:
        expected = ", ".join(VALID_LOG_LEVELS)
        raise ValueError(f"Invalid log level: {raw} (expected one of {expected})")
    return level


# key -> parser for the raw CLI value
SETTERS: dict[str, Callable[[str], str | int]] = {
    "paths.layers_dir": str,
    "paths.build_dir": str,
    "paths.overrides_file": str,
    "defaults.rarity_delimiter": str,
    "defaults.unique_dna_tolerance": _positive_int,
    "defaults.network": _network,
    "defaults.log_level": _log_level,
}

SECTION_TITLES = {
    "paths": "Paths",
    "defaults": "Defaults (used when a collection spec is silent)",
}


@app.command("config")
def config_command(
    action: str = typer.Argument(..., help="Action: show, set, reset"),
    key: str | None = typer.Argument(
        None, help="Config key (e.g. paths.layers_dir, defaults.network)"
    ),
    value: str | None = typer.Argument(None, help="Value to set"),
):
    """View or modify layerforge configuration.

    Examples:
        layerforge config show
        layerforge config set paths.layers_dir ./art/layers
        layerforge config set defaults.unique_dna_tolerance 5000
        layerforge config reset
    """
    actions = {
        "show": _show_config,
        "set": lambda: _set_config(key, value),
        "reset": _reset_config,
    }
    handler = actions.get(action)
    if handler is None:
        console.print(f"[red]Unknown action:[/red] {action}")
        console.print(f"Valid actions: {', '.join(actions)}")
        raise typer.Exit(1)
    handler()


def _show_config():
    config = get_config()

    console.print()
    console.print("[bold]Layerforge Configuration[/bold]")
    console.print("─" * 40)
    for section, values in config.to_dict().items():
        console.print()
        console.print(f"[bold cyan]{SECTION_TITLES[section]}[/bold cyan]")
        for name, current in values.items():
            console.print(f"  {name:<22}= {current}")

    console.print()
    if CONFIG_FILE.exists():
        console.print(f"Config file: {CONFIG_FILE}")
    else:
        console.print(f"Config file: [dim]not created yet[/dim] ({CONFIG_FILE})")
    console.print()


def _set_config(key: str | None, value: str | None):
    if not key or value is None:
        console.print("[red]Usage:[/red] layerforge config set <key> <value>")
        console.print("Available keys: " + ", ".join(sorted(SETTERS)))
        raise typer.Exit(1)

    parser = SETTERS.get(key)
    if parser is None:
        console.print(f"[red]Unknown key:[/red] {key}")
        console.print("Valid keys: " + ", ".join(sorted(SETTERS)))
        raise typer.Exit(1)

    try:
        parsed = parser(value)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    section, field_name = key.split(".", 1)
    config = get_config()
    setattr(getattr(config, section), field_name, parsed)
    config.save()
    reset_config()

    console.print(f"[green]✓[/green] Set {key} = {parsed}")
    console.print(f"  Saved to {CONFIG_FILE}")


def _reset_config():
    if not CONFIG_FILE.exists():
        console.print("Config already at defaults (no config file exists)")
        return
    CONFIG_FILE.unlink()
    reset_config()
    console.print("[green]✓[/green] Config reset to defaults")
    console.print(f"  Removed {CONFIG_FILE}")
