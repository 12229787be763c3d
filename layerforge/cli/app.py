"""The ``layerforge`` typer app, its global flags and shared console."""

import typer
from rich.console import Console

from .. import __version__

app = typer.Typer(
    name="layerforge",
    help="Generate unique layered artwork collections with rarity rankings.",
    no_args_is_help=True,
)

console = Console()

# Set once per invocation by the root callback
_json_mode = False


def get_json_mode() -> bool:
    """Whether the current invocation asked for --json output."""
    return _json_mode


def _print_version(value: bool) -> None:
    if not value:
        return
    print(f"layerforge {__version__}")
    raise typer.Exit()


@app.callback()
def root(
    json_output: bool = typer.Option(
        False,
        "--json",
        is_eager=True,
        help="Print one JSON document per command instead of rich text",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        is_eager=True,
        callback=_print_version,
        help="Print the layerforge version and exit",
    ),
):
    """Layerforge: draw, deduplicate and rank layered artwork editions."""
    global _json_mode
    _json_mode = json_output


# Commands register themselves on import
from .commands import generate, validate, rarity, config_cmd  # noqa: E402, F401
