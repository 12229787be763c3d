"""Generate command: build a whole collection from a collection spec."""

import time
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from ...catalog import CatalogError
from ...config import get_config
from ...core.models import CollectionSpec
from ...generator import MalformedDnaError, UniquenessExhaustedError
from ..app import app, console, get_json_mode
from ..utils import (
    ExitCode,
    Output,
    format_elapsed,
    format_generation_stats_for_json,
    rarest_rows,
    setup_logging,
)


def load_collection_spec(path: Path, out: Output) -> CollectionSpec:
    """Load a collection spec, reporting failures through ``out``."""
    try:
        return CollectionSpec.from_yaml(path)
    except FileNotFoundError:
        out.error(f"Collection spec not found: {path}", exit_code=ExitCode.FILE_NOT_FOUND)
        raise typer.Exit(out.finish())
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "spec"
        out.error(
            f"Invalid collection spec {path}: {e.error_count()} error(s)",
            suggestion=f"{location}: {first['msg']}",
        )
        raise typer.Exit(out.finish())
    except Exception as e:
        out.error(f"Failed to load collection spec: {e}")
        raise typer.Exit(out.finish())


@app.command("generate")
def generate_command(
    collection: Path = typer.Option(
        ..., "--collection", "-c", help="Collection spec YAML file"
    ),
    layers: Path | None = typer.Option(
        None, "--layers", "-l", help="Layers directory (defaults to config paths.layers_dir)"
    ),
    build: Path | None = typer.Option(
        None, "--build", "-b", help="Build directory (defaults to config paths.build_dir)"
    ),
    seed: int | None = typer.Option(
        None, "--seed", help="Random seed for reproducibility"
    ),
    no_images: bool = typer.Option(
        False, "--no-images", help="Write metadata only, skip artwork"
    ),
    top: int = typer.Option(10, "--top", help="Number of rarest editions to show"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each edition"),
    debug: bool = typer.Option(False, "--debug", help="Log every draw and file write"),
):
    """
    Generate a collection: draw unique DNAs, render, rank and write metadata.

    EXIT CODES:
        0 = Success
        1 = Invalid collection spec
        3 = File not found
        4 = Configuration error in a layer
        5 = Not enough unique combinations

    Examples:
        layerforge generate -c collection.yaml
        layerforge generate -c collection.yaml --seed 42 --no-images
    """
    from ...pipeline import generate_collection

    json_mode = get_json_mode()
    out = Output(console=console, json_mode=json_mode)
    config = get_config()
    setup_logging(
        Console(stderr=True) if json_mode else console,
        verbose=verbose,
        debug=debug,
        default_level=config.defaults.log_level,
    )
    start_time = time.time()
    out.blank()

    spec = load_collection_spec(collection, out)
    out.success(
        f"Loaded collection spec: [bold]{collection}[/bold] "
        f"({len(spec.layer_configurations)} phase(s), {spec.total_editions} editions)",
        collection=str(collection),
        phases=len(spec.layer_configurations),
        target_editions=spec.total_editions,
    )

    result = None
    try:
        if not json_mode and not verbose and not debug:
            from rich.progress import (
                BarColumn,
                Progress,
                SpinnerColumn,
                TaskProgressColumn,
                TextColumn,
            )

            with Progress(
                SpinnerColumn(),
                TextColumn("[cyan]Creating editions...[/cyan]"),
                BarColumn(),
                TaskProgressColumn(),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Generating", total=spec.total_editions)

                def on_progress(current: int, total: int):
                    progress.update(task, completed=current, total=total)

                result = generate_collection(
                    spec,
                    config,
                    layers_dir=layers,
                    build_dir=build,
                    seed=seed,
                    render_images=not no_images,
                    on_progress=on_progress,
                )
        else:
            result = generate_collection(
                spec,
                config,
                layers_dir=layers,
                build_dir=build,
                seed=seed,
                render_images=not no_images,
            )
    except CatalogError as e:
        out.error(
            f"Configuration error: {e}",
            exit_code=ExitCode.GENERATION_ERROR,
            suggestion="Check the layer directory and its element weights",
        )
        raise typer.Exit(out.finish())
    except UniquenessExhaustedError as e:
        out.set_data("accepted", e.accepted)
        out.error(
            str(e),
            exit_code=ExitCode.EXHAUSTED,
            suggestion="Add layers or elements, or raise unique_dna_tolerance",
        )
        raise typer.Exit(out.finish())
    except MalformedDnaError as e:
        out.error(f"DNA error: {e}", exit_code=ExitCode.GENERATION_ERROR)
        raise typer.Exit(out.finish())

    generation = result.generation
    elapsed = time.time() - start_time
    out.success(
        f"Created {len(generation.editions)} editions "
        f"({generation.stats.duplicates} duplicate draws, seed={generation.meta['seed']}, "
        f"{format_elapsed(elapsed)})",
        created=len(generation.editions),
        duplicates=generation.stats.duplicates,
        seed=generation.meta["seed"],
        total_time_seconds=elapsed,
    )

    out.set_data("stats", format_generation_stats_for_json(generation.stats))
    out.table(
        "Rarest Editions",
        ["Rank", "Edition", "Score", "DNA"],
        rarest_rows(result.rarity.editions, top, with_dna=True),
        styles=["cyan", None, None, "dim"],
    )

    out.set_data("build_dir", str(result.paths.root))
    out.divider()
    out.success(f"Wrote metadata to [bold]{result.paths.json_dir}[/bold]")
    out.text(f"[dim]Rarity report: {result.paths.rarity_file}[/dim]")
    out.divider()

    raise typer.Exit(out.finish())
