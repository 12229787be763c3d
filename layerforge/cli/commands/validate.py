"""Validate command: check a collection's layers without generating."""

from pathlib import Path

import typer

from ...catalog import (
    CatalogError,
    count_combinations,
    dna_key_signature,
    read_overrides_csv,
    setup_layers,
)
from ...config import get_config
from ..app import app, console, get_json_mode
from ..utils import ExitCode, Output
from .generate import load_collection_spec


@app.command("validate")
def validate_command(
    collection: Path = typer.Option(
        ..., "--collection", "-c", help="Collection spec YAML file"
    ),
    layers: Path | None = typer.Option(
        None, "--layers", "-l", help="Layers directory (defaults to config paths.layers_dir)"
    ),
):
    """
    Validate a collection spec against its layer directories.

    Builds every phase's catalog, reports per-layer element counts and checks
    that each phase has enough combinations to reach its target.

    EXIT CODES:
        0 = Valid
        1 = Invalid spec or not enough combinations
        3 = File not found
        4 = Configuration error in a layer

    Examples:
        layerforge validate -c collection.yaml
    """
    out = Output(console=console, json_mode=get_json_mode())
    config = get_config()
    layers_dir = layers or Path(config.paths.layers_dir)

    spec = load_collection_spec(collection, out)
    delimiter = config.resolve_rarity_delimiter(spec)

    try:
        overrides = read_overrides_csv(config.resolve_overrides_path(layers_dir))
    except CatalogError as e:
        out.error(f"Override table error: {e}")
        raise typer.Exit(out.finish())
    if overrides:
        out.success(f"Loaded {len(overrides)} trait override(s)", overrides=len(overrides))

    phases_data = []
    previous_target = 0
    # editions already claimed from each DNA key space by earlier phases
    claimed: dict[tuple, int] = {}
    for index, phase in enumerate(spec.layer_configurations, start=1):
        try:
            phase_layers = setup_layers(
                phase.layers_order,
                layers_dir,
                overrides=overrides,
                rarity_delimiter=delimiter,
            )
        except CatalogError as e:
            out.error(
                f"Phase {index}: {e}",
                exit_code=ExitCode.GENERATION_ERROR,
            )
            raise typer.Exit(out.finish())

        rows = [
            [
                layer.name,
                str(len(layer.elements)),
                f"{layer.total_weight:g}",
                layer.blend,
                "yes" if layer.bypass_dna else "",
            ]
            for layer in phase_layers
        ]
        out.table(
            f"Phase {index} Layers",
            ["Layer", "Elements", "Total Weight", "Blend", "Bypass DNA"],
            rows,
            data_key=f"phase_{index}_layers",
            styles=["cyan", None, None, "dim", "dim"],
        )

        needed = phase.grow_edition_size_to - previous_target
        combinations = count_combinations(phase_layers)
        signature = dna_key_signature(phase_layers)
        shared = claimed.get(signature, 0)
        claimed[signature] = shared + needed
        phases_data.append(
            {
                "phase": index,
                "needed": needed,
                "combinations": combinations,
                "claimed_by_earlier_phases": shared,
            }
        )
        if combinations < needed + shared:
            detail = (
                f" ({shared} already used by earlier phases with the same layers)"
                if shared
                else ""
            )
            out.error(
                f"Phase {index} needs {needed} unique editions but its layers "
                f"allow at most {max(combinations - shared, 0)} more combinations{detail}",
                suggestion="Add layers or elements, or lower grow_edition_size_to",
            )
        else:
            out.success(
                f"Phase {index}: {combinations} combinations for {needed} editions"
            )
        previous_target = phase.grow_edition_size_to

    out.set_data("phases", phases_data)
    raise typer.Exit(out.finish())
