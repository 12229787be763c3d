"""End-to-end collection generation.

assemble -> rarity analysis -> metadata + report persistence, with the
build directory bootstrapped only after every phase's catalog validated.
"""

import logging
import random
from dataclasses import dataclass, field
from pathlib import Path

from .catalog import read_overrides_csv
from .config import LayerforgeConfig, get_config
from .core.models import CollectionSpec, GenerationResult, RarityResult
from .generator import assemble_collection, build_phase_layers
from .metadata import MetadataWriter, get_metadata_shape
from .rarity import analyze_rarity, format_rarity_report
from .render import NullRenderer, PillowRenderer
from .storage import BuildPaths, build_setup
from .utils.callbacks import ItemProgressCallback, StepProgressCallback

logger = logging.getLogger(__name__)


@dataclass
class CollectionOutput:
    """Everything one generate run produced."""

    generation: GenerationResult
    rarity: RarityResult
    paths: BuildPaths
    report: list[str] = field(default_factory=list)


def generate_collection(
    spec: CollectionSpec,
    config: LayerforgeConfig | None = None,
    *,
    layers_dir: Path | str | None = None,
    build_dir: Path | str | None = None,
    seed: int | None = None,
    render_images: bool = True,
    on_progress: ItemProgressCallback | None = None,
    on_step: StepProgressCallback | None = None,
) -> CollectionOutput:
    """
    Generate, rank and persist a whole collection.

    Args:
        spec: Collection spec
        config: Tool config (None = global config)
        layers_dir: Overrides config.paths.layers_dir
        build_dir: Overrides config.paths.build_dir
        seed: Random seed (None = random, reported in the result meta)
        render_images: False skips artwork and writes metadata only
        on_progress: Optional callback(current, total) per accepted edition
        on_step: Optional callback(step, status) per pipeline stage

    Returns:
        CollectionOutput with the generation result, rarity result and paths

    Raises:
        CatalogError: If any phase's layers cannot produce a draw
        UniquenessExhaustedError: If the collection cannot reach its size
    """
    config = config or get_config()
    layers_dir = Path(layers_dir or config.paths.layers_dir)
    build_dir = Path(build_dir or config.paths.build_dir)
    delimiter = config.resolve_rarity_delimiter(spec)
    network = config.resolve_network(spec)

    if seed is None:
        seed = random.randint(0, 2**31 - 1)

    def step(name: str, status: str) -> None:
        logger.info("[%s] %s", name, status)
        if on_step:
            on_step(name, status)

    overrides = read_overrides_csv(config.resolve_overrides_path(layers_dir))

    step("catalog", f"Validating {len(spec.layer_configurations)} layer configuration(s)")
    phases = build_phase_layers(
        spec, layers_dir, overrides=overrides, rarity_delimiter=delimiter
    )

    paths = build_setup(build_dir)
    shape = get_metadata_shape(network, spec)
    renderer = (
        PillowRenderer(
            paths,
            fmt=spec.format,
            background=spec.background,
            text=spec.text,
            rng=random.Random(seed),
        )
        if render_images
        else NullRenderer()
    )

    step("assemble", f"Creating {spec.total_editions} editions")
    generation = assemble_collection(
        spec,
        layers_dir,
        overrides=overrides,
        rarity_delimiter=delimiter,
        tolerance=config.resolve_tolerance(spec),
        network=network,
        renderer=renderer,
        seed=seed,
        on_progress=on_progress,
        phases=phases,
    )

    step("rarity", "Scoring and ranking editions")
    rarity = analyze_rarity(generation.editions)
    report = format_rarity_report(rarity)

    step("metadata", f"Writing metadata to {paths.json_dir}")
    writer = MetadataWriter(paths, shape)
    writer.write_rarity_report(report)
    writer.write_collection(rarity.editions)

    return CollectionOutput(
        generation=generation, rarity=rarity, paths=paths, report=report
    )
