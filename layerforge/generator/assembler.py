"""Collection assembly across one or more layer configurations.

The assembler is the only component that talks to the render collaborator.
Generation is strictly sequential: the accept/reject decision for an edition
is final before the next draw starts.
"""

import logging
import random
import time
from datetime import datetime
from pathlib import Path
from typing import Callable

from ..catalog import OverrideTable, setup_layers
from ..catalog.builder import ElementLister
from ..catalog.elements import list_element_files
from ..core.models import (
    CollectionSpec,
    EditionRecord,
    GenerationResult,
    GenerationStats,
    Layer,
)
from ..render.base import NullRenderer, Renderer
from ..utils.callbacks import ItemProgressCallback
from .dna import attributes_for, construct_layer_to_dna, create_dna, dna_hash
from .uniqueness import UniquenessTracker

logger = logging.getLogger(__name__)

EditionCallback = Callable[[EditionRecord], None]


def build_edition_pool(
    total: int,
    start: int = 1,
    shuffle: bool = False,
    rng: random.Random | None = None,
) -> list[int]:
    """Build the edition numbers handed out to accepted DNAs, in order.

    Shuffling only changes which number an accepted DNA receives, never which
    DNAs are generated.
    """
    pool = list(range(start, total + 1))
    if shuffle:
        (rng or random.Random()).shuffle(pool)
    return pool


def build_phase_layers(
    spec: CollectionSpec,
    layers_dir: Path | str,
    overrides: OverrideTable | None = None,
    rarity_delimiter: str = "#",
    list_elements: ElementLister = list_element_files,
) -> list[list[Layer]]:
    """Build every phase's layers up front so config errors surface before any edition."""
    return [
        setup_layers(
            phase.layers_order,
            layers_dir,
            overrides=overrides,
            rarity_delimiter=rarity_delimiter,
            list_elements=list_elements,
        )
        for phase in spec.layer_configurations
    ]


def assemble_collection(
    spec: CollectionSpec,
    layers_dir: Path | str,
    *,
    overrides: OverrideTable | None = None,
    rarity_delimiter: str = "#",
    tolerance: int = 10000,
    network: str = "eth",
    renderer: Renderer | None = None,
    seed: int | None = None,
    on_progress: ItemProgressCallback | None = None,
    on_edition: EditionCallback | None = None,
    list_elements: ElementLister = list_element_files,
    phases: list[list[Layer]] | None = None,
) -> GenerationResult:
    """
    Generate every edition of a collection.

    Args:
        spec: Collection spec with one or more layer configurations
        layers_dir: Root directory of the layer folders
        overrides: Normalized override table
        rarity_delimiter: Delimiter between trait name and weight in file names
        tolerance: Duplicate draws allowed (run-wide) before giving up
        network: "sol" numbers editions from 0, anything else from 1
        renderer: Render collaborator (None = no artwork)
        seed: Random seed (None = random)
        on_progress: Optional callback(current, total)
        on_edition: Optional callback invoked with each accepted record
        list_elements: Enumerates raw identifiers of a layer directory
        phases: Prebuilt layers per layer configuration (None = build them here)

    Returns:
        GenerationResult with edition records in acceptance order

    Raises:
        CatalogError: If a phase's layers cannot produce a draw
        UniquenessExhaustedError: If the tolerance is reached before a phase's target
    """
    if seed is None:
        seed = random.randint(0, 2**31 - 1)
    rng = random.Random(seed)
    renderer = renderer or NullRenderer()

    if phases is None:
        phases = build_phase_layers(
            spec,
            layers_dir,
            overrides=overrides,
            rarity_delimiter=rarity_delimiter,
            list_elements=list_elements,
        )
    elif len(phases) != len(spec.layer_configurations):
        raise ValueError(
            f"Got layers for {len(phases)} phase(s) but the collection has "
            f"{len(spec.layer_configurations)} layer configuration(s)"
        )

    total = spec.total_editions
    pool = build_edition_pool(
        total,
        start=0 if network == "sol" else 1,
        shuffle=spec.shuffle_layer_configurations,
        rng=rng,
    )
    logger.debug("Editions left to create: %s", pool)

    tracker = UniquenessTracker(tolerance)
    stats = GenerationStats(phases=len(phases))
    editions: list[EditionRecord] = []

    for phase_index, (phase, layers) in enumerate(
        zip(spec.layer_configurations, phases)
    ):
        logger.info(
            "Phase %d: growing collection to %d editions",
            phase_index + 1,
            phase.grow_edition_size_to,
        )
        editions = _run_phase(
            layers,
            phase.grow_edition_size_to,
            editions,
            pool,
            tracker,
            renderer,
            rng,
            stats,
            on_progress=on_progress,
            on_edition=on_edition,
            total=total,
        )

    meta = {
        "count": len(editions),
        "seed": seed,
        "network": network,
        "phases": len(phases),
        "generated_at": datetime.now().isoformat(),
    }
    return GenerationResult(editions=editions, meta=meta, stats=stats)


def _run_phase(
    layers: list[Layer],
    target: int,
    editions: list[EditionRecord],
    pool: list[int],
    tracker: UniquenessTracker,
    renderer: Renderer,
    rng: random.Random,
    stats: GenerationStats,
    on_progress: ItemProgressCallback | None = None,
    on_edition: EditionCallback | None = None,
    total: int = 0,
) -> list[EditionRecord]:
    """Draw until the collection reaches ``target`` editions; returns the grown list."""
    while len(editions) < target:
        dna, _ = create_dna(layers, rng)

        if not tracker.is_unique(dna):
            stats.duplicates += 1
            tracker.reject(target)
            continue

        edition_number = pool[len(editions)]
        resolved = construct_layer_to_dna(dna, layers)
        renderer.render(edition_number, resolved)

        record = EditionRecord(
            edition=edition_number,
            dna=dna,
            dna_hash=dna_hash(dna),
            attributes=attributes_for(resolved),
            date=int(time.time() * 1000),
        )
        editions.append(record)
        tracker.accept(dna)
        stats.accepted += 1
        for attr in record.attributes:
            counts = stats.layer_counts.setdefault(attr.trait_type, {})
            counts[str(attr.value)] = counts.get(str(attr.value), 0) + 1

        logger.info("Created edition: %d, with DNA: %s", edition_number, record.dna_hash)
        if on_edition:
            on_edition(record)
        if on_progress:
            on_progress(len(editions), total or target)

    return editions
