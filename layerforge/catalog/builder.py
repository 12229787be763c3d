"""Layer setup for one generation phase."""

import logging
from pathlib import Path
from typing import Callable

from ..core.models import Layer, LayerOrderEntry, normalize_trait_key
from .elements import CatalogError, build_elements, list_element_files
from .overrides import OverrideTable

logger = logging.getLogger(__name__)

ElementLister = Callable[[Path], list[str]]


def setup_layers(
    layers_order: list[LayerOrderEntry],
    layers_dir: Path | str,
    overrides: OverrideTable | None = None,
    rarity_delimiter: str = "#",
    list_elements: ElementLister = list_element_files,
) -> list[Layer]:
    """Build the ordered layers of one phase.

    Args:
        layers_order: Phase layer order with per-layer options
        layers_dir: Root directory containing one subdirectory per layer
        overrides: Normalized override table (None = empty)
        rarity_delimiter: Delimiter separating trait name and weight
        list_elements: Enumerates raw identifiers of a layer directory

    Returns:
        Layers in draw order, each with at least one positive weight

    Raises:
        CatalogError: If a layer has no elements or zero total weight
    """
    layers_dir = Path(layers_dir)
    layers: list[Layer] = []
    for index, entry in enumerate(layers_order):
        layer_dir = layers_dir / entry.name
        raw_identifiers = list_elements(layer_dir)
        elements = build_elements(
            raw_identifiers,
            entry.name,
            layer_dir,
            overrides=overrides,
            delimiter=rarity_delimiter,
        )
        options = entry.options
        layer = Layer(
            id=index,
            name=options.display_name if options.display_name is not None else entry.name,
            elements=elements,
            blend=options.blend,
            opacity=options.opacity,
            bypass_dna=options.bypass_dna,
        )
        validate_layer(layer, source=str(layer_dir))
        logger.debug(
            "Layer %s: %d elements, total weight %s",
            layer.name,
            len(layer.elements),
            layer.total_weight,
        )
        layers.append(layer)
    return layers


def validate_layer(layer: Layer, source: str | None = None) -> None:
    """Reject layers that can never produce a draw."""
    where = f" ({source})" if source else ""
    if not layer.elements:
        raise CatalogError(f"Layer '{layer.name}'{where} has no elements")
    if layer.total_weight <= 0:
        raise CatalogError(
            f"Layer '{layer.name}'{where} has zero total weight across "
            f"{len(layer.elements)} element(s)"
        )


def count_combinations(layers: list[Layer]) -> int:
    """Number of distinct normalized DNAs the layers can produce.

    Bypass layers are excluded from the uniqueness key, and zero-weight
    elements can only be reached through downstream overrides, so this is an
    upper bound based on elements with a positive base weight.
    """
    total = 1
    for layer in layers:
        if layer.bypass_dna:
            continue
        reachable = sum(
            1
            for element in layer.elements
            if element.weight > 0 or _has_incoming_override(layer, element.name, layers)
        )
        total *= max(reachable, 1)
    return total


def _has_incoming_override(layer: Layer, element_name: str, layers: list[Layer]) -> bool:
    key = normalize_trait_key(layer.name, element_name)
    for other in layers:
        if other.id >= layer.id:
            break
        for element in other.elements:
            if element.downstream_traits.get(key, 0) > 0:
                return True
    return False


def dna_key_signature(layers: list[Layer]) -> tuple[tuple[str, ...], ...]:
    """Identify the uniqueness key space a phase's layers draw from.

    Phases with equal signatures produce overlapping DNA keys, so they share
    one pool of combinations across the run.
    """
    return tuple(
        tuple(element.filename for element in layer.elements)
        for layer in layers
        if not layer.bypass_dna
    )
