"""Element enumeration and derivation.

Elements are derived from raw identifiers (file names) such as
``Red Sky#20.png``: the part after the rarity delimiter is the base weight,
and the fixed four-character extension is stripped from the name.
"""

import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING

from ..core.models import Element, normalize_trait_key

if TYPE_CHECKING:
    from .overrides import OverrideTable

logger = logging.getLogger(__name__)

EXTENSION_LENGTH = 4
DEFAULT_WEIGHT = 1.0


class CatalogError(Exception):
    """Raised when a layer configuration cannot produce a valid draw."""

    pass


def list_element_files(layer_dir: Path | str) -> list[str]:
    """List the raw element identifiers in a layer directory.

    Hidden entries (dotfiles) and subdirectories are skipped. Names are sorted
    so element ids are stable across platforms.

    Raises:
        CatalogError: If the directory does not exist
    """
    layer_dir = Path(layer_dir)
    if not layer_dir.is_dir():
        raise CatalogError(f"Layer directory not found: {layer_dir}")
    return sorted(
        entry.name
        for entry in layer_dir.iterdir()
        if entry.is_file() and not entry.name.startswith(".")
    )


def get_rarity_weight(filename: str, delimiter: str = "#") -> float:
    """Parse the weight suffix of a raw identifier, defaulting to 1."""
    without_extension = filename[:-EXTENSION_LENGTH]
    if delimiter not in without_extension:
        return DEFAULT_WEIGHT
    suffix = without_extension.split(delimiter)[-1]
    try:
        weight = float(suffix)
    except ValueError:
        return DEFAULT_WEIGHT
    if not math.isfinite(weight) or weight < 0:
        return DEFAULT_WEIGHT
    return weight


def clean_name(filename: str, delimiter: str = "#") -> str:
    """Strip the weight suffix and extension from a raw identifier."""
    without_extension = filename[:-EXTENSION_LENGTH]
    return without_extension.split(delimiter)[0]


def build_elements(
    raw_identifiers: list[str],
    layer_name: str,
    layer_dir: Path | str = "",
    overrides: "OverrideTable | None" = None,
    delimiter: str = "#",
) -> list[Element]:
    """Derive ordered elements from raw identifiers.

    Weight resolution order:
    1. Override table rarity for this exact layer+trait
    2. Numeric suffix after the rarity delimiter
    3. 1

    Args:
        raw_identifiers: File names in catalog order
        layer_name: Layer directory name (used for override lookups)
        layer_dir: Directory the identifiers live in
        overrides: Normalized override table
        delimiter: Rarity delimiter

    Returns:
        Elements with ids matching their position
    """
    overrides = overrides or {}
    layer_dir = Path(layer_dir) if layer_dir else None
    elements: list[Element] = []
    for index, filename in enumerate(raw_identifiers):
        name = clean_name(filename, delimiter)
        override = overrides.get(normalize_trait_key(layer_name, name))

        if override is not None and override.rarity is not None:
            weight = override.rarity
        else:
            weight = get_rarity_weight(filename, delimiter)

        elements.append(
            Element(
                id=index,
                name=name,
                filename=filename,
                path=str(layer_dir / filename) if layer_dir else filename,
                weight=weight,
                downstream_traits=dict(override.downstream_traits) if override else {},
            )
        )
    return elements
