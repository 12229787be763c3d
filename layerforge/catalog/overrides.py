"""Override table ingestion.

The override table is a CSV file with one row per trait:

    layer,trait,rarity,eyes#closed,mouth#smile
    Background,Red,5,,
    Head,Sleepy,,100,0

``layer`` and ``trait`` identify the row; ``rarity`` (optional) replaces the
element's base weight; every header containing ``#`` is a downstream trait
whose weight is overridden once this trait has been drawn. Empty cells are
ignored so the file can be kept as a full matrix.
"""

import csv
import logging
import math
from pathlib import Path

from pydantic import BaseModel, Field

from ..core.models import normalize_trait_key
from .elements import CatalogError

logger = logging.getLogger(__name__)


class TraitOverride(BaseModel):
    """Override data for one normalized 'layer#trait' key."""

    rarity: float | None = None
    downstream_traits: dict[str, float] = Field(default_factory=dict)


OverrideTable = dict[str, TraitOverride]


def _parse_number(raw: str) -> float | None:
    """Parse a numeric cell, returning None for non-numeric input."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_override_rows(rows: list[dict[str, str]]) -> OverrideTable:
    """Normalize already-parsed CSV rows into an override table.

    Args:
        rows: One dict per data row, keyed by header

    Returns:
        Mapping of normalized 'layer#trait' to TraitOverride

    Raises:
        CatalogError: If a row lacks layer/trait or a downstream cell is not numeric
    """
    table: OverrideTable = {}
    for line_no, row in enumerate(rows, start=2):
        layer = (row.get("layer") or "").strip()
        trait = (row.get("trait") or "").strip()
        if not layer or not trait:
            raise CatalogError(
                f"Override table row {line_no} is missing 'layer' or 'trait'"
            )

        downstream: dict[str, float] = {}
        for header, value in row.items():
            if header is None or "#" not in header:
                continue
            if value is None or value.strip() == "":
                continue
            weight = _parse_number(value)
            if weight is None or weight < 0:
                raise CatalogError(
                    f"Override table row {line_no} ({layer}#{trait}): "
                    f"downstream weight for '{header}' is not a non-negative number: {value!r}"
                )
            downstream[header.strip().lower()] = weight

        rarity_raw = (row.get("rarity") or "").strip()
        rarity = _parse_number(rarity_raw) if rarity_raw else None
        if rarity_raw and rarity is None:
            logger.warning(
                "Ignoring non-numeric rarity %r for %s#%s", rarity_raw, layer, trait
            )
        if rarity is not None and rarity < 0:
            raise CatalogError(
                f"Override table row {line_no} ({layer}#{trait}): rarity must be >= 0"
            )

        table[normalize_trait_key(layer, trait)] = TraitOverride(
            rarity=rarity, downstream_traits=downstream
        )
    return table


def read_overrides_csv(path: Path | str) -> OverrideTable:
    """Load the override table from a CSV file.

    A missing file is valid and yields an empty table.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Override table not provided (%s)", path)
        return {}

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    table = parse_override_rows(rows)
    logger.debug("Override table parsed with %d entries", len(table))
    return table
