"""Persistence of edition metadata and the rarity report."""

import json
import logging
from pathlib import Path
from typing import Any

from ..core.models import Attribute, EditionRecord
from ..storage.build import BuildPaths
from .shapes import MetadataShape

logger = logging.getLogger(__name__)


class MetadataWriter:
    """Writes per-edition JSON files, the combined document and rarity.txt."""

    def __init__(self, paths: BuildPaths, shape: MetadataShape):
        self.paths = paths
        self.shape = shape

    def write_edition(self, record: EditionRecord) -> Path:
        path = self.paths.edition_json(record.edition)
        data = self.shape.build(record)
        logger.debug("Writing metadata for %d: %s", record.edition, json.dumps(data))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    def write_collection(self, records: list[EditionRecord]) -> Path:
        """Write one file per edition plus the combined ``_metadata.json``."""
        for record in records:
            self.write_edition(record)
        path = self.paths.metadata_file
        path.write_text(
            json.dumps([self.shape.build(r) for r in records], indent=2),
            encoding="utf-8",
        )
        return path

    def write_rarity_report(self, lines: list[str]) -> Path:
        path = self.paths.rarity_file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path


def load_metadata_document(path: Path | str) -> list[EditionRecord]:
    """Read edition records back from a combined metadata document.

    Only the fields needed for rarity analysis are restored; ``dna`` holds the
    hash, since the raw DNA is not persisted.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data: list[dict[str, Any]] = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected a list of editions in {path}")

    records = []
    for item in data:
        records.append(
            EditionRecord(
                edition=int(item["edition"]),
                dna_hash=str(item.get("dna", "")),
                attributes=[Attribute.model_validate(a) for a in item.get("attributes", [])],
                score=float(item.get("score", 0.0)),
                date=int(item.get("date", 0)),
            )
        )
    return records
