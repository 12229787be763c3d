"""Edition and rarity models.

An EditionRecord is created when a DNA is accepted, and mutated exactly once
afterwards by the rarity analyzer (score + rank attribute).
"""

from typing import Any

from pydantic import BaseModel, Field


RARITY_RANK_TRAIT = "Rarity Rank (#1 Rarest)"


class Attribute(BaseModel):
    """One trait of an edition, in persisted metadata form."""

    trait_type: str
    value: str | int
    max_value: int | None = None


class EditionRecord(BaseModel):
    """One accepted, numbered artwork of the collection."""

    edition: int = Field(ge=0)
    dna: str = Field(default="", description="Full DNA string, including per-draw options")
    dna_hash: str = Field(default="", description="SHA-1 hex digest of the DNA")
    attributes: list[Attribute] = Field(default_factory=list)
    score: float = 0.0
    date: int = Field(default=0, description="Creation time, ms since epoch")

    @property
    def rank(self) -> int | None:
        for attr in self.attributes:
            if attr.trait_type == RARITY_RANK_TRAIT:
                return int(attr.value)
        return None


class TraitRarityStat(BaseModel):
    """Occurrence count and inverse-frequency score of one trait pair."""

    occurrence: int = 0
    score: float = 0.0


class RarityResult(BaseModel):
    """Output of the rarity analysis."""

    total_editions: int
    trait_stats: dict[str, TraitRarityStat] = Field(default_factory=dict)
    editions: list[EditionRecord] = Field(default_factory=list)


class GenerationStats(BaseModel):
    """Counters collected while assembling a collection."""

    accepted: int = 0
    duplicates: int = 0
    phases: int = 0
    layer_counts: dict[str, dict[str, int]] = Field(
        default_factory=dict, description="trait_type -> value -> count"
    )


class GenerationResult(BaseModel):
    """Result of assembling a collection."""

    editions: list[EditionRecord]
    meta: dict[str, Any] = Field(default_factory=dict)
    stats: GenerationStats = Field(default_factory=GenerationStats)
