"""Post-generation rarity scoring and ranking.

Every trait pair (trait_type, value) gets an inverse-frequency score:

    score = total_editions / occurrence

An edition's score is the sum of its traits' scores, so editions carrying
rare traits score high. Editions are then ranked densely from 1 (highest
score, rarest) to N.
"""

import logging

from ..core.models import (
    RARITY_RANK_TRAIT,
    Attribute,
    EditionRecord,
    RarityResult,
    TraitRarityStat,
    normalize_trait_key,
)

logger = logging.getLogger(__name__)


def _scored_attributes(record: EditionRecord) -> list[Attribute]:
    """Attributes that take part in scoring (a previous rank is not a trait)."""
    return [a for a in record.attributes if a.trait_type != RARITY_RANK_TRAIT]


def compute_trait_stats(editions: list[EditionRecord]) -> dict[str, TraitRarityStat]:
    """Count every trait pair and assign its inverse-frequency score.

    Scores are computed once from the final counts.
    """
    total = len(editions)
    stats: dict[str, TraitRarityStat] = {}
    for record in editions:
        for attr in _scored_attributes(record):
            key = normalize_trait_key(attr.trait_type, str(attr.value))
            stat = stats.setdefault(key, TraitRarityStat())
            stat.occurrence += 1

    for stat in stats.values():
        stat.score = total / stat.occurrence
    return stats


def score_editions(
    editions: list[EditionRecord], stats: dict[str, TraitRarityStat]
) -> None:
    """Set each edition's score to the sum of its trait scores."""
    for record in editions:
        record.score = sum(
            stats[normalize_trait_key(attr.trait_type, str(attr.value))].score
            for attr in _scored_attributes(record)
        )


def rank_editions(editions: list[EditionRecord]) -> None:
    """Append the rarity rank attribute to every edition.

    Editions are sorted ascending by score (stable), so the highest score
    receives rank 1. Ranks are attached by edition number, not sort position,
    and replace any rank from a previous analysis.
    """
    total = len(editions)
    by_edition = {record.edition: record for record in editions}
    ordered = sorted(editions, key=lambda record: record.score)

    for index, ranked in enumerate(ordered):
        record = by_edition[ranked.edition]
        record.attributes = _scored_attributes(record)
        record.attributes.append(
            Attribute(
                trait_type=RARITY_RANK_TRAIT,
                value=total - index,
                max_value=total,
            )
        )


def analyze_rarity(editions: list[EditionRecord]) -> RarityResult:
    """Score and rank a finished collection in place.

    Args:
        editions: Every accepted edition of the run

    Returns:
        RarityResult with per-trait stats and the rank-annotated editions
    """
    stats = compute_trait_stats(editions)
    score_editions(editions, stats)
    rank_editions(editions)
    logger.info(
        "Rarity analysis: %d trait pairs across %d editions", len(stats), len(editions)
    )
    return RarityResult(total_editions=len(editions), trait_stats=stats, editions=editions)


def _format_percentage(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return repr(value)


def format_rarity_report(result: RarityResult) -> list[str]:
    """One human-readable line per trait pair.

    Example:
        background#red - 25 in 100 editions - 25% - 4.00 rarity score
    """
    total = result.total_editions
    lines = []
    for key, stat in result.trait_stats.items():
        chance = (stat.occurrence / total) * 100
        lines.append(
            f"{key} - {stat.occurrence} in {total} editions - "
            f"{_format_percentage(chance)}% - {stat.score:.2f} rarity score"
        )
    return lines
