"""Rarity scoring and ranking of a finished collection."""

from .analyzer import (
    compute_trait_stats,
    score_editions,
    rank_editions,
    analyze_rarity,
    format_rarity_report,
)

__all__ = [
    "compute_trait_stats",
    "score_editions",
    "rank_editions",
    "analyze_rarity",
    "format_rarity_report",
]
