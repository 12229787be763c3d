"""Tests for trait scoring and edition ranking."""

import pytest

from layerforge.core.models import RARITY_RANK_TRAIT, Attribute, EditionRecord
from layerforge.rarity import (
    analyze_rarity,
    compute_trait_stats,
    format_rarity_report,
    rank_editions,
)


def make_edition(edition: int, **traits) -> EditionRecord:
    return EditionRecord(
        edition=edition,
        attributes=[Attribute(trait_type=k, value=v) for k, v in traits.items()],
    )


def make_collection() -> list[EditionRecord]:
    """100 editions: 25 Red and 75 Blue backgrounds, all with Open eyes."""
    return [
        make_edition(i, Background="Red" if i <= 25 else "Blue", Eyes="Open")
        for i in range(1, 101)
    ]


class TestTraitStats:
    def test_inverse_frequency(self):
        stats = compute_trait_stats(make_collection())
        assert stats["background#red"].occurrence == 25
        assert stats["background#red"].score == pytest.approx(4.0)
        assert stats["background#blue"].score == pytest.approx(100 / 75)
        assert stats["eyes#open"].score == pytest.approx(1.0)

    def test_keys_are_case_insensitive(self):
        editions = [make_edition(1, Background="Red"), make_edition(2, background="RED")]
        stats = compute_trait_stats(editions)
        assert list(stats) == ["background#red"]
        assert stats["background#red"].occurrence == 2


class TestAnalyzeRarity:
    """Tests for scoring and ranking a finished collection."""

    def test_edition_score_is_sum_of_trait_scores(self):
        result = analyze_rarity(make_collection())
        red = next(r for r in result.editions if r.edition == 1)
        blue = next(r for r in result.editions if r.edition == 100)
        assert red.score == pytest.approx(5.0)
        assert blue.score == pytest.approx(100 / 75 + 1)

    def test_ranks_are_a_permutation(self):
        result = analyze_rarity(make_collection())
        ranks = sorted(r.rank for r in result.editions)
        assert ranks == list(range(1, 101))

    def test_highest_score_is_rank_one(self):
        editions = [
            make_edition(1, Background="Blue"),
            make_edition(2, Background="Blue"),
            make_edition(3, Background="Red"),
        ]
        analyze_rarity(editions)
        assert editions[2].rank == 1

    def test_rank_attribute_shape(self):
        editions = [make_edition(7, Background="Blue"), make_edition(9, Background="Red")]
        analyze_rarity(editions)
        rank_attr = editions[0].attributes[-1]
        assert rank_attr.trait_type == RARITY_RANK_TRAIT
        assert rank_attr.max_value == 2

    def test_ties_keep_input_order(self):
        editions = [make_edition(1, Background="Blue"), make_edition(2, Background="Blue")]
        rank_editions(editions)
        assert editions[0].rank == 2
        assert editions[1].rank == 1

    def test_reanalysis_replaces_rank(self):
        editions = make_collection()
        analyze_rarity(editions)
        first_scores = [r.score for r in editions]
        analyze_rarity(editions)
        assert [r.score for r in editions] == first_scores
        for record in editions:
            ranks = [a for a in record.attributes if a.trait_type == RARITY_RANK_TRAIT]
            assert len(ranks) == 1

    def test_empty_collection(self):
        result = analyze_rarity([])
        assert result.total_editions == 0
        assert result.trait_stats == {}


class TestRarityReport:
    def test_line_format(self):
        lines = format_rarity_report(analyze_rarity(make_collection()))
        assert "background#red - 25 in 100 editions - 25% - 4.00 rarity score" in lines
        assert "eyes#open - 100 in 100 editions - 100% - 1.00 rarity score" in lines

    def test_fractional_percentage(self):
        editions = [
            make_edition(1, Background="Red"),
            make_edition(2, Background="Blue"),
            make_edition(3, Background="Blue"),
        ]
        lines = format_rarity_report(analyze_rarity(editions))
        assert lines[0].startswith("background#red - 1 in 3 editions - 33.33")
        assert lines[0].endswith("% - 3.00 rarity score")
