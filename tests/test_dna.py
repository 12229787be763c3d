"""Tests for weighted selection and DNA encoding/decoding."""

import random

import pytest

from layerforge.catalog import CatalogError, build_elements
from layerforge.core.models import Element, Layer
from layerforge.generator import (
    MalformedDnaError,
    construct_layer_to_dna,
    create_dna,
    dna_hash,
    element_id_from_token,
    filter_dna_options,
    parse_token_options,
    remove_query_strings,
    select_element,
    split_dna,
)


def make_layer(layer_id: int, name: str, files: list[str], **kwargs) -> Layer:
    return Layer(id=layer_id, name=name, elements=build_elements(files, name), **kwargs)


class TestSelectElement:
    """Tests for the linear-scan weighted draw."""

    def test_frequency_follows_weights(self):
        layer = make_layer(0, "Background", ["Common#3.png", "Rare#1.png"])
        rng = random.Random(42)
        draws = 8000
        rare = sum(
            1 for _ in range(draws) if select_element(layer, {}, rng).name == "Rare"
        )
        assert abs(rare / draws - 0.25) < 0.03

    def test_fractional_weights_keep_their_share(self):
        rng = random.Random(7)
        for files in (["A#0.5.png", "B#0.5.png"], ["A#1.5.png", "B#1.5.png"]):
            layer = make_layer(0, "Background", files)
            draws = 6000
            second = sum(
                1 for _ in range(draws) if select_element(layer, {}, rng).name == "B"
            )
            assert abs(second / draws - 0.5) < 0.03

    def test_fractional_downstream_override(self):
        layer = make_layer(1, "Eyes", ["Open#1.png", "Closed#1.png"])
        rng = random.Random(8)
        downstream = {"eyes#open": 0.25, "eyes#closed": 0.75}
        draws = 6000
        closed = sum(
            1 for _ in range(draws) if select_element(layer, downstream, rng).name == "Closed"
        )
        assert abs(closed / draws - 0.75) < 0.03

    def test_zero_weight_never_selected(self):
        layer = make_layer(0, "Background", ["Never#0.png", "Always#5.png"])
        rng = random.Random(1)
        for _ in range(500):
            assert select_element(layer, {}, rng).name == "Always"

    def test_downstream_override_applies(self):
        layer = make_layer(1, "Eyes", ["Open#10.png", "Closed#0.png"])
        rng = random.Random(3)
        downstream = {"eyes#open": 0, "eyes#closed": 1}
        for _ in range(200):
            assert select_element(layer, downstream, rng).name == "Closed"

    def test_base_weights_not_mutated(self):
        layer = make_layer(1, "Eyes", ["Open#10.png", "Closed#0.png"])
        selected = select_element(layer, {"eyes#closed": 7}, random.Random(0))
        assert [e.weight for e in layer.elements] == [10, 0]
        if selected.name == "Closed":
            assert selected.weight == 7

    def test_zero_total_raises(self):
        layer = make_layer(0, "Eyes", ["Open#1.png"])
        with pytest.raises(CatalogError, match="zero total weight"):
            select_element(layer, {"eyes#open": 0}, random.Random(0))


class TestCreateDna:
    def test_format(self):
        layers = [
            make_layer(0, "Background", ["Red.png"]),
            make_layer(1, "Dot", ["Circle.png"], bypass_dna=True),
        ]
        dna, _ = create_dna(layers, random.Random(0))
        assert dna == "0:Red.png-0:Circle.png?bypassDNA=true"

    def test_same_seed_same_dna(self):
        layers = [
            make_layer(0, "Background", ["A.png", "B.png", "C.png"]),
            make_layer(1, "Eyes", ["X.png", "Y.png"]),
        ]
        first = [create_dna(layers, random.Random(9))[0] for _ in range(3)]
        second = [create_dna(layers, random.Random(9))[0] for _ in range(3)]
        assert first == second

    def test_earlier_override_wins(self):
        head = Layer(
            id=0,
            name="Head",
            elements=[
                Element(
                    id=0,
                    name="Sleepy",
                    filename="Sleepy.png",
                    weight=1,
                    downstream_traits={"eyes#open": 1, "eyes#closed": 0},
                )
            ],
        )
        hat = Layer(
            id=1,
            name="Hat",
            elements=[
                Element(
                    id=0,
                    name="Cap",
                    filename="Cap.png",
                    weight=1,
                    downstream_traits={"eyes#open": 0, "eyes#closed": 1},
                )
            ],
        )
        eyes = make_layer(2, "Eyes", ["Open#1.png", "Closed#1.png"])
        rng = random.Random(5)
        for _ in range(50):
            dna, state = create_dna([head, hat, eyes], rng)
            assert dna == "0:Sleepy.png-0:Cap.png-0:Open#1.png"
            assert state == {"eyes#open": 1, "eyes#closed": 0}


class TestDnaTokens:
    """Tests for splitting and normalizing DNA strings."""

    def test_split_keeps_dashes_in_filenames(self):
        assert split_dna("0:Red-Sky.png-1:Dot.png") == ["0:Red-Sky.png", "1:Dot.png"]

    def test_split_empty(self):
        assert split_dna("") == []

    def test_remove_query_strings(self):
        assert remove_query_strings("1:Circle.png?bypassDNA=true") == "1:Circle.png"

    def test_parse_token_options(self):
        assert parse_token_options("1:Circle.png?bypassDNA=true&x=1") == {
            "bypassDNA": "true",
            "x": "1",
        }
        assert parse_token_options("1:Circle.png") == {}

    def test_element_id_from_token(self):
        assert element_id_from_token("12:Circle.png?bypassDNA=true") == 12

    def test_element_id_missing(self):
        with pytest.raises(MalformedDnaError):
            element_id_from_token("Circle.png")

    def test_filter_drops_bypass_tokens(self):
        dna = "0:Red.png-1:Circle.png?bypassDNA=true-2:Eye.png"
        assert filter_dna_options(dna) == "0:Red.png-2:Eye.png"

    def test_filter_is_idempotent(self):
        dna = "0:Red.png-1:Circle.png?bypassDNA=true"
        once = filter_dna_options(dna)
        assert filter_dna_options(once) == once

    def test_bypass_variants_share_a_key(self):
        a = "0:Red.png-1:Circle.png?bypassDNA=true"
        b = "0:Red.png-2:Square.png?bypassDNA=true"
        assert filter_dna_options(a) == filter_dna_options(b)

    def test_dna_hash_is_sha1(self):
        digest = dna_hash("0:Red.png")
        assert len(digest) == 40
        assert digest == dna_hash("0:Red.png")
        assert digest != dna_hash("1:Blue.png")


class TestConstructLayerToDna:
    def setup_method(self):
        self.layers = [
            make_layer(0, "Background", ["Red.png", "Blue.png"], blend="multiply"),
            make_layer(1, "Eyes", ["Open.png"], opacity=0.5),
        ]

    def test_resolves_elements(self):
        resolved = construct_layer_to_dna("1:Blue.png-0:Open.png", self.layers)
        assert [r.selected_element.name for r in resolved] == ["Blue", "Open"]
        assert resolved[0].blend == "multiply"
        assert resolved[1].opacity == 0.5

    def test_token_count_mismatch(self):
        with pytest.raises(MalformedDnaError, match="1 token"):
            construct_layer_to_dna("1:Blue.png", self.layers)

    def test_unknown_element_id(self):
        with pytest.raises(MalformedDnaError, match="no element with id 7"):
            construct_layer_to_dna("0:Red.png-7:Gone.png", self.layers)
