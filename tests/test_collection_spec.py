"""Tests for the collection spec model and YAML I/O."""

import pytest
from pydantic import ValidationError

from layerforge.core.models import CollectionSpec


class TestCollectionSpec:
    def test_bare_layer_names(self):
        spec = CollectionSpec.model_validate(
            {
                "layer_configurations": [
                    {"grow_edition_size_to": 5, "layers_order": ["Background", "Eyes"]}
                ]
            }
        )
        order = spec.layer_configurations[0].layers_order
        assert [entry.name for entry in order] == ["Background", "Eyes"]
        assert order[0].options.blend == "source-over"
        assert spec.total_editions == 5

    def test_targets_must_increase(self):
        with pytest.raises(ValidationError, match="must be greater"):
            CollectionSpec.model_validate(
                {
                    "layer_configurations": [
                        {"grow_edition_size_to": 5, "layers_order": ["A"]},
                        {"grow_edition_size_to": 5, "layers_order": ["A", "B"]},
                    ]
                }
            )

    def test_unknown_blend_rejected(self):
        with pytest.raises(ValidationError):
            CollectionSpec.model_validate(
                {
                    "layer_configurations": [
                        {
                            "grow_edition_size_to": 1,
                            "layers_order": [{"name": "A", "options": {"blend": "glow"}}],
                        }
                    ]
                }
            )

    def test_empty_layers_order_rejected(self):
        with pytest.raises(ValidationError):
            CollectionSpec.model_validate(
                {"layer_configurations": [{"grow_edition_size_to": 1, "layers_order": []}]}
            )

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "collection.yaml"
        path.write_text(
            "layer_configurations:\n"
            "  - grow_edition_size_to: 10\n"
            "    layers_order:\n"
            "      - Background\n"
            "      - name: Dot\n"
            "        options:\n"
            "          bypass_dna: true\n"
            "          opacity: 0.5\n"
            "network: sol\n"
            "metadata:\n"
            "  name_prefix: Sky Club\n"
        )
        spec = CollectionSpec.from_yaml(path)
        dot = spec.layer_configurations[0].layers_order[1]
        assert dot.options.bypass_dna is True
        assert dot.options.opacity == 0.5
        assert spec.network == "sol"
        assert spec.metadata.name_prefix == "Sky Club"

        out = tmp_path / "saved" / "collection.yaml"
        spec.to_yaml(out)
        assert CollectionSpec.from_yaml(out) == spec
