"""Tests for tool configuration loading and resolution."""

import json
from pathlib import Path

import pytest

import layerforge.config as config_module
from layerforge.config import (
    DefaultsConfig,
    LayerforgeConfig,
    PathsConfig,
    configure,
    get_config,
    reset_config,
)
from layerforge.core.models import CollectionSpec

ENV_VARS = [
    "LAYERFORGE_LAYERS_DIR",
    "LAYERFORGE_BUILD_DIR",
    "LAYERFORGE_OVERRIDES_FILE",
    "LAYERFORGE_RARITY_DELIMITER",
    "LAYERFORGE_UNIQUE_DNA_TOLERANCE",
    "LAYERFORGE_NETWORK",
    "LAYERFORGE_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at a temp dir and clear env overrides."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_dir / "config.json")
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield config_dir / "config.json"
    reset_config()


def make_spec(**kwargs) -> CollectionSpec:
    return CollectionSpec.model_validate(
        {
            "layer_configurations": [
                {"grow_edition_size_to": 1, "layers_order": ["Background"]}
            ],
            **kwargs,
        }
    )


class TestLoad:
    def test_defaults(self):
        config = LayerforgeConfig.load()
        assert config.paths.layers_dir == "./layers"
        assert config.defaults.rarity_delimiter == "#"
        assert config.defaults.unique_dna_tolerance == 10000
        assert config.defaults.network == "eth"

    def test_file_values(self, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(
            json.dumps(
                {
                    "paths": {"layers_dir": "/art/layers"},
                    "defaults": {"unique_dna_tolerance": "50", "network": "sol"},
                }
            )
        )
        config = LayerforgeConfig.load()
        assert config.paths.layers_dir == "/art/layers"
        assert config.defaults.unique_dna_tolerance == 50
        assert config.defaults.network == "sol"

    def test_env_beats_file(self, isolated_config, monkeypatch):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(json.dumps({"paths": {"build_dir": "/from/file"}}))
        monkeypatch.setenv("LAYERFORGE_BUILD_DIR", "/from/env")
        monkeypatch.setenv("LAYERFORGE_UNIQUE_DNA_TOLERANCE", "25")
        config = LayerforgeConfig.load()
        assert config.paths.build_dir == "/from/env"
        assert config.defaults.unique_dna_tolerance == 25

    def test_invalid_env_values_ignored(self, monkeypatch):
        monkeypatch.setenv("LAYERFORGE_NETWORK", "btc")
        monkeypatch.setenv("LAYERFORGE_UNIQUE_DNA_TOLERANCE", "many")
        config = LayerforgeConfig.load()
        assert config.defaults.network == "eth"
        assert config.defaults.unique_dna_tolerance == 10000

    def test_corrupt_file_falls_back(self, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("{not json")
        assert LayerforgeConfig.load().paths.layers_dir == "./layers"

    def test_save_and_reload(self, isolated_config):
        config = LayerforgeConfig(
            paths=PathsConfig(layers_dir="art"),
            defaults=DefaultsConfig(network="sol"),
        )
        config.save()
        assert isolated_config.exists()
        loaded = LayerforgeConfig.load()
        assert loaded.paths.layers_dir == "art"
        assert loaded.defaults.network == "sol"


class TestResolve:
    """Collection spec values win over tool defaults."""

    def test_spec_values_win(self):
        config = LayerforgeConfig()
        spec = make_spec(rarity_delimiter="_", unique_dna_tolerance=3, network="sol")
        assert config.resolve_rarity_delimiter(spec) == "_"
        assert config.resolve_tolerance(spec) == 3
        assert config.resolve_network(spec) == "sol"

    def test_defaults_fill_gaps(self):
        config = LayerforgeConfig(defaults=DefaultsConfig(unique_dna_tolerance=7))
        spec = make_spec()
        assert config.resolve_rarity_delimiter(spec) == "#"
        assert config.resolve_tolerance(spec) == 7
        assert config.resolve_network(spec) == "eth"

    def test_overrides_path_relative_to_layers(self):
        config = LayerforgeConfig()
        assert config.resolve_overrides_path("art/layers") == Path("art/layers/layers.csv")

    def test_overrides_path_absolute(self, tmp_path):
        config = LayerforgeConfig(paths=PathsConfig(overrides_file=str(tmp_path / "o.csv")))
        assert config.resolve_overrides_path("art/layers") == tmp_path / "o.csv"


class TestGlobalConfig:
    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_configure_and_reset(self):
        custom = LayerforgeConfig(paths=PathsConfig(build_dir="out"))
        configure(custom)
        assert get_config() is custom
        reset_config()
        assert get_config() is not custom
