"""Configuration management for Layerforge.

Tool-level settings shared by every collection:
- paths: where layers live and where builds are written
- defaults: fallbacks for settings a collection spec leaves unset

Config resolution order (highest priority first):
1. Programmatic (LayerforgeConfig constructed in code, or configure())
2. Environment variables (LAYERFORGE_LAYERS_DIR, LAYERFORGE_BUILD_DIR, etc.)
3. Config file (~/.config/layerforge/config.json, managed by `layerforge config`)
4. Hardcoded defaults

Per-collection settings (phases, metadata, image format) live in the
collection spec YAML, see ``layerforge.core.models.CollectionSpec``.
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

from .core.models import CollectionSpec


logger = logging.getLogger(__name__)


# =============================================================================
# Config file location
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "layerforge"
CONFIG_FILE = CONFIG_DIR / "config.json"

VALID_NETWORKS = ("eth", "sol")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


# =============================================================================
# Config dataclasses
# =============================================================================


@dataclass
class PathsConfig:
    """Input and output locations.

    ``overrides_file`` is resolved relative to ``layers_dir`` unless absolute.
    """

    layers_dir: str = "./layers"
    build_dir: str = "./build"
    overrides_file: str = "layers.csv"


@dataclass
class DefaultsConfig:
    """Fallbacks for settings a collection spec does not set."""

    rarity_delimiter: str = "#"
    unique_dna_tolerance: int = 10000
    network: str = "eth"
    log_level: str = "WARNING"


# =============================================================================
# Main config class
# =============================================================================


@dataclass
class LayerforgeConfig:
    """Top-level layerforge configuration.

    Examples:
        # Package use: no files needed
        config = LayerforgeConfig(paths=PathsConfig(layers_dir="art/layers"))

        # CLI use: loads from ~/.config/layerforge/config.json
        config = LayerforgeConfig.load()
    """

    paths: PathsConfig = field(default_factory=PathsConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls) -> "LayerforgeConfig":
        """Load config from file + env vars.

        Priority: env var values > config.json values > defaults.
        """
        config = cls()

        # Layer 1: Load from config file if it exists
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                _apply_dict(config, data)
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Failed to load config from %s: %s", CONFIG_FILE, exc)

        # Layer 2: Env var overrides
        if val := os.environ.get("LAYERFORGE_LAYERS_DIR"):
            config.paths.layers_dir = val
        if val := os.environ.get("LAYERFORGE_BUILD_DIR"):
            config.paths.build_dir = val
        if val := os.environ.get("LAYERFORGE_OVERRIDES_FILE"):
            config.paths.overrides_file = val
        if val := os.environ.get("LAYERFORGE_RARITY_DELIMITER"):
            config.defaults.rarity_delimiter = val
        if val := os.environ.get("LAYERFORGE_UNIQUE_DNA_TOLERANCE"):
            try:
                config.defaults.unique_dna_tolerance = int(val)
            except ValueError:
                logger.warning("Invalid LAYERFORGE_UNIQUE_DNA_TOLERANCE=%r, ignoring", val)
        if val := os.environ.get("LAYERFORGE_NETWORK"):
            if val in VALID_NETWORKS:
                config.defaults.network = val
            else:
                logger.warning("Invalid LAYERFORGE_NETWORK=%r, ignoring", val)
        if val := os.environ.get("LAYERFORGE_LOG_LEVEL"):
            config.defaults.log_level = val.upper()

        return config

    def save(self) -> None:
        """Save config to ~/.config/layerforge/config.json."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for display."""
        return {
            "paths": asdict(self.paths),
            "defaults": asdict(self.defaults),
        }

    # ── Resolution against a collection spec ──

    def resolve_rarity_delimiter(self, spec: CollectionSpec) -> str:
        return spec.rarity_delimiter or self.defaults.rarity_delimiter

    def resolve_tolerance(self, spec: CollectionSpec) -> int:
        return spec.unique_dna_tolerance or self.defaults.unique_dna_tolerance

    def resolve_network(self, spec: CollectionSpec) -> str:
        return spec.network or self.defaults.network

    def resolve_overrides_path(self, layers_dir: Path | str | None = None) -> Path:
        """Resolve the override table path against the layers directory."""
        path = Path(self.paths.overrides_file)
        if path.is_absolute():
            return path
        return Path(layers_dir or self.paths.layers_dir) / path


# =============================================================================
# Config dict application
# =============================================================================


def _apply_dict(config: LayerforgeConfig, data: dict) -> None:
    """Apply a dict of values onto a LayerforgeConfig."""
    if "paths" in data and isinstance(data["paths"], dict):
        for k, v in data["paths"].items():
            if hasattr(config.paths, k):
                setattr(config.paths, k, str(v))
    if "defaults" in data and isinstance(data["defaults"], dict):
        for k, v in data["defaults"].items():
            if hasattr(config.defaults, k):
                if k == "unique_dna_tolerance":
                    v = int(v)
                setattr(config.defaults, k, v)


# =============================================================================
# Global config singleton
# =============================================================================

_config: LayerforgeConfig | None = None


def get_config() -> LayerforgeConfig:
    """Get the global LayerforgeConfig instance.

    First call loads from file + env vars. Subsequent calls return cached instance.
    Use configure() to replace the global config programmatically.
    """
    global _config
    if _config is None:
        _config = LayerforgeConfig.load()
    return _config


def configure(config: LayerforgeConfig) -> None:
    """Set the global LayerforgeConfig programmatically."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global config (forces reload on next get_config())."""
    global _config
    _config = None
