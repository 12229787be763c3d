"""CLI commands for Layerforge."""

from . import (
    generate,
    validate,
    rarity,
    config_cmd,
)

__all__ = [
    "generate",
    "validate",
    "rarity",
    "config_cmd",
]
