"""All Pydantic models for Layerforge, organized by domain.

- catalog.py: Layers, elements and resolved selections
- collection.py: Collection spec (phases + output settings) with YAML I/O
- edition.py: Edition records, rarity stats and generation results
"""

from .catalog import (
    BlendMode,
    DEFAULT_BLEND,
    Element,
    Layer,
    ResolvedLayer,
    normalize_trait_key,
)
from .collection import (
    Network,
    LayerOptions,
    LayerOrderEntry,
    LayerConfiguration,
    MetadataConfig,
    SolanaCreator,
    SolanaConfig,
    FormatConfig,
    BackgroundConfig,
    TextConfig,
    CollectionSpec,
)
from .edition import (
    RARITY_RANK_TRAIT,
    Attribute,
    EditionRecord,
    TraitRarityStat,
    RarityResult,
    GenerationStats,
    GenerationResult,
)

__all__ = [
    # Catalog
    "BlendMode",
    "DEFAULT_BLEND",
    "Element",
    "Layer",
    "ResolvedLayer",
    "normalize_trait_key",
    # Collection
    "Network",
    "LayerOptions",
    "LayerOrderEntry",
    "LayerConfiguration",
    "MetadataConfig",
    "SolanaCreator",
    "SolanaConfig",
    "FormatConfig",
    "BackgroundConfig",
    "TextConfig",
    "CollectionSpec",
    # Editions
    "RARITY_RANK_TRAIT",
    "Attribute",
    "EditionRecord",
    "TraitRarityStat",
    "RarityResult",
    "GenerationStats",
    "GenerationResult",
]
