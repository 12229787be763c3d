"""Trait catalog: override tables, element derivation and layer setup."""

from .elements import (
    CatalogError,
    list_element_files,
    get_rarity_weight,
    clean_name,
    build_elements,
)
from .overrides import TraitOverride, OverrideTable, parse_override_rows, read_overrides_csv
from .builder import setup_layers, validate_layer, count_combinations, dna_key_signature

__all__ = [
    "CatalogError",
    "list_element_files",
    "get_rarity_weight",
    "clean_name",
    "build_elements",
    "TraitOverride",
    "OverrideTable",
    "parse_override_rows",
    "read_overrides_csv",
    "setup_layers",
    "validate_layer",
    "count_combinations",
    "dna_key_signature",
]
