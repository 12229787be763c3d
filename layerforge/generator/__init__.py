"""DNA generation, uniqueness tracking and collection assembly."""

from .dna import (
    DNA_DELIMITER,
    BYPASS_DNA_OPTION,
    DownstreamState,
    MalformedDnaError,
    select_element,
    create_dna,
    split_dna,
    remove_query_strings,
    parse_token_options,
    element_id_from_token,
    filter_dna_options,
    construct_layer_to_dna,
    attributes_for,
    dna_hash,
)
from .uniqueness import UniquenessTracker, UniquenessExhaustedError
from .assembler import assemble_collection, build_edition_pool, build_phase_layers

__all__ = [
    "DNA_DELIMITER",
    "BYPASS_DNA_OPTION",
    "DownstreamState",
    "MalformedDnaError",
    "select_element",
    "create_dna",
    "split_dna",
    "remove_query_strings",
    "parse_token_options",
    "element_id_from_token",
    "filter_dna_options",
    "construct_layer_to_dna",
    "attributes_for",
    "dna_hash",
    "UniquenessTracker",
    "UniquenessExhaustedError",
    "assemble_collection",
    "build_edition_pool",
    "build_phase_layers",
]
