"""Metadata shapes and persistence."""

from .shapes import MetadataShape, GenericMetadata, SolanaMetadata, get_metadata_shape
from .writer import MetadataWriter, load_metadata_document

__all__ = [
    "MetadataShape",
    "GenericMetadata",
    "SolanaMetadata",
    "get_metadata_shape",
    "MetadataWriter",
    "load_metadata_document",
]
