"""Metadata shapes: how an edition record is persisted for a target network.

Provides:
- MetadataShape: base class turning an EditionRecord into a JSON-ready dict
- GenericMetadata: ERC-721 style document (default, "eth")
- SolanaMetadata: Metaplex style document ("sol")
- get_metadata_shape(): pick the shape once per run from the network name
"""

from abc import ABC, abstractmethod
from typing import Any

from ..core.models import CollectionSpec, EditionRecord, MetadataConfig, SolanaConfig


class MetadataShape(ABC):
    """Builds the persisted form of one edition."""

    network: str = ""

    def __init__(self, metadata: MetadataConfig):
        self.metadata = metadata

    def edition_name(self, record: EditionRecord) -> str:
        return f"{self.metadata.name_prefix} #{record.edition}"

    def attributes(self, record: EditionRecord) -> list[dict[str, Any]]:
        return [attr.model_dump(exclude_none=True) for attr in record.attributes]

    @abstractmethod
    def build(self, record: EditionRecord) -> dict[str, Any]: ...


class GenericMetadata(MetadataShape):
    network = "eth"

    def build(self, record: EditionRecord) -> dict[str, Any]:
        return {
            "name": self.edition_name(record),
            "description": self.metadata.description,
            "image": f"{self.metadata.base_uri}/{record.edition}.png",
            "dna": record.dna_hash,
            "edition": record.edition,
            "date": record.date,
            **self.metadata.extra_metadata,
            "attributes": self.attributes(record),
            "score": record.score,
        }


class SolanaMetadata(MetadataShape):
    network = "sol"

    def __init__(self, metadata: MetadataConfig, solana: SolanaConfig):
        super().__init__(metadata)
        self.solana = solana

    def build(self, record: EditionRecord) -> dict[str, Any]:
        return {
            "name": self.edition_name(record),
            "symbol": self.solana.symbol,
            "description": self.metadata.description,
            "seller_fee_basis_points": self.solana.seller_fee_basis_points,
            "image": "image.png",
            "external_url": self.solana.external_url,
            "edition": record.edition,
            **self.metadata.extra_metadata,
            "attributes": self.attributes(record),
            "properties": {
                "files": [{"uri": "image.png", "type": "image/png"}],
                "category": "image",
                "creators": [c.model_dump() for c in self.solana.creators],
            },
            "score": record.score,
        }


def get_metadata_shape(network: str, spec: CollectionSpec) -> MetadataShape:
    """Create the metadata shape for a network.

    Raises:
        ValueError: If the network is unknown
    """
    if network == "eth":
        return GenericMetadata(spec.metadata)
    if network == "sol":
        return SolanaMetadata(spec.metadata, spec.solana)
    raise ValueError(f"Unknown network: {network!r}. Expected 'eth' or 'sol'.")
