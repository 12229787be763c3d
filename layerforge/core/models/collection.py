"""Collection spec models and YAML I/O for Layerforge.

A CollectionSpec is the complete blueprint for one generation run: the
ordered layer configurations (phases), how many editions each phase grows
the collection to, and how artwork and metadata should be produced.
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .catalog import BlendMode, DEFAULT_BLEND


Network = Literal["eth", "sol"]


# =============================================================================
# Layer configuration (phases)
# =============================================================================


class LayerOptions(BaseModel):
    """Per-layer display and composite options."""

    display_name: str | None = Field(
        default=None, description="Trait type shown in metadata (defaults to layer name)"
    )
    blend: BlendMode = DEFAULT_BLEND
    opacity: float = Field(default=1.0, ge=0, le=1)
    bypass_dna: bool = False


class LayerOrderEntry(BaseModel):
    """One layer in a phase's draw order."""

    name: str = Field(description="Directory name of the layer under the layers dir")
    options: LayerOptions = Field(default_factory=LayerOptions)


class LayerConfiguration(BaseModel):
    """One generation phase."""

    grow_edition_size_to: int = Field(
        ge=1, description="Cumulative edition count reached at the end of this phase"
    )
    layers_order: list[LayerOrderEntry] = Field(min_length=1)

    @field_validator("layers_order", mode="before")
    @classmethod
    def coerce_layer_names(cls, v):
        # Allow bare strings as shorthand for {"name": ...}
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v


# =============================================================================
# Output configuration
# =============================================================================


class MetadataConfig(BaseModel):
    """Fields shared by every persisted edition record."""

    name_prefix: str = "Your Collection"
    description: str = "Remember to replace this description"
    base_uri: str = "ipfs://NewUriToReplace"
    extra_metadata: dict[str, Any] = Field(default_factory=dict)


class SolanaCreator(BaseModel):
    address: str
    share: int = Field(ge=0, le=100)


class SolanaConfig(BaseModel):
    """Chain-specific fields for the Solana metadata shape."""

    symbol: str = "YC"
    seller_fee_basis_points: int = Field(default=1000, ge=0, le=10000)
    external_url: str = ""
    creators: list[SolanaCreator] = Field(default_factory=list)


class FormatConfig(BaseModel):
    width: int = Field(default=512, ge=1)
    height: int = Field(default=512, ge=1)
    smoothing: bool = False


class BackgroundConfig(BaseModel):
    generate: bool = True
    static: bool = False
    default: str = "#000000"
    brightness: str = Field(default="80%", description="HSL lightness for random backgrounds")


class TextConfig(BaseModel):
    """Text-only rendering: one '<layer><spacer><trait>' line per layer."""

    only: bool = False
    color: str = "#ffffff"
    size: int = Field(default=20, ge=1)
    x_gap: int = 40
    y_gap: int = 40
    spacer: str = " => "
    font: str | None = Field(default=None, description="Path to a TrueType font file")


# =============================================================================
# Collection Spec
# =============================================================================


class CollectionSpec(BaseModel):
    """Complete specification for generating a collection."""

    layer_configurations: list[LayerConfiguration] = Field(min_length=1)
    shuffle_layer_configurations: bool = False
    unique_dna_tolerance: int | None = Field(
        default=None, ge=1, description="Rejected draws allowed before giving up"
    )
    rarity_delimiter: str | None = None
    network: Network | None = None
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    solana: SolanaConfig = Field(default_factory=SolanaConfig)
    format: FormatConfig = Field(default_factory=FormatConfig)
    background: BackgroundConfig = Field(default_factory=BackgroundConfig)
    text: TextConfig = Field(default_factory=TextConfig)

    @model_validator(mode="after")
    def check_phase_targets_increase(self) -> "CollectionSpec":
        previous = 0
        for index, phase in enumerate(self.layer_configurations):
            if phase.grow_edition_size_to <= previous:
                raise ValueError(
                    f"layer_configurations[{index}].grow_edition_size_to "
                    f"({phase.grow_edition_size_to}) must be greater than the "
                    f"previous phase's ({previous})"
                )
            previous = phase.grow_edition_size_to
        return self

    @property
    def total_editions(self) -> int:
        return self.layer_configurations[-1].grow_edition_size_to

    def to_yaml(self, path: Path | str) -> None:
        """Save spec to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json", exclude_none=True)

        with open(path, "w") as f:
            yaml.dump(
                data, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

    @classmethod
    def from_yaml(cls, path: Path | str) -> "CollectionSpec":
        """Load spec from YAML file."""
        path = Path(path)

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.model_validate(data)
