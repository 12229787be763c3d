"""Trait catalog models for Layerforge.

A catalog is the per-phase, immutable description of which layers make up an
artwork and which elements each layer can draw from:

- Element: one selectable trait with a base weight and downstream overrides
- Layer: one positional slot with its ordered elements and composite options
- ResolvedLayer: a layer with the element chosen for one edition
"""

from typing import Literal

from pydantic import BaseModel, Field


BlendMode = Literal[
    "source-over",
    "multiply",
    "screen",
    "overlay",
    "darken",
    "lighten",
    "difference",
    "add",
]

DEFAULT_BLEND: BlendMode = "source-over"


def normalize_trait_key(layer: str, trait: str) -> str:
    """Build the case-insensitive "layer#trait" key used by override tables.

    Examples:
        ("Background", "Red") -> "background#red"
    """
    return f"{layer.lower()}#{trait.lower()}"


# =============================================================================
# Elements & Layers
# =============================================================================


class Element(BaseModel):
    """One selectable option within a layer."""

    id: int = Field(description="Ordinal, unique within its layer")
    name: str = Field(description="Trait name (file name without weight and extension)")
    filename: str = Field(description="Raw identifier the element was derived from")
    path: str = Field(default="", description="Location of the element artwork")
    weight: float = Field(ge=0, description="Base selection weight")
    downstream_traits: dict[str, float] = Field(
        default_factory=dict,
        description="Normalized 'layer#trait' -> weight overrides applied to later layers",
    )


class Layer(BaseModel):
    """One positional slot of the composite artwork.

    The order of ``elements`` is significant: element ids are encoded
    positionally in the DNA and the weighted draw walks them in order.
    """

    id: int
    name: str
    elements: list[Element] = Field(default_factory=list)
    blend: BlendMode = DEFAULT_BLEND
    opacity: float = Field(default=1.0, ge=0, le=1)
    bypass_dna: bool = Field(
        default=False,
        description="Exclude this layer from the uniqueness comparison",
    )

    @property
    def total_weight(self) -> float:
        return sum(element.weight for element in self.elements)

    def get_element(self, element_id: int) -> Element | None:
        """Get an element by id."""
        for element in self.elements:
            if element.id == element_id:
                return element
        return None


class ResolvedLayer(BaseModel):
    """A layer paired with the element selected for one edition."""

    name: str
    blend: BlendMode = DEFAULT_BLEND
    opacity: float = 1.0
    selected_element: Element
