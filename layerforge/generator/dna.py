"""Weighted DNA generation and decoding.

A DNA string records which element was drawn for every layer of one edition:

    0:Red#1.png-1:Circle.png?bypassDNA=true

Tokens are joined by ``-`` in layer order. Each token is
``<element id>:<filename>`` with an optional query string carrying per-draw
options. Options are not part of an edition's identity; see
``filter_dna_options`` for the uniqueness key.
"""

import hashlib
import logging
import random
import re

from ..catalog import CatalogError
from ..core.models import Attribute, Element, Layer, ResolvedLayer, normalize_trait_key

logger = logging.getLogger(__name__)

DNA_DELIMITER = "-"
BYPASS_DNA_OPTION = "bypassDNA"

# Split on the delimiter only where the next token starts, so file names
# containing the delimiter survive a round trip.
_TOKEN_SPLIT = re.compile(rf"{re.escape(DNA_DELIMITER)}(?=\d+:)")
_QUERY = re.compile(r"\?.*$")

DownstreamState = dict[str, float]


class MalformedDnaError(Exception):
    """Raised when a DNA string does not match the layers it is decoded against."""

    pass


# =============================================================================
# Generation
# =============================================================================


def select_element(
    layer: Layer,
    downstream: DownstreamState,
    rng: random.Random,
) -> Element:
    """Draw one element of a layer by linear-scan weighted selection.

    Elements are cloned before downstream overrides are applied, so the
    catalog's base weights are never mutated.

    Args:
        layer: Layer to draw from
        downstream: Overrides accumulated earlier in this round
        rng: Random number generator

    Returns:
        The selected (cloned, possibly re-weighted) element

    Raises:
        CatalogError: If the effective total weight is zero
    """
    candidates = [element.model_copy(deep=True) for element in layer.elements]

    total_weight = 0.0
    for element in candidates:
        override = downstream.get(normalize_trait_key(layer.name, element.name))
        if override is not None:
            element.weight = override
        total_weight += element.weight

    if total_weight <= 0:
        raise CatalogError(
            f"Layer '{layer.name}' has zero total weight"
            + (" after downstream overrides" if downstream else "")
        )

    # uniform in [0, total_weight), so fractional weights keep their share
    draw = rng.random() * total_weight
    last_positive = None
    for element in candidates:
        if element.weight > 0:
            last_positive = element
        draw -= element.weight
        if draw < 0:
            return element

    # Float rounding can leave a draw just short of the total
    return last_positive


def create_dna(
    layers: list[Layer],
    rng: random.Random,
    downstream: DownstreamState | None = None,
) -> tuple[str, DownstreamState]:
    """Draw one element per layer and encode the draw as DNA.

    Args:
        layers: Layers in catalog order
        rng: Random number generator
        downstream: Initial override state (None = fresh round)

    Returns:
        Tuple of (dna, override state after the final layer)
    """
    state: DownstreamState = dict(downstream) if downstream else {}
    tokens: list[str] = []

    for layer in layers:
        selected = select_element(layer, state, rng)
        # Overrides from earlier layers are never clobbered by later ones
        state = {**selected.downstream_traits, **state}
        token = f"{selected.id}:{selected.filename}"
        if layer.bypass_dna:
            token += f"?{BYPASS_DNA_OPTION}=true"
        tokens.append(token)

    return DNA_DELIMITER.join(tokens), state


# =============================================================================
# Decoding
# =============================================================================


def split_dna(dna: str) -> list[str]:
    """Split a DNA string into per-layer tokens."""
    if not dna:
        return []
    return _TOKEN_SPLIT.split(dna)


def remove_query_strings(token: str) -> str:
    """Strip the ``?option=value`` suffix from a token."""
    return _QUERY.sub("", token)


def parse_token_options(token: str) -> dict[str, str]:
    """Parse the query-string options of a token."""
    match = _QUERY.search(token)
    if not match:
        return {}
    options: dict[str, str] = {}
    for setting in match.group(0)[1:].split("&"):
        if not setting:
            continue
        key, _, value = setting.partition("=")
        options[key] = value
    return options


def element_id_from_token(token: str) -> int:
    """Extract the element id of a token."""
    head = remove_query_strings(token).split(":", 1)[0]
    try:
        return int(head)
    except ValueError:
        raise MalformedDnaError(f"DNA token has no element id: {token!r}") from None


def filter_dna_options(dna: str) -> str:
    """Build the uniqueness key of a DNA string.

    Tokens of layers flagged ``bypassDNA=true`` are dropped entirely, so
    editions differing only in a bypass layer count as duplicates. The result
    carries no bypass tokens, so re-filtering it is a no-op.
    """
    kept = [
        token
        for token in split_dna(dna)
        if parse_token_options(token).get(BYPASS_DNA_OPTION, "").lower() != "true"
    ]
    return DNA_DELIMITER.join(kept)


def construct_layer_to_dna(dna: str, layers: list[Layer]) -> list[ResolvedLayer]:
    """Resolve each token of a DNA back to the element it encodes.

    Raises:
        MalformedDnaError: If the token count differs from the layer count or a
            token's element id does not exist in its layer
    """
    tokens = split_dna(dna)
    if len(tokens) != len(layers):
        raise MalformedDnaError(
            f"DNA has {len(tokens)} token(s) but the catalog has {len(layers)} layer(s)"
        )

    resolved: list[ResolvedLayer] = []
    for layer, token in zip(layers, tokens):
        element_id = element_id_from_token(token)
        element = layer.get_element(element_id)
        if element is None:
            raise MalformedDnaError(
                f"Layer '{layer.name}' has no element with id {element_id} (token {token!r})"
            )
        resolved.append(
            ResolvedLayer(
                name=layer.name,
                blend=layer.blend,
                opacity=layer.opacity,
                selected_element=element,
            )
        )
    return resolved


def attributes_for(resolved: list[ResolvedLayer]) -> list[Attribute]:
    """Derive the metadata attributes of a resolved selection."""
    return [
        Attribute(trait_type=layer.name, value=layer.selected_element.name)
        for layer in resolved
    ]


def dna_hash(dna: str) -> str:
    """SHA-1 hex digest of a DNA string."""
    return hashlib.sha1(dna.encode("utf-8")).hexdigest()
