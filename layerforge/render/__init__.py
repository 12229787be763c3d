"""Render collaborators."""

from .base import Renderer, NullRenderer
from .compositor import PillowRenderer, apply_opacity, blend_onto, random_pastel

__all__ = [
    "Renderer",
    "NullRenderer",
    "PillowRenderer",
    "apply_opacity",
    "blend_onto",
    "random_pastel",
]
