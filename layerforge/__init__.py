"""Layerforge: weighted, layer-based generative collection engine."""

__version__ = "0.3.0"
