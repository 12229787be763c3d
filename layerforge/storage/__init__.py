"""Build output layout."""

from .build import BuildPaths, build_setup

__all__ = ["BuildPaths", "build_setup"]
