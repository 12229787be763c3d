"""Render collaborator protocol."""

from typing import Protocol

from ..core.models import ResolvedLayer


class Renderer(Protocol):
    """Produces the artwork of one accepted edition.

    Called exactly once per accepted edition and must complete before the
    next edition is drawn.
    """

    def render(self, edition: int, layers: list[ResolvedLayer]) -> None: ...


class NullRenderer:
    """Renderer that produces no artwork (metadata-only runs)."""

    def render(self, edition: int, layers: list[ResolvedLayer]) -> None:
        return None
