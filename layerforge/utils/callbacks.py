"""Typed callback protocols for progress reporting across the pipeline.

These Protocol classes provide type-safe callback signatures without
requiring runtime changes: existing callables continue to work via duck typing.
"""

from typing import Protocol


class StepProgressCallback(Protocol):
    """Callback for step-based progress (generate pipeline stages).

    Args:
        step: Step identifier (e.g. "assemble", "rarity")
        status: Human-readable status message
    """

    def __call__(self, step: str, status: str) -> None: ...


class ItemProgressCallback(Protocol):
    """Callback for item-based progress (collection assembler).

    Args:
        current: Number of editions created so far
        total: Total editions to create
    """

    def __call__(self, current: int, total: int) -> None: ...
