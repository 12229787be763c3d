"""Uniqueness tracking for generated DNA."""

import logging

from .dna import filter_dna_options

logger = logging.getLogger(__name__)


class UniquenessExhaustedError(Exception):
    """Raised when too many duplicate DNAs were drawn to reach a target size."""

    def __init__(self, target_size: int, tolerance: int, accepted: int):
        self.target_size = target_size
        self.tolerance = tolerance
        self.accepted = accepted
        super().__init__(
            f"You need more layers or elements to grow your edition to "
            f"{target_size} artworks! ({accepted} unique editions created, "
            f"{tolerance} duplicate draws tolerated)"
        )


class UniquenessTracker:
    """Set of accepted DNA uniqueness keys plus a run-scoped rejection counter.

    ``is_unique`` never mutates state; only ``accept`` adds keys and only
    ``reject`` bumps the counter.
    """

    def __init__(self, tolerance: int):
        if tolerance < 1:
            raise ValueError(f"tolerance must be >= 1, got {tolerance}")
        self.tolerance = tolerance
        self.failed_count = 0
        self._seen: set[str] = set()

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, dna: str) -> bool:
        return filter_dna_options(dna) in self._seen

    def is_unique(self, dna: str) -> bool:
        return filter_dna_options(dna) not in self._seen

    def accept(self, dna: str) -> None:
        key = filter_dna_options(dna)
        if key in self._seen:
            raise ValueError(f"DNA already accepted: {key}")
        self._seen.add(key)

    def reject(self, target_size: int) -> None:
        """Record a duplicate draw.

        Raises:
            UniquenessExhaustedError: When the counter reaches the tolerance
        """
        self.failed_count += 1
        logger.debug("DNA exists! (%d/%d)", self.failed_count, self.tolerance)
        if self.failed_count >= self.tolerance:
            raise UniquenessExhaustedError(target_size, self.tolerance, len(self))
