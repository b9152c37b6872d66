"""
Tile store for tracking the explored map.

Maintains a sparse map of every cell the agent has observed, keyed by
absolute coordinate. The grid is unbounded, so cells live in a dict
rather than a fixed array.
"""

import logging
from collections import Counter
from enum import Enum
from typing import Iterator

from src.api.models import Position, TileKind
from src.api.observation import ObservationWindow

logger = logging.getLogger(__name__)


class MergePolicy(Enum):
    """How newly observed tiles interact with stored ones."""

    KEEP_FIRST = "keep_first"  # First observation wins, VOID included
    SKIP_VOID = "skip_void"  # VOID is never recorded
    REPLACE_VOID = "replace_void"  # A stored VOID yields to a real tile


class TileStore:
    """
    Sparse record of observed terrain.

    A coordinate is present only once it has been observed. Under the
    default policy a stored tile is never overwritten, so the store only
    grows.

    Example usage:
        store = TileStore()
        store.merge(window, position)
        if Position(3, -1) not in store:
            ...
    """

    def __init__(self, policy: MergePolicy = MergePolicy.KEEP_FIRST):
        self.policy = policy
        self._tiles: dict[Position, TileKind] = {}

    def merge(self, window: ObservationWindow, position: Position) -> int:
        """
        Record every cell of an observation window.

        Args:
            window: Window centred on `position`
            position: Believed absolute position of the agent

        Returns:
            Number of entries written
        """
        written = 0
        for offset, kind in window.cells():
            if self.set(position.offset(offset.x, offset.y), kind):
                written += 1

        if written:
            logger.debug(f"merge: {written} new tiles around {position}, {len(self._tiles)} known")
        return written

    def set(self, pos: Position, kind: TileKind) -> bool:
        """
        Record a single observation according to the merge policy.

        Returns:
            True if the stored tile changed
        """
        if kind == TileKind.VOID and self.policy == MergePolicy.SKIP_VOID:
            return False

        existing = self._tiles.get(pos)
        if existing is None:
            self._tiles[pos] = kind
            return True

        if (
            self.policy == MergePolicy.REPLACE_VOID
            and existing == TileKind.VOID
            and kind != TileKind.VOID
        ):
            self._tiles[pos] = kind
            return True

        return False

    def get(self, pos: Position) -> TileKind | None:
        """Get the stored tile, or None if never observed."""
        return self._tiles.get(pos)

    def __contains__(self, pos: object) -> bool:
        return pos in self._tiles

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._tiles)

    def items(self) -> Iterator[tuple[Position, TileKind]]:
        """Iterate (position, tile) pairs in insertion order."""
        return iter(self._tiles.items())

    def bounds(self) -> tuple[Position, Position] | None:
        """
        Bounding box of everything observed.

        Returns:
            (top-left, bottom-right) corners, or None if the store is empty
        """
        if not self._tiles:
            return None
        xs = [p.x for p in self._tiles]
        ys = [p.y for p in self._tiles]
        return Position(min(xs), min(ys)), Position(max(xs), max(ys))

    def counts(self) -> dict[TileKind, int]:
        """Number of stored tiles of each kind."""
        return dict(Counter(self._tiles.values()))

    def to_dict(self) -> dict:
        """Summary for logging."""
        return {
            "policy": self.policy.value,
            "known": len(self._tiles),
            "counts": {kind.name.lower(): n for kind, n in self.counts().items()},
        }
