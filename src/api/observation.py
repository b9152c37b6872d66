"""
Observation window handling.

The host reveals a square patch of terrain centred on the agent each
turn. ObservationWindow validates the raw sequence and exposes each cell
with its offset relative to the agent.
"""

import logging
from typing import Iterator, Sequence, Union

import numpy as np

from .models import Position, TileKind

logger = logging.getLogger(__name__)

_VALID_KINDS = frozenset(int(kind) for kind in TileKind)


class MalformedObservation(ValueError):
    """Raised when a surroundings window does not match its declared radius."""


class ObservationWindow:
    """
    Square window of side 2r+1 centred on the agent.

    Cells are stored row-major; the cell at linear index i has the
    relative offset (i mod width - r, i div width - r).
    """

    def __init__(self, radius: int, tiles: np.ndarray):
        """
        Initialize the window.

        Args:
            radius: Surroundings radius
            tiles: (2r+1, 2r+1) array of TileKind values, indexed [row, col]
        """
        self.radius = radius
        self.tiles = tiles

    @classmethod
    def from_sequence(
        cls,
        radius: int,
        surroundings: Sequence[Union[TileKind, int]],
    ) -> "ObservationWindow":
        """
        Build a window from the host's flat, row-major sequence.

        Raises:
            MalformedObservation: If the radius is not a non-negative int,
                the surroundings are not a sequence of (2r+1)^2 values, or
                a value is not a known tile kind
        """
        if isinstance(radius, bool) or not isinstance(radius, (int, np.integer)):
            raise MalformedObservation(f"Surroundings radius must be an int, got {radius!r}")
        if radius < 0:
            raise MalformedObservation(f"Negative surroundings radius {radius}")
        if isinstance(surroundings, (str, bytes)) or not isinstance(surroundings, Sequence):
            raise MalformedObservation(
                f"Surroundings must be a sequence, got {type(surroundings).__name__}"
            )

        width = 2 * int(radius) + 1
        expected = width * width
        if len(surroundings) != expected:
            raise MalformedObservation(
                f"Expected {expected} tiles for radius {radius}, got {len(surroundings)}"
            )

        try:
            values = [int(v) for v in surroundings]
        except (TypeError, ValueError, OverflowError) as e:
            raise MalformedObservation(f"Non-integer tile in surroundings: {e}") from e
        if any(value != raw for value, raw in zip(values, surroundings)):
            raise MalformedObservation("Non-integral tile value in surroundings")
        unknown = sorted(set(values) - _VALID_KINDS)
        if unknown:
            raise MalformedObservation(f"Unknown tile values in surroundings: {unknown}")

        tiles = np.array(values, dtype=np.uint8).reshape(width, width)
        return cls(int(radius), tiles)

    @classmethod
    def filled(cls, radius: int, kind: TileKind = TileKind.FLOOR) -> "ObservationWindow":
        """Window of the given radius with every cell set to one kind."""
        width = 2 * radius + 1
        return cls(radius, np.full((width, width), int(kind), dtype=np.uint8))

    @property
    def width(self) -> int:
        return 2 * self.radius + 1

    def __len__(self) -> int:
        return self.width * self.width

    def get(self, dx: int, dy: int) -> TileKind | None:
        """Tile at a relative offset, or None if outside the window."""
        if abs(dx) > self.radius or abs(dy) > self.radius:
            return None
        return TileKind(int(self.tiles[dy + self.radius, dx + self.radius]))

    def set(self, dx: int, dy: int, kind: TileKind) -> None:
        """Overwrite the tile at a relative offset."""
        if abs(dx) > self.radius or abs(dy) > self.radius:
            raise MalformedObservation(f"Offset ({dx}, {dy}) outside radius {self.radius}")
        self.tiles[dy + self.radius, dx + self.radius] = int(kind)

    def cells(self) -> Iterator[tuple[Position, TileKind]]:
        """
        Iterate (offset, tile) pairs in row-major order.

        Yields:
            Relative offset from the centre and the tile observed there
        """
        r = self.radius
        for (row, col), value in np.ndenumerate(self.tiles):
            yield Position(col - r, row - r), TileKind(int(value))

    def to_list(self) -> list[int]:
        """Flatten back to the host's row-major encoding."""
        return [int(v) for v in self.tiles.flatten()]

    def __repr__(self) -> str:
        return f"ObservationWindow(radius={self.radius})"
