"""
Door detection.

Finds a closed door the agent can open from where it stands. Doors are
only openable from an orthogonally adjacent cell; diagonal doors never
count.
"""

import logging
from typing import Optional

from .models import ORIGIN, Position, TileKind
from .observation import ObservationWindow

logger = logging.getLogger(__name__)


def is_cardinal_adjacent(offset: Position) -> bool:
    """Check if an offset is exactly one step N, S, W or E of the centre."""
    return offset.manhattan_distance(ORIGIN) == 1


class DoorScanner:
    """
    Stateless scan of an observation window for an openable door.

    Example usage:
        scanner = DoorScanner()
        target = scanner.scan(window)
        if target is not None:
            return Open(target)
    """

    def scan(self, window: ObservationWindow) -> Optional[Position]:
        """
        Find the first cardinal-adjacent closed door in row-major order.

        Args:
            window: Current observation window

        Returns:
            Offset of the door relative to the agent, or None
        """
        for offset, kind in window.cells():
            if kind == TileKind.CLOSED_DOOR and is_cardinal_adjacent(offset):
                logger.debug(f"scan: closed door at offset {offset}")
                return offset
        return None
