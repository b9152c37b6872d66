"""
Frontier search over the known map.

Breadth-first search from the believed position through known,
traversable tiles, stopping at the first neighbour that has never been
observed. BFS visits cells in non-decreasing distance, so the first
frontier found is a nearest one and the recorded first hop lies on a
shortest path to it.

Follows the pathfinding conventions of the rest of the API:
- Searches return a FrontierResult with a reason for success/failure
- The raising form (next_direction) is what the decision engine uses
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .models import Direction, Position

if TYPE_CHECKING:
    from src.memory.tile_store import TileStore

logger = logging.getLogger(__name__)


class ExplorationExhausted(Exception):
    """Raised when no unmapped cell is reachable through known terrain."""

    def __init__(self, position: Position, explored: int, message: str = ""):
        self.position = position
        self.explored = explored
        super().__init__(
            message or f"No reachable frontier from {position} ({explored} cells searched)"
        )


class PathStopReason(Enum):
    """Reasons why a frontier search stopped."""

    SUCCESS = "success"
    NO_FRONTIER = "no_frontier"
    SEARCH_LIMIT = "search_limit"


@dataclass
class FrontierResult:
    """Result of a frontier search."""

    direction: Optional[Direction]
    frontier: Optional[Position]
    distance: int
    reason: PathStopReason
    explored: int = 0
    message: str = ""

    @property
    def success(self) -> bool:
        """Whether a frontier was found."""
        return self.reason == PathStopReason.SUCCESS

    def __bool__(self) -> bool:
        """Allow `if result:` to check for success."""
        return self.success

    def __repr__(self) -> str:
        if self.success:
            return (
                f"FrontierResult(direction={self.direction.value}, "
                f"frontier={self.frontier}, distance={self.distance})"
            )
        return f"FrontierResult(direction=None, reason={self.reason.value}, message='{self.message}')"


class FrontierExplorer:
    """
    Picks the next step toward the nearest unmapped cell.

    Example usage:
        explorer = FrontierExplorer()
        try:
            direction = explorer.next_direction(store, position)
        except ExplorationExhausted:
            ...  # nothing left to explore
    """

    def __init__(self, plan_through_closed_doors: bool = True, max_nodes: int = 0):
        """
        Initialize the explorer.

        Args:
            plan_through_closed_doors: Route through closed doors, which the
                agent opens when it reaches them. If False they block.
            max_nodes: Give up after expanding this many cells (0 = no limit)
        """
        self.plan_through_closed_doors = plan_through_closed_doors
        self.max_nodes = max_nodes

    def find_frontier(self, store: "TileStore", start: Position) -> FrontierResult:
        """
        Search for the nearest unmapped neighbour of the reachable known map.

        Neighbours are examined in the fixed order N, S, W, E, which
        decides between frontiers at the same distance.

        Args:
            store: Known tiles
            start: Believed position of the agent

        Returns:
            FrontierResult with the first step to take and the frontier cell
        """
        # Each entry: (cell, direction of the first hop from start, distance)
        queue: deque[tuple[Position, Optional[Direction], int]] = deque()
        queue.append((start, None, 0))
        visited = {start}
        expanded = 0

        while queue:
            cell, first_step, dist = queue.popleft()
            expanded += 1

            if self.max_nodes and expanded > self.max_nodes:
                return FrontierResult(
                    None, None, -1, PathStopReason.SEARCH_LIMIT,
                    explored=expanded - 1,
                    message=f"Search limit of {self.max_nodes} cells reached",
                )

            for direction, neighbor in cell.neighbors():
                kind = store.get(neighbor)

                if kind is None:
                    step = first_step or direction
                    logger.debug(
                        f"find_frontier: from {start} frontier {neighbor} at distance {dist + 1}, "
                        f"stepping {step.value}"
                    )
                    return FrontierResult(
                        step, neighbor, dist + 1, PathStopReason.SUCCESS, explored=expanded
                    )

                if neighbor in visited:
                    continue
                if not kind.is_traversable(self.plan_through_closed_doors):
                    continue

                visited.add(neighbor)
                queue.append((neighbor, first_step or direction, dist + 1))

        logger.debug(f"find_frontier: no frontier reachable from {start}, {expanded} cells searched")
        return FrontierResult(
            None, None, -1, PathStopReason.NO_FRONTIER,
            explored=expanded,
            message="No unexplored areas reachable",
        )

    def next_direction(self, store: "TileStore", start: Position) -> Direction:
        """
        Direction of the first step toward the nearest frontier.

        Raises:
            ExplorationExhausted: If no frontier is reachable
        """
        result = self.find_frontier(store, start)
        if not result:
            raise ExplorationExhausted(start, result.explored, f"{result.message} from {start}")
        return result.direction
