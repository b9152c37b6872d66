"""Memory layer: the explored map and the agent's believed position."""

from .position import (
    AgentState,
    PositionTracker,
)
from .tile_store import (
    MergePolicy,
    TileStore,
)

__all__ = [
    # Position
    "AgentState",
    "PositionTracker",
    # Tile Store
    "MergePolicy",
    "TileStore",
]
