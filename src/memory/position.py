"""
Position tracking.

The agent never sees its absolute coordinate. It keeps a believed
position, starting at the origin, and moves it only when the host
confirms that the last requested step succeeded.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.api.models import ORIGIN, Direction, MoveOutcome, Position

logger = logging.getLogger(__name__)


@dataclass
class AgentState:
    """Persistent per-process state of the agent."""

    position: Position = ORIGIN
    pending: Optional[Direction] = None

    # Bookkeeping
    turn: int = 0
    moves_requested: int = 0
    moves_succeeded: int = 0
    doors_opened: int = 0
    exhausted: bool = False

    def to_dict(self) -> dict:
        return {
            "position": [self.position.x, self.position.y],
            "pending": self.pending.value if self.pending else None,
            "turn": self.turn,
            "moves_requested": self.moves_requested,
            "moves_succeeded": self.moves_succeeded,
            "doors_opened": self.doors_opened,
            "exhausted": self.exhausted,
        }


class PositionTracker:
    """Reconciles intended moves with the outcomes the host reports."""

    def __init__(self, state: Optional[AgentState] = None):
        self.state = state or AgentState()

    @property
    def position(self) -> Position:
        return self.state.position

    @property
    def pending(self) -> Optional[Direction]:
        return self.state.pending

    def set_pending(self, direction: Direction) -> None:
        """Record the move about to be requested."""
        self.state.pending = direction
        self.state.moves_requested += 1

    def clear_pending(self) -> None:
        self.state.pending = None

    def update_position(self, outcome: MoveOutcome) -> Position:
        """
        Apply the host's report on the last requested move.

        The position moves one cell along the pending direction only if
        the move succeeded. The pending direction is cleared either way.

        Args:
            outcome: Result of the previous move request

        Returns:
            The believed position after reconciliation
        """
        pending = self.state.pending
        self.state.pending = None

        if pending is None:
            if outcome == MoveOutcome.SUCCEEDED:
                logger.debug("update_position: success reported with no pending move, ignoring")
            return self.state.position

        if outcome == MoveOutcome.SUCCEEDED:
            self.state.position = self.state.position.moved(pending)
            self.state.moves_succeeded += 1
            logger.debug(f"update_position: moved {pending.value} to {self.state.position}")
        else:
            logger.debug(f"update_position: move {pending.value} {outcome.value}, staying at {self.state.position}")

        return self.state.position
