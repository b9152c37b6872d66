"""
Per-turn decision loop.

Coordinates position tracking, door detection, map merging and frontier
search to produce exactly one action every turn.
"""

import logging
from typing import Optional, Sequence, Union

from src.api.doors import DoorScanner
from src.api.models import Action, MoveOutcome, MoveTo, Open, TileKind, Wait
from src.api.observation import MalformedObservation, ObservationWindow
from src.api.pathfinding import ExplorationExhausted, FrontierExplorer
from src.config import AgentConfig
from src.memory.position import AgentState, PositionTracker
from src.memory.tile_store import TileStore

logger = logging.getLogger(__name__)


class DecisionEngine:
    """
    Turns one observation and move outcome into one action.

    Per turn:
    1. Reconcile the believed position with the last move outcome
    2. Open an adjacent closed door if there is one (skips the rest)
    3. Merge the observation into the map
    4. Step toward the nearest frontier, or wait if none is left

    Example usage:
        engine = DecisionEngine()
        action = engine.decide(window, MoveOutcome.SUCCEEDED)
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        store: Optional[TileStore] = None,
        scanner: Optional[DoorScanner] = None,
        explorer: Optional[FrontierExplorer] = None,
    ):
        """
        Initialize the engine.

        Args:
            config: Agent configuration
            store: Map to build on (a fresh one by default)
            scanner: Door scanner
            explorer: Frontier explorer
        """
        self.config = config or AgentConfig()
        self.state = AgentState()
        self.tracker = PositionTracker(self.state)
        self.store = store if store is not None else TileStore(self.config.get_merge_policy())
        self.scanner = scanner or DoorScanner()
        self.explorer = explorer or FrontierExplorer(
            plan_through_closed_doors=self.config.plan_through_closed_doors,
            max_nodes=self.config.max_search_nodes,
        )

    @property
    def is_exhausted(self) -> bool:
        """Whether the last frontier search found nothing left to explore."""
        return self.state.exhausted

    def decide(self, window: ObservationWindow, outcome: MoveOutcome) -> Action:
        """
        Choose the action for this turn.

        Args:
            window: Surroundings centred on the agent
            outcome: Result of the previously requested move

        Returns:
            Wait, Open or MoveTo
        """
        self.state.turn += 1
        position = self.tracker.update_position(outcome)

        target = self.scanner.scan(window)
        if target is not None:
            self.tracker.clear_pending()
            self.state.doors_opened += 1
            return self._emit(Open(target))

        self.store.merge(window, position)

        try:
            direction = self.explorer.next_direction(self.store, position)
        except ExplorationExhausted as e:
            if not self.state.exhausted:
                logger.info(f"Exploration exhausted: {e}")
            self.state.exhausted = True
            self.tracker.clear_pending()
            return self._emit(Wait())

        self.state.exhausted = False
        self.tracker.set_pending(direction)
        return self._emit(MoveTo(direction, 1))

    def decide_raw(
        self,
        radius: int,
        surroundings: Sequence[Union[TileKind, int]],
        outcome: MoveOutcome,
    ) -> Action:
        """
        Choose an action from the host's flat surroundings encoding.

        A malformed window still reconciles the position, then waits.
        """
        try:
            window = ObservationWindow.from_sequence(radius, surroundings)
        except MalformedObservation as e:
            logger.warning(f"Malformed observation on turn {self.state.turn + 1}: {e}")
            self.state.turn += 1
            self.tracker.update_position(outcome)
            self.tracker.clear_pending()
            return self._emit(Wait())

        return self.decide(window, outcome)

    def _emit(self, action: Action) -> Action:
        if self.config.log_decisions:
            logger.debug(
                f"turn {self.state.turn} at {self.state.position}: {action.to_dict()}"
            )
        return action
