"""
Simulation runner.

Drives a MapperClient against a Maze turn by turn, the way a host
would, and summarises the run.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from src.agent.client import MapperClient
from src.api.models import InitialParameters, MoveOutcome, Open, Position, TurnInput, Wait
from src.config import Config

from .maze import Maze

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of a simulated run."""

    turns: int = 0
    moves: int = 0
    failed_moves: int = 0
    doors_opened: int = 0
    waits: int = 0
    exhausted: bool = False
    known_tiles: int = 0
    mapped_cells: int = 0
    visited_cells: int = 0
    reachable_cells: int = 0
    believed_position: Position = Position(0, 0)
    true_offset: Position = Position(0, 0)
    duration_seconds: float = 0.0
    actions: list[dict] = field(default_factory=list)

    @property
    def position_consistent(self) -> bool:
        """Whether the believed position matches the true displacement."""
        return self.believed_position == self.true_offset

    @property
    def coverage(self) -> float:
        """Fraction of reachable cells present in the agent's map."""
        if self.reachable_cells == 0:
            return 0.0
        return self.mapped_cells / self.reachable_cells

    @property
    def success(self) -> bool:
        """Run ended by finishing exploration with an accurate position."""
        return self.exhausted and self.position_consistent

    def to_dict(self) -> dict:
        return {
            "turns": self.turns,
            "moves": self.moves,
            "failed_moves": self.failed_moves,
            "doors_opened": self.doors_opened,
            "waits": self.waits,
            "exhausted": self.exhausted,
            "known_tiles": self.known_tiles,
            "mapped_cells": self.mapped_cells,
            "visited_cells": self.visited_cells,
            "reachable_cells": self.reachable_cells,
            "coverage": round(self.coverage, 3),
            "position_consistent": self.position_consistent,
            "duration_seconds": round(self.duration_seconds, 3),
        }


class SimulationRunner:
    """
    Runs the agent in a maze until it runs out of frontier or turns.

    Example usage:
        runner = SimulationRunner(Maze.from_file("mazes/rooms.txt"))
        result = runner.run()
        print(result.coverage)
    """

    def __init__(
        self,
        maze: Maze,
        config: Optional[Config] = None,
        client: Optional[MapperClient] = None,
        record_actions: bool = False,
    ):
        self.maze = maze
        self.config = config or Config()
        self.client = client or MapperClient(self.config.agent)
        self.record_actions = record_actions

    def run(self, max_turns: Optional[int] = None) -> RunResult:
        """
        Play turns until exploration is exhausted or the turn limit hits.

        Args:
            max_turns: Override the configured turn limit

        Returns:
            RunResult summarising the run
        """
        sim = self.config.simulation
        limit = max_turns if max_turns is not None else sim.max_turns
        radius = sim.radius
        engine = self.client.engine
        reachable = self.maze.reachable_cells()
        result = RunResult(reachable_cells=len(reachable))

        self.client.initialize(InitialParameters(diagonal_movement=False))
        started = time.monotonic()
        outcome = MoveOutcome.NONE

        for _ in range(limit):
            window = self.maze.observe(radius)
            action = self.client.decide(TurnInput(radius, window.to_list(), outcome))
            result.turns += 1
            if self.record_actions:
                result.actions.append(action.to_dict())

            if isinstance(action, Wait):
                result.waits += 1
                if engine.is_exhausted and sim.stop_when_exhausted:
                    outcome = MoveOutcome.NONE
                    break
            elif isinstance(action, Open):
                result.doors_opened += 1
            else:
                result.moves += 1

            outcome = self.maze.apply(action)
            if outcome == MoveOutcome.FAILED:
                result.failed_moves += 1

        # Deliver the last outcome so the believed position is current
        if outcome != MoveOutcome.NONE:
            engine.tracker.update_position(outcome)

        result.duration_seconds = time.monotonic() - started
        result.exhausted = engine.is_exhausted
        result.known_tiles = len(engine.store)
        result.visited_cells = len(self.maze.visited)
        # Believed coordinates are maze coordinates shifted by the start
        start = self.maze.start
        result.mapped_cells = sum(
            1 for cell in reachable
            if Position(cell.x - start.x, cell.y - start.y) in engine.store
        )
        result.believed_position = engine.state.position
        result.true_offset = Position(
            self.maze.agent.x - self.maze.start.x,
            self.maze.agent.y - self.maze.start.y,
        )

        logger.info(
            f"Run finished after {result.turns} turns: {result.known_tiles} tiles known, "
            f"coverage {result.coverage:.0%}, exhausted={result.exhausted}"
        )
        logger.debug(f"Final state: {engine.state.to_dict()}, map: {engine.store.to_dict()}")
        if not result.position_consistent:
            logger.warning(
                f"Believed position {result.believed_position} differs from true offset {result.true_offset}"
            )
        return result
