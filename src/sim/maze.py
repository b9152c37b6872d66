"""
Maze environment for local runs.

Plays the host side of the protocol on a maze loaded from text: renders
the surroundings window around the agent's true position, applies the
actions it returns, and reports move outcomes.

Maze text format:
    #  wall          .  floor
    +  closed door   /  open door
    ~  void          @  agent start (on floor)
Spaces and cells beyond the text are void.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np

from src.api.models import Action, MoveOutcome, MoveTo, Open, Position, TileKind, Wait
from src.api.observation import ObservationWindow

logger = logging.getLogger(__name__)

CHAR_TO_TILE = {
    "#": TileKind.WALL,
    ".": TileKind.FLOOR,
    "@": TileKind.FLOOR,
    "+": TileKind.CLOSED_DOOR,
    "/": TileKind.OPEN_DOOR,
    "~": TileKind.VOID,
    " ": TileKind.VOID,
}

START_CHAR = "@"


class MazeFormatError(ValueError):
    """Raised when maze text cannot be parsed."""


class Maze:
    """
    Ground-truth grid plus the agent's true position.

    Positions here are absolute maze coordinates (column, row), unlike
    the agent's believed position which starts at the origin.
    """

    def __init__(self, tiles: np.ndarray, start: Position):
        """
        Initialize the maze.

        Args:
            tiles: (height, width) array of TileKind values
            start: Agent start position in maze coordinates
        """
        self.tiles = tiles
        self.start = start
        self.agent = start
        self.last_outcome = MoveOutcome.NONE
        self.visited: set[Position] = {start}

    @classmethod
    def from_text(cls, text: str) -> "Maze":
        """
        Parse maze text.

        Raises:
            MazeFormatError: On unknown characters, an empty maze, or a
                missing or repeated start marker
        """
        lines = [line.rstrip("\n") for line in text.splitlines()]
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines:
            raise MazeFormatError("Maze is empty")

        height = len(lines)
        width = max(len(line) for line in lines)
        tiles = np.full((height, width), int(TileKind.VOID), dtype=np.uint8)
        starts = []

        for y, line in enumerate(lines):
            for x, char in enumerate(line):
                if char not in CHAR_TO_TILE:
                    raise MazeFormatError(f"Unknown maze character {char!r} at ({x}, {y})")
                tiles[y, x] = int(CHAR_TO_TILE[char])
                if char == START_CHAR:
                    starts.append(Position(x, y))

        if len(starts) != 1:
            raise MazeFormatError(f"Maze needs exactly one '{START_CHAR}', found {len(starts)}")

        return cls(tiles, starts[0])

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Maze":
        """Load maze text from a file."""
        with open(path) as f:
            return cls.from_text(f.read())

    @property
    def width(self) -> int:
        return self.tiles.shape[1]

    @property
    def height(self) -> int:
        return self.tiles.shape[0]

    def tile_at(self, pos: Position) -> TileKind:
        """Tile at a maze position; everything off the grid is void."""
        if 0 <= pos.x < self.width and 0 <= pos.y < self.height:
            return TileKind(int(self.tiles[pos.y, pos.x]))
        return TileKind.VOID

    def observe(self, radius: int) -> ObservationWindow:
        """Surroundings window centred on the agent's true position."""
        window = ObservationWindow.filled(radius, TileKind.VOID)
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                window.set(dx, dy, self.tile_at(self.agent.offset(dx, dy)))
        return window

    def apply(self, action: Action) -> MoveOutcome:
        """
        Carry out an agent action.

        Returns:
            The outcome reported with the next observation
        """
        if isinstance(action, Open):
            self._open(self.agent.offset(action.target.x, action.target.y))
            self.last_outcome = MoveOutcome.NONE
        elif isinstance(action, MoveTo):
            self.last_outcome = self._move(action)
        elif isinstance(action, Wait):
            self.last_outcome = MoveOutcome.NONE
        else:
            raise TypeError(f"Unsupported action {action!r}")
        return self.last_outcome

    def _open(self, pos: Position) -> None:
        if self.tile_at(pos) == TileKind.CLOSED_DOOR:
            self.tiles[pos.y, pos.x] = int(TileKind.OPEN_DOOR)
            logger.debug(f"maze: opened door at {pos}")
        else:
            logger.debug(f"maze: nothing to open at {pos}")

    def _move(self, action: MoveTo) -> MoveOutcome:
        # Multi-cell moves stop at the first blocked cell
        moved = False
        for _ in range(action.distance):
            target = self.agent.moved(action.direction)
            if not self.tile_at(target).is_traversable(through_closed_doors=False):
                break
            self.agent = target
            self.visited.add(target)
            moved = True
        return MoveOutcome.SUCCEEDED if moved else MoveOutcome.FAILED

    def reachable_cells(self) -> set[Position]:
        """Cells reachable from the start when every door is open."""
        seen = {self.start}
        stack = [self.start]
        while stack:
            cell = stack.pop()
            for _, neighbor in cell.neighbors():
                if neighbor in seen:
                    continue
                if self.tile_at(neighbor).is_traversable(through_closed_doors=True):
                    seen.add(neighbor)
                    stack.append(neighbor)
        return seen
