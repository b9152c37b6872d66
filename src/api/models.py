"""
Data models for the mapper API.

These dataclasses represent grid coordinates, terrain and the messages
exchanged with the host in a structured, type-safe way.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Sequence, Union


class TileKind(IntEnum):
    """Terrain classification of a single grid cell.

    Values match the host's byte encoding of the surroundings window.
    """

    VOID = 0  # Observed, but outside the playable area
    FLOOR = 1
    WALL = 2
    OPEN_DOOR = 3
    CLOSED_DOOR = 4

    def is_traversable(self, through_closed_doors: bool = True) -> bool:
        """
        Whether a path may be planned across this tile.

        Closed doors count as traversable by default: the agent routes
        through them and opens them once adjacent.
        """
        if self == TileKind.CLOSED_DOOR:
            return through_closed_doors
        return self in (TileKind.FLOOR, TileKind.OPEN_DOOR)


class Direction(Enum):
    """Cardinal movement directions."""

    N = "north"
    S = "south"
    W = "west"
    E = "east"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (dx, dy) for this direction. North is toward negative y."""
        deltas = {
            Direction.N: (0, -1),
            Direction.S: (0, 1),
            Direction.W: (-1, 0),
            Direction.E: (1, 0),
        }
        return deltas[self]


# Neighbour order for the frontier search. The order is the tie-break
# between equally distant frontiers, so it must stay fixed.
FRONTIER_SEARCH_ORDER = (Direction.N, Direction.S, Direction.W, Direction.E)


@dataclass(frozen=True, order=True)
class Position:
    """A coordinate on the unbounded grid."""

    x: int
    y: int

    def moved(self, direction: Direction, distance: int = 1) -> "Position":
        """Position reached by stepping `distance` cells toward `direction`."""
        dx, dy = direction.delta
        return Position(self.x + dx * distance, self.y + dy * distance)

    def offset(self, dx: int, dy: int) -> "Position":
        """Position translated by a relative offset."""
        return Position(self.x + dx, self.y + dy)

    def manhattan_distance(self, other: "Position") -> int:
        """Number of cardinal steps between two positions."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def neighbors(self) -> list[tuple[Direction, "Position"]]:
        """Orthogonal neighbours in frontier search order."""
        return [(d, self.moved(d)) for d in FRONTIER_SEARCH_ORDER]

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


ORIGIN = Position(0, 0)


class MoveOutcome(Enum):
    """Host report on the previously requested move."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NONE = "none"  # No move was requested last turn


# =============================================================================
# Actions
# =============================================================================


@dataclass(frozen=True)
class Wait:
    """Do nothing this turn."""

    def to_dict(self) -> dict:
        return {"action": "wait"}


@dataclass(frozen=True)
class Open:
    """Open the door at a relative offset from the agent's cell."""

    target: Position

    def to_dict(self) -> dict:
        return {"action": "open", "target": [self.target.x, self.target.y]}


@dataclass(frozen=True)
class MoveTo:
    """Move toward a direction."""

    direction: Direction
    distance: int = 1

    def __post_init__(self) -> None:
        if self.distance < 1:
            raise ValueError(f"Move distance must be positive, got {self.distance}")

    def to_dict(self) -> dict:
        return {
            "action": "move_to",
            "direction": self.direction.value,
            "distance": self.distance,
        }


Action = Union[Wait, Open, MoveTo]


# =============================================================================
# Host messages
# =============================================================================


@dataclass
class InitialParameters:
    """Game parameters sent by the host before the first turn."""

    diagonal_movement: bool = False
    extras: dict[str, Any] = field(default_factory=dict)


@dataclass
class TurnInput:
    """What the host tells the agent at the start of each turn."""

    surroundings_radius: int
    surroundings: Sequence[Union[TileKind, int]]
    last_move_result: MoveOutcome = MoveOutcome.NONE


# Fixed width of the name field in the metadata record
BOT_NAME_LENGTH = 26


def make_bot_name(name: str) -> bytes:
    """Encode a bot name into the fixed-size, NUL-padded name field."""
    encoded = name.encode("utf-8")[:BOT_NAME_LENGTH]
    return encoded.ljust(BOT_NAME_LENGTH, b"\x00")


def parse_bot_version(version: str) -> tuple[int, int, int]:
    """
    Parse a "major.minor.patch" string into a version triple.

    Returns:
        The version triple, or (0, 0, 0) if the string is not parseable
    """
    parts = version.split(".")
    if len(parts) != 3:
        return (0, 0, 0)
    try:
        major, minor, patch = (int(p) for p in parts)
    except ValueError:
        return (0, 0, 0)
    if min(major, minor, patch) < 0:
        return (0, 0, 0)
    return (major, minor, patch)


@dataclass(frozen=True)
class BotMetadata:
    """Identity record the agent reports to the host."""

    name: bytes
    version: tuple[int, int, int]
    supports_diagonal: bool = False

    @property
    def display_name(self) -> str:
        """Name with the NUL padding stripped."""
        return self.name.rstrip(b"\x00").decode("utf-8", errors="replace")

    def to_dict(self) -> dict:
        return {
            "name": self.display_name,
            "version": ".".join(str(v) for v in self.version),
            "supports_diagonal": self.supports_diagonal,
        }
