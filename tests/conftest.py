"""Shared fixtures and map-building helpers."""

from pathlib import Path

import pytest

from src.api.models import Position, TileKind
from src.api.observation import ObservationWindow
from src.memory.tile_store import TileStore

MAZES_DIR = Path(__file__).parent.parent / "mazes"

# '?' marks a cell that was never observed
MAP_CHARS = {
    ".": TileKind.FLOOR,
    "@": TileKind.FLOOR,
    "#": TileKind.WALL,
    "+": TileKind.CLOSED_DOOR,
    "/": TileKind.OPEN_DOOR,
    "~": TileKind.VOID,
}


def make_store(rows: list[str], store: TileStore | None = None) -> tuple[TileStore, Position]:
    """
    Build a TileStore from an ASCII map.

    Coordinates are relative to the '@' cell, which becomes the origin.
    Cells marked '?' are left out of the store.
    """
    start = None
    for y, row in enumerate(rows):
        x = row.find("@")
        if x >= 0:
            start = (x, y)
    assert start is not None, "map needs an '@'"

    store = store if store is not None else TileStore()
    sx, sy = start
    for y, row in enumerate(rows):
        for x, char in enumerate(row):
            if char == "?":
                continue
            store.set(Position(x - sx, y - sy), MAP_CHARS[char])
    return store, Position(0, 0)


def make_window(rows: list[str]) -> ObservationWindow:
    """Build an observation window from a square ASCII block."""
    width = len(rows)
    assert all(len(row) == width for row in rows), "window must be square"
    tiles = [MAP_CHARS[char] for row in rows for char in row]
    return ObservationWindow.from_sequence(width // 2, tiles)


@pytest.fixture
def mazes_dir() -> Path:
    return MAZES_DIR
