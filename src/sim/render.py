"""Rich renderables for the known map and run summaries."""

from typing import Optional

from rich.table import Table
from rich.text import Text

from src.api.models import Position, TileKind
from src.memory.tile_store import TileStore

from .runner import RunResult

TILE_GLYPHS = {
    TileKind.FLOOR: (".", "white"),
    TileKind.WALL: ("#", "bright_black"),
    TileKind.OPEN_DOOR: ("/", "yellow"),
    TileKind.CLOSED_DOOR: ("+", "yellow bold"),
    TileKind.VOID: ("~", "blue"),
}
UNKNOWN_GLYPH = (" ", "")
AGENT_GLYPH = ("@", "green bold")


def render_map(store: TileStore, agent: Optional[Position] = None) -> Text:
    """
    Draw the known map, one character per tile.

    Args:
        store: Known tiles
        agent: Believed agent position to mark with '@'

    Returns:
        Multi-line rich Text (empty if nothing is known)
    """
    text = Text()
    bounds = store.bounds()
    if bounds is None:
        return text

    top_left, bottom_right = bounds
    width = bottom_right.x - top_left.x + 1
    height = bottom_right.y - top_left.y + 1
    grid = [[UNKNOWN_GLYPH] * width for _ in range(height)]
    for pos, kind in store.items():
        grid[pos.y - top_left.y][pos.x - top_left.x] = TILE_GLYPHS[kind]
    if agent is not None:
        col, row = agent.x - top_left.x, agent.y - top_left.y
        if 0 <= col < width and 0 <= row < height:
            grid[row][col] = AGENT_GLYPH

    for row_index, row in enumerate(grid):
        for char, style in row:
            text.append(char, style=style)
        if row_index != height - 1:
            text.append("\n")
    return text


def render_summary(result: RunResult) -> Table:
    """Two-column table of run statistics."""
    table = Table(title="Run summary", show_header=False)
    table.add_column("stat", style="dim")
    table.add_column("value")

    status = Text("exhausted", style="green") if result.exhausted else Text("turn limit", style="yellow")
    table.add_row("Finished by", status)
    table.add_row("Turns", str(result.turns))
    table.add_row("Moves", f"{result.moves} ({result.failed_moves} failed)")
    table.add_row("Doors opened", str(result.doors_opened))
    table.add_row("Known tiles", str(result.known_tiles))
    table.add_row("Mapped", f"{result.mapped_cells}/{result.reachable_cells} ({result.coverage:.0%})")
    table.add_row("Cells visited", str(result.visited_cells))

    consistent = result.position_consistent
    table.add_row(
        "Position",
        Text(
            f"believed {result.believed_position}, true {result.true_offset}",
            style="green" if consistent else "red bold",
        ),
    )
    table.add_row("Time", f"{result.duration_seconds:.3f}s")
    return table
