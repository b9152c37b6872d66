"""Local maze simulator that plays the host side of the protocol."""

from .maze import Maze, MazeFormatError
from .render import render_map, render_summary
from .runner import RunResult, SimulationRunner

__all__ = [
    # Maze
    "Maze",
    "MazeFormatError",
    # Runner
    "RunResult",
    "SimulationRunner",
    # Rendering
    "render_map",
    "render_summary",
]
