"""Tests for the maze simulator and end-to-end exploration runs."""

import pytest

from src.api.models import Direction, MoveOutcome, MoveTo, Open, Position, TileKind, Wait
from src.config import Config
from src.sim import Maze, MazeFormatError, SimulationRunner, render_map, render_summary

SMALL_MAZE = """\
#####
#@+.#
#.###
#####
"""


class TestMazeParsing:
    """Tests for Maze.from_text()."""

    def test_parse(self):
        """Test tiles and start position are read."""
        maze = Maze.from_text(SMALL_MAZE)
        assert maze.width == 5
        assert maze.height == 4
        assert maze.start == Position(1, 1)
        assert maze.tile_at(Position(1, 1)) == TileKind.FLOOR
        assert maze.tile_at(Position(2, 1)) == TileKind.CLOSED_DOOR
        assert maze.tile_at(Position(0, 0)) == TileKind.WALL

    def test_outside_is_void(self):
        """Test cells beyond the text are void."""
        maze = Maze.from_text(SMALL_MAZE)
        assert maze.tile_at(Position(-1, 0)) == TileKind.VOID
        assert maze.tile_at(Position(100, 100)) == TileKind.VOID

    def test_ragged_lines(self):
        """Test short lines are padded with void."""
        maze = Maze.from_text("###\n#@#.\n##")
        assert maze.width == 4
        assert maze.tile_at(Position(2, 2)) == TileKind.VOID

    def test_empty(self):
        """Test an empty maze is rejected."""
        with pytest.raises(MazeFormatError):
            Maze.from_text("\n\n")

    def test_no_start(self):
        """Test a maze without '@' is rejected."""
        with pytest.raises(MazeFormatError):
            Maze.from_text("###\n#.#\n###")

    def test_two_starts(self):
        """Test a maze with two '@' is rejected."""
        with pytest.raises(MazeFormatError):
            Maze.from_text("####\n#@@#\n####")

    def test_unknown_char(self):
        """Test unknown characters are rejected."""
        with pytest.raises(MazeFormatError):
            Maze.from_text("###\n#@X\n###")


class TestMazeActions:
    """Tests for Maze.observe() and Maze.apply()."""

    def test_observe(self):
        """Test the window is centred on the agent."""
        maze = Maze.from_text(SMALL_MAZE)
        window = maze.observe(1)
        assert window.get(0, 0) == TileKind.FLOOR
        assert window.get(1, 0) == TileKind.CLOSED_DOOR
        assert window.get(0, 1) == TileKind.FLOOR
        assert window.get(-1, -1) == TileKind.WALL

    def test_move_into_wall_fails(self):
        """Test walls block moves."""
        maze = Maze.from_text(SMALL_MAZE)
        assert maze.apply(MoveTo(Direction.N)) == MoveOutcome.FAILED
        assert maze.agent == maze.start

    def test_move_into_closed_door_fails(self):
        """Test closed doors block until opened."""
        maze = Maze.from_text(SMALL_MAZE)
        assert maze.apply(MoveTo(Direction.E)) == MoveOutcome.FAILED

    def test_open_then_move(self):
        """Test an opened door can be walked through."""
        maze = Maze.from_text(SMALL_MAZE)
        assert maze.apply(Open(Position(1, 0))) == MoveOutcome.NONE
        assert maze.tile_at(Position(2, 1)) == TileKind.OPEN_DOOR
        assert maze.apply(MoveTo(Direction.E, 2)) == MoveOutcome.SUCCEEDED
        assert maze.agent == Position(3, 1)

    def test_long_move_stops_at_wall(self):
        """Test a multi-cell move stops at the first blocked cell."""
        maze = Maze.from_text(SMALL_MAZE)
        assert maze.apply(MoveTo(Direction.S, 5)) == MoveOutcome.SUCCEEDED
        assert maze.agent == Position(1, 2)

    def test_wait(self):
        """Test waiting reports no move."""
        maze = Maze.from_text(SMALL_MAZE)
        assert maze.apply(Wait()) == MoveOutcome.NONE

    def test_reachable_cells(self):
        """Test reachability counts doors and floor behind them."""
        maze = Maze.from_text(SMALL_MAZE)
        assert maze.reachable_cells() == {
            Position(1, 1), Position(2, 1), Position(3, 1), Position(1, 2),
        }


class TestSimulationRunner:
    """End-to-end runs on the bundled mazes."""

    @pytest.mark.parametrize("name", ["rooms.txt", "corridor.txt", "open_field.txt"])
    @pytest.mark.parametrize("radius", [1, 2, 3])
    def test_explores_fully(self, mazes_dir, name, radius):
        """Test every reachable cell gets mapped and the position stays true."""
        config = Config()
        config.simulation.radius = radius
        maze = Maze.from_file(mazes_dir / name)

        result = SimulationRunner(maze, config).run()

        assert result.exhausted
        assert result.position_consistent
        assert result.coverage == 1.0
        assert result.failed_moves == 0
        assert result.success

    def test_door_opened_once(self):
        """Test the only way onward is opened exactly once."""
        config = Config()
        config.simulation.radius = 1
        maze = Maze.from_text(SMALL_MAZE)
        result = SimulationRunner(maze, config, record_actions=True).run()

        assert result.actions[0] == {"action": "open", "target": [1, 0]}
        assert result.doors_opened == 1
        assert sum(1 for a in result.actions if a["action"] == "open") == 1
        assert maze.tile_at(Position(2, 1)) == TileKind.OPEN_DOOR
        assert result.success
        assert result.coverage == 1.0

    def test_rooms_doors_opened(self, mazes_dir):
        """Test the rooms maze needs at least one door opened."""
        maze = Maze.from_file(mazes_dir / "rooms.txt")
        result = SimulationRunner(maze).run()

        opened = sum(
            1 for pos in [Position(5, 2), Position(7, 4)]
            if maze.tile_at(pos) == TileKind.OPEN_DOOR
        )
        assert result.doors_opened >= 1
        assert opened == result.doors_opened

    def test_turn_limit(self, mazes_dir):
        """Test a run stops at the turn limit."""
        maze = Maze.from_file(mazes_dir / "rooms.txt")
        result = SimulationRunner(maze).run(max_turns=3)

        assert result.turns == 3
        assert not result.exhausted
        assert result.position_consistent

    def test_skip_void_never_finishes(self, mazes_dir):
        """Test skipping void leaves the agent bumping into the void border."""
        config = Config()
        config.agent.merge_policy = "skip_void"
        maze = Maze.from_file(mazes_dir / "open_field.txt")

        result = SimulationRunner(maze, config).run(max_turns=60)

        assert not result.exhausted
        assert result.failed_moves > 0
        assert result.position_consistent


class TestRender:
    """Tests for the rich renderables."""

    def test_render_map(self, mazes_dir):
        """Test the known map renders with the agent marked."""
        maze = Maze.from_file(mazes_dir / "corridor.txt")
        runner = SimulationRunner(maze)
        runner.run()
        engine = runner.client.engine

        text = render_map(engine.store, engine.state.position).plain
        assert text.count("@") == 1
        assert "#" in text

    def test_render_sparse_map(self):
        """Test unknown cells inside the bounds render blank."""
        from src.api.models import Position, TileKind
        from src.memory.tile_store import TileStore

        store = TileStore()
        store.set(Position(0, 0), TileKind.FLOOR)
        store.set(Position(2, 0), TileKind.WALL)
        store.set(Position(0, 1), TileKind.CLOSED_DOOR)
        store.set(Position(2, 1), TileKind.VOID)

        assert render_map(store).plain == ". #\n+ ~"
        assert render_map(store, Position(2, 0)).plain == ". @\n+ ~"

    def test_render_empty_map(self):
        """Test an empty store renders as empty text."""
        from src.memory.tile_store import TileStore

        assert render_map(TileStore()).plain == ""

    def test_render_summary(self, mazes_dir):
        """Test the summary table has a row per statistic."""
        maze = Maze.from_file(mazes_dir / "corridor.txt")
        result = SimulationRunner(maze).run()
        table = render_summary(result)
        assert table.row_count == 9
