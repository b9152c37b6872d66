"""Tests for position tracking."""

import itertools

import pytest

from src.api.models import Direction, MoveOutcome, Position
from src.memory.position import AgentState, PositionTracker


class TestAgentState:
    """Tests for AgentState dataclass."""

    def test_default_state(self):
        """Test the agent starts at the origin with nothing pending."""
        state = AgentState()
        assert state.position == Position(0, 0)
        assert state.pending is None
        assert state.turn == 0
        assert state.exhausted is False

    def test_to_dict(self):
        """Test state serialization."""
        state = AgentState(position=Position(2, -1), pending=Direction.W)
        data = state.to_dict()
        assert data["position"] == [2, -1]
        assert data["pending"] == "west"


class TestUpdatePosition:
    """Tests for PositionTracker.update_position()."""

    def test_north_succeeded(self):
        """Test a successful move north decreases y."""
        tracker = PositionTracker()
        tracker.set_pending(Direction.N)
        assert tracker.update_position(MoveOutcome.SUCCEEDED) == Position(0, -1)

    def test_north_failed(self):
        """Test a failed move leaves the position alone."""
        tracker = PositionTracker()
        tracker.set_pending(Direction.N)
        assert tracker.update_position(MoveOutcome.FAILED) == Position(0, 0)

    def test_pending_cleared(self):
        """Test the pending move is consumed either way."""
        tracker = PositionTracker()
        tracker.set_pending(Direction.E)
        tracker.update_position(MoveOutcome.FAILED)
        assert tracker.pending is None

        tracker.set_pending(Direction.E)
        tracker.update_position(MoveOutcome.SUCCEEDED)
        assert tracker.pending is None

    def test_outcome_without_pending_move(self):
        """Test a reported success with no pending move is a no-op."""
        tracker = PositionTracker()
        assert tracker.update_position(MoveOutcome.SUCCEEDED) == Position(0, 0)
        assert tracker.state.moves_succeeded == 0

    @pytest.mark.parametrize(
        "direction,outcome",
        list(itertools.product(list(Direction) + [None], list(MoveOutcome))),
    )
    def test_position_delta(self, direction, outcome):
        """Test position moves one unit along the pending axis only on success."""
        start = Position(3, 7)
        tracker = PositionTracker(AgentState(position=start))
        if direction is not None:
            tracker.set_pending(direction)

        after = tracker.update_position(outcome)

        if direction is not None and outcome == MoveOutcome.SUCCEEDED:
            dx, dy = direction.delta
            assert after == Position(start.x + dx, start.y + dy)
            assert start.manhattan_distance(after) == 1
        else:
            assert after == start

    def test_sequence(self):
        """Test a mix of moves accumulates correctly."""
        tracker = PositionTracker()
        moves = [
            (Direction.E, MoveOutcome.SUCCEEDED),
            (Direction.E, MoveOutcome.SUCCEEDED),
            (Direction.S, MoveOutcome.FAILED),
            (Direction.S, MoveOutcome.SUCCEEDED),
            (Direction.W, MoveOutcome.SUCCEEDED),
        ]
        for direction, outcome in moves:
            tracker.set_pending(direction)
            tracker.update_position(outcome)

        assert tracker.position == Position(1, 1)
        assert tracker.state.moves_requested == 5
        assert tracker.state.moves_succeeded == 4
