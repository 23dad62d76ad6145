"""Tests for pushpuzzle.core.pathfinder – shortest walks and step-by-step navigation."""

from __future__ import annotations

import pytest

from pushpuzzle.core.board import Coord, Direction, setup_level
from pushpuzzle.core.engine import MoveStatus
from pushpuzzle.core.pathfinder import AutoNavigator, find_path

MAZE = (
    "XXXXXXXX",
    "X@   X X",
    "X XX XXX",
    "X  *   X",
    "XX X XXX",
    "X    . X",
    "XXXXXXXX",
)


def _shortest_distances(board, level, start):
    """Exhaustive depth-first relaxation; slow but independent of the BFS under test."""
    best = {}

    def visit(cell, depth):
        if depth >= best.get(cell, float("inf")):
            return
        best[cell] = depth
        for direction in Direction:
            nxt = cell.shifted(direction)
            if (
                level.in_bounds(nxt.x, nxt.y)
                and not level.is_wall(nxt.x, nxt.y)
                and not board.has_box(nxt)
            ):
                visit(nxt, depth + 1)

    visit(start, 0)
    return best


def _is_walk(start, path):
    cells = [start] + path
    return all(
        Direction.from_delta(b.x - a.x, b.y - a.y) is not None
        for a, b in zip(cells, cells[1:])
    )


# ---------------------------------------------------------------------------
# find_path
# ---------------------------------------------------------------------------

class TestFindPath:
    def test_path_lengths_are_shortest(self, make_level):
        level = make_level(*MAZE)
        board = setup_level(level)
        distances = _shortest_distances(board, level, board.player)
        assert len(distances) > 10
        for goal, distance in distances.items():
            path = find_path(board, level, board.player, goal)
            assert path is not None
            assert len(path) == distance
            assert _is_walk(board.player, path)
            if path:
                assert path[-1] == goal

    def test_path_excludes_start(self, make_level):
        level = make_level("@  .")
        board = setup_level(level)
        assert find_path(board, level, Coord(0, 0), Coord(3, 0)) == [Coord(1, 0), Coord(2, 0), Coord(3, 0)]

    def test_start_equals_goal(self, make_level):
        level = make_level("@ .")
        board = setup_level(level)
        assert find_path(board, level, Coord(0, 0), Coord(0, 0)) == []

    def test_goal_is_wall(self, make_level):
        level = make_level(*MAZE)
        board = setup_level(level)
        assert find_path(board, level, board.player, Coord(0, 0)) is None

    def test_goal_holds_box(self, make_level):
        level = make_level(*MAZE)
        board = setup_level(level)
        assert find_path(board, level, board.player, Coord(3, 3)) is None

    def test_goal_out_of_bounds(self, make_level):
        level = make_level(*MAZE)
        board = setup_level(level)
        assert find_path(board, level, board.player, Coord(20, 1)) is None
        assert find_path(board, level, board.player, Coord(-1, 1)) is None

    def test_unreachable_goal(self, make_level):
        level = make_level(*MAZE)
        board = setup_level(level)
        # (6, 1) is walled in on every side.
        assert find_path(board, level, board.player, Coord(6, 1)) is None

    def test_boxes_are_obstacles(self, make_level):
        level = make_level(
            "@*.",
            "   ",
        )
        board = setup_level(level)
        path = find_path(board, level, Coord(0, 0), Coord(2, 0))
        assert path == [Coord(0, 1), Coord(1, 1), Coord(2, 1), Coord(2, 0)]

    def test_box_cuts_off_goal(self, make_level):
        level = make_level("@*  .")
        board = setup_level(level)
        assert find_path(board, level, Coord(0, 0), Coord(4, 0)) is None

    def test_tie_break_follows_direction_order(self, make_level):
        level = make_level(
            "@ ",
            "  ",
        )
        board = setup_level(level)
        assert find_path(board, level, Coord(0, 0), Coord(1, 1)) == [Coord(0, 1), Coord(1, 1)]

    def test_does_not_move_the_player(self, make_level):
        level = make_level(*MAZE)
        board = setup_level(level)
        find_path(board, level, board.player, Coord(5, 5))
        assert board.player == Coord(1, 1)
        assert len(board.history) == 0


# ---------------------------------------------------------------------------
# AutoNavigator
# ---------------------------------------------------------------------------

class TestAutoNavigator:
    def test_walks_path_to_goal(self, make_level):
        level = make_level(*MAZE)
        board = setup_level(level)
        path = find_path(board, level, board.player, Coord(5, 5))
        nav = AutoNavigator()
        nav.start(path)
        steps = 0
        while nav.active:
            outcome = nav.step(board, level)
            assert outcome is not None
            assert outcome.status is MoveStatus.MOVED
            steps += 1
        assert steps == len(path)
        assert board.player == Coord(5, 5)
        assert len(board.history) == len(path)

    def test_step_when_idle(self, make_level):
        level = make_level("@ .")
        board = setup_level(level)
        nav = AutoNavigator()
        assert nav.step(board, level) is None
        assert board.player == Coord(0, 0)

    def test_cancel(self, make_level):
        level = make_level("@  .")
        board = setup_level(level)
        nav = AutoNavigator()
        nav.start([Coord(1, 0), Coord(2, 0)])
        nav.step(board, level)
        nav.cancel()
        assert not nav.active
        assert nav.remaining == []
        assert nav.step(board, level) is None
        assert board.player == Coord(1, 0)

    def test_remaining_is_a_copy(self):
        nav = AutoNavigator()
        nav.start([Coord(1, 0)])
        nav.remaining.clear()
        assert nav.active

    def test_stops_when_box_appears_on_path(self, make_level):
        level = make_level("@  .")
        board = setup_level(level)
        nav = AutoNavigator()
        nav.start([Coord(1, 0), Coord(2, 0), Coord(3, 0)])
        nav.step(board, level)
        board.boxes.add(Coord(2, 0))
        assert nav.step(board, level) is None
        assert not nav.active
        assert board.player == Coord(1, 0)
        assert board.boxes == {Coord(2, 0)}

    @pytest.mark.parametrize("bad", [Coord(2, 0), Coord(1, 1), Coord(0, 0)])
    def test_stops_on_non_adjacent_cell(self, make_level, bad):
        level = make_level("@ .", "   ")
        board = setup_level(level)
        nav = AutoNavigator()
        nav.start([bad, Coord(2, 0)])
        assert nav.step(board, level) is None
        assert not nav.active
        assert board.player == Coord(0, 0)

    def test_stops_when_move_rejected(self, make_level):
        level = make_level("@X.")
        board = setup_level(level)
        nav = AutoNavigator()
        nav.start([Coord(1, 0), Coord(2, 0)])
        assert nav.step(board, level) is None
        assert not nav.active
        assert board.player == Coord(0, 0)
