"""Tests for pushpuzzle.ui.models – LevelState and snapshot diffing."""

from __future__ import annotations

import pytest

from pushpuzzle.core.board import Coord, Direction, setup_level
from pushpuzzle.core.engine import move
from pushpuzzle.core.levels import Level
from pushpuzzle.ui.models import LevelState, diff_snapshots


# ===========================================================================
# LevelState dataclass
# ===========================================================================

class TestLevelState:
    @pytest.fixture()
    def sample_level(self, make_level) -> Level:
        return Level(key="pack-0", name="Basics", rows=make_level("@*.").rows)

    def test_creation(self, sample_level: Level):
        ls = LevelState(level=sample_level, index=0, completed=5)
        assert ls.level is sample_level
        assert ls.completed == 5
        assert ls.is_current is False  # default

    def test_is_current_explicit(self, sample_level: Level):
        ls = LevelState(level=sample_level, index=0, completed=3, is_current=True)
        assert ls.is_current is True

    def test_equality(self, sample_level: Level):
        a = LevelState(level=sample_level, index=0, completed=3)
        b = LevelState(level=sample_level, index=0, completed=3)
        assert a == b

    def test_inequality_different_completed(self, sample_level: Level):
        a = LevelState(level=sample_level, index=0, completed=3)
        b = LevelState(level=sample_level, index=0, completed=5)
        assert a != b

    def test_title_is_one_based(self, sample_level: Level):
        assert LevelState(level=sample_level, index=0, completed=0).title == "1. Basics"
        assert LevelState(level=sample_level, index=9, completed=0).title == "10. Basics"

    def test_title_falls_back_to_key(self, make_level):
        unnamed = Level(key="classic-2", name="", rows=make_level("@*.").rows)
        assert LevelState(level=unnamed, index=2, completed=0).title == "3. classic-2"


# ===========================================================================
# diff_snapshots
# ===========================================================================

class TestDiffSnapshots:
    @pytest.fixture()
    def level(self, make_level) -> Level:
        return make_level(
            "XXXXX",
            "X@* X",
            "X  .X",
            "XXXXX",
        )

    def test_first_snapshot_is_full_redraw(self, level: Level):
        snap = setup_level(level).snapshot(level)
        diff = diff_snapshots(None, snap)
        assert diff.full_redraw
        assert len(diff.dirty_cells(None, snap)) == 20

    def test_different_level_is_full_redraw(self, level: Level, make_level):
        other = make_level("@*.")
        before = setup_level(level).snapshot(level)
        after = setup_level(other).snapshot(other)
        assert diff_snapshots(before, after).full_redraw

    def test_walk_marks_old_and_new_player_cells(self, level: Level):
        board = setup_level(level)
        before = board.snapshot(level)
        move(board, level, Direction.DOWN)
        after = board.snapshot(level)
        diff = diff_snapshots(before, after)
        assert not diff.full_redraw
        assert diff.player_moved
        assert diff.moved_boxes == frozenset()
        assert diff.dirty_cells(before, after) == frozenset({Coord(1, 1), Coord(1, 2)})

    def test_push_marks_box_cells(self, level: Level):
        board = setup_level(level)
        before = board.snapshot(level)
        move(board, level, Direction.RIGHT)
        after = board.snapshot(level)
        diff = diff_snapshots(before, after)
        assert diff.moved_boxes == frozenset({Coord(2, 1), Coord(3, 1)})
        assert diff.dirty_cells(before, after) == frozenset({Coord(1, 1), Coord(2, 1), Coord(3, 1)})

    def test_unchanged_snapshot_has_no_dirty_cells(self, level: Level):
        board = setup_level(level)
        snap = board.snapshot(level)
        diff = diff_snapshots(snap, board.snapshot(level))
        assert diff.dirty_cells(snap, snap) == frozenset()

    def test_facing_change_redraws_player(self, level: Level):
        board = setup_level(level)
        before = board.snapshot(level)
        board.facing = Direction.LEFT
        after = board.snapshot(level)
        diff = diff_snapshots(before, after)
        assert diff.facing_changed
        assert not diff.player_moved
        assert diff.dirty_cells(before, after) == frozenset({Coord(1, 1)})
