"""Move-and-push rules, win detection and undo."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pushpuzzle.core.board import BoardState, Coord, Direction
from pushpuzzle.core.history import MoveRecord
from pushpuzzle.core.levels import Level

logger = logging.getLogger(__name__)


class MoveStatus(Enum):
    MOVED = "moved"
    PUSHED = "pushed"
    OUT_OF_BOUNDS = "out_of_bounds"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class MoveOutcome:
    """Result of a move attempt.

    ``level_solved`` is set only on the move that takes the board from
    unsolved to solved, so a host can count solves without deduplicating.
    """

    status: MoveStatus
    record: Optional[MoveRecord] = None
    level_solved: bool = False

    @property
    def accepted(self) -> bool:
        return self.status in (MoveStatus.MOVED, MoveStatus.PUSHED)


def _open(level: Level, cell: Coord) -> Optional[MoveStatus]:
    """None if *cell* can be entered, otherwise the rejection status."""
    if not level.in_bounds(cell.x, cell.y):
        return MoveStatus.OUT_OF_BOUNDS
    if level.is_wall(cell.x, cell.y):
        return MoveStatus.BLOCKED
    return None


def move(board: BoardState, level: Level, direction: Direction) -> MoveOutcome:
    """Apply one step in *direction*, pushing a box if one is in the way.

    A rejected move leaves the board, its facing and its history untouched.
    """
    candidate = board.player.shifted(direction)
    rejected = _open(level, candidate)
    if rejected is not None:
        return MoveOutcome(status=rejected)

    box_from: Optional[Coord] = None
    box_to: Optional[Coord] = None
    # Boxes move, so look them up in the board, not in the level grid.
    if board.has_box(candidate):
        destination = candidate.shifted(direction)
        rejected = _open(level, destination)
        if rejected is not None:
            return MoveOutcome(status=rejected)
        if board.has_box(destination):
            return MoveOutcome(status=MoveStatus.BLOCKED)
        box_from, box_to = candidate, destination

    was_solved = board.is_solved()
    record = MoveRecord(
        player_from=board.player,
        facing_before=board.facing,
        box_from=box_from,
        box_to=box_to,
    )
    if box_from is not None and box_to is not None:
        board.boxes.remove(box_from)
        board.boxes.add(box_to)
    board.player = candidate
    board.facing = direction
    board.history.push(record)

    solved = not was_solved and board.is_solved()
    if solved:
        logger.info("Level %s solved in %d moves", level.key, len(board.history))
    return MoveOutcome(
        status=MoveStatus.PUSHED if record.pushed else MoveStatus.MOVED,
        record=record,
        level_solved=solved,
    )


def undo(board: BoardState) -> bool:
    """Reverse the most recent move. False when there is nothing to undo."""
    record = board.history.pop()
    if record is None:
        return False
    if record.box_from is not None and record.box_to is not None:
        board.boxes.discard(record.box_to)
        board.boxes.add(record.box_from)
    board.player = record.player_from
    board.facing = record.facing_before
    return True
