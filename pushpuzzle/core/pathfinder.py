"""Walk-only shortest paths for tap-to-move navigation."""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional

from pushpuzzle.core.board import BoardState, Coord, Direction
from pushpuzzle.core.engine import MoveOutcome, move
from pushpuzzle.core.levels import Level


def _walkable(board: BoardState, level: Level, cell: Coord) -> bool:
    return (
        level.in_bounds(cell.x, cell.y)
        and not level.is_wall(cell.x, cell.y)
        and not board.has_box(cell)
    )


def find_path(board: BoardState, level: Level, start: Coord, goal: Coord) -> Optional[List[Coord]]:
    """Breadth-first search from *start* to *goal* around walls and boxes.

    Returns the cells to walk through, excluding *start* and ending with
    *goal*, or None when the goal is blocked or unreachable. Ties between
    equally short paths follow the Direction order (up, down, left, right).
    """
    if not _walkable(board, level, goal):
        return None
    if start == goal:
        return []

    parent: Dict[Coord, Optional[Coord]] = {start: None}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        if current == goal:
            break
        for direction in Direction:
            nxt = current.shifted(direction)
            if nxt in parent or not _walkable(board, level, nxt):
                continue
            parent[nxt] = current
            queue.append(nxt)

    if goal not in parent:
        return None

    path: List[Coord] = []
    cur: Optional[Coord] = goal
    while cur is not None and cur != start:
        path.append(cur)
        cur = parent[cur]
    path.reverse()
    return path


class AutoNavigator:
    """Consumes a walk path one cell per step.

    The host decides when the next step happens; a manual move should call
    :meth:`cancel` first.
    """

    def __init__(self) -> None:
        self._path: List[Coord] = []

    @property
    def active(self) -> bool:
        return bool(self._path)

    @property
    def remaining(self) -> List[Coord]:
        return list(self._path)

    def start(self, path: List[Coord]) -> None:
        self._path = list(path)

    def cancel(self) -> None:
        self._path = []

    def step(self, board: BoardState, level: Level) -> Optional[MoveOutcome]:
        """Walk to the next cell. None (and the path dropped) if that is no longer possible."""
        if not self._path:
            return None
        nxt = self._path.pop(0)
        direction = Direction.from_delta(nxt.x - board.player.x, nxt.y - board.player.y)
        if direction is None or board.has_box(nxt):
            self.cancel()
            return None
        outcome = move(board, level, direction)
        if not outcome.accepted:
            self.cancel()
            return None
        return outcome
