from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Set

from pushpuzzle.core.history import UndoHistory
from pushpuzzle.core.levels import Level, TileType

logger = logging.getLogger(__name__)


class Direction(Enum):
    # Declaration order is also the neighbour order used by the pathfinder.
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> tuple[int, int]:
        return self.value

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> Optional["Direction"]:
        for direction in cls:
            if direction.value == (dx, dy):
                return direction
        return None


@dataclass(frozen=True, order=True)
class Coord:
    """A grid cell as (column, row)."""

    x: int
    y: int

    def shifted(self, direction: Direction) -> "Coord":
        dx, dy = direction.delta
        return Coord(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class BoardSnapshot:
    """Read-only view of a board for rendering."""

    width: int
    height: int
    walls: FrozenSet[Coord]
    player: Coord
    boxes: FrozenSet[Coord]
    targets: FrozenSet[Coord]
    facing: Direction
    solved: bool
    moves: int


@dataclass
class BoardState:
    player: Coord
    boxes: Set[Coord]
    targets: FrozenSet[Coord]
    facing: Direction = Direction.DOWN
    history: UndoHistory = field(default_factory=UndoHistory)

    def has_box(self, cell: Coord) -> bool:
        return cell in self.boxes

    def is_solved(self) -> bool:
        """True once every target holds a box. A level without targets never counts as solved."""
        return bool(self.targets) and self.boxes == self.targets

    def snapshot(self, level: Level) -> BoardSnapshot:
        return BoardSnapshot(
            width=level.width,
            height=level.height,
            walls=frozenset(Coord(x, y) for x, y in level.cells_of(TileType.WALL)),
            player=self.player,
            boxes=frozenset(self.boxes),
            targets=self.targets,
            facing=self.facing,
            solved=self.is_solved(),
            moves=len(self.history),
        )


def setup_level(level: Level) -> BoardState:
    """Project a level's initial layout into a fresh board with empty history.

    With several player tiles the last one in row-major order wins. Without
    any (hand-built levels only; decoded levels always have one) the player
    starts on the first non-wall cell.
    """
    targets: Set[Coord] = set()
    boxes: Set[Coord] = set()
    players: list[Coord] = []
    first_open: Optional[Coord] = None

    for y, row in enumerate(level.rows):
        for x, tile in enumerate(row):
            cell = Coord(x, y)
            if tile == TileType.WALL:
                continue
            if first_open is None:
                first_open = cell
            if tile in (TileType.TARGET, TileType.BOX_ON_TARGET):
                targets.add(cell)
            if tile in (TileType.BOX, TileType.BOX_ON_TARGET):
                boxes.add(cell)
            if tile == TileType.PLAYER:
                players.append(cell)

    if players:
        player = players[-1]
        if len(players) > 1:
            logger.warning("Level %s has %d player tiles; using %s", level.key, len(players), player)
    else:
        player = first_open if first_open is not None else Coord(0, 0)
        logger.warning("Level %s has no player tile; starting at %s", level.key, player)

    return BoardState(player=player, boxes=boxes, targets=frozenset(targets))
