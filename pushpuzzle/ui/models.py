"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional

from pushpuzzle.core.board import BoardSnapshot, Coord
from pushpuzzle.core.levels import Level


@dataclass
class LevelState:
    """UI state for a single level in the picker: solve count and selection."""

    level: Level
    index: int
    completed: int
    is_current: bool = False

    @property
    def title(self) -> str:
        name = self.level.name or self.level.key
        return f"{self.index + 1}. {name}"


@dataclass(frozen=True)
class SnapshotDiff:
    """Cells whose rendering changed between two snapshots."""

    moved_boxes: FrozenSet[Coord]
    player_moved: bool
    facing_changed: bool
    full_redraw: bool

    def dirty_cells(self, before: Optional[BoardSnapshot], after: BoardSnapshot) -> FrozenSet[Coord]:
        if self.full_redraw or before is None:
            return frozenset(Coord(x, y) for y in range(after.height) for x in range(after.width))
        cells = set(self.moved_boxes)
        if self.player_moved or self.facing_changed:
            cells.add(before.player)
            cells.add(after.player)
        return frozenset(cells)


def diff_snapshots(before: Optional[BoardSnapshot], after: BoardSnapshot) -> SnapshotDiff:
    """Compare two snapshots; a different grid (new level) needs a full redraw."""
    if (
        before is None
        or before.width != after.width
        or before.height != after.height
        or before.walls != after.walls
        or before.targets != after.targets
    ):
        return SnapshotDiff(frozenset(), True, True, True)
    return SnapshotDiff(
        moved_boxes=frozenset(before.boxes ^ after.boxes),
        player_moved=before.player != after.player,
        facing_changed=before.facing != after.facing,
        full_redraw=False,
    )
