from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from pushpuzzle.core.board import Coord, Direction


@dataclass(frozen=True)
class MoveRecord:
    """What one accepted move changed, enough to reverse it."""

    player_from: Coord
    facing_before: Direction
    box_from: Optional[Coord] = None
    box_to: Optional[Coord] = None

    @property
    def pushed(self) -> bool:
        return self.box_from is not None and self.box_to is not None


class UndoHistory:
    """LIFO stack of move records for the current level attempt."""

    def __init__(self) -> None:
        self._records: List[MoveRecord] = []

    def push(self, record: MoveRecord) -> None:
        self._records.append(record)

    def pop(self) -> Optional[MoveRecord]:
        if not self._records:
            return None
        return self._records.pop()

    def peek(self) -> Optional[MoveRecord]:
        return self._records[-1] if self._records else None

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)
