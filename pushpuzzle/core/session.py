from __future__ import annotations

import logging
from typing import List, Optional

from pushpuzzle.core.board import BoardSnapshot, BoardState, Coord, Direction, setup_level
from pushpuzzle.core.engine import MoveOutcome, MoveStatus, move, undo
from pushpuzzle.core.levels import Level, LevelRepository
from pushpuzzle.core.pathfinder import AutoNavigator, find_path
from pushpuzzle.core.progress import CURRENT_LEVEL_KEY, KeyValueStore, completion_key

logger = logging.getLogger(__name__)


class GameSession:
    """Drives play across the level catalog.

    Owns the live board, forwards moves, undo and navigation to the engine,
    counts solves in the injected store and advances to the next level when
    the host calls :meth:`advance` after its own presentation delay.
    """

    def __init__(self, levels: LevelRepository, store: KeyValueStore) -> None:
        """Bind the session to a catalog and a persistence store. Call :meth:`load_catalog` to start."""
        self._levels = levels
        self._store = store
        self._index: Optional[int] = None
        self._board: Optional[BoardState] = None
        self._navigator = AutoNavigator()
        self._advance_pending = False
        self._all_complete = False

    @property
    def levels(self) -> LevelRepository:
        """The level catalog."""
        return self._levels

    @property
    def level_count(self) -> int:
        """Number of levels in the catalog."""
        return len(self._levels)

    @property
    def current_index(self) -> Optional[int]:
        """Catalog index of the level being played, None before any level loads."""
        return self._index

    @property
    def current_level(self) -> Optional[Level]:
        """The level being played."""
        if self._index is None:
            return None
        return self._levels.at(self._index)

    @property
    def board(self) -> Optional[BoardState]:
        """The live board (mutable; prefer :meth:`current_board_snapshot` for display)."""
        return self._board

    @property
    def advance_pending(self) -> bool:
        """True between a solve and the host's call to :meth:`advance`."""
        return self._advance_pending

    @property
    def all_complete(self) -> bool:
        """True once the last level has been solved and advanced past."""
        return self._all_complete

    @property
    def navigating(self) -> bool:
        """True while an auto-navigation path has steps left."""
        return self._navigator.active

    @property
    def navigation_path(self) -> List[Coord]:
        """Cells the auto-navigation still has to walk through."""
        return self._navigator.remaining

    def load_catalog(self) -> bool:
        """Reload the catalog and open the persisted level (index 0 if out of range)."""
        self._levels.reload()
        self._index = None
        self._board = None
        if not len(self._levels):
            logger.warning("Level catalog is empty; nothing to play")
            return False
        index = self._store.get(CURRENT_LEVEL_KEY, 0)
        if not 0 <= index < len(self._levels):
            index = 0
        return self.load_level(index)

    def load_level(self, index: int) -> bool:
        """Start *index* from its initial layout. False if there is no such level."""
        if not 0 <= index < len(self._levels):
            return False
        level = self._levels.at(index)
        self._index = index
        self._board = setup_level(level)
        self._navigator.cancel()
        self._advance_pending = False
        self._all_complete = False
        self._store.set(CURRENT_LEVEL_KEY, index)
        logger.info("Loaded level %d (%s)", index, level.key)
        return True

    def reset_current_level(self) -> bool:
        """Restart the current level; the undo history is discarded."""
        if self._index is None:
            return False
        return self.load_level(self._index)

    def next_level(self) -> bool:
        """Move to the next level; no-op on the last one."""
        if self._index is None or self._index + 1 >= len(self._levels):
            return False
        return self.load_level(self._index + 1)

    def previous_level(self) -> bool:
        """Move to the previous level; no-op on the first one."""
        if self._index is None or self._index == 0:
            return False
        return self.load_level(self._index - 1)

    def move(self, direction: Direction) -> MoveOutcome:
        """Manual move. Cancels any auto-navigation in progress.

        A push that leaves a solved board unsolved drops the pending advance.
        """
        self._navigator.cancel()
        if self._board is None or self._index is None:
            return MoveOutcome(status=MoveStatus.BLOCKED)
        outcome = move(self._board, self._levels.at(self._index), direction)
        self._handle_outcome(outcome)
        return outcome

    def undo(self) -> bool:
        """Undo the last move. A pending advance is dropped if the board is no longer solved."""
        self._navigator.cancel()
        if self._board is None:
            return False
        undone = undo(self._board)
        if undone and not self._board.is_solved():
            self._advance_pending = False
        return undone

    def find_path(self, goal: Coord) -> Optional[List[Coord]]:
        """Plan a walk from the player to *goal* and queue it for :meth:`step_auto_navigation`."""
        self._navigator.cancel()
        if self._board is None or self._index is None:
            return None
        path = find_path(self._board, self._levels.at(self._index), self._board.player, goal)
        if path:
            self._navigator.start(path)
        return path

    def step_auto_navigation(self) -> Optional[MoveOutcome]:
        """Take one step of the queued walk. None when there is nothing (more) to walk."""
        if self._board is None or self._index is None:
            self._navigator.cancel()
            return None
        outcome = self._navigator.step(self._board, self._levels.at(self._index))
        if outcome is not None:
            self._handle_outcome(outcome)
        return outcome

    def cancel_navigation(self) -> None:
        self._navigator.cancel()

    def advance(self) -> Optional[int]:
        """Go to the next level after a solve.

        Returns the new index, or None when nothing is pending or the solved
        level was the last one (then :attr:`all_complete` is set).
        """
        if not self._advance_pending or self._index is None:
            return None
        self._advance_pending = False
        if self._index + 1 >= len(self._levels):
            self._all_complete = True
            logger.info("All %d levels complete", len(self._levels))
            return None
        self.load_level(self._index + 1)
        return self._index

    def current_board_snapshot(self) -> Optional[BoardSnapshot]:
        """Immutable view of the board for rendering."""
        if self._board is None or self._index is None:
            return None
        return self._board.snapshot(self._levels.at(self._index))

    def completion_count(self, level_index: int) -> int:
        """How many times *level_index* has been solved."""
        return self._store.get(completion_key(level_index), 0)

    def _handle_outcome(self, outcome: MoveOutcome) -> None:
        if outcome.accepted and self._board is not None and not self._board.is_solved():
            # a box was pushed back off its target before the host advanced
            self._advance_pending = False
        if not outcome.level_solved or self._index is None:
            return
        self._navigator.cancel()
        key = completion_key(self._index)
        self._store.set(key, self._store.get(key, 0) + 1)
        self._advance_pending = True
