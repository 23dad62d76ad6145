from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent, QKeyEvent, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pushpuzzle.core.board import Coord, Direction
from pushpuzzle.core.engine import MoveOutcome
from pushpuzzle.core.progress import ProgressStore
from pushpuzzle.core.session import GameSession
from pushpuzzle.ui.board_widget import BoardWidget
from pushpuzzle.ui.colors import BoardColors
from pushpuzzle.ui.custom_overlay import AllLevelsCompleteOverlay, LevelCompletedOverlay
from pushpuzzle.ui.models import LevelState

logger = logging.getLogger(__name__)

AUTO_STEP_INTERVAL_MS = 120
ADVANCE_DELAY_MS = 1200

_KEY_DIRECTIONS = {
    Qt.Key_Up: Direction.UP,
    Qt.Key_W: Direction.UP,
    Qt.Key_Down: Direction.DOWN,
    Qt.Key_S: Direction.DOWN,
    Qt.Key_Left: Direction.LEFT,
    Qt.Key_A: Direction.LEFT,
    Qt.Key_Right: Direction.RIGHT,
    Qt.Key_D: Direction.RIGHT,
}


def _button_style() -> str:
    return f"""
        QPushButton {{
            background: #fafafa;
            color: {BoardColors.TEXT_PRIMARY};
            padding: 8px 14px;
            border: 1px solid #e0e0e0;
            border-radius: 12px;
            font-weight: 600;
            font-size: 13px;
        }}
        QPushButton:hover {{
            background: #f0f0f0;
            border-color: {BoardColors.PRIMARY};
            color: {BoardColors.PRIMARY};
        }}
        QPushButton:disabled {{
            color: {BoardColors.TEXT_MUTED};
        }}
    """


class MainWindow(QMainWindow):
    """Single-screen game window: level picker, board, and move/undo/reset controls.

    All game rules live in :class:`GameSession`; the window only translates
    input into session calls, schedules auto-navigation steps and the
    post-solve advance with timers, and repaints from board snapshots.
    """

    def __init__(self, session: GameSession, progress_store: Optional[ProgressStore] = None) -> None:
        super().__init__()
        self._session = session
        self._progress_store = progress_store
        self._updating_picker = False

        self._nav_timer = QTimer(self)
        self._nav_timer.setInterval(AUTO_STEP_INTERVAL_MS)
        self._nav_timer.timeout.connect(self._step_navigation)

        self._advance_timer = QTimer(self)
        self._advance_timer.setSingleShot(True)
        self._advance_timer.timeout.connect(self._advance)

        self._build_ui()
        self._build_shortcuts()
        self._refresh()

    def _build_ui(self) -> None:
        self.setWindowTitle("PushPuzzle")
        central = QWidget()
        central.setObjectName("central")
        central.setStyleSheet(
            f"""
            QWidget#central {{
                background: qlineargradient(x1:0, y1:0, x2:0, y2:1,
                    stop:0 {BoardColors.BG_TOP}, stop:1 {BoardColors.BG_BOTTOM});
            }}
            """
        )
        layout = QVBoxLayout(central)
        layout.setContentsMargins(18, 14, 18, 14)
        layout.setSpacing(10)

        header = QHBoxLayout()
        header.setSpacing(8)
        self._prev_button = self._make_button("◀ Prev", self._previous_level)
        self._next_button = self._make_button("Next ▶", self._next_level)
        self._picker = QComboBox()
        self._picker.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self._picker.currentIndexChanged.connect(self._on_picker_changed)
        header.addWidget(self._prev_button)
        header.addWidget(self._picker, 1)
        header.addWidget(self._next_button)
        layout.addLayout(header)

        self._status_label = QLabel("")
        self._status_label.setAlignment(Qt.AlignCenter)
        self._status_label.setStyleSheet(
            f"color: {BoardColors.TEXT_SECONDARY}; font-size: 14px; font-weight: 700;"
        )
        layout.addWidget(self._status_label)

        self._board_widget = BoardWidget()
        self._board_widget.cell_clicked.connect(self._on_cell_clicked)
        layout.addWidget(self._board_widget, 1)

        footer = QHBoxLayout()
        footer.setSpacing(8)
        footer.addStretch(1)
        self._undo_button = self._make_button("↶ Undo", self._undo)
        self._reset_button = self._make_button("↻ Reset", self._reset_level)
        footer.addWidget(self._undo_button)
        footer.addWidget(self._reset_button)
        footer.addStretch(1)
        layout.addLayout(footer)

        self.setCentralWidget(central)

        self._level_completed_overlay = LevelCompletedOverlay(central)
        self._level_completed_overlay.closed.connect(self._advance_now)
        self._all_complete_overlay = AllLevelsCompleteOverlay(central)

        self.resize(720, 720)

    def _make_button(self, text: str, slot) -> QPushButton:
        button = QPushButton(text)
        button.setStyleSheet(_button_style())
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        button.clicked.connect(slot)
        return button

    def _build_shortcuts(self) -> None:
        QShortcut(QKeySequence.Undo, self, activated=self._undo)
        QShortcut(QKeySequence(Qt.Key_Backspace), self, activated=self._undo)
        QShortcut(QKeySequence(Qt.Key_R), self, activated=self._reset_level)
        QShortcut(QKeySequence(Qt.Key_PageDown), self, activated=self._next_level)
        QShortcut(QKeySequence(Qt.Key_PageUp), self, activated=self._previous_level)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        direction = _KEY_DIRECTIONS.get(event.key())
        if direction is None:
            super().keyPressEvent(event)
            return
        self._move(direction)

    # -- session actions -------------------------------------------------

    def _move(self, direction: Direction) -> None:
        self._stop_navigation()
        outcome = self._session.move(direction)
        self._after_move(outcome)

    def _undo(self) -> None:
        self._stop_navigation()
        if self._session.undo() and not self._session.advance_pending:
            self._advance_timer.stop()
            self._level_completed_overlay.hide()
        self._refresh()

    def _reset_level(self) -> None:
        self._stop_navigation()
        self._cancel_advance()
        self._session.reset_current_level()
        self._refresh()

    def _next_level(self) -> None:
        self._stop_navigation()
        self._cancel_advance()
        self._session.next_level()
        self._refresh()

    def _previous_level(self) -> None:
        self._stop_navigation()
        self._cancel_advance()
        self._session.previous_level()
        self._refresh()

    def _on_picker_changed(self, index: int) -> None:
        if self._updating_picker or index < 0 or index == self._session.current_index:
            return
        self._stop_navigation()
        self._cancel_advance()
        self._session.load_level(index)
        self._refresh()

    def _on_cell_clicked(self, cell: Coord) -> None:
        path = self._session.find_path(cell)
        if not path:
            self._stop_navigation()
            return
        self._board_widget.set_path(path)
        self._nav_timer.start()

    def _step_navigation(self) -> None:
        outcome = self._session.step_auto_navigation()
        if outcome is None or not self._session.navigating:
            self._stop_navigation()
        else:
            self._board_widget.set_path(self._session.navigation_path)
        if outcome is not None:
            self._after_move(outcome)

    def _stop_navigation(self) -> None:
        self._nav_timer.stop()
        self._session.cancel_navigation()
        self._board_widget.set_path([])

    def _after_move(self, outcome: MoveOutcome) -> None:
        if outcome.accepted and not self._session.advance_pending:
            self._advance_timer.stop()
            self._level_completed_overlay.hide()
        self._refresh()
        if outcome.level_solved:
            index = self._session.current_index or 0
            count = self._session.completion_count(index)
            self._level_completed_overlay.set_message(
                f"Solved in {len(self._session.board.history)} moves. "
                f"You have cleared this level {count} time{'s' if count != 1 else ''}."
            )
            self._level_completed_overlay.present()
            self._advance_timer.start(ADVANCE_DELAY_MS)

    def _advance_now(self) -> None:
        if self._advance_timer.isActive():
            self._advance_timer.stop()
            self._advance()

    def _advance(self) -> None:
        self._level_completed_overlay.hide()
        self._session.advance()
        if self._session.all_complete:
            self._all_complete_overlay.present()
        self._refresh()

    def _cancel_advance(self) -> None:
        self._advance_timer.stop()
        self._level_completed_overlay.hide()
        self._all_complete_overlay.hide()

    # -- rendering -------------------------------------------------------

    def _level_states(self) -> list[LevelState]:
        current = self._session.current_index
        return [
            LevelState(
                level=self._session.levels.at(i),
                index=i,
                completed=self._session.completion_count(i),
                is_current=i == current,
            )
            for i in range(self._session.level_count)
        ]

    def _refresh(self) -> None:
        self._refresh_picker()
        snapshot = self._session.current_board_snapshot()
        self._board_widget.set_snapshot(snapshot)
        has_level = snapshot is not None
        index = self._session.current_index

        self._undo_button.setEnabled(has_level and snapshot.moves > 0)
        self._reset_button.setEnabled(has_level)
        self._prev_button.setEnabled(has_level and index is not None and index > 0)
        self._next_button.setEnabled(
            has_level and index is not None and index + 1 < self._session.level_count
        )

        if not has_level:
            self._status_label.setText("No levels available.")
            return
        count = self._session.completion_count(index)
        placed = len(snapshot.boxes & snapshot.targets)
        self._status_label.setText(
            f"Level {index + 1}/{self._session.level_count}  •  "
            f"Moves {snapshot.moves}  •  Boxes {placed}/{len(snapshot.targets)}  •  "
            f"Cleared {count}×"
        )

    def _refresh_picker(self) -> None:
        states = self._level_states()
        self._updating_picker = True
        try:
            self._picker.clear()
            for state in states:
                suffix = f"  ✓{state.completed}" if state.completed else ""
                self._picker.addItem(f"{state.title}{suffix}")
                if state.is_current:
                    self._picker.setCurrentIndex(state.index)
        finally:
            self._updating_picker = False

    def closeEvent(self, event: QCloseEvent) -> None:
        """Persist progress when closing the app."""
        if self._progress_store is not None:
            self._progress_store.save()
        super().closeEvent(event)
