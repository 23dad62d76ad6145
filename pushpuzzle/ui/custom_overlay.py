"""Custom in-window overlays (level solved, all levels complete)."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import Qt, QEvent, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from pushpuzzle.ui.colors import BoardColors


def _themed_card_container(radius: int = 20, object_name: str = "overlayContainer") -> QFrame:
    container = QFrame()
    container.setObjectName(object_name)
    container.setMinimumWidth(360)
    container.setMaximumWidth(480)
    container.setStyleSheet(
        f"""
        QFrame#{object_name} {{
            background: #ffffff;
            border: 1px solid rgba(0, 131, 143, 0.12);
            border-radius: {radius}px;
        }}
        """
    )
    shadow = QGraphicsDropShadowEffect(container)
    shadow.setBlurRadius(20)
    shadow.setOffset(0, 6)
    shadow.setColor(QColor(0, 80, 100, 25))
    container.setGraphicsEffect(shadow)
    return container


def _overlay_background(parent: QWidget, on_click: Callable[[], None]) -> QWidget:
    overlay_bg = QWidget(parent)
    overlay_bg.setStyleSheet("background: rgba(0, 0, 0, 0.2);")
    overlay_bg.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
    overlay_bg.setCursor(Qt.CursorShape.ArrowCursor)
    overlay_bg.setMinimumSize(1, 1)
    overlay_bg.mousePressEvent = lambda e: on_click()
    return overlay_bg


def _primary_button_style() -> str:
    return f"""
        QPushButton {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                stop:0 {BoardColors.PRIMARY_LIGHT}, stop:1 {BoardColors.PRIMARY});
            color: white;
            padding: 10px 16px;
            border: none;
            border-radius: 12px;
            font-weight: 600;
            font-size: 13px;
        }}
        QPushButton:hover {{ background: {BoardColors.PRIMARY}; }}
    """


class MessageOverlay(QWidget):
    """In-window card with an icon, title, message and an OK button; tracks the parent's size."""

    closed = Signal()

    def __init__(self, icon: str, title: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        main_layout = QGridLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        main_layout.setRowStretch(0, 1)
        main_layout.setColumnStretch(0, 1)

        overlay_bg = _overlay_background(self, self.dismiss)
        main_layout.addWidget(overlay_bg, 0, 0)

        container = _themed_card_container(object_name="messageContainer")
        content = QVBoxLayout(container)
        content.setContentsMargins(28, 24, 28, 24)
        content.setSpacing(18)

        header = QHBoxLayout()
        header.setSpacing(12)
        icon_box = QFrame()
        icon_box.setFixedSize(44, 44)
        icon_box.setStyleSheet(
            f"""
            QFrame {{
                background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                    stop:0 {BoardColors.BG_TOP}, stop:1 #b2ebf2);
                border-radius: 12px;
            }}
            """
        )
        icon_layout = QVBoxLayout(icon_box)
        icon_layout.setContentsMargins(0, 0, 0, 0)
        icon_label = QLabel(icon)
        icon_label.setStyleSheet(f"color: {BoardColors.PRIMARY}; font-size: 24px; font-weight: 900;")
        icon_label.setAlignment(Qt.AlignCenter)
        icon_layout.addWidget(icon_label)
        header.addWidget(icon_box, 0)

        self._title = QLabel(title)
        self._title.setStyleSheet(f"color: {BoardColors.PRIMARY}; font-size: 18px; font-weight: 800;")
        header.addWidget(self._title, 0)
        header.addStretch(1)
        content.addLayout(header)

        self._message = QLabel("")
        self._message.setStyleSheet(f"color: {BoardColors.TEXT_PRIMARY}; font-size: 14px; font-weight: 500;")
        self._message.setWordWrap(True)
        content.addWidget(self._message, 0)

        ok_btn = QPushButton("OK")
        ok_btn.setStyleSheet(_primary_button_style())
        ok_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        ok_btn.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        ok_btn.clicked.connect(self.dismiss)
        content.addWidget(ok_btn, 0)

        main_layout.addWidget(container, 0, 0, 1, 1, Qt.AlignCenter)
        self.hide()

    def set_message(self, text: str) -> None:
        self._message.setText(text)

    def present(self) -> None:
        self._update_geometry()
        self.raise_()
        self.show()

    def dismiss(self) -> None:
        if self.isVisible():
            self.hide()
            self.closed.emit()

    def _update_geometry(self) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())

    def eventFilter(self, obj: QWidget, event: QEvent) -> bool:
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self._update_geometry()
        return super().eventFilter(obj, event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._update_geometry()
        parent = self.parentWidget()
        if parent is not None:
            parent.installEventFilter(self)

    def hideEvent(self, event) -> None:
        parent = self.parentWidget()
        if parent is not None:
            parent.removeEventFilter(self)
        super().hideEvent(event)


class LevelCompletedOverlay(MessageOverlay):
    """Shown between a solve and the automatic move to the next level."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__("✓", "Level Complete!", parent)


class AllLevelsCompleteOverlay(MessageOverlay):
    """Shown once the last level of the catalog is solved."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__("★", "All Levels Complete", parent)
        self.set_message("Every puzzle is solved. Pick any level to play it again.")
