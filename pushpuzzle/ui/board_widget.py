"""Board rendering: paints a BoardSnapshot and reports clicked cells."""

from __future__ import annotations

from typing import Iterable, Optional

from PySide6.QtCore import QRect, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QMouseEvent, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from pushpuzzle.core.board import BoardSnapshot, Coord, Direction
from pushpuzzle.ui.colors import TILE_GLYPHS, BoardColors, blend_hex
from pushpuzzle.ui.models import diff_snapshots


class BoardWidget(QWidget):
    """Square tiles centred in the widget; walls, targets, boxes and the player as emoji."""

    cell_clicked = Signal(object)  # Coord

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._snapshot: Optional[BoardSnapshot] = None
        self._path: list[Coord] = []
        self.setMinimumSize(240, 240)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setFocusPolicy(Qt.FocusPolicy.NoFocus)

    def set_snapshot(self, snapshot: Optional[BoardSnapshot]) -> None:
        """Show *snapshot*, repainting only the cells that changed."""
        before = self._snapshot
        self._snapshot = snapshot
        if snapshot is None:
            self.update()
            return
        diff = diff_snapshots(before, snapshot)
        if diff.full_redraw:
            self.update()
            return
        for cell in diff.dirty_cells(before, snapshot):
            self.update(self._cell_rect(cell).adjusted(-1, -1, 1, 1))

    def set_path(self, cells: Iterable[Coord]) -> None:
        self._path = list(cells)
        self.update()

    def _tile_size(self) -> int:
        snap = self._snapshot
        if snap is None or snap.width == 0 or snap.height == 0:
            return 0
        return max(8, min(self.width() // snap.width, self.height() // snap.height, 64))

    def _origin(self) -> tuple[int, int]:
        snap = self._snapshot
        size = self._tile_size()
        if snap is None:
            return 0, 0
        return (self.width() - size * snap.width) // 2, (self.height() - size * snap.height) // 2

    def _cell_rect(self, cell: Coord) -> QRect:
        size = self._tile_size()
        ox, oy = self._origin()
        return QRect(ox + cell.x * size, oy + cell.y * size, size, size)

    def cell_at(self, x: int, y: int) -> Optional[Coord]:
        """Grid cell under widget coordinates (x, y), if any."""
        snap = self._snapshot
        size = self._tile_size()
        if snap is None or size == 0:
            return None
        ox, oy = self._origin()
        col = (x - ox) // size
        row = (y - oy) // size
        if 0 <= col < snap.width and 0 <= row < snap.height and x >= ox and y >= oy:
            return Coord(col, row)
        return None

    def mousePressEvent(self, event: QMouseEvent) -> None:
        pos = event.position().toPoint()
        cell = self.cell_at(pos.x(), pos.y())
        if cell is not None and event.button() == Qt.MouseButton.LeftButton:
            self.cell_clicked.emit(cell)
        super().mousePressEvent(event)

    def paintEvent(self, event) -> None:
        """Paint floor, walls, targets, path hints, boxes and the player."""
        super().paintEvent(event)
        snap = self._snapshot
        size = self._tile_size()
        if snap is None or size == 0:
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        radius = max(3, size // 6)
        font = painter.font()
        font.setPixelSize(max(8, int(size * 0.6)))
        painter.setFont(font)
        path = set(self._path)
        hint = QColor(BoardColors.PRIMARY)
        hint.setAlpha(64)

        for y in range(snap.height):
            for x in range(snap.width):
                cell = Coord(x, y)
                rect = QRectF(self._cell_rect(cell)).adjusted(1, 1, -1, -1)
                if not rect.toRect().intersects(event.rect()):
                    continue
                if cell in snap.walls:
                    fill = BoardColors.WALL
                elif cell in snap.boxes and cell in snap.targets:
                    fill = BoardColors.BOX_ON_TARGET
                elif cell in snap.boxes:
                    fill = BoardColors.BOX
                elif cell in snap.targets:
                    fill = BoardColors.TARGET
                else:
                    fill = BoardColors.FLOOR
                painter.setPen(QPen(QColor(blend_hex(fill, "#000000", 0.12)), 1))
                painter.setBrush(QColor(fill))
                painter.drawRoundedRect(rect, radius, radius)

                if cell in path:
                    painter.setPen(Qt.NoPen)
                    painter.setBrush(hint)
                    painter.drawEllipse(rect.center(), size / 6, size / 6)

                glyph = ""
                if cell in snap.walls:
                    glyph = TILE_GLYPHS["wall"]
                elif cell in snap.boxes:
                    glyph = TILE_GLYPHS["box"]
                elif cell in snap.targets and cell != snap.player:
                    glyph = TILE_GLYPHS["target"]
                if glyph:
                    painter.setPen(QColor(BoardColors.TEXT_PRIMARY))
                    painter.drawText(rect, Qt.AlignCenter, glyph)

        self._paint_player(painter, snap, size)
        painter.end()

    def _paint_player(self, painter: QPainter, snap: BoardSnapshot, size: int) -> None:
        rect = QRectF(self._cell_rect(snap.player)).adjusted(1, 1, -1, -1)
        painter.save()
        # mirror the sprite when walking left
        if snap.facing == Direction.LEFT:
            painter.translate(rect.center().x() * 2, 0)
            painter.scale(-1, 1)
        painter.setPen(QColor(BoardColors.PLAYER))
        painter.drawText(rect, Qt.AlignCenter, TILE_GLYPHS["player"])
        painter.restore()
