"""Application entry point and setup for the PushPuzzle game."""

import logging
import os
import sys
from pathlib import Path

from PySide6.QtGui import QFont, QGuiApplication
from PySide6.QtWidgets import QApplication

from pushpuzzle.core.levels import LevelRepository
from pushpuzzle.core.progress import ProgressStore
from pushpuzzle.core.session import GameSession
from pushpuzzle.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def configure_font(app: QApplication) -> None:
    """Use the platform UI font with emoji fallbacks so tile glyphs render."""
    app_font = QFont(app.font())
    app_font.setFamilies(
        [
            app_font.family(),
            "Noto Color Emoji",  # Linux (common)
            "Noto Emoji",
            "Segoe UI Emoji",  # Windows
            "Apple Color Emoji",  # macOS
        ]
    )
    app_font.setPointSize(11)
    app.setFont(app_font)
    QGuiApplication.setFont(app_font)


def levels_dir() -> Path | None:
    """Levels directory from PUSHPUZZLE_LEVELS_DIR, or None for the bundled set."""
    override = os.environ.get("PUSHPUZZLE_LEVELS_DIR")
    return Path(override).expanduser() if override else None


def run() -> None:
    """Initialize the application, load the level catalog, and start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("PushPuzzle")
    app.setApplicationDisplayName("PushPuzzle")

    configure_font(app)

    levels = LevelRepository(levels_dir())
    progress_store = ProgressStore()
    session = GameSession(levels=levels, store=progress_store)
    if not session.load_catalog():
        logging.warning("No playable levels found in %s", levels_dir() or "bundled data")

    window = MainWindow(session=session, progress_store=progress_store)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
