"""Shared helpers: build levels from compact text pictures."""

from __future__ import annotations

from typing import Callable

import pytest

from pushpuzzle.core.levels import Level, TileType

# Same glyphs as the classic text format, plus '&' for a box already on a target.
_PICTURE_TILES = {
    " ": TileType.EMPTY,
    "X": TileType.WALL,
    ".": TileType.TARGET,
    "*": TileType.BOX,
    "@": TileType.PLAYER,
    "&": TileType.BOX_ON_TARGET,
}


def level_from_picture(*lines: str, key: str = "test") -> Level:
    """Build a Level directly (no validation) from equal-width text lines."""
    width = max(len(line) for line in lines)
    rows = tuple(
        tuple(_PICTURE_TILES[ch] for ch in line.ljust(width))
        for line in lines
    )
    return Level(key=key, name=key, rows=rows)


@pytest.fixture()
def make_level() -> Callable[..., Level]:
    return level_from_picture
