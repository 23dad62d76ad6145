from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

DEFAULT_LEVELS_DIR = Path(__file__).resolve().parent.parent / "data" / "levels"


class DecodeError(ValueError):
    """A level source could not be turned into a playable level."""


class TileType(IntEnum):
    EMPTY = 0
    WALL = 1
    TARGET = 2
    BOX = 3
    PLAYER = 4
    BOX_ON_TARGET = 5

    @classmethod
    def from_code(cls, code: Any) -> "TileType":
        """Map a raw code to a tile; anything unrecognised is EMPTY."""
        if isinstance(code, bool) or not isinstance(code, int):
            return cls.EMPTY
        try:
            return cls(code)
        except ValueError:
            return cls.EMPTY


TEXT_TILES = {
    " ": TileType.EMPTY,
    "X": TileType.WALL,
    ".": TileType.TARGET,
    "*": TileType.BOX,
    "@": TileType.PLAYER,
}


@dataclass(frozen=True)
class Level:
    key: str
    name: str
    rows: Tuple[Tuple[TileType, ...], ...]

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def height(self) -> int:
        return len(self.rows)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= y < self.height and 0 <= x < self.width

    def tile_at(self, x: int, y: int) -> TileType:
        return self.rows[y][x]

    def is_wall(self, x: int, y: int) -> bool:
        return self.rows[y][x] == TileType.WALL

    def cells_of(self, *types: TileType) -> List[Tuple[int, int]]:
        """(x, y) of every cell holding one of *types*, in row-major order."""
        wanted = set(types)
        return [
            (x, y)
            for y, row in enumerate(self.rows)
            for x, tile in enumerate(row)
            if tile in wanted
        ]


def decode_rows(
    rows: Any,
    key: str,
    name: str = "",
    width: Optional[int] = None,
) -> Level:
    """Build a Level from rows of integer tile codes.

    Short rows are padded with EMPTY and unknown codes become EMPTY, but a
    level without rows, without a player or without any target is rejected.
    """
    if not isinstance(rows, list) or not rows:
        raise DecodeError(f"{key}: level has no rows")
    normalized = [row if isinstance(row, list) else [] for row in rows]
    if width is None:
        width = max(len(row) for row in normalized)
    if not isinstance(width, int) or isinstance(width, bool) or width < 1:
        raise DecodeError(f"{key}: invalid width {width!r}")

    grid: List[Tuple[TileType, ...]] = []
    for row in normalized:
        tiles = [TileType.from_code(code) for code in row[:width]]
        tiles.extend([TileType.EMPTY] * (width - len(tiles)))
        grid.append(tuple(tiles))

    level = Level(key=key, name=name.strip(), rows=tuple(grid))
    _validate(level)
    return level


def _validate(level: Level) -> None:
    if not level.cells_of(TileType.PLAYER):
        raise DecodeError(f"{level.key}: no player tile")
    if not level.cells_of(TileType.TARGET, TileType.BOX_ON_TARGET):
        raise DecodeError(f"{level.key}: no target tiles")


def decode_document(raw: Any, source: str = "levels") -> List[Level]:
    """Decode a structured document: ``{"levels": [...]}`` or a bare list.

    Each entry is ``{"rows": [[int, ...], ...], "name": str, "width": int}``
    (name and width optional) or just the list of rows. Entries that fail to
    decode are logged and skipped.
    """
    if isinstance(raw, dict):
        entries = raw.get("levels")
    else:
        entries = raw
    if not isinstance(entries, list):
        logger.warning("%s: expected a list of levels, got %s", source, type(entries).__name__)
        return []

    levels: List[Level] = []
    for index, entry in enumerate(entries):
        key = f"{source}-{index}"
        try:
            if isinstance(entry, dict):
                name = entry.get("name")
                levels.append(
                    decode_rows(
                        entry.get("rows"),
                        key=key,
                        name=name if isinstance(name, str) else "",
                        width=entry.get("width"),
                    )
                )
            else:
                levels.append(decode_rows(entry, key=key))
        except DecodeError as e:
            logger.warning("Skipping level %d of %s: %s", index, source, e)
    return levels


_HEADER = re.compile(r"^\s*(Maze|Size X|Size Y)\s*:\s*(.*?)\s*$")


def _is_block_marker(line: str) -> bool:
    stripped = line.strip()
    return len(stripped) >= 3 and set(stripped) == {"*"}


def _next_marker(lines: List[str], start: int) -> int:
    """Index of the first block marker at or after *start*, or len(lines)."""
    for i in range(start, len(lines)):
        if _is_block_marker(lines[i]):
            return i
    return len(lines)


def _decode_text_block(lines: List[str], start: int, key: str) -> Tuple[Level, int]:
    """Decode the block whose header begins at *start*.

    Returns the level and the index of the first line after its grid. Grid
    rows are taken by count, so a row such as `` *** `` is never read as the
    start of the next block.
    """
    headers: dict[str, str] = {}
    i = start
    while i < len(lines) and lines[i].strip():
        if _is_block_marker(lines[i]):
            raise DecodeError(f"{key}: block ends before its grid")
        m = _HEADER.match(lines[i])
        if m:
            headers[m.group(1)] = m.group(2)
        i += 1

    try:
        width = int(headers["Size X"])
        height = int(headers["Size Y"])
    except KeyError as e:
        raise DecodeError(f"{key}: missing header {e.args[0]!r}") from None
    except ValueError as e:
        raise DecodeError(f"{key}: invalid size header ({e})") from None
    if width < 1 or height < 1:
        raise DecodeError(f"{key}: size must be positive, got {width}x{height}")

    # skip the blank line(s) between header and grid
    while i < len(lines) and not lines[i].strip():
        i += 1
    grid_lines: List[str] = []
    while i < len(lines) and lines[i].strip() and len(grid_lines) < height:
        grid_lines.append(lines[i].rstrip("\r\n"))
        i += 1
    if len(grid_lines) < height:
        raise DecodeError(f"{key}: expected {height} rows, found {len(grid_lines)}")

    rows = [[int(TEXT_TILES.get(ch, TileType.EMPTY)) for ch in line] for line in grid_lines]
    maze = headers.get("Maze", "").strip()
    name = f"Maze {maze}" if maze else ""
    return decode_rows(rows, key=key, name=name, width=width), i


def decode_text(text: str, source: str = "levels") -> List[Level]:
    """Decode every ``***``-delimited block of the line-oriented format.

    Malformed blocks are logged and skipped; the rest are returned in order.
    """
    lines = text.splitlines()
    levels: List[Level] = []
    index = 0
    i = _next_marker(lines, 0)
    while i < len(lines):
        start = i + 1
        key = f"{source}-{index}"
        index += 1
        following = _next_marker(lines, start)
        if not any(line.strip() for line in lines[start:following]):
            i = following
            continue
        try:
            level, end = _decode_text_block(lines, start, key)
        except DecodeError as e:
            logger.warning("Skipping block %d of %s: %s", index - 1, source, e)
            i = following
            continue
        levels.append(level)
        i = _next_marker(lines, end)
    return levels


class LevelRepository:
    """Ordered level catalog built from every level file in a directory.

    Files are read on first use, or when :meth:`reload` is called.
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else DEFAULT_LEVELS_DIR
        self._levels: Optional[List[Level]] = None

    def all(self) -> List[Level]:
        return list(self._catalog())

    def at(self, index: int) -> Level:
        return self._catalog()[index]

    def get(self, key: str) -> Level:
        for level in self._catalog():
            if level.key == key:
                return level
        raise KeyError(key)

    def index_of(self, key: str) -> int:
        for index, level in enumerate(self._catalog()):
            if level.key == key:
                return index
        raise KeyError(key)

    def reload(self) -> None:
        self._levels = self._load_levels()

    def __len__(self) -> int:
        return len(self._catalog())

    def _catalog(self) -> List[Level]:
        if self._levels is None:
            self._levels = self._load_levels()
        return self._levels

    def _load_levels(self) -> List[Level]:
        base_dir = self._base_dir
        if not base_dir.exists():
            logger.warning("Levels directory not found: %s", base_dir)
            return []

        def _sort_key(p: Path) -> tuple[str, int, str]:
            # natural order: pack2 before pack10
            m = re.match(r"^(.*?)(\d+)$", p.stem)
            if m:
                return (m.group(1), int(m.group(2)), p.name)
            return (p.stem, -1, p.name)

        levels: List[Level] = []
        paths = [p for p in base_dir.iterdir() if p.suffix.lower() in {".yaml", ".yml", ".json", ".txt"}]
        for level_path in sorted(paths, key=_sort_key):
            try:
                text = level_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Could not read %s: %s", level_path, e)
                continue
            source = level_path.stem
            if level_path.suffix.lower() == ".txt":
                levels.extend(decode_text(text, source=source))
                continue
            try:
                raw = yaml.safe_load(text)
            except yaml.YAMLError as e:
                logger.warning("Could not parse %s: %s", level_path.name, e)
                continue
            levels.extend(decode_document(raw, source=source))

        keys = set()
        for level in levels:
            if level.key in keys:
                logger.warning("Duplicate level key %s", level.key)
            keys.add(level.key)

        logger.info("Loaded %d levels from %s", len(levels), base_dir)
        return levels
