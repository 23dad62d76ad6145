"""Theme colors and color utilities for the UI."""


class BoardColors:
    """Light theme palette for the board and its chrome."""

    BG_TOP = "#e0f7fa"
    BG_BOTTOM = "#80deea"

    PRIMARY = "#00838f"
    PRIMARY_LIGHT = "#4fb3bf"

    FLOOR = "#f8fcfd"
    WALL = "#78909c"
    TARGET = "#b2ebf2"
    BOX = "#ffb74d"
    BOX_ON_TARGET = "#69f0ae"
    PLAYER = "#00838f"

    TEXT_PRIMARY = "#1a3a3a"
    TEXT_SECONDARY = "#4a6572"
    TEXT_MUTED = "#78909c"


# Emoji glyphs drawn on top of the tile fill.
TILE_GLYPHS = {
    "wall": "🪨",
    "target": "🔳",
    "box": "💎",
    "player": "👴",
}


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    try:
        a = a.strip()
        b = b.strip()
        if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
            return a
        t = max(0.0, min(1.0, float(t)))
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
        r = int(ar + (br - ar) * t)
        g = int(ag + (bg - ag) * t)
        bl = int(ab + (bb - ab) * t)
        return f"#{r:02X}{g:02X}{bl:02X}"
    except ValueError:
        return a
