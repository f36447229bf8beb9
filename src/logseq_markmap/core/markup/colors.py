"""Pick a readable text colour for a block background."""

import re

_HEX_RE = re.compile(r"^#?([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)

LIGHT_TEXT = "#fff"
DARK_TEXT = "#000"


def hex_to_rgb(value: str) -> tuple[int, int, int] | None:
    """Parse ``#rgb`` or ``#rrggbb``; None for anything else (named colours, css vars)."""
    m = _HEX_RE.match(value.strip())
    if not m:
        return None
    digits = m.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def pick_text_color(
    background: str, *, light: str = LIGHT_TEXT, dark: str = DARK_TEXT
) -> str:
    """Return ``dark`` on bright backgrounds, ``light`` otherwise.

    Uses the simple perceived-luminance weighting with a 186 threshold. Backgrounds
    that are not hex colours get ``dark``, matching the host's pastel named colours.
    """
    rgb = hex_to_rgb(background)
    if rgb is None:
        return dark
    r, g, b = rgb
    return dark if (r * 0.299 + g * 0.587 + b * 0.114) > 186 else light
