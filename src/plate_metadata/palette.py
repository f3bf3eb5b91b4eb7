"""Stable colours for metadata values (same value -> same colour, every run)."""

from __future__ import annotations

import hashlib

import matplotlib
from matplotlib.colors import to_hex

EMPTY_COLOR = "#e0e0e0"
PALETTE_NAME = "tab20"


def color_for_value(value: str) -> str:
    if not value:
        return EMPTY_COLOR
    cmap = matplotlib.colormaps[PALETTE_NAME]
    digest = hashlib.md5(value.encode("utf-8")).digest()
    return to_hex(cmap(int.from_bytes(digest[:4], "big") % cmap.N))
