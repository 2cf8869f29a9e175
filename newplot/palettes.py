"""Named colour swatches and palette resolution."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

import numpy as np
import plotly.express as px
from plotly.colors import hex_to_rgb

logger = logging.getLogger(__name__)

PALETTES: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "cyan": ("#008B8B", "#00CDCD", "#00EEEE", "#00FFFF", "#20B2AA", "#48D1CC"),
        "purple": ("#68228B", "#9932CC", "#B23AEE", "#BF3EFF", "#9B30FF", "#D8BFD8"),
        "red": ("#8B2323", "#CD3333", "#EE3B3B", "#FF4040", "#FF6347", "#FA8072"),
        "blue": ("#00008B", "#0000CD", "#4169E1", "#1E90FF", "#00BFFF", "#87CEFA"),
        "green": ("#006400", "#008000", "#228B22", "#32CD32", "#3CB371", "#66CDAA"),
        "orange": ("#FF8C00", "#FFA500", "#FFB347", "#FF7F50", "#FF6347", "#FF4500"),
        "pink": ("#FF1493", "#FF69B4", "#FF82AB", "#FFB6C1", "#FFC0CB", "#FF69B4"),
        "yellow": ("#FFD700", "#FFFF00", "#FFFACD", "#FAFAD2", "#FFEFD5", "#FFF8DC"),
    }
)

PALETTE_NAMES: Tuple[str, ...] = tuple(PALETTES)

VIRIDIS_STOPS: Tuple[str, ...] = tuple(px.colors.sequential.Viridis)


def get_palette(name: Optional[str]) -> Optional[Tuple[str, ...]]:
    """Return the base swatch for ``name``, or None when it is not built in."""
    if name is None:
        return None
    return PALETTES.get(name)


def interpolate_colors(colors: Sequence[str], n: int) -> List[str]:
    """Stretch ``colors`` to ``n`` evenly spaced hex colours.

    Stops are spread evenly over [0, 1] and each RGB channel is interpolated
    linearly, so the first and last colours are always kept.
    """
    if n <= 0:
        return []
    rgb = np.array([hex_to_rgb(c) for c in colors], dtype=float)
    stops = np.linspace(0.0, 1.0, len(colors))
    points = np.linspace(0.0, 1.0, n)
    channels = [np.interp(points, stops, rgb[:, i]) for i in range(3)]
    out = np.rint(np.column_stack(channels)).astype(int)
    return ["#{:02X}{:02X}{:02X}".format(*row) for row in out]


def viridis(n: int) -> List[str]:
    """Perceptually-uniform sequence of ``n`` colours."""
    return interpolate_colors(VIRIDIS_STOPS, n)


def resolve_palette(name: Optional[str], n_groups: int, min_size: int = 6) -> List[str]:
    base = get_palette(name)
    if base is None:
        if name is not None:
            logger.debug("Palette %r is not built in; using viridis(%d)", name, n_groups)
        return viridis(n_groups)
    size = max(n_groups, min_size)
    logger.debug("Interpolating palette %r to %d colours", name, size)
    return interpolate_colors(base, size)
