"""Declarative chart description produced by ``new_plot``.

Nothing here draws anything: a ``ChartSpec`` records which geometry to use,
which columns map to which aesthetics, the discrete colour scales, the theme
and the labels. ``newplot.render`` turns it into a Plotly figure.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import pandas as pd

PLOT_TYPES: Tuple[str, ...] = ("point", "line", "boxplot", "violin")
THEME_STYLES: Tuple[str, ...] = ("minimal", "classic")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    return value


def _literal(value: Any) -> str:
    # non-string column labels (e.g. 0) stay non-strings in the emitted call
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if hasattr(value, "item"):
        value = value.item()
    return repr(value)


@dataclass(frozen=True)
class PlotRequest:
    """Arguments of one ``new_plot`` call, with empty strings meaning absent."""

    x: str
    y: str
    group: Optional[str] = None
    type: str = "point"
    palette: Optional[str] = None
    theme_style: str = "minimal"
    title: Optional[str] = None
    subtitle: Optional[str] = None
    caption: Optional[str] = None

    def __post_init__(self):
        for name in ("group", "palette", "title", "subtitle", "caption"):
            object.__setattr__(self, name, _blank_to_none(getattr(self, name)))

    @property
    def resolved_title(self) -> str:
        if self.title:
            return self.title
        return f"Plot of {self.y} by {self.x}"

    def as_kwargs(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "group": self.group,
            "type": self.type,
            "palette": self.palette,
            "theme_style": self.theme_style,
            "title": self.title,
            "subtitle": self.subtitle,
            "caption": self.caption,
        }

    def to_call(self, data_name: str = "data") -> str:
        """Render the equivalent ``new_plot(...)`` call as source text."""
        args = [("x", self.x), ("y", self.y)]
        if self.group is not None:
            args.append(("group", self.group))
        args.append(("type", self.type))
        if self.palette is not None:
            args.append(("palette", self.palette))
        args.append(("theme_style", self.theme_style))
        for name in ("title", "subtitle", "caption"):
            value = getattr(self, name)
            if value is not None:
                args.append((name, value))

        lines = ["new_plot(", f"    {data_name},"]
        lines.extend(f"    {name}={_literal(value)}," for name, value in args)
        lines.append(")")
        return "\n".join(lines)


@dataclass(frozen=True)
class Aesthetics:
    x: str
    y: str
    color: Optional[str] = None
    fill: Optional[str] = None


@dataclass(frozen=True)
class Geometry:
    kind: str
    opacity: float
    size: Optional[float] = None
    line_width: Optional[float] = None
    outline: Optional[str] = None
    fill: Optional[str] = None
    scale_mode: Optional[str] = None
    trim: Optional[bool] = None


@dataclass(frozen=True)
class Scale:
    """Discrete colour scale for the ``color`` or ``fill`` aesthetic.

    ``column`` is None for a single-colour scale; only the first palette
    colour is used then.
    """

    aesthetic: str
    column: Optional[str]
    levels: Tuple[Any, ...]
    palette: Tuple[str, ...]

    @property
    def mapping(self) -> Dict[Any, str]:
        return dict(zip(self.levels, self.palette))

    @property
    def values(self) -> Tuple[str, ...]:
        if self.column is None:
            return self.palette[:1]
        return tuple(self.mapping.values())


@dataclass(frozen=True)
class Theme:
    style: str
    template: str
    base_size: int


@dataclass(frozen=True)
class Labels:
    title: str
    x: str
    y: str
    subtitle: Optional[str] = None
    caption: Optional[str] = None
    color: Optional[str] = None
    fill: Optional[str] = None


@dataclass(frozen=True)
class ChartSpec:
    request: PlotRequest
    geometry: Geometry
    aesthetics: Aesthetics
    scales: Tuple[Scale, ...]
    theme: Theme
    labels: Labels
    palette: Tuple[str, ...]
    group_count: int
    data: pd.DataFrame = field(compare=False, repr=False)

    def scale_for(self, aesthetic: str) -> Optional[Scale]:
        for scale in self.scales:
            if scale.aesthetic == aesthetic:
                return scale
        return None

    @property
    def keyed_scale(self) -> Optional[Scale]:
        """The scale that splits the data into coloured series, if any."""
        for scale in self.scales:
            if scale.column is not None:
                return scale
        return None

    def to_figure(self):
        from newplot.render import to_figure

        return to_figure(self)
