"""Configuration dataclasses.

All behaviour-controlling constants live here, not as magic numbers in the
builder or the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


def _default_templates() -> Dict[str, str]:
    return {"minimal": "plotly_white", "classic": "simple_white"}


@dataclass(frozen=True)
class PlotConfig:
    """Geometry and theme defaults applied by ``new_plot``."""

    point_size: float = 9.0
    point_opacity: float = 0.8
    line_width: float = 2.4
    line_opacity: float = 0.8
    box_opacity: float = 0.8
    violin_opacity: float = 0.8
    single_violin_opacity: float = 0.9
    outline_color: str = "black"
    min_palette_size: int = 6
    base_font_size: int = 14
    templates: Dict[str, str] = field(default_factory=_default_templates)


@dataclass(frozen=True)
class GadgetConfig:
    """Settings for the Streamlit process started by ``launch``."""

    port: Optional[int] = None
    headless: bool = False
    poll_interval: float = 0.5
    page_title: str = "new_plot() Gadget"
    shutdown_timeout: float = 5.0


DEFAULT_CONFIG = PlotConfig()
