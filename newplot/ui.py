from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import streamlit as st

from newplot.chart import PLOT_TYPES, THEME_STYLES
from newplot.session import NO_GROUP, default_form, palette_choices
from newplot.state import WIDGET_PREFIX, widget_key

HELP_TEXT = "All variables will be passed as quoted column names."


def _select(label: str, options: List[Any], value: Any, key: str, **kwargs) -> Any:
    # keyed widgets already in session state keep their own value
    if key not in st.session_state:
        kwargs["index"] = options.index(value) if value in options else 0
    return st.selectbox(label, options=options, key=key, **kwargs)


def _text(label: str, value: str, key: str) -> str:
    if key in st.session_state:
        return st.text_input(label, key=key)
    return st.text_input(label, value=value or "", key=key)


def render_builder_controls(
    columns: List[Any],
    current: Optional[Mapping[str, Any]] = None,
    prefix: str = WIDGET_PREFIX,
) -> Dict[str, Any]:
    """Render Streamlit inputs for every ``new_plot`` argument and return their values."""
    form = dict(default_form(columns))
    if current:
        form.update(current)

    st.caption(HELP_TEXT)

    values: Dict[str, Any] = {}
    values["x"] = _select("X variable", columns, form["x"], widget_key("x", prefix))
    values["y"] = _select("Y variable", columns, form["y"], widget_key("y", prefix))
    values["group"] = _select(
        "Group (optional)",
        [NO_GROUP] + columns,
        form["group"],
        widget_key("group", prefix),
        help="Column whose values drive colour and fill. Numeric columns are treated as categories.",
    )
    values["type"] = _select("Plot type", list(PLOT_TYPES), form["type"], widget_key("type", prefix))
    values["palette"] = _select(
        "Palette",
        palette_choices(),
        form["palette"],
        widget_key("palette", prefix),
        help="'default' uses a viridis palette sized to the number of groups.",
    )
    values["theme_style"] = _select(
        "Theme", list(THEME_STYLES), form["theme_style"], widget_key("theme_style", prefix)
    )
    values["title"] = _text("Title", form["title"], widget_key("title", prefix))
    values["subtitle"] = _text("Subtitle", form["subtitle"], widget_key("subtitle", prefix))
    values["caption"] = _text("Caption", form["caption"], widget_key("caption", prefix))
    return values
