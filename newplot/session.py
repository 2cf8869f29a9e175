"""State behind the interactive builder.

A ``BuilderSession`` holds the current form values, rebuilds the chart on
every change and keeps the last valid chart when a rebuild fails. Streamlit
reruns drive it one event at a time.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, MutableMapping, Optional

import pandas as pd
from pandas.core.groupby import DataFrameGroupBy

from newplot.chart import PLOT_TYPES, THEME_STYLES, ChartSpec, PlotRequest
from newplot.config import DEFAULT_CONFIG, PlotConfig
from newplot.core import new_plot
from newplot.errors import GadgetError, NewPlotError, NotADatasetError
from newplot.palettes import PALETTE_NAMES

logger = logging.getLogger(__name__)

NO_GROUP = "None"
DEFAULT_PALETTE = "default"

SESSION_KEY = "np_session"


@dataclass(frozen=True)
class BuilderResult:
    chart: ChartSpec
    source_text: str


def coerce_dataset(data: Any) -> pd.DataFrame:
    """Turn frame-like input (records, dict of columns) into a DataFrame."""
    if isinstance(data, DataFrameGroupBy):
        data = data.obj
    if isinstance(data, pd.DataFrame):
        return data
    if data is None:
        raise NotADatasetError("No dataset given")
    try:
        return pd.DataFrame(data)
    except (TypeError, ValueError) as e:
        raise NotADatasetError(f"Cannot use {type(data).__name__} as a dataset: {e}") from e


def palette_choices() -> List[str]:
    return [DEFAULT_PALETTE] + list(PALETTE_NAMES)


def default_form(columns: List[Any]) -> Dict[str, Any]:
    x = columns[0] if columns else ""
    y = columns[1] if len(columns) > 1 else x
    return {
        "x": x,
        "y": y,
        "group": NO_GROUP,
        "type": PLOT_TYPES[0],
        "palette": DEFAULT_PALETTE,
        "theme_style": THEME_STYLES[0],
        "title": "",
        "subtitle": "",
        "caption": "",
    }


def request_from_form(form: Mapping[str, Any]) -> PlotRequest:
    """Map form values to a request; the "None"/"default" sentinels mean absent."""
    group = form.get("group")
    palette = form.get("palette")
    return PlotRequest(
        x=form["x"],
        y=form["y"],
        group=None if group == NO_GROUP else group,
        type=form.get("type", PLOT_TYPES[0]),
        palette=None if palette == DEFAULT_PALETTE else palette,
        theme_style=form.get("theme_style", THEME_STYLES[0]),
        title=form.get("title"),
        subtitle=form.get("subtitle"),
        caption=form.get("caption"),
    )


class BuilderSession:
    def __init__(self, data: Any, config: PlotConfig = DEFAULT_CONFIG):
        self.data = coerce_dataset(data)
        self.config = config
        self.columns: List[Any] = list(self.data.columns)
        self.form: Dict[str, Any] = default_form(self.columns)
        self.chart: Optional[ChartSpec] = None
        self.request: Optional[PlotRequest] = None
        self.error: Optional[str] = None
        self._notifications: List[str] = []
        self.refresh()

    def update(self, **changes: Any) -> Optional[ChartSpec]:
        """Apply form changes and rebuild; returns the chart to preview."""
        self.form.update(changes)
        return self.refresh()

    def refresh(self) -> Optional[ChartSpec]:
        request = request_from_form(self.form)
        try:
            chart = new_plot(self.data, config=self.config, **request.as_kwargs())
        except NewPlotError as e:
            message = str(e)
            logger.warning("Preview not updated: %s", message)
            if message != self.error:
                self._notifications.append(message)
            self.error = message
            return self.chart
        self.chart = chart
        self.request = request
        self.error = None
        return chart

    def drain_notifications(self) -> List[str]:
        pending, self._notifications = self._notifications, []
        return pending

    @property
    def source_text(self) -> Optional[str]:
        if self.request is None:
            return None
        return self.request.to_call()

    def confirm(self) -> BuilderResult:
        """Return the last valid chart with its equivalent call."""
        if self.chart is None or self.request is None:
            raise GadgetError("No valid plot to return; fix the highlighted inputs first.")
        return BuilderResult(chart=self.chart, source_text=self.request.to_call())


def upload_token(name: str, payload: bytes, sheet: Optional[str] = None) -> str:
    """Identify an uploaded file by its content, not just its shape."""
    digest = hashlib.sha1(payload).hexdigest()
    return f"upload:{name}:{sheet or ''}:{digest}"


def session_for(
    store: MutableMapping[str, Any],
    data: Any,
    token: str,
    config: PlotConfig = DEFAULT_CONFIG,
) -> BuilderSession:
    """Reuse the session kept in ``store`` while ``token`` is unchanged."""
    session = store.get(SESSION_KEY)
    if session is None or store.get(SESSION_KEY + "_token") != token:
        logger.info("Starting a builder session for %s", token)
        session = BuilderSession(data, config=config)
        store[SESSION_KEY] = session
        store[SESSION_KEY + "_token"] = token
    return session
