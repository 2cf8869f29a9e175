"""Turn a ``ChartSpec`` into a Plotly figure."""

from __future__ import annotations

import html
import logging
import os
from dataclasses import replace
from typing import Any, Dict, Iterator, Optional, Tuple

import pandas as pd
import plotly.graph_objects as go

from newplot.chart import ChartSpec, Scale

logger = logging.getLogger(__name__)


def _series(chart: ChartSpec) -> Iterator[Tuple[Optional[str], pd.DataFrame, Optional[str]]]:
    """Yield ``(name, rows, colour)`` for each trace to draw."""
    df = chart.data
    scale = chart.keyed_scale
    if scale is None:
        yield None, df, _single_color(chart)
        return
    mapping = scale.mapping
    for level in scale.levels:
        yield str(level), df[df[scale.column] == level], mapping.get(level)


def _single_color(chart: ChartSpec) -> Optional[str]:
    if chart.geometry.fill is not None:
        return chart.geometry.fill
    fill = chart.scale_for("fill")
    if fill is not None and fill.palette:
        return fill.palette[0]
    return None


def _trace(chart: ChartSpec, name: Optional[str], part: pd.DataFrame, color: Optional[str]):
    geom = chart.geometry
    aes = chart.aesthetics
    common: Dict[str, Any] = dict(
        x=part[aes.x].to_numpy(),
        y=part[aes.y].to_numpy(),
        name=name or aes.y,
        showlegend=name is not None,
    )
    if name is not None:
        common["legendgroup"] = name

    if geom.kind == "point":
        return go.Scatter(
            mode="markers",
            marker=dict(size=geom.size, color=color, opacity=geom.opacity),
            hovertemplate="%{x}<br>%{y}<extra>%{fullData.name}</extra>",
            **common,
        )
    if geom.kind == "line":
        return go.Scatter(
            mode="lines",
            line=dict(width=geom.line_width, color=color),
            opacity=geom.opacity,
            **common,
        )
    if geom.kind == "boxplot":
        return go.Box(
            fillcolor=color,
            marker=dict(color=color),
            line=dict(color=geom.outline),
            opacity=geom.opacity,
            **common,
        )
    return go.Violin(
        fillcolor=color,
        marker=dict(color=color),
        line=dict(color=geom.outline),
        opacity=geom.opacity,
        scalemode=geom.scale_mode,
        spanmode="hard" if geom.trim else "soft",
        points=False,
        **common,
    )


def _title_text(chart: ChartSpec) -> str:
    text = html.escape(chart.labels.title, quote=False)
    if chart.labels.subtitle:
        text += f"<br><sup>{html.escape(chart.labels.subtitle, quote=False)}</sup>"
    return text


def _group_mode(chart: ChartSpec, scale: Optional[Scale]) -> str:
    if scale is None or scale.column == chart.aesthetics.x:
        return "overlay"
    return "group"


def to_figure(chart: ChartSpec) -> go.Figure:
    """Draw ``chart`` with one trace per level of its keyed colour scale."""
    if chart.geometry.kind == "line":
        chart_data = chart.data.sort_values(chart.aesthetics.x, kind="stable")
    else:
        chart_data = chart.data

    fig = go.Figure()
    view = replace(chart, data=chart_data)
    for name, part, color in _series(view):
        fig.add_trace(_trace(view, name, part, color))

    labels = chart.labels
    scale = chart.keyed_scale
    fig.update_layout(
        template=chart.theme.template,
        font=dict(size=chart.theme.base_size),
        title=dict(text=_title_text(chart)),
        xaxis_title=labels.x,
        yaxis_title=labels.y,
        showlegend=scale is not None,
        legend_title_text=labels.color or labels.fill or (scale.column if scale else None),
    )
    if chart.geometry.kind == "boxplot":
        fig.update_layout(boxmode=_group_mode(chart, scale))
    elif chart.geometry.kind == "violin":
        fig.update_layout(violinmode=_group_mode(chart, scale))

    if labels.caption:
        fig.add_annotation(
            text=html.escape(labels.caption, quote=False),
            xref="paper",
            yref="paper",
            x=1.0,
            y=-0.12,
            xanchor="right",
            yanchor="top",
            showarrow=False,
            font=dict(size=chart.theme.base_size - 3),
        )
        fig.update_layout(margin=dict(b=90))
    return fig


def save_figure(chart: ChartSpec, path: str) -> str:
    """Write ``chart`` to ``path`` as HTML or Plotly JSON, chosen by suffix."""
    suffix = os.path.splitext(path)[1].lower()
    fig = to_figure(chart)
    if suffix in (".html", ".htm"):
        fig.write_html(path, include_plotlyjs="cdn")
    elif suffix == ".json":
        fig.write_json(path)
    else:
        raise ValueError(f"Unsupported output type {suffix!r}. Use .html or .json.")
    logger.info("Wrote %s chart to %s", chart.geometry.kind, path)
    return path
