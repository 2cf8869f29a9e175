"""Pipe-friendly Plotly charts with automatic grouping, palettes and theming."""

from newplot.chart import ChartSpec, PlotRequest
from newplot.core import new_plot
from newplot.errors import (
    ColumnNotFoundError,
    DuplicateColumnError,
    GadgetError,
    InvalidPlotTypeError,
    InvalidThemeError,
    NewPlotError,
    NotADatasetError,
)
from newplot.gadget import launch
from newplot.palettes import PALETTES, viridis
from newplot.render import save_figure, to_figure
from newplot.session import BuilderResult, BuilderSession

__all__ = [
    "BuilderResult",
    "BuilderSession",
    "ChartSpec",
    "ColumnNotFoundError",
    "DuplicateColumnError",
    "GadgetError",
    "InvalidPlotTypeError",
    "InvalidThemeError",
    "NewPlotError",
    "NotADatasetError",
    "PALETTES",
    "PlotRequest",
    "launch",
    "new_plot",
    "save_figure",
    "to_figure",
    "viridis",
]
