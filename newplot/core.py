"""Plot builder: validate a request against a DataFrame and describe the chart."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

import pandas as pd
from pandas.core.groupby import DataFrameGroupBy

from newplot.chart import (
    PLOT_TYPES,
    THEME_STYLES,
    Aesthetics,
    ChartSpec,
    Geometry,
    Labels,
    PlotRequest,
    Scale,
    Theme,
)
from newplot.config import DEFAULT_CONFIG, PlotConfig
from newplot.errors import (
    ColumnNotFoundError,
    DuplicateColumnError,
    InvalidPlotTypeError,
    InvalidThemeError,
    NotADatasetError,
)
from newplot.palettes import resolve_palette

logger = logging.getLogger(__name__)


def as_frame(data: Any) -> pd.DataFrame:
    """Return a working copy of ``data``, dropping any groupby wrapper."""
    if isinstance(data, DataFrameGroupBy):
        logger.debug("Ungrouping %s before plotting", type(data).__name__)
        data = data.obj
    if not isinstance(data, pd.DataFrame):
        raise NotADatasetError(f"data must be a pandas DataFrame, got {type(data).__name__}")
    return data.copy()


def is_numeric_column(series: pd.Series) -> bool:
    return pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series)


def is_categorical_column(series: pd.Series) -> bool:
    if pd.api.types.is_bool_dtype(series):
        return True
    return (
        isinstance(series.dtype, pd.CategoricalDtype)
        or pd.api.types.is_object_dtype(series)
        or pd.api.types.is_string_dtype(series)
    )


def column_levels(series: pd.Series) -> Tuple[Any, ...]:
    """Observed levels of ``series`` in category order."""
    if not isinstance(series.dtype, pd.CategoricalDtype):
        series = series.astype("category")
    return tuple(series.cat.remove_unused_categories().cat.categories.tolist())


def check_columns(df: pd.DataFrame, request: PlotRequest) -> None:
    """Each referenced column must exist exactly once; checked x, y, group."""
    roles = [("x", request.x), ("y", request.y)]
    if request.group is not None:
        roles.append(("group", request.group))
    for role, name in roles:
        if name not in df.columns:
            raise ColumnNotFoundError(name, role)
        if not isinstance(df.columns.get_loc(name), int):
            raise DuplicateColumnError(name)


def resolve_theme(theme_style: str, config: PlotConfig = DEFAULT_CONFIG) -> Theme:
    if theme_style not in THEME_STYLES:
        raise InvalidThemeError(
            f"theme_style must be one of {', '.join(THEME_STYLES)}; got {theme_style!r}"
        )
    return Theme(
        style=theme_style,
        template=config.templates[theme_style],
        base_size=config.base_font_size,
    )


def _geometry_and_scales(
    request: PlotRequest,
    df: pd.DataFrame,
    palette: List[str],
    group_levels: Optional[Tuple[Any, ...]],
    config: PlotConfig,
) -> Tuple[Geometry, Aesthetics, Tuple[Scale, ...]]:
    x, y, group = request.x, request.y, request.group
    colors = tuple(palette)

    if request.type == "point":
        geometry = Geometry(kind="point", opacity=config.point_opacity, size=config.point_size)
        aes = Aesthetics(x=x, y=y, color=group, fill=group)
        scales = (Scale("color", group, group_levels, colors),) if group is not None else ()

    elif request.type == "line":
        geometry = Geometry(kind="line", opacity=config.line_opacity, line_width=config.line_width)
        aes = Aesthetics(x=x, y=y, color=group, fill=group)
        scales = (Scale("color", group, group_levels, colors),) if group is not None else ()

    elif request.type == "boxplot":
        geometry = Geometry(kind="boxplot", opacity=config.box_opacity, outline=config.outline_color)
        aes = Aesthetics(x=x, y=y, color=group, fill=group)
        if group is not None:
            scales = (Scale("fill", group, group_levels, colors),)
        else:
            scales = (Scale("fill", None, (), colors[:1]),)

    elif request.type == "violin":
        violin = dict(outline=config.outline_color, scale_mode="width", trim=False)
        if group is not None:
            geometry = Geometry(kind="violin", opacity=config.violin_opacity, **violin)
            aes = Aesthetics(x=x, y=y, color=group, fill=group)
            scales = (Scale("fill", group, group_levels, colors),)
        elif is_categorical_column(df[x]):
            # fill keyed on x so ungrouped categorical violins still get distinct colours
            geometry = Geometry(kind="violin", opacity=config.violin_opacity, **violin)
            aes = Aesthetics(x=x, y=y, fill=x)
            scales = (Scale("fill", x, column_levels(df[x]), colors),)
        else:
            geometry = Geometry(
                kind="violin", opacity=config.single_violin_opacity, fill=colors[0], **violin
            )
            aes = Aesthetics(x=x, y=y)
            scales = ()

    else:
        raise InvalidPlotTypeError(
            f"type must be one of {', '.join(PLOT_TYPES)}; got {request.type!r}"
        )

    return geometry, aes, scales


def new_plot(
    data,
    x: str,
    y: str,
    group: Optional[str] = None,
    type: str = "point",
    palette: Optional[str] = None,
    theme_style: str = "minimal",
    title: Optional[str] = None,
    subtitle: Optional[str] = None,
    caption: Optional[str] = None,
    *,
    config: PlotConfig = DEFAULT_CONFIG,
) -> ChartSpec:
    """Build a chart specification with grouping, palette and theme filled in.

    Column arguments are plain column names. A numeric ``group`` column is
    converted to a categorical one (sorted levels) in a working copy of the
    data. ``palette`` names one of the built-in swatches; any other value,
    including None, falls back to a viridis sequence sized to the number of
    groups without raising.

    Raises:
        NotADatasetError: ``data`` is not a DataFrame.
        ColumnNotFoundError: ``x``, ``y`` or ``group`` is not a column,
            checked in that order.
        InvalidThemeError: ``theme_style`` is not "minimal" or "classic".
        InvalidPlotTypeError: ``type`` is not point, line, boxplot or violin.
        DuplicateColumnError: a referenced column name is not unique.
    """
    df = as_frame(data)
    request = PlotRequest(
        x=x,
        y=y,
        group=group,
        type=type,
        palette=palette,
        theme_style=theme_style,
        title=title,
        subtitle=subtitle,
        caption=caption,
    )
    check_columns(df, request)

    group_levels = None
    if request.group is not None:
        if is_numeric_column(df[request.group]):
            logger.debug("Converting numeric group column %r to categorical", request.group)
            df[request.group] = df[request.group].astype("category")
        group_levels = column_levels(df[request.group])
        n_groups = len(group_levels)
    elif is_categorical_column(df[request.x]):
        n_groups = len(column_levels(df[request.x]))
    else:
        n_groups = 1
    n_groups = max(n_groups, 1)

    colors = resolve_palette(request.palette, n_groups, min_size=config.min_palette_size)
    theme = resolve_theme(request.theme_style, config)
    geometry, aes, scales = _geometry_and_scales(request, df, colors, group_levels, config)

    labels = Labels(
        title=request.resolved_title,
        subtitle=request.subtitle,
        caption=request.caption,
        x=request.x,
        y=request.y,
        color=request.group,
        fill=request.group,
    )
    logger.debug(
        "Built %s chart of %r by %r with %d group(s)", request.type, request.y, request.x, n_groups
    )
    return ChartSpec(
        request=request,
        geometry=geometry,
        aesthetics=aes,
        scales=scales,
        theme=theme,
        labels=labels,
        palette=tuple(colors),
        group_count=n_groups,
        data=df,
    )
