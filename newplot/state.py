"""Serialise builder form state and plot requests to JSON-safe dicts."""

from __future__ import annotations

from typing import Any, Dict, Mapping, MutableMapping

from newplot.chart import PlotRequest

WIDGET_PREFIX = "np_"

FORM_FIELDS = (
    "x",
    "y",
    "group",
    "type",
    "palette",
    "theme_style",
    "title",
    "subtitle",
    "caption",
)


def widget_key(field: str, prefix: str = WIDGET_PREFIX) -> str:
    return f"{prefix}{field}"


def apply_form_state(
    form: Mapping[str, Any],
    session_state: MutableMapping[str, Any],
    prefix: str = WIDGET_PREFIX,
) -> None:
    """Populate ``session_state`` with form values under their widget keys."""

    for field, value in form.items():
        if field in FORM_FIELDS:
            session_state[widget_key(field, prefix)] = value


def request_to_dict(request: PlotRequest) -> Dict[str, Any]:
    """JSON-ready arguments; column labels are plain str or int values."""
    return request.as_kwargs()


def request_from_dict(data: Mapping[str, Any]) -> PlotRequest:
    """Rebuild a request, ignoring unknown keys."""
    if "x" not in data or "y" not in data:
        raise ValueError("Plot request needs both 'x' and 'y'")
    kwargs = {k: data[k] for k in FORM_FIELDS if k in data}
    return PlotRequest(**kwargs)
