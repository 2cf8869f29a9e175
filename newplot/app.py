# -*- coding: utf-8 -*-
# new_plot() builder (Streamlit + Plotly)
# Run with: streamlit run newplot/app.py [-- --data frame.pkl --result out.json]
from __future__ import annotations

import argparse
import json
import os
import sys
import tempfile
from typing import Any, Dict, Optional, Tuple

import pandas as pd
import streamlit as st

from newplot.config import GadgetConfig
from newplot.loaders import read_table
from newplot.session import default_form, session_for, upload_token
from newplot.state import apply_form_state, request_to_dict
from newplot.ui import render_builder_controls



def _parse_args(argv) -> argparse.Namespace:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--data", default=None, help="Pickled DataFrame to plot.")
    parser.add_argument("--result", default=None, help="File receiving the confirmed request.")
    parser.add_argument("--title", default=GadgetConfig.page_title)
    args, _ = parser.parse_known_args(argv)
    return args


def _write_result(path: str, payload: Dict[str, Any]) -> None:
    """Write ``payload`` so that readers never see a partial file."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp = tempfile.mkstemp(dir=directory, suffix=".tmp")
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        json.dump(payload, fh)
    os.replace(tmp, path)


@st.cache_data(show_spinner=False)
def _read_upload(name: str, data: bytes, sheet: Optional[str]) -> pd.DataFrame:
    return read_table(name, data, sheet)


@st.cache_data(show_spinner=False)
def _read_pickle(path: str) -> pd.DataFrame:
    return pd.read_pickle(path)


def _load_data(args: argparse.Namespace) -> Tuple[Optional[pd.DataFrame], Optional[str]]:
    """Return the frame and a token identifying where it came from."""
    if args.data:
        return _read_pickle(args.data), f"pickle:{args.data}"

    st.sidebar.header("Data")
    upl = st.sidebar.file_uploader(
        "Upload CSV/TSV, Excel, Parquet or JSON",
        type=["csv", "tsv", "txt", "xlsx", "xls", "parquet", "json"],
    )
    if upl is None:
        st.info("Upload a dataset in the sidebar to start building a plot.")
        return None, None
    sheet = None
    if upl.name.lower().endswith((".xls", ".xlsx")):
        sheet = st.sidebar.text_input("Excel sheet (optional)") or None
    payload = upl.getvalue()
    try:
        df = _read_upload(upl.name, payload, sheet)
    except (ValueError, RuntimeError, ImportError) as e:
        st.error(str(e))
        return None, None
    return df, upload_token(upl.name, payload, sheet)


def _reset_form(columns) -> None:
    apply_form_state(default_form(columns), st.session_state)


args = _parse_args(sys.argv[1:])

# ----------------------------------
# Page config
# ----------------------------------
st.set_page_config(page_title=args.title, layout="wide")
st.markdown(
    f"""
<h2 style="margin:0">{args.title}</h2>
<p style="color:#6b7280;margin:.25rem 0 0">
  Pick columns and styling; the preview and the equivalent <code>new_plot()</code> call update as you go.
</p>
""",
    unsafe_allow_html=True,
)

if st.session_state.get("np_finished"):
    st.success(st.session_state["np_finished"])
    st.stop()

df, data_token = _load_data(args)
if df is None:
    st.stop()

session = session_for(st.session_state, df, data_token)

# ----------------------------------
# Controls
# ----------------------------------
with st.sidebar:
    st.header("Plot")
    form = render_builder_controls(session.columns, current=session.form)
    st.button("Reset", on_click=_reset_form, args=(session.columns,), key="np_reset")

chart = session.update(**form)
for message in session.drain_notifications():
    st.toast(f"⚠️ {message}")

# ----------------------------------
# Preview
# ----------------------------------
if chart is None:
    st.info("No valid plot yet. Adjust the inputs in the sidebar.")
else:
    if session.error:
        st.caption(f"Showing the last valid plot. {session.error}")
    fig = chart.to_figure()
    st.plotly_chart(fig, use_container_width=True)

    code = session.source_text
    st.code(code, language="python")

    c1, c2 = st.columns(2)
    with c1:
        st.download_button(
            label="Download code (.py)",
            data=code.encode("utf-8"),
            file_name="new_plot_call.py",
            mime="text/x-python",
        )
    with c2:
        st.download_button(
            label="Download figure (HTML)",
            data=fig.to_html(include_plotlyjs="cdn").encode("utf-8"),
            file_name="new_plot.html",
            mime="text/html",
        )

# ----------------------------------
# Done / Cancel
# ----------------------------------
if args.result:
    done_col, cancel_col = st.columns(2)
    with done_col:
        done = st.button("Done", type="primary", disabled=chart is None, key="np_done")
    with cancel_col:
        cancel = st.button("Cancel", key="np_cancel")

    if done:
        result = session.confirm()
        _write_result(
            args.result,
            {"status": "done", "request": request_to_dict(result.chart.request), "code": result.source_text},
        )
        st.session_state["np_finished"] = "Plot returned to Python. You can close this tab."
        st.rerun()
    elif cancel:
        _write_result(args.result, {"status": "cancelled"})
        st.session_state["np_finished"] = "Cancelled. You can close this tab."
        st.rerun()
