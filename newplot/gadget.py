"""Blocking launcher for the interactive builder.

``launch`` serves ``newplot/app.py`` with Streamlit in a child process and
waits until the user presses Done or Cancel there. The app only sends back
the confirmed request; the chart is rebuilt here against the caller's data.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
import tempfile
import time
from typing import Any, Dict, List, Optional

from newplot.config import GadgetConfig
from newplot.core import new_plot
from newplot.errors import GadgetError
from newplot.session import BuilderResult, coerce_dataset
from newplot.state import request_from_dict

logger = logging.getLogger(__name__)

APP_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app.py")


def build_command(data_path: str, result_path: str, config: GadgetConfig) -> List[str]:
    cmd = [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        APP_PATH,
        "--server.headless",
        "true" if config.headless else "false",
        "--browser.gatherUsageStats",
        "false",
    ]
    if config.port is not None:
        cmd += ["--server.port", str(config.port)]
    cmd += ["--", "--data", data_path, "--result", result_path, "--title", config.page_title]
    return cmd


def _wait_for_result(
    proc: subprocess.Popen, result_path: str, poll_interval: float
) -> Optional[Dict[str, Any]]:
    while True:
        if os.path.exists(result_path):
            with open(result_path, encoding="utf-8") as fh:
                return json.load(fh)
        code = proc.poll()
        if code is not None:
            if code != 0:
                raise GadgetError(f"Builder server exited with status {code}")
            return None
        time.sleep(poll_interval)


def _stop(proc: subprocess.Popen, timeout: float) -> None:
    if proc.poll() is not None:
        return
    proc.terminate()
    try:
        proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning("Builder server did not stop within %.1fs; killing it", timeout)
        proc.kill()
        proc.wait()


def launch(data, *, config: GadgetConfig = GadgetConfig()) -> Optional[BuilderResult]:
    """Open the builder for ``data`` and block until the user is done.

    Returns the confirmed chart with its equivalent ``new_plot(...)`` call,
    or None when the user cancels or closes the server without confirming.
    """
    frame = coerce_dataset(data)
    with tempfile.TemporaryDirectory(prefix="newplot-") as tmp:
        data_path = os.path.join(tmp, "data.pkl")
        result_path = os.path.join(tmp, "result.json")
        frame.to_pickle(data_path)

        cmd = build_command(data_path, result_path, config)
        logger.info("Starting builder: %s", " ".join(cmd))
        proc = subprocess.Popen(cmd)
        try:
            payload = _wait_for_result(proc, result_path, config.poll_interval)
        finally:
            _stop(proc, config.shutdown_timeout)

    if payload is None or payload.get("status") != "done":
        logger.info("Builder closed without a plot")
        return None

    request = request_from_dict(payload["request"])
    chart = new_plot(frame, **request.as_kwargs())
    return BuilderResult(chart=chart, source_text=request.to_call())
