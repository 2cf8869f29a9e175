import json
import sys

import pandas as pd
import pytest

from newplot import gadget
from newplot.config import GadgetConfig
from newplot.errors import GadgetError


class FakePopen:
    """Stands in for the Streamlit server: answers immediately through the result file."""

    payload = None
    exit_code = 0
    last_cmd = None

    def __init__(self, cmd):
        type(self).last_cmd = cmd
        self.terminated = False
        data_path = cmd[cmd.index("--data") + 1]
        result_path = cmd[cmd.index("--result") + 1]
        assert pd.read_pickle(data_path).shape[0] > 0
        if self.payload is not None:
            with open(result_path, "w", encoding="utf-8") as fh:
                json.dump(self.payload, fh)

    def poll(self):
        return None if self.payload is not None else self.exit_code

    def terminate(self):
        self.terminated = True

    def wait(self, timeout=None):
        return 0

    def kill(self):
        pass


@pytest.fixture
def df():
    return pd.DataFrame({"cyl": [4, 6, 8, 4], "mpg": [30.0, 21.0, 15.0, 28.0]})


@pytest.fixture
def fake_popen(monkeypatch):
    class Popen(FakePopen):
        pass

    monkeypatch.setattr(gadget.subprocess, "Popen", Popen)
    return Popen


def test_build_command_runs_app_with_paths():
    cmd = gadget.build_command("d.pkl", "r.json", GadgetConfig(port=8600, headless=True))

    assert cmd[:4] == [sys.executable, "-m", "streamlit", "run"]
    assert cmd[4] == gadget.APP_PATH
    assert cmd[cmd.index("--server.port") + 1] == "8600"
    assert cmd[cmd.index("--server.headless") + 1] == "true"
    assert cmd[cmd.index("--data") + 1] == "d.pkl"
    assert cmd[cmd.index("--result") + 1] == "r.json"


def test_launch_rebuilds_confirmed_chart(df, fake_popen):
    fake_popen.payload = {
        "status": "done",
        "request": {"x": "cyl", "y": "mpg", "group": "cyl", "type": "boxplot", "palette": "purple"},
    }

    result = gadget.launch(df, config=GadgetConfig(poll_interval=0))

    assert result.chart.geometry.kind == "boxplot"
    assert result.chart.scale_for("fill").column == "cyl"
    assert 'palette="purple"' in result.source_text
    assert result.source_text.startswith("new_plot(")


def test_launch_returns_none_on_cancel(df, fake_popen):
    fake_popen.payload = {"status": "cancelled"}
    assert gadget.launch(df, config=GadgetConfig(poll_interval=0)) is None


def test_launch_returns_none_when_server_closes_cleanly(df, fake_popen):
    fake_popen.payload = None
    fake_popen.exit_code = 0
    assert gadget.launch(df, config=GadgetConfig(poll_interval=0)) is None


def test_launch_raises_when_server_crashes(df, fake_popen):
    fake_popen.payload = None
    fake_popen.exit_code = 2
    with pytest.raises(GadgetError):
        gadget.launch(df, config=GadgetConfig(poll_interval=0))


def test_launch_accepts_records(fake_popen):
    fake_popen.payload = {"status": "done", "request": {"x": "a", "y": "b"}}
    result = gadget.launch([{"a": 1, "b": 2}, {"a": 2, "b": 3}], config=GadgetConfig(poll_interval=0))
    assert result.chart.labels.title == "Plot of b by a"


def test_launch_keeps_integer_column_labels(fake_popen):
    fake_popen.payload = {"status": "done", "request": {"x": 0, "y": 1}}
    frame = pd.DataFrame({0: [1, 2, 3], 1: [4.0, 5.0, 6.0]})

    result = gadget.launch(frame, config=GadgetConfig(poll_interval=0))

    assert "x=0," in result.source_text
    assert "y=1," in result.source_text
    assert 'x="0"' not in result.source_text
