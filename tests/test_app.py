import json
import sys

import pandas as pd
import pytest
from streamlit.testing.v1 import AppTest

from newplot.gadget import APP_PATH


@pytest.fixture
def app_files(tmp_path, monkeypatch):
    data_path = tmp_path / "data.pkl"
    result_path = tmp_path / "result.json"
    pd.DataFrame({"cyl": [4, 6, 8, 4], "mpg": [30.0, 21.0, 15.0, 28.0]}).to_pickle(data_path)
    monkeypatch.setattr(sys, "argv", [APP_PATH, "--data", str(data_path), "--result", str(result_path)])
    return data_path, result_path


def test_app_without_data_asks_for_upload(monkeypatch):
    monkeypatch.setattr(sys, "argv", [APP_PATH])
    at = AppTest.from_file(APP_PATH, default_timeout=30).run()

    assert not at.exception
    assert "Upload a dataset" in at.info[0].value


def test_app_previews_and_shows_code(app_files):
    at = AppTest.from_file(APP_PATH, default_timeout=30).run()
    assert not at.exception
    assert 'x="cyl"' in at.code[0].value

    at.selectbox(key="np_type").set_value("boxplot").run()
    assert 'type="boxplot"' in at.code[0].value


def test_app_done_writes_result(app_files):
    _, result_path = app_files
    at = AppTest.from_file(APP_PATH, default_timeout=30).run()
    at.selectbox(key="np_group").set_value("cyl").run()

    at.button(key="np_done").click().run()

    payload = json.loads(result_path.read_text())
    assert payload["status"] == "done"
    assert payload["request"]["group"] == "cyl"
