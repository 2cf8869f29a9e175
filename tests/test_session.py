import pandas as pd
import pytest

from newplot.errors import GadgetError, NotADatasetError
from newplot.session import (
    DEFAULT_PALETTE,
    NO_GROUP,
    BuilderSession,
    coerce_dataset,
    default_form,
    request_from_form,
    session_for,
    upload_token,
)


@pytest.fixture
def df():
    return pd.DataFrame(
        {
            "cyl": [4, 6, 8, 4, 6, 8],
            "mpg": [30.0, 21.0, 15.0, 28.0, 20.0, 14.0],
            "origin": ["eu", "us", "us", "jp", "eu", "us"],
        }
    )


def test_default_form_uses_first_columns():
    form = default_form(["a", "b", "c"])
    assert form["x"] == "a"
    assert form["y"] == "b"
    assert form["group"] == NO_GROUP
    assert form["palette"] == DEFAULT_PALETTE
    assert form["type"] == "point"
    assert form["theme_style"] == "minimal"


def test_sentinels_map_to_absent_arguments():
    request = request_from_form(
        {
            "x": "cyl",
            "y": "mpg",
            "group": NO_GROUP,
            "type": "line",
            "palette": DEFAULT_PALETTE,
            "theme_style": "classic",
            "title": "",
            "subtitle": "",
            "caption": "",
        }
    )
    assert request.group is None
    assert request.palette is None
    assert request.title is None
    assert request.subtitle is None
    assert request.caption is None


def test_session_builds_initial_preview(df):
    session = BuilderSession(df)
    assert session.chart is not None
    assert session.chart.labels.title == "Plot of mpg by cyl"
    assert session.error is None


def test_update_rebuilds_chart(df):
    session = BuilderSession(df)
    chart = session.update(group="origin", type="boxplot", palette="blue")

    assert chart.geometry.kind == "boxplot"
    assert chart.scale_for("fill").column == "origin"
    assert session.chart is chart


def test_failed_update_keeps_previous_chart_and_notifies(df):
    session = BuilderSession(df)
    before = session.update(type="line")

    after = session.update(theme_style="dark")

    assert after is before
    assert "theme_style" in session.error
    notes = session.drain_notifications()
    assert len(notes) == 1
    assert session.drain_notifications() == []


def test_same_error_is_notified_once(df):
    session = BuilderSession(df)
    session.update(type="scatter3d")
    session.update(title="still broken")
    assert len(session.drain_notifications()) == 1


def test_recovery_clears_error(df):
    session = BuilderSession(df)
    session.update(type="scatter3d")
    chart = session.update(type="violin")
    assert session.error is None
    assert chart.geometry.kind == "violin"


def test_confirm_returns_chart_and_source_text(df):
    session = BuilderSession(df)
    session.update(group="cyl", type="boxplot", palette="purple", title="Cars")

    result = session.confirm()

    assert result.chart is session.chart
    assert result.source_text == (
        "new_plot(\n"
        "    data,\n"
        '    x="cyl",\n'
        '    y="mpg",\n'
        '    group="cyl",\n'
        '    type="boxplot",\n'
        '    palette="purple",\n'
        '    theme_style="minimal",\n'
        '    title="Cars",\n'
        ")"
    )


def test_confirm_without_valid_chart_raises():
    session = BuilderSession(pd.DataFrame())

    assert session.chart is None
    assert session.drain_notifications()
    with pytest.raises(GadgetError):
        session.confirm()


def test_coerce_dataset_accepts_records_and_rejects_scalars():
    df = coerce_dataset([{"a": 1, "b": 2}, {"a": 3, "b": 4}])
    assert list(df.columns) == ["a", "b"]
    with pytest.raises(NotADatasetError):
        coerce_dataset(42)
    with pytest.raises(NotADatasetError):
        coerce_dataset(None)


def test_duplicate_column_is_a_notification_not_a_crash():
    session = BuilderSession(pd.DataFrame([[1, 2, 3]], columns=["a", "a", "b"]))

    assert session.chart is None
    assert "more than once" in session.error
    chart = session.update(x="b", y="b")
    assert chart is not None


def test_session_for_reuses_session_while_token_is_unchanged(df):
    store = {}
    first = session_for(store, df, "pickle:data.pkl")
    assert session_for(store, df.copy(), "pickle:data.pkl") is first


def test_same_shaped_upload_with_new_content_gets_new_session(df):
    other = df.assign(mpg=df["mpg"] * 2)
    first_bytes = df.to_csv(index=False).encode("utf-8")
    other_bytes = other.to_csv(index=False).encode("utf-8")
    store = {}

    first = session_for(store, df, upload_token("cars.csv", first_bytes))
    second = session_for(store, other, upload_token("cars.csv", other_bytes))

    assert second is not first
    assert second.data["mpg"].tolist() == other["mpg"].tolist()
    assert upload_token("cars.csv", first_bytes) == upload_token("cars.csv", first_bytes)
