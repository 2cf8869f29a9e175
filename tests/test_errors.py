from newplot.errors import (
    ColumnNotFoundError,
    DuplicateColumnError,
    GadgetError,
    InvalidPlotTypeError,
    InvalidThemeError,
    NewPlotError,
    NotADatasetError,
)


def test_all_errors_inherit_from_root():
    for cls in [
        NotADatasetError,
        ColumnNotFoundError,
        DuplicateColumnError,
        InvalidPlotTypeError,
        InvalidThemeError,
        GadgetError,
    ]:
        assert issubclass(cls, NewPlotError)


def test_column_not_found_message():
    err = ColumnNotFoundError("hp", "y")
    assert str(err) == "Column 'hp' not found in data."
    assert err.column == "hp"


def test_grouping_column_message():
    assert str(ColumnNotFoundError("g", "group")) == "Grouping column 'g' not found in data."
