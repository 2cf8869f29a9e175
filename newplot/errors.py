"""Exception hierarchy for newplot.

NewPlotError is the root. Builder failures are raised where they are
detected; the interactive shell and the CLI catch NewPlotError at their
boundary.
"""


class NewPlotError(Exception):
    """Root exception for the package."""


class NotADatasetError(NewPlotError):
    """Input is not tabular data."""


class ColumnNotFoundError(NewPlotError):
    """A referenced column is missing from the data."""

    def __init__(self, column: str, role: str = "x"):
        self.column = column
        self.role = role
        if role == "group":
            message = f"Grouping column '{column}' not found in data."
        else:
            message = f"Column '{column}' not found in data."
        super().__init__(message)


class InvalidPlotTypeError(NewPlotError):
    """Plot type is not one of point, line, boxplot, violin."""


class InvalidThemeError(NewPlotError):
    """Theme style is not one of minimal, classic."""


class GadgetError(NewPlotError):
    """Interactive builder failures: nothing to confirm, server crashed."""


class DuplicateColumnError(NewPlotError):
    """A referenced column name appears more than once in the data."""

    def __init__(self, column: str):
        self.column = column
        super().__init__(f"Column '{column}' appears more than once in data.")
