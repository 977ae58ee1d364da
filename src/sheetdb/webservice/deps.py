"""Dependency providers for the SheetDB webservice."""

from sheetdb.configs import DATA_DIR
from sheetdb.data.permissions import ANONYMOUS, Principal
from sheetdb.data.row_source import RowSource, SheetFileRowSource


def get_row_source() -> RowSource:
    """Return the configured row source."""
    return SheetFileRowSource(DATA_DIR)


def get_principal() -> Principal:
    """Return the caller of the request.

    Sessions are resolved outside this service; deployments override this
    dependency. Without an override every caller is anonymous.
    """
    return ANONYMOUS
