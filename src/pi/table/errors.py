"""Exceptions raised by the table store and JSON interchange."""

from __future__ import annotations


class TableError(Exception):
    """Base class for table errors."""


class RowNotFoundError(TableError, LookupError):
    """No row with the requested position or name."""


class ColumnNotFoundError(TableError, LookupError):
    """None of the requested column names exist in the header."""


class TableJSONError(TableError, ValueError):
    """JSON input could not be decoded into a table."""
