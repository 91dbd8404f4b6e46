"""Exceptions raised by data exchanges."""


class DataExchangeException(Exception):
    """Base exception for data import/export errors."""
    pass


class DataExchangeTimeoutException(DataExchangeException):
    """Raised when waiting for a data exchange result times out."""
    pass


class DataExchangeCancelledException(DataExchangeException):
    """Raised when a data exchange was cancelled before it finished."""
    pass


class UnsupportedExchangeException(DataExchangeException):
    """Raised when no service supports a data exchange."""
    pass


class TableNotFoundException(DataExchangeException):
    """Raised when the table of a data exchange does not exist."""
    pass


class ColumnNotFoundException(DataExchangeException):
    """Raised when imported data names a column the table does not have."""
    pass
