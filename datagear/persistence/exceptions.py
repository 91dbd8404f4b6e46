"""Exceptions raised by the persistence layer."""


class PersistenceException(Exception):
    """Base exception for persistence errors."""
    pass


class PstParamMapperException(PersistenceException):
    """Raised when a value cannot be mapped to a SQL parameter."""
    pass
