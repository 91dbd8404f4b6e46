"""Persistence helpers for mapping column values."""

from datagear.persistence.exceptions import PersistenceException, PstParamMapperException
from datagear.persistence.file_path import FilePathValueResolver
from datagear.persistence.param_mapper import FileValuePstParamMapper

__all__ = [
    "PersistenceException",
    "PstParamMapperException",
    "FilePathValueResolver",
    "FileValuePstParamMapper",
]
