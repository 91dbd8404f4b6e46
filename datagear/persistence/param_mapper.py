"""
Parameter mapping for SQL statements.

Converts raw column values into values suitable for binding to a
SQLAlchemy column type. File path values are replaced by the content
of the file they point at.
"""

from typing import Any, Optional
import logging

from sqlalchemy import types as sqltypes

from datagear.persistence.file_path import FilePathValueResolver

logger = logging.getLogger(__name__)


class FileValuePstParamMapper:
    """
    Maps parameter values, loading ``file:`` values into binary or text content.

    Values that are not file path values, or whose file does not exist,
    are returned unchanged.
    """

    def __init__(self, resolver: Optional[FilePathValueResolver] = None):
        self.resolver = resolver or FilePathValueResolver()

    def map(self, sql_type: Optional[sqltypes.TypeEngine], value: Any) -> Any:
        """
        Map a value for the given column type.

        Args:
            sql_type: Target SQLAlchemy column type, None if unknown
            value: Raw value

        Returns:
            Value to bind
        """
        path = self.resolver.get_file_value(value)
        if path is None:
            return value

        if self._is_binary(sql_type):
            with self.resolver.get_input_stream(path) as stream:
                content = stream.read()
        else:
            with self.resolver.get_reader(path) as reader:
                content = reader.read()

        logger.debug(f"Mapped file value {path} ({len(content)} units)")
        return content

    @staticmethod
    def _is_binary(sql_type: Optional[sqltypes.TypeEngine]) -> bool:
        return isinstance(sql_type, (sqltypes.LargeBinary, sqltypes.BINARY, sqltypes.VARBINARY))
