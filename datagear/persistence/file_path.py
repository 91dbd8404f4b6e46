"""
File Path Value Resolver

Detects column values of the form ``file:<path>`` and gives access to the
file they point at, so a parameter mapper can bind file content instead of
the literal string.
"""

from typing import Any, BinaryIO, Optional, TextIO
from pathlib import Path
import logging

from datagear.persistence.exceptions import PstParamMapperException

logger = logging.getLogger(__name__)


class FilePathValueResolver:
    """Resolves ``file:``-prefixed values to files and streams."""

    FILE_PATH_VALUE_PREFIX = "file:"

    def __init__(self, file_value_charset: Optional[str] = None):
        """
        Args:
            file_value_charset: Charset used when reading file values as text,
                None for the platform default
        """
        self.file_value_charset = file_value_charset

    def has_file_value_charset(self) -> bool:
        return bool(self.file_value_charset)

    def is_file_path_value(self, value: Any) -> bool:
        """Check if the given value is a file path value."""
        return isinstance(value, str) and value.startswith(self.FILE_PATH_VALUE_PREFIX)

    def get_file_path_content(self, file_path_value: str) -> str:
        """Strip the ``file:`` prefix and return the path part."""
        return file_path_value[len(self.FILE_PATH_VALUE_PREFIX):]

    def get_file_value(self, file_path_value: Any) -> Optional[Path]:
        """
        Get the file a file path value points at.

        Returns:
            The file path, or None if the value is not a file path value
            or the file does not exist
        """
        if not self.is_file_path_value(file_path_value):
            return None

        path = Path(self.get_file_path_content(file_path_value))

        if not path.exists():
            logger.debug(f"File value does not exist: {path}")
            return None

        return path

    def get_input_stream(self, value: Path) -> BinaryIO:
        """Open a file value for binary reading."""
        try:
            return open(value, "rb")
        except FileNotFoundError as e:
            raise PstParamMapperException(f"File not found: {value}") from e

    def get_reader(self, value: Path) -> TextIO:
        """Open a file value for text reading with the configured charset."""
        try:
            return open(value, "r", encoding=self.file_value_charset)
        except (OSError, LookupError) as e:
            raise PstParamMapperException(f"Cannot read file value {value}: {e}") from e
