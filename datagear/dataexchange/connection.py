"""
Connection Factory

Supplies database connections to data exchanges, backed by a pooled
SQLAlchemy engine.
"""

from typing import Optional, Union, Generator
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, inspect, MetaData, Table
from sqlalchemy.engine import Engine, Connection
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError

from datagear.config import DatabaseConfig, DatabaseType
from datagear.dataexchange.exceptions import DataExchangeException, TableNotFoundException

logger = logging.getLogger(__name__)


class ConnectionFactory:
    """
    Creates database connections for data exchanges.

    Features:
    - Lazily created engine shared by all exchanges of a batch
    - Connection health checks
    - Context manager support for safe connection handling
    """

    def __init__(self, config: Union[DatabaseConfig, str]):
        """
        Initialize the connection factory.

        Args:
            config: Database configuration object or a SQLAlchemy URL
        """
        self.config = config
        self._engine: Optional[Engine] = None

    @property
    def url(self) -> str:
        if isinstance(self.config, DatabaseConfig):
            return self.config.get_connection_string()
        return self.config

    @property
    def schema(self) -> Optional[str]:
        return self.config.schema if isinstance(self.config, DatabaseConfig) else None

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create SQLAlchemy engine with appropriate settings."""
        engine_kwargs = {
            "pool_pre_ping": True,
        }

        # Pool sizing only applies to server databases
        if not self.url.startswith("sqlite"):
            engine_kwargs.update({
                "pool_size": 5,
                "max_overflow": 10,
                "pool_recycle": 3600,
            })

        try:
            engine = create_engine(self.url, **engine_kwargs)
            logger.info(f"Created database engine for {engine.dialect.name}")
            return engine
        except Exception as e:
            raise DataExchangeException(f"Failed to create engine: {e}") from e

    @contextmanager
    def get_connection(self) -> Generator[Connection, None, None]:
        """
        Get a database connection as a context manager.

        Example:
            with factory.get_connection() as conn:
                conn.execute(query)
        """
        connection = None
        try:
            connection = self.engine.connect()
            yield connection
        except SQLAlchemyError as e:
            logger.error(f"Database error: {e}")
            raise DataExchangeException(f"Connection error: {e}") from e
        finally:
            if connection is not None:
                connection.close()

    def reflect_table(self, table_name: str) -> Table:
        """
        Reflect a table's metadata.

        Raises:
            TableNotFoundException: If the table does not exist
        """
        try:
            return Table(table_name, MetaData(), autoload_with=self.engine, schema=self.schema)
        except NoSuchTableError as e:
            raise TableNotFoundException(f"Table not found: {table_name}") from e

    def get_table_names(self):
        return inspect(self.engine).get_table_names(schema=self.schema)

    def close(self):
        """Dispose of the engine."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database connection factory closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @classmethod
    def for_sqlite(cls, db_path: str) -> "ConnectionFactory":
        return cls(DatabaseConfig(db_type=DatabaseType.SQLITE, db_path=db_path))
