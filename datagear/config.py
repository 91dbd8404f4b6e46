"""
Configuration management for DataGear.

Handles all configuration options including database connections,
chart rendering defaults and data exchange settings.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from enum import Enum
import os
import yaml


class DatabaseType(Enum):
    """Supported database types."""
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class ExceptionResolve(Enum):
    """How a data import reacts to a row that cannot be written."""
    ABORT = "abort"
    IGNORE = "ignore"


@dataclass
class DatabaseConfig:
    """Database connection configuration."""
    db_type: DatabaseType
    host: Optional[str] = None
    port: Optional[int] = None
    database: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    db_path: Optional[str] = None  # For SQLite
    schema: Optional[str] = None
    connection_timeout: int = 30

    def get_connection_string(self) -> str:
        """Generate SQLAlchemy connection string."""
        if self.db_type == DatabaseType.SQLITE:
            return f"sqlite:///{self.db_path}" if self.db_path else "sqlite://"
        elif self.db_type == DatabaseType.POSTGRESQL:
            auth = f"{self.username}:{self.password}@" if self.username else ""
            return f"postgresql+psycopg2://{auth}{self.host}:{self.port}/{self.database}"
        elif self.db_type == DatabaseType.MYSQL:
            auth = f"{self.username}:{self.password}@" if self.username else ""
            return f"mysql+pymysql://{auth}{self.host}:{self.port}/{self.database}"
        else:
            raise ValueError(f"Unsupported database type: {self.db_type}")


@dataclass
class RenderConfig:
    """Chart rendering configuration."""
    element_tag_name: str = "div"
    new_line: str = "\n"
    plugin_dirs: List[str] = field(default_factory=list)
    page_title: str = "DataGear"


@dataclass
class ExchangeConfig:
    """Data import/export configuration."""
    max_workers: int = 4
    encoding: str = "utf-8"
    file_value_charset: Optional[str] = None  # Charset for "file:" text values
    exception_resolve: ExceptionResolve = ExceptionResolve.ABORT
    ignore_inexistent_columns: bool = False

    def __post_init__(self):
        if not self.file_value_charset:
            self.file_value_charset = os.environ.get("DATAGEAR_FILE_VALUE_CHARSET")


@dataclass
class DataGearConfig:
    """Main configuration container."""
    database: DatabaseConfig = None
    render: RenderConfig = field(default_factory=RenderConfig)
    exchange: ExchangeConfig = field(default_factory=ExchangeConfig)

    verbose: bool = False

    @classmethod
    def from_yaml(cls, path: str) -> "DataGearConfig":
        """Load configuration from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "DataGearConfig":
        """Create config from dictionary."""
        db_config = None
        db_data = data.get("database")
        if db_data:
            db_config = DatabaseConfig(
                db_type=DatabaseType(db_data.get("type", "sqlite")),
                host=db_data.get("host"),
                port=db_data.get("port"),
                database=db_data.get("database"),
                username=db_data.get("username"),
                password=db_data.get("password"),
                db_path=db_data.get("path"),
                schema=db_data.get("schema"),
            )

        render_data = data.get("render", {})
        render_config = RenderConfig(
            element_tag_name=render_data.get("element_tag_name", "div"),
            new_line=render_data.get("new_line", "\n"),
            plugin_dirs=list(render_data.get("plugin_dirs", [])),
            page_title=render_data.get("page_title", "DataGear"),
        )

        exchange_data = data.get("exchange", {})
        exchange_config = ExchangeConfig(
            max_workers=exchange_data.get("max_workers", 4),
            encoding=exchange_data.get("encoding", "utf-8"),
            file_value_charset=exchange_data.get("file_value_charset"),
            exception_resolve=ExceptionResolve(exchange_data.get("exception_resolve", "abort")),
            ignore_inexistent_columns=exchange_data.get("ignore_inexistent_columns", False),
        )

        return cls(
            database=db_config,
            render=render_config,
            exchange=exchange_config,
            verbose=data.get("verbose", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "database": {
                "type": self.database.db_type.value if self.database else None,
                "host": self.database.host if self.database else None,
                "port": self.database.port if self.database else None,
                "path": self.database.db_path if self.database else None,
            },
            "render": {
                "element_tag_name": self.render.element_tag_name,
                "plugin_dirs": list(self.render.plugin_dirs),
            },
            "exchange": {
                "max_workers": self.exchange.max_workers,
                "encoding": self.exchange.encoding,
                "exception_resolve": self.exchange.exception_resolve.value,
            },
        }


def create_default_config(
    db_type: str,
    db_path: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    database: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    max_workers: int = 4,
) -> DataGearConfig:
    """Factory function to create a default configuration."""

    db_config = DatabaseConfig(
        db_type=DatabaseType(db_type),
        db_path=db_path,
        host=host,
        port=port,
        database=database,
        username=username,
        password=password,
    )

    return DataGearConfig(
        database=db_config,
        render=RenderConfig(),
        exchange=ExchangeConfig(max_workers=max_workers),
    )
