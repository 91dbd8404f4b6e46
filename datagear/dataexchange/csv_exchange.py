"""
CSV Data Exchange

Exports tables or queries to CSV files and imports CSV files into tables.
Imported values are converted to the column type and passed through a
parameter mapper, so ``file:`` values load file content into columns.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional
import csv
import logging

from sqlalchemy import insert, select, text
from sqlalchemy import types as sqltypes

from datagear.config import ExceptionResolve
from datagear.dataexchange.base import (
    BatchDataExchangeListener,
    DataExchange,
    DataExchangeListener,
    SimpleBatchDataExchange,
)
from datagear.dataexchange.connection import ConnectionFactory
from datagear.dataexchange.exceptions import ColumnNotFoundException, DataExchangeException
from datagear.dataexchange.service import AbstractDevotedDataExchangeService
from datagear.persistence.param_mapper import FileValuePstParamMapper

logger = logging.getLogger(__name__)


@dataclass
class ExchangeResult:
    """Outcome of one data exchange."""
    name: str
    success_count: int = 0
    fail_count: int = 0

    @property
    def total_count(self) -> int:
        return self.success_count + self.fail_count


class CsvDataExport(DataExchange):
    """Export of a table or a query to a CSV file."""

    def __init__(
        self,
        connection_factory: ConnectionFactory,
        output_path: str,
        table: Optional[str] = None,
        query: Optional[str] = None,
        encoding: str = "utf-8",
        listener: Optional[DataExchangeListener] = None,
    ):
        super().__init__(connection_factory, listener)
        if not table and not query:
            raise ValueError("Either table or query must be set")
        self.output_path = output_path
        self.table = table
        self.query = query
        self.encoding = encoding

    @property
    def name(self) -> str:
        return self.table or self.query

    def __repr__(self) -> str:
        return f"CsvDataExport({self.name!r} -> {self.output_path!r})"


class CsvDataImport(DataExchange):
    """Import of a CSV file with a header row into a table."""

    def __init__(
        self,
        connection_factory: ConnectionFactory,
        input_path: str,
        table: str,
        encoding: str = "utf-8",
        exception_resolve: ExceptionResolve = ExceptionResolve.ABORT,
        ignore_inexistent_columns: bool = False,
        param_mapper: Optional[FileValuePstParamMapper] = None,
        listener: Optional[DataExchangeListener] = None,
    ):
        super().__init__(connection_factory, listener)
        self.input_path = input_path
        self.table = table
        self.encoding = encoding
        self.exception_resolve = exception_resolve
        self.ignore_inexistent_columns = ignore_inexistent_columns
        self.param_mapper = param_mapper or FileValuePstParamMapper()

    def __repr__(self) -> str:
        return f"CsvDataImport({self.input_path!r} -> {self.table!r})"


class CsvDataExportService(AbstractDevotedDataExchangeService):
    """Writes a header row and every result row to the output file."""

    exchange_type = CsvDataExport

    def do_exchange(self, data_exchange: CsvDataExport) -> ExchangeResult:
        factory = data_exchange.connection_factory
        result = ExchangeResult(name=data_exchange.name)

        if data_exchange.table:
            statement = select(factory.reflect_table(data_exchange.table))
        else:
            statement = text(data_exchange.query)

        output_path = Path(data_exchange.output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with factory.get_connection() as conn:
            rows = conn.execute(statement)
            with open(output_path, "w", newline="", encoding=data_exchange.encoding) as f:
                writer = csv.writer(f)
                writer.writerow(list(rows.keys()))
                for row in rows:
                    writer.writerow([self._to_csv_value(v) for v in row])
                    result.success_count += 1

        logger.info(f"Exported {result.success_count} rows from {data_exchange.name} to {output_path}")
        return result

    @staticmethod
    def _to_csv_value(value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value).hex()
        return value


class CsvDataImportService(AbstractDevotedDataExchangeService):
    """
    Inserts the rows of a CSV file into a table.

    With ExceptionResolve.ABORT all rows are written in one transaction that
    is rolled back on the first failure. With IGNORE each row is written in
    its own transaction and failed rows are logged and skipped.
    """

    exchange_type = CsvDataImport

    def do_exchange(self, data_exchange: CsvDataImport) -> ExchangeResult:
        factory = data_exchange.connection_factory
        table = factory.reflect_table(data_exchange.table)
        result = ExchangeResult(name=data_exchange.table)

        try:
            f = open(data_exchange.input_path, "r", newline="", encoding=data_exchange.encoding)
        except OSError as e:
            raise DataExchangeException(f"Cannot open {data_exchange.input_path}: {e}") from e

        with f:
            reader = csv.reader(f)
            header = next(reader, None)
            if header is None:
                logger.warning(f"Empty CSV file: {data_exchange.input_path}")
                return result

            columns = self._resolve_columns(table, header, data_exchange)

            if data_exchange.exception_resolve == ExceptionResolve.ABORT:
                self._import_in_one_transaction(factory, table, columns, reader, data_exchange, result)
            else:
                self._import_row_by_row(factory, table, columns, reader, data_exchange, result)

        logger.info(
            f"Imported {result.success_count} rows into {data_exchange.table}"
            f" ({result.fail_count} failed)"
        )
        return result

    def _import_in_one_transaction(self, factory, table, columns, reader, data_exchange, result):
        with factory.get_connection() as conn:
            with conn.begin():
                for line_number, row in enumerate(reader, start=2):
                    try:
                        values = self._row_values(columns, row, data_exchange)
                        conn.execute(insert(table).values(**values))
                    except Exception as e:
                        raise DataExchangeException(
                            f"Import into {data_exchange.table} failed at line {line_number}: {e}"
                        ) from e
                    result.success_count += 1

    def _import_row_by_row(self, factory, table, columns, reader, data_exchange, result):
        with factory.get_connection() as conn:
            for line_number, row in enumerate(reader, start=2):
                try:
                    values = self._row_values(columns, row, data_exchange)
                    with conn.begin():
                        conn.execute(insert(table).values(**values))
                except Exception as e:
                    logger.warning(f"Skipping line {line_number} of {data_exchange.input_path}: {e}")
                    result.fail_count += 1
                else:
                    result.success_count += 1

    def _resolve_columns(self, table, header: List[str], data_exchange: CsvDataImport) -> List[Optional[Any]]:
        """Map header names to table columns; None marks a skipped column."""
        columns = []
        for name in header:
            column = table.columns.get(name.strip())
            if column is None:
                if not data_exchange.ignore_inexistent_columns:
                    raise ColumnNotFoundException(f"Column not found in {table.name}: {name}")
                logger.debug(f"Ignoring column {name} not in {table.name}")
            columns.append(column)
        return columns

    def _row_values(self, columns, row: List[str], data_exchange: CsvDataImport) -> Dict[str, Any]:
        if len(row) != len(columns):
            raise ValueError(f"Expected {len(columns)} values, got {len(row)}")

        values = {}
        for column, raw in zip(columns, row):
            if column is None:
                continue
            value = data_exchange.param_mapper.map(column.type, raw)
            if value is raw:
                value = convert_value(column.type, raw)
            values[column.name] = value
        return values


def convert_value(sql_type: sqltypes.TypeEngine, value: str) -> Any:
    """
    Convert a CSV text value to the Python type of a column.

    Empty strings become None.

    Raises:
        ValueError: If the text is not valid for the column type
    """
    if value == "":
        return None
    if isinstance(sql_type, sqltypes.Boolean):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "t", "yes", "y"):
            return True
        if lowered in ("0", "false", "f", "no", "n"):
            return False
        raise ValueError(f"Not a boolean: {value}")
    if isinstance(sql_type, sqltypes.Integer):
        return int(value)
    if isinstance(sql_type, sqltypes.Float):
        return float(value)
    if isinstance(sql_type, sqltypes.Numeric):
        return Decimal(value)
    if isinstance(sql_type, sqltypes.DateTime):
        return datetime.fromisoformat(value)
    if isinstance(sql_type, sqltypes.Date):
        return date.fromisoformat(value)
    if isinstance(sql_type, sqltypes.Time):
        return time.fromisoformat(value)
    if isinstance(sql_type, (sqltypes.LargeBinary, sqltypes.BINARY, sqltypes.VARBINARY)):
        return bytes.fromhex(value)
    return value


class BatchCsvDataExport(SimpleBatchDataExchange[CsvDataExport]):
    """Batch export of several tables, one CSV file per table."""

    @classmethod
    def for_tables(
        cls,
        connection_factory: ConnectionFactory,
        tables: List[str],
        output_dir: str,
        encoding: str = "utf-8",
        listener: Optional[BatchDataExchangeListener] = None,
        sub_listener: Optional[DataExchangeListener] = None,
    ) -> "BatchCsvDataExport":
        """
        Build one export per table.

        listener observes the batch as a whole; sub_listener, if given, is
        attached to every table export.
        """
        subs = [
            CsvDataExport(
                connection_factory,
                str(Path(output_dir) / f"{table}.csv"),
                table=table,
                encoding=encoding,
                listener=sub_listener,
            )
            for table in tables
        ]
        return cls(subs, connection_factory, listener)


class BatchCsvDataImport(SimpleBatchDataExchange[CsvDataImport]):
    """Batch import of CSV files, each into the table named like the file."""

    @classmethod
    def for_directory(
        cls,
        connection_factory: ConnectionFactory,
        input_dir: str,
        encoding: str = "utf-8",
        exception_resolve: ExceptionResolve = ExceptionResolve.ABORT,
        ignore_inexistent_columns: bool = False,
        param_mapper: Optional[FileValuePstParamMapper] = None,
        listener: Optional[BatchDataExchangeListener] = None,
        sub_listener: Optional[DataExchangeListener] = None,
    ) -> "BatchCsvDataImport":
        directory = Path(input_dir)
        if not directory.is_dir():
            raise DataExchangeException(f"Not a directory: {directory}")

        subs = [
            CsvDataImport(
                connection_factory,
                str(path),
                table=path.stem,
                encoding=encoding,
                exception_resolve=exception_resolve,
                ignore_inexistent_columns=ignore_inexistent_columns,
                param_mapper=param_mapper,
                listener=sub_listener,
            )
            for path in sorted(directory.glob("*.csv"))
        ]
        return cls(subs, connection_factory, listener)
