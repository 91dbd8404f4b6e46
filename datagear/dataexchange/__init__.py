"""Batch data import/export between databases and files."""

from datagear.dataexchange.exceptions import (
    DataExchangeException,
    DataExchangeTimeoutException,
    DataExchangeCancelledException,
    UnsupportedExchangeException,
    TableNotFoundException,
    ColumnNotFoundException,
)
from datagear.dataexchange.connection import ConnectionFactory
from datagear.dataexchange.base import (
    DataExchange,
    DataExchangeListener,
    BatchDataExchangeListener,
    LoggingDataExchangeListener,
    BatchDataExchange,
    SimpleBatchDataExchange,
)
from datagear.dataexchange.service import (
    DataExchangeService,
    AbstractDevotedDataExchangeService,
    GenericDataExchangeService,
    BatchDataExchangeService,
)
from datagear.dataexchange.csv_exchange import (
    ExchangeResult,
    CsvDataExport,
    CsvDataImport,
    CsvDataExportService,
    CsvDataImportService,
    BatchCsvDataExport,
    BatchCsvDataImport,
)

__all__ = [
    "DataExchangeException",
    "DataExchangeTimeoutException",
    "DataExchangeCancelledException",
    "UnsupportedExchangeException",
    "TableNotFoundException",
    "ColumnNotFoundException",
    "ConnectionFactory",
    "DataExchange",
    "DataExchangeListener",
    "BatchDataExchangeListener",
    "LoggingDataExchangeListener",
    "BatchDataExchange",
    "SimpleBatchDataExchange",
    "DataExchangeService",
    "AbstractDevotedDataExchangeService",
    "GenericDataExchangeService",
    "BatchDataExchangeService",
    "ExchangeResult",
    "CsvDataExport",
    "CsvDataImport",
    "CsvDataExportService",
    "CsvDataImportService",
    "BatchCsvDataExport",
    "BatchCsvDataImport",
]
