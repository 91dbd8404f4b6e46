"""
Data Exchange Services

Services execute data exchanges. BatchDataExchangeService fans the sub
exchanges of a batch out to a thread pool and stores one future per sub
exchange on the batch; it does not wait for them.
"""

from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, List, Optional
import logging
import threading

from datagear.dataexchange.base import (
    BatchDataExchange,
    BatchDataExchangeListener,
    DataExchange,
)
from datagear.dataexchange.exceptions import DataExchangeException, UnsupportedExchangeException

logger = logging.getLogger(__name__)


class DataExchangeService(ABC):
    """Executes data exchanges of the types it supports."""

    @abstractmethod
    def supports(self, data_exchange: DataExchange) -> bool:
        """Check if this service can execute the data exchange."""

    @abstractmethod
    def exchange(self, data_exchange: DataExchange) -> Any:
        """
        Execute a data exchange.

        Raises:
            DataExchangeException: If the exchange fails
        """


class AbstractDevotedDataExchangeService(DataExchangeService):
    """
    Service for one data exchange type that drives the listener protocol:
    on_start, then on_success or on_exception, then on_finish.
    """

    exchange_type = DataExchange

    def supports(self, data_exchange: DataExchange) -> bool:
        return isinstance(data_exchange, self.exchange_type)

    def exchange(self, data_exchange: DataExchange) -> Any:
        listener = data_exchange.listener

        if listener is not None:
            listener.on_start()

        try:
            result = self.do_exchange(data_exchange)
        except Exception as e:
            if listener is not None:
                listener.on_exception(e)
            if isinstance(e, DataExchangeException):
                raise
            raise DataExchangeException(f"Data exchange failed: {e}") from e
        else:
            if listener is not None:
                listener.on_success()
            return result
        finally:
            if listener is not None:
                listener.on_finish()

    @abstractmethod
    def do_exchange(self, data_exchange: DataExchange) -> Any:
        """Perform the actual exchange."""


class GenericDataExchangeService(DataExchangeService):
    """Dispatches each data exchange to the first service that supports it."""

    def __init__(self, services: Optional[List[DataExchangeService]] = None):
        self.services: List[DataExchangeService] = list(services or [])

    def add_service(self, service: DataExchangeService):
        self.services.append(service)

    def supports(self, data_exchange: DataExchange) -> bool:
        return self._find_service(data_exchange) is not None

    def exchange(self, data_exchange: DataExchange) -> Any:
        service = self._find_service(data_exchange)
        if service is None:
            raise UnsupportedExchangeException(
                f"No service supports {type(data_exchange).__name__}"
            )
        return service.exchange(data_exchange)

    def _find_service(self, data_exchange: DataExchange) -> Optional[DataExchangeService]:
        for service in self.services:
            if service.supports(data_exchange):
                return service
        return None


class BatchDataExchangeService(DataExchangeService):
    """
    Submits the sub exchanges of a BatchDataExchange to an executor.

    exchange() returns as soon as every sub exchange is submitted; use
    BatchDataExchange.wait_for_results() to block for the outcome. The batch
    listener receives on_start before submission and on_finish once every
    submitted sub exchange has completed.
    """

    def __init__(
        self,
        sub_service: DataExchangeService,
        max_workers: int = 4,
        executor: Optional[Executor] = None,
    ):
        """
        Args:
            sub_service: Service executing each sub exchange
            max_workers: Size of the thread pool created when no executor is given
            executor: Executor to submit to; it is not shut down by this service
        """
        self.sub_service = sub_service
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="datagear-exchange"
        )

    def supports(self, data_exchange: DataExchange) -> bool:
        return isinstance(data_exchange, BatchDataExchange)

    def exchange(self, data_exchange: BatchDataExchange) -> List[Optional[Future]]:
        if not isinstance(data_exchange, BatchDataExchange):
            raise UnsupportedExchangeException(
                f"{type(self).__name__} only supports batch data exchanges"
            )

        listener = data_exchange.listener
        sub_exchanges = data_exchange.get_sub_data_exchanges()

        if listener is not None:
            listener.on_start()

        results: List[Optional[Future]] = []

        for sub_exchange in sub_exchanges:
            try:
                future = self.executor.submit(self.sub_service.exchange, sub_exchange)
            except Exception as e:
                logger.error(f"Failed to submit sub data exchange {sub_exchange}: {e}")
                if isinstance(listener, BatchDataExchangeListener):
                    listener.on_submit_fail(sub_exchange, e)
                results.append(None)
            else:
                if isinstance(listener, BatchDataExchangeListener):
                    listener.on_submit_success(sub_exchange)
                results.append(future)

        data_exchange.results = results
        self._notify_finish_when_done(data_exchange, results)

        submitted = sum(1 for f in results if f is not None)
        logger.info(f"Submitted {submitted}/{len(results)} sub data exchanges")
        return results

    def cancel(self, data_exchange: BatchDataExchange) -> int:
        """
        Cancel sub exchanges that have not started yet.

        Returns:
            Number of cancelled sub exchanges
        """
        if data_exchange.results is None:
            return 0

        listener = data_exchange.listener
        subs = data_exchange.get_sub_data_exchanges()
        cancelled = 0

        for sub_exchange, future in zip(subs, data_exchange.results):
            if future is not None and future.cancel():
                cancelled += 1
                if isinstance(listener, BatchDataExchangeListener):
                    listener.on_cancel(sub_exchange)

        return cancelled

    def _notify_finish_when_done(self, data_exchange: BatchDataExchange, results: List[Optional[Future]]):
        listener = data_exchange.listener
        if listener is None:
            return

        pending = [f for f in results if f is not None]
        if not pending:
            listener.on_finish()
            return

        remaining = [len(pending)]
        lock = threading.Lock()

        def on_done(_future: Future):
            with lock:
                remaining[0] -= 1
                done = remaining[0] == 0
            if done:
                listener.on_finish()

        for future in pending:
            future.add_done_callback(on_done)

    def shutdown(self, wait: bool = True):
        if self._owns_executor:
            self.executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
