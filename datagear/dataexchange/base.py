"""
Data Exchange Model

A data exchange is one unit of import/export work. A batch data exchange
groups sub exchanges that a BatchDataExchangeService runs concurrently;
after submission it holds one future per sub exchange.
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future, CancelledError, TimeoutError as FutureTimeoutError
from typing import Any, Generic, List, Optional, TypeVar
import logging

from datagear.dataexchange.connection import ConnectionFactory
from datagear.dataexchange.exceptions import (
    DataExchangeException,
    DataExchangeTimeoutException,
    DataExchangeCancelledException,
)

logger = logging.getLogger(__name__)


class DataExchangeListener:
    """Receives lifecycle events of a data exchange. All methods are no-ops by default."""

    def on_start(self):
        pass

    def on_exception(self, exception: Exception):
        pass

    def on_success(self):
        pass

    def on_finish(self):
        pass


class BatchDataExchangeListener(DataExchangeListener):
    """Receives submission events of a batch data exchange."""

    def on_submit_success(self, sub_data_exchange: "DataExchange"):
        pass

    def on_submit_fail(self, sub_data_exchange: "DataExchange", exception: Exception):
        pass

    def on_cancel(self, sub_data_exchange: "DataExchange"):
        pass


class LoggingDataExchangeListener(BatchDataExchangeListener):
    """Listener that logs every event under a given name."""

    def __init__(self, name: str):
        self.name = name

    def on_start(self):
        logger.info(f"[{self.name}] started")

    def on_exception(self, exception: Exception):
        logger.error(f"[{self.name}] failed: {exception}")

    def on_success(self):
        logger.info(f"[{self.name}] succeeded")

    def on_finish(self):
        logger.debug(f"[{self.name}] finished")

    def on_submit_success(self, sub_data_exchange: "DataExchange"):
        logger.debug(f"[{self.name}] submitted {sub_data_exchange}")

    def on_submit_fail(self, sub_data_exchange: "DataExchange", exception: Exception):
        logger.error(f"[{self.name}] could not submit {sub_data_exchange}: {exception}")

    def on_cancel(self, sub_data_exchange: "DataExchange"):
        logger.warning(f"[{self.name}] cancelled {sub_data_exchange}")


class DataExchange:
    """Base class of data exchanges."""

    def __init__(
        self,
        connection_factory: Optional[ConnectionFactory] = None,
        listener: Optional[DataExchangeListener] = None,
    ):
        self.connection_factory = connection_factory
        self.listener = listener


T = TypeVar("T", bound=DataExchange)


class BatchDataExchange(DataExchange, ABC, Generic[T]):
    """
    A data exchange made of sub data exchanges.

    After BatchDataExchangeService.exchange() returns, ``results`` holds one
    future per sub exchange, in the order of get_sub_data_exchanges().
    A None entry means the corresponding sub exchange failed to submit.
    """

    def __init__(
        self,
        connection_factory: Optional[ConnectionFactory] = None,
        listener: Optional[BatchDataExchangeListener] = None,
    ):
        super().__init__(connection_factory, listener)
        self.results: Optional[List[Optional[Future]]] = None

    @abstractmethod
    def get_sub_data_exchanges(self) -> List[T]:
        """
        Get the sub data exchanges, in submission order.

        Raises:
            DataExchangeException: If the sub exchanges cannot be built
        """

    def wait_for_results(self, timeout: Optional[float] = None) -> List[Optional[Any]]:
        """
        Block until every submitted sub exchange has finished.

        Futures are waited on one by one in submission order, so a failure
        is reported only after all earlier sub exchanges have finished.

        Args:
            timeout: Seconds to wait for each future, None to wait without limit

        Returns:
            Results in submission order, None where submission failed

        Raises:
            DataExchangeException: If results are not set or a sub exchange failed
        """
        if self.results is None:
            raise DataExchangeException("Batch data exchange has not been submitted")

        sub_results: List[Optional[Any]] = []

        for index, future in enumerate(self.results):
            result = None

            if future is not None:
                try:
                    result = future.result(timeout=timeout)
                except FutureTimeoutError as e:
                    raise DataExchangeTimeoutException(
                        f"Timed out waiting for sub data exchange {index}"
                    ) from e
                except CancelledError as e:
                    raise DataExchangeCancelledException(
                        f"Sub data exchange {index} was cancelled"
                    ) from e
                except DataExchangeException:
                    raise
                except Exception as e:
                    raise DataExchangeException(f"Sub data exchange {index} failed: {e}") from e

            sub_results.append(result)

        return sub_results


class SimpleBatchDataExchange(BatchDataExchange[T]):
    """Batch data exchange over a fixed list of sub exchanges."""

    def __init__(
        self,
        sub_data_exchanges: List[T],
        connection_factory: Optional[ConnectionFactory] = None,
        listener: Optional[BatchDataExchangeListener] = None,
    ):
        super().__init__(connection_factory, listener)
        self._sub_data_exchanges = list(sub_data_exchanges)

    def get_sub_data_exchanges(self) -> List[T]:
        return list(self._sub_data_exchanges)
