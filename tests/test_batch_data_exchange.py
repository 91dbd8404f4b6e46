"""BatchDataExchange result collection and BatchDataExchangeService submission."""

from __future__ import annotations

from concurrent.futures import Executor, Future, ThreadPoolExecutor

import pytest

from datagear.dataexchange.base import (
    BatchDataExchangeListener,
    DataExchange,
    SimpleBatchDataExchange,
)
from datagear.dataexchange.exceptions import (
    DataExchangeCancelledException,
    DataExchangeException,
    DataExchangeTimeoutException,
    UnsupportedExchangeException,
)
from datagear.dataexchange.service import (
    AbstractDevotedDataExchangeService,
    BatchDataExchangeService,
    GenericDataExchangeService,
)


class Job(DataExchange):
    def __init__(self, value, fail: bool = False, listener=None):
        super().__init__(listener=listener)
        self.value = value
        self.fail = fail


class OtherJob(DataExchange):
    pass


class JobService(AbstractDevotedDataExchangeService):
    exchange_type = Job

    def do_exchange(self, data_exchange: Job):
        if data_exchange.fail:
            raise ValueError(f"job {data_exchange.value} failed")
        return data_exchange.value * 10


class RecordingListener(BatchDataExchangeListener):
    def __init__(self):
        self.events: list = []

    def on_start(self):
        self.events.append("start")

    def on_exception(self, exception):
        self.events.append("exception")

    def on_success(self):
        self.events.append("success")

    def on_finish(self):
        self.events.append("finish")

    def on_submit_success(self, sub_data_exchange):
        self.events.append(("submitted", sub_data_exchange.value))

    def on_submit_fail(self, sub_data_exchange, exception):
        self.events.append(("submit_fail", sub_data_exchange.value))

    def on_cancel(self, sub_data_exchange):
        self.events.append(("cancel", sub_data_exchange.value))


class InlineExecutor(Executor):
    """Runs tasks at submission; refuses the submissions listed in reject."""

    def __init__(self, reject: tuple[int, ...] = ()):
        self.reject = reject
        self.count = 0

    def submit(self, fn, /, *args, **kwargs):
        index = self.count
        self.count += 1
        if index in self.reject:
            raise RuntimeError("executor is full")
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class PendingExecutor(Executor):
    """Returns futures that never start."""

    def submit(self, fn, /, *args, **kwargs):
        return Future()


def done(value) -> Future:
    future = Future()
    future.set_result(value)
    return future


def test_wait_for_results_keeps_order_and_null_slots() -> None:
    """None futures yield None results at the same positions."""

    batch = SimpleBatchDataExchange([Job(i) for i in range(5)])
    batch.results = [done("a"), None, done("c"), None, done("e")]

    assert batch.wait_for_results() == ["a", None, "c", None, "e"]


def test_wait_for_results_requires_submission() -> None:
    """Waiting on a batch that was never submitted fails."""

    batch = SimpleBatchDataExchange([Job(1)])

    with pytest.raises(DataExchangeException):
        batch.wait_for_results()


def test_wait_for_results_wraps_sub_exchange_failure() -> None:
    """A failed future is reported as DataExchangeException with the original cause."""

    failed = Future()
    failed.set_exception(ValueError("bad row"))
    batch = SimpleBatchDataExchange([Job(1), Job(2)])
    batch.results = [done(1), failed]

    with pytest.raises(DataExchangeException, match="Sub data exchange 1") as info:
        batch.wait_for_results()

    assert isinstance(info.value.__cause__, ValueError)


def test_wait_for_results_keeps_data_exchange_exceptions() -> None:
    """Domain exceptions raised by sub exchanges are not wrapped twice."""

    failed = Future()
    error = DataExchangeException("table locked")
    failed.set_exception(error)
    batch = SimpleBatchDataExchange([Job(1)])
    batch.results = [failed]

    with pytest.raises(DataExchangeException) as info:
        batch.wait_for_results()

    assert info.value is error


def test_wait_for_results_timeout() -> None:
    """A per-future timeout raises DataExchangeTimeoutException."""

    batch = SimpleBatchDataExchange([Job(1)])
    batch.results = [Future()]

    with pytest.raises(DataExchangeTimeoutException):
        batch.wait_for_results(timeout=0.01)


def test_wait_for_results_cancelled() -> None:
    """A cancelled future raises DataExchangeCancelledException."""

    pending = Future()
    assert pending.cancel()
    batch = SimpleBatchDataExchange([Job(1)])
    batch.results = [pending]

    with pytest.raises(DataExchangeCancelledException):
        batch.wait_for_results()


def test_service_submits_every_sub_exchange_in_order() -> None:
    """Results come back in submission order from a real thread pool."""

    batch = SimpleBatchDataExchange([Job(i) for i in range(8)])

    with BatchDataExchangeService(JobService(), max_workers=3) as service:
        futures = service.exchange(batch)
        results = batch.wait_for_results()

    assert futures is batch.results
    assert results == [i * 10 for i in range(8)]


def test_service_records_failed_submissions_as_none() -> None:
    """Rejected submissions leave a None slot and notify the batch listener."""

    listener = RecordingListener()
    batch = SimpleBatchDataExchange([Job(i) for i in range(4)], listener=listener)
    service = BatchDataExchangeService(JobService(), executor=InlineExecutor(reject=(1, 3)))

    service.exchange(batch)

    assert [f is None for f in batch.results] == [False, True, False, True]
    assert batch.wait_for_results() == [0, None, 20, None]
    assert listener.events == [
        "start",
        ("submitted", 0),
        ("submit_fail", 1),
        ("submitted", 2),
        ("submit_fail", 3),
        "finish",
    ]


def test_service_after_shutdown_submits_nothing() -> None:
    """Every slot is None when the executor no longer accepts work."""

    executor = ThreadPoolExecutor(max_workers=1)
    executor.shutdown()
    batch = SimpleBatchDataExchange([Job(1), Job(2)])

    BatchDataExchangeService(JobService(), executor=executor).exchange(batch)

    assert batch.results == [None, None]
    assert batch.wait_for_results() == [None, None]


def test_failure_surfaces_after_earlier_results() -> None:
    """A failing sub exchange is reported when its position is reached."""

    batch = SimpleBatchDataExchange([Job(1), Job(2, fail=True), Job(3)])
    BatchDataExchangeService(JobService(), executor=InlineExecutor()).exchange(batch)

    assert batch.results[0].result() == 10
    with pytest.raises(DataExchangeException, match="job 2 failed"):
        batch.wait_for_results()


def test_cancel_pending_sub_exchanges() -> None:
    """Sub exchanges that have not started can be cancelled."""

    listener = RecordingListener()
    batch = SimpleBatchDataExchange([Job(1), Job(2)], listener=listener)
    service = BatchDataExchangeService(JobService(), executor=PendingExecutor())
    service.exchange(batch)

    assert service.cancel(batch) == 2
    assert ("cancel", 1) in listener.events
    assert ("cancel", 2) in listener.events
    assert listener.events.count("finish") == 1

    with pytest.raises(DataExchangeCancelledException):
        batch.wait_for_results()


def test_devoted_service_listener_protocol() -> None:
    """Sub exchanges report start, success or exception, then finish."""

    ok_listener = RecordingListener()
    assert JobService().exchange(Job(2, listener=ok_listener)) == 20
    assert ok_listener.events == ["start", "success", "finish"]

    fail_listener = RecordingListener()
    with pytest.raises(DataExchangeException) as info:
        JobService().exchange(Job(2, fail=True, listener=fail_listener))
    assert isinstance(info.value.__cause__, ValueError)
    assert fail_listener.events == ["start", "exception", "finish"]


def test_generic_service_dispatch() -> None:
    """The generic service picks the first supporting service."""

    service = GenericDataExchangeService([JobService()])

    assert service.supports(Job(1))
    assert service.exchange(Job(4)) == 40
    assert not service.supports(OtherJob())
    with pytest.raises(UnsupportedExchangeException):
        service.exchange(OtherJob())


def test_batch_service_rejects_plain_exchanges() -> None:
    """Only batch data exchanges can be submitted."""

    service = BatchDataExchangeService(JobService(), executor=InlineExecutor())

    assert not service.supports(Job(1))
    with pytest.raises(UnsupportedExchangeException):
        service.exchange(Job(1))
