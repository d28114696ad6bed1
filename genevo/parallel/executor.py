"""
Timed Parallel Executor

This module wraps a caller-supplied ``concurrent.futures.Executor`` and
measures the wall-clock duration of every unit of work it runs. It also
provides the two composition primitives the evolution engine needs to
express a generation step as a small dependency graph: continuations
(``then_apply``) and joins (``combine``).
"""

import concurrent.futures
import logging
import os
import threading
import time
from concurrent.futures import CancelledError, Executor, Future
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

Clock = Callable[[], float]


class Timer:
    """
    Stop watch for measuring execution durations.

    All durations are float seconds, taken from the clock given at
    construction time.

    Example:
        timer = Timer.of(time.perf_counter).start()
        do_work()
        elapsed = timer.stop().time
    """

    def __init__(self, clock: Clock = time.perf_counter):
        if not callable(clock):
            raise TypeError(f"clock must be callable, got {type(clock)}")
        self._clock = clock
        self._start = 0.0
        self._stop = 0.0

    @classmethod
    def of(cls, clock: Clock = time.perf_counter) -> 'Timer':
        return cls(clock)

    def start(self) -> 'Timer':
        self._start = self._clock()
        return self

    def stop(self) -> 'Timer':
        self._stop = self._clock()
        return self

    @property
    def time(self) -> float:
        """Duration between the last ``start()`` and ``stop()`` calls."""
        return self._stop - self._start

    def timing(self, task: Callable[[], T]) -> T:
        """Run ``task`` between ``start()`` and ``stop()``."""
        self.start()
        try:
            return task()
        finally:
            self.stop()


@dataclass(frozen=True)
class TimedResult(Generic[T]):
    """Result of a unit of work together with its execution duration."""

    result: T
    duration: float

    @classmethod
    def of(cls, task: Callable[[], T], clock: Clock = time.perf_counter) -> Callable[[], 'TimedResult[T]']:
        """
        Wrap ``task`` so that calling the wrapper runs it and times it.

        Args:
            task: Zero-argument callable to execute
            clock: Time source used for the measurement

        Returns:
            Zero-argument callable returning a TimedResult
        """
        def timed() -> 'TimedResult[T]':
            timer = Timer.of(clock)
            value = timer.timing(task)
            return cls(value, timer.time)

        return timed


def _failure(source: Future) -> Optional[BaseException]:
    """Exception of a completed future; a cancelled future counts as failed."""
    if source.cancelled():
        return CancelledError()
    return source.exception()


def _fail(target: Future, exception: BaseException) -> None:
    if not target.done():
        target.set_exception(exception)


def _transfer(source: Future, target: Future) -> None:
    try:
        exception = _failure(source)
        if exception is not None:
            _fail(target, exception)
        elif not target.done():
            target.set_result(source.result())
    except BaseException as e:
        _fail(target, e)


class TimedExecutor:
    """
    Executor facade which times every submitted unit of work.

    Key Features:
    - Never spawns threads itself, all work goes to the wrapped executor
    - ``submit`` returns a future of ``TimedResult``
    - ``then_apply`` chains a timed continuation onto a future
    - ``combine`` joins two futures into one

    Thread Safety:
    - The facade holds no mutable state and can be shared freely
    - Exceptions raised by a stage are transferred to every dependent future
    """

    def __init__(self, executor: Executor):
        if executor is None:
            raise ValueError("executor must not be None")
        self._executor = executor

    @property
    def executor(self) -> Executor:
        return self._executor

    def submit(self, task: Callable[[], T], clock: Clock = time.perf_counter) -> 'Future[TimedResult[T]]':
        """
        Run ``task`` asynchronously and measure its duration.

        Example:
            executor = TimedExecutor(ThreadPoolExecutor(max_workers=2))
            future = executor.submit(lambda: select(population))
            selected, seconds = future.result().result, future.result().duration
        """
        return self._executor.submit(TimedResult.of(task, clock))

    def then_apply(self,
                   future: 'Future[Any]',
                   function: Callable[[Any], T],
                   clock: Clock = time.perf_counter) -> 'Future[TimedResult[T]]':
        """
        Apply ``function`` to the result of ``future`` once it is available.

        The continuation is submitted to the wrapped executor, so it never
        runs on the thread which completed ``future`` unless the executor
        itself runs work inline.

        Args:
            future: Upstream future
            function: Called with the upstream result
            clock: Time source used for the measurement

        Returns:
            Future of the timed continuation result
        """
        chained: Future = Future()

        def on_done(source: Future) -> None:
            try:
                exception = _failure(source)
                if exception is not None:
                    _fail(chained, exception)
                    return
                value = source.result()
                inner = self._executor.submit(TimedResult.of(lambda: function(value), clock))
                inner.add_done_callback(lambda f: _transfer(f, chained))
            except BaseException as e:
                _fail(chained, e)

        future.add_done_callback(on_done)
        return chained

    def combine(self,
                first: 'Future[Any]',
                second: 'Future[Any]',
                function: Callable[[Any, Any], T]) -> 'Future[T]':
        """
        Join two futures and apply ``function`` to both results.

        The combined future completes only after both inputs completed, even
        when the first one failed.
        """
        combined: Future = Future()

        def on_both(_: Future) -> None:
            try:
                for source in (first, second):
                    exception = _failure(source)
                    if exception is not None:
                        _fail(combined, exception)
                        return
                a, b = first.result(), second.result()
                inner = self._executor.submit(function, a, b)
                inner.add_done_callback(lambda f: _transfer(f, combined))
            except BaseException as e:
                _fail(combined, e)

        first.add_done_callback(lambda _: second.add_done_callback(on_both))
        return combined


class SerialExecutor(Executor):
    """
    Executor running every task inline on the submitting thread.

    Use this as the sequential fallback mode: results are identical to the
    concurrent mode, only without parallelism.
    """

    def __init__(self):
        self._shutdown = False
        self._lock = threading.Lock()

    def submit(self, fn, /, *args, **kwargs):
        with self._lock:
            if self._shutdown:
                raise RuntimeError("cannot schedule new futures after shutdown")

        future: Future = Future()
        future.set_running_or_notify_cancel()
        try:
            result = fn(*args, **kwargs)
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)
        return future

    def shutdown(self, wait=True, *, cancel_futures=False):
        with self._lock:
            self._shutdown = True


_default_executor: Optional[Executor] = None
_default_lock = threading.Lock()


def default_executor() -> Executor:
    """
    Process-wide thread pool used when no executor is configured.

    The pool is created lazily on first use and sized to the CPU count.
    """
    global _default_executor
    with _default_lock:
        if _default_executor is None:
            workers = os.cpu_count() or 1
            _default_executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=workers,
                thread_name_prefix='genevo'
            )
            logger.info(f"Default executor initialized with {workers} workers")
        return _default_executor
