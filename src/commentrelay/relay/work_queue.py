"""Work queue - runs work units on background threads and re-enqueues deferrals."""

from __future__ import annotations

import logging
import queue
import threading
from typing import TYPE_CHECKING

from commentrelay.config import DEFAULT_MAX_BATCH_SIZE, DEFAULT_WORKERS
from commentrelay.relay.splitter import BatchSplitter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from commentrelay.relay.models import UnitReport, WorkUnit

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.5


class WorkQueue:
    """FIFO of work units drained by a fixed number of worker threads.

    Units never share state, so workers take them in any order. After a
    unit is processed, the activity IDs its dispatch deferred are split
    again and put back on the queue with the next attempt number.
    """

    def __init__(
        self,
        handler: Callable[[WorkUnit], UnitReport],
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        workers: int = DEFAULT_WORKERS,
        on_report: Callable[[UnitReport], None] | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            handler: Processes one unit and reports what happened.
            max_batch_size: Maximum IDs per unit when splitting.
            workers: Number of worker threads started by start().
            on_report: Called with every unit report (e.g. for stats).
        """
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.handler = handler
        self.workers = workers
        self.on_report = on_report
        self.splitter = BatchSplitter(self, max_batch_size)
        self._queue: queue.Queue[WorkUnit] = queue.Queue()
        self._threads: list[threading.Thread] = []
        self._stopping = threading.Event()

    @property
    def pending(self) -> int:
        """Units waiting to be picked up."""
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)

    def put(self, unit: WorkUnit) -> None:
        """Queue a unit; never waits for processing."""
        self._queue.put(unit)

    def submit(self, activity_ids: Iterable[str] | None) -> list[WorkUnit]:
        """Split IDs into units and queue them for a first pass."""
        return self.splitter.submit(activity_ids)

    def redispatch(self, activity_ids: Iterable[str], attempt: int) -> list[WorkUnit]:
        """Queue deferred IDs again for pass number ``attempt``."""
        units = self.splitter.submit(activity_ids, attempt=attempt)
        if units:
            logger.info(
                "Re-queued deferred activities as %d unit(s) for attempt %d", len(units), attempt
            )
        return units

    def process(self, unit: WorkUnit) -> UnitReport | None:
        """Run one unit through the handler and re-queue its deferrals.

        Exceptions from the handler are logged and swallowed so that one
        unit never takes down a worker.
        """
        try:
            report = self.handler(unit)
        except Exception:
            logger.exception(
                "Unexpected error processing unit of %d activities (attempt %d)",
                len(unit),
                unit.attempt,
            )
            return None

        if report.dispatch.deferred_ids:
            report.resubmitted = self.redispatch(report.dispatch.deferred_ids, unit.attempt + 1)

        if self.on_report is not None:
            self.on_report(report)
        return report

    def drain(self) -> list[UnitReport]:
        """Process queued units on the calling thread until the queue is empty.

        Deferred work re-queued along the way is processed too.
        """
        reports = []
        while True:
            try:
                unit = self._queue.get_nowait()
            except queue.Empty:
                break
            try:
                report = self.process(unit)
                if report is not None:
                    reports.append(report)
            finally:
                self._queue.task_done()
        return reports

    def _worker(self, index: int) -> None:
        logger.debug("Worker %d started", index)
        while not self._stopping.is_set():
            try:
                unit = self._queue.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue
            try:
                self.process(unit)
            finally:
                self._queue.task_done()
        logger.debug("Worker %d stopped", index)

    def start(self) -> None:
        """Start the worker threads (no-op if already running)."""
        if self.running:
            return
        self._stopping.clear()
        self._threads = [
            threading.Thread(
                target=self._worker,
                args=(i,),
                name=f"commentrelay-worker-{i}",
                daemon=True,
            )
            for i in range(self.workers)
        ]
        for thread in self._threads:
            thread.start()
        logger.info("Started %d relay worker(s)", self.workers)

    def join(self) -> None:
        """Block until every queued unit, including re-queued ones, is done."""
        self._queue.join()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal workers to stop after their current unit and wait for them."""
        self._stopping.set()
        for thread in self._threads:
            thread.join(timeout=timeout)
        self._threads = []
        logger.info("Stopped relay workers (%d unit(s) still queued)", self.pending)
