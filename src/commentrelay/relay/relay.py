"""CommentRelay - Entry point that turns activity IDs into tracker comments."""

from __future__ import annotations

import logging
import threading
from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, Any

from commentrelay.config import (
    DEFAULT_CALL_LIMIT,
    DEFAULT_MAX_BATCH_SIZE,
    DEFAULT_SAFETY_MARGIN,
    DEFAULT_WORKERS,
)
from commentrelay.relay.aggregator import ActivityReader, CommentAggregator, utcnow
from commentrelay.relay.dispatcher import CommentPoster, RateLimitedDispatcher
from commentrelay.relay.models import CallBudget, OutcomeStatus, UnitReport, WorkUnit
from commentrelay.relay.work_queue import WorkQueue

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from commentrelay.config import RelayConfig

logger = logging.getLogger(__name__)


class RelayStats:
    """Running totals across all processed units (thread-safe)."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.units_processed = 0
        self.calls_attempted = 0
        self.skipped = 0
        self.outcomes: dict[OutcomeStatus, int] = dict.fromkeys(OutcomeStatus, 0)

    def record(self, report: UnitReport) -> None:
        with self._lock:
            self.units_processed += 1
            self.calls_attempted += report.dispatch.calls_attempted
            self.skipped += len(report.skipped)
            for result in report.dispatch.results:
                self.outcomes[result.status] += 1

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "units_processed": self.units_processed,
                "calls_attempted": self.calls_attempted,
                "skipped": self.skipped,
                **{status.value: count for status, count in self.outcomes.items()},
            }


class CommentRelay:
    """Relays activity records into comments on their tracker issues.

    ``post_comment`` only queues work. Each queued unit is aggregated and
    dispatched independently with its own call budget; whatever the budget
    cannot cover is queued again for a later pass.
    """

    def __init__(
        self,
        reader: ActivityReader,
        poster: CommentPoster,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        call_limit: int = DEFAULT_CALL_LIMIT,
        safety_margin: int = DEFAULT_SAFETY_MARGIN,
        workers: int = DEFAULT_WORKERS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the relay.

        Args:
            reader: Batched activity read access.
            poster: Transport used to post comments.
            max_batch_size: Maximum activity IDs per work unit.
            call_limit: Outbound calls allowed per unit execution.
            safety_margin: Calls held back from call_limit on every pass.
            workers: Units processed concurrently once started.
            clock: Source of comment timestamps.

        Raises:
            ValueError: If call_limit leaves no budget after the safety margin.
        """
        if call_limit <= safety_margin:
            raise ValueError(
                f"call_limit ({call_limit}) must exceed safety_margin ({safety_margin})"
            )
        self.call_limit = call_limit
        self.safety_margin = safety_margin
        self.aggregator = CommentAggregator(reader, clock=clock)
        self.dispatcher = RateLimitedDispatcher(poster)
        self.stats = RelayStats()
        self.queue = WorkQueue(
            self.process_unit,
            max_batch_size=max_batch_size,
            workers=workers,
            on_report=self.stats.record,
        )

    @classmethod
    def from_config(
        cls, config: RelayConfig, reader: ActivityReader, poster: CommentPoster
    ) -> CommentRelay:
        """Create a relay using the limits from ``config``."""
        config.validate()
        return cls(
            reader,
            poster,
            max_batch_size=config.max_batch_size,
            call_limit=config.call_limit,
            safety_margin=config.safety_margin,
            workers=config.workers,
        )

    def post_comment(self, activity_ids: Iterable[str] | None) -> list[WorkUnit]:
        """Queue comments for the given activities and return immediately.

        Args:
            activity_ids: Activity IDs; None or empty does nothing.

        Returns:
            The work units queued.
        """
        if not activity_ids:
            logger.debug("post_comment called with no activity ids")
            return []
        return self.queue.submit(activity_ids)

    def process_unit(self, unit: WorkUnit) -> UnitReport:
        """Aggregate and dispatch one unit with a fresh call budget."""
        aggregation = self.aggregator.aggregate(unit)
        budget = CallBudget.for_pass(self.call_limit, self.safety_margin)
        dispatch = self.dispatcher.dispatch(aggregation, budget)
        logger.info(
            "Unit of %d activities (attempt %d): %d posted, %d rejected, %d failed, %d deferred",
            len(unit),
            unit.attempt,
            dispatch.count(OutcomeStatus.POSTED),
            dispatch.count(OutcomeStatus.REJECTED),
            dispatch.count(OutcomeStatus.FAILED),
            dispatch.count(OutcomeStatus.DEFERRED),
        )
        return UnitReport(unit=unit, skipped=aggregation.skipped, dispatch=dispatch)

    def status(self) -> dict[str, Any]:
        """Worker state, queue depth and outcome counters."""
        return {
            "running": self.queue.running,
            "pending_units": self.queue.pending,
            **self.stats.snapshot(),
        }

    def start(self) -> None:
        """Start background workers."""
        self.queue.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop background workers."""
        self.queue.stop(timeout=timeout)

    def drain(self) -> list[UnitReport]:
        """Process all queued work on the calling thread."""
        return self.queue.drain()

    def join(self) -> None:
        """Wait until background workers have finished all queued work."""
        self.queue.join()
