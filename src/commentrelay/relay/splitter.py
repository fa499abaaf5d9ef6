"""Batch splitting of activity IDs into work units."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from commentrelay.config import DEFAULT_MAX_BATCH_SIZE
from commentrelay.relay.models import WorkUnit

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class UnitSink(Protocol):
    """Anything that accepts work units for asynchronous processing."""

    def put(self, unit: WorkUnit) -> None:
        """Queue a unit without waiting for it to run."""
        ...


def split_into_units(
    activity_ids: Iterable[str] | None,
    max_size: int = DEFAULT_MAX_BATCH_SIZE,
    attempt: int = 1,
) -> list[WorkUnit]:
    """Partition IDs into consecutive units of at most ``max_size``.

    Input order is kept within and across units. ``None`` or an empty
    input yields no units.

    Raises:
        ValueError: If max_size is less than 1.
    """
    if max_size < 1:
        raise ValueError(f"max_size must be >= 1, got {max_size}")
    if not activity_ids:
        return []

    ids = list(activity_ids)
    return [
        WorkUnit(activity_ids=tuple(ids[start : start + max_size]), attempt=attempt)
        for start in range(0, len(ids), max_size)
    ]


class BatchSplitter:
    """Splits ID lists into work units and hands each one to a sink."""

    def __init__(self, sink: UnitSink, max_size: int = DEFAULT_MAX_BATCH_SIZE) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self.sink = sink
        self.max_size = max_size

    def submit(self, activity_ids: Iterable[str] | None, attempt: int = 1) -> list[WorkUnit]:
        """Split ``activity_ids`` and queue every resulting unit.

        Returns:
            The queued units (empty for empty input).
        """
        units = split_into_units(activity_ids, self.max_size, attempt=attempt)
        for unit in units:
            self.sink.put(unit)
        if units:
            logger.info(
                "Queued %d activity id(s) as %d unit(s) (attempt %d)",
                sum(len(u) for u in units),
                len(units),
                attempt,
            )
        return units
