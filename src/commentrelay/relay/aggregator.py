"""Comment aggregation - turns a work unit into one draft per ticket key."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from sqlalchemy.exc import SQLAlchemyError

from commentrelay.activity_store import Activity, ActivityStoreError
from commentrelay.relay.keys import extract_ticket_key
from commentrelay.relay.models import AggregationResult, WorkUnit

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
NO_SUMMARY = "No summary provided"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


class ActivityReader(Protocol):
    """Batched read access to activity records."""

    def get_activities(self, activity_ids: Iterable[str]) -> list[Activity]:
        """Return the records that exist for ``activity_ids``."""
        ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def build_comment_body(activity: Activity, timestamp: datetime) -> str:
    """Render the comment text for a single activity.

    The commit line is only added when both the commit reference and the
    repository URL are present.
    """
    lines = [
        f"Work Item: {activity.name or NOT_AVAILABLE}",
        f"Activity Type: {activity.activity_type or NOT_AVAILABLE}",
        f"Summary: {activity.summary or NO_SUMMARY}",
        f"Timestamp: {timestamp.strftime(TIMESTAMP_FORMAT)}",
    ]
    if activity.commit_id and activity.repository_url:
        repo = activity.repository_url.rstrip("/")
        lines.append(f"Commit: {repo}/commit/{activity.commit_id}")
    return "\n".join(lines)


class CommentAggregator:
    """Resolves a work unit's activities and merges them per ticket key."""

    def __init__(
        self,
        reader: ActivityReader,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the aggregator.

        Args:
            reader: Store used for the batched activity read.
            clock: Source of the comment timestamp.
        """
        self.reader = reader
        self.clock = clock

    def _read(self, unit: WorkUnit) -> list[Activity]:
        try:
            return self.reader.get_activities(unit.activity_ids)
        except (ActivityStoreError, SQLAlchemyError) as e:
            logger.error(
                "Could not read %d activities (%s): %s",
                len(unit),
                ", ".join(unit.activity_ids),
                e,
            )
            return []

    def aggregate(self, unit: WorkUnit) -> AggregationResult:
        """Build drafts for every activity in the unit.

        Activities with a blank description or no ticket key in it are
        skipped. A failed read yields an empty result.
        """
        result = AggregationResult()
        activities = self._read(unit)
        found = {activity.id for activity in activities}
        timestamp = self.clock()

        for activity_id in unit.activity_ids:
            if activity_id not in found:
                logger.debug("Activity %s not found, skipping", activity_id)
                result.skipped.append(activity_id)

        for activity in activities:
            if not activity.description or not activity.description.strip():
                logger.debug("Activity %s has no description, skipping", activity.id)
                result.skipped.append(activity.id)
                continue

            ticket_key = extract_ticket_key(activity.description)
            if ticket_key is None:
                logger.debug("No ticket key in description of activity %s, skipping", activity.id)
                result.skipped.append(activity.id)
                continue

            result.add(ticket_key, activity.id, build_comment_body(activity, timestamp))

        logger.info(
            "Aggregated %d activities into %d comment(s), skipped %d",
            len(activities),
            len(result.drafts),
            len(result.skipped),
        )
        return result
