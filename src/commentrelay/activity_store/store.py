"""ActivityStore - Read and write access to activity records."""

from __future__ import annotations

from collections.abc import Iterable  # noqa: TC003

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from commentrelay.activity_store.database import Database
from commentrelay.activity_store.exceptions import (
    ActivityExistsError,
    ActivityNotFoundError,
    ActivityStoreError,
)
from commentrelay.activity_store.models import Activity

# SQLite caps bound parameters per statement; stay well below it
_MAX_IDS_PER_QUERY = 500


class ActivityStore:
    """Main API for Activity Store operations."""

    def __init__(self, db_path: str = "commentrelay.db") -> None:
        """Initialize Activity Store with SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
        """
        self._db = Database(db_path)
        self._db.create_tables()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    def add_activity(
        self,
        name: str | None = None,
        description: str | None = None,
        activity_type: str | None = None,
        summary: str | None = None,
        commit_id: str | None = None,
        repository_url: str | None = None,
        id: str | None = None,
    ) -> Activity:
        """Store a new activity record.

        Args:
            name: Work item name
            description: Free text holding the tracker issue URL
            activity_type: Activity type label
            summary: Summary text
            commit_id: Commit reference, if any
            repository_url: Repository URL the commit belongs to
            id: Explicit ID; generated when omitted

        Returns:
            The stored Activity

        Raises:
            ActivityExistsError: If an activity with the same ID exists
        """
        session = self._db.get_session()
        try:
            activity = Activity(
                id=id,
                name=name,
                description=description,
                activity_type=activity_type,
                summary=summary,
                commit_id=commit_id,
                repository_url=repository_url,
            )
            session.add(activity)
            session.commit()
            session.refresh(activity)
            return activity
        except IntegrityError as e:
            session.rollback()
            raise ActivityExistsError(f"Activity with id '{id}' already exists") from e
        finally:
            session.close()

    def get_activity(self, activity_id: str) -> Activity:
        """Get activity by ID.

        Raises:
            ActivityNotFoundError: If activity doesn't exist
        """
        session = self._db.get_session()
        try:
            activity = session.get(Activity, activity_id)
            if activity is None:
                raise ActivityNotFoundError(f"Activity with id '{activity_id}' not found")
            return activity
        finally:
            session.close()

    def get_activities(self, activity_ids: Iterable[str]) -> list[Activity]:
        """Fetch several activities at once.

        Unknown IDs are left out of the result. Results follow the order of
        ``activity_ids``; repeated IDs are returned once.

        Args:
            activity_ids: IDs to fetch

        Returns:
            The activities that exist

        Raises:
            ActivityStoreError: If the database read fails
        """
        ordered = list(dict.fromkeys(activity_ids))
        if not ordered:
            return []

        found: dict[str, Activity] = {}
        session = self._db.get_session()
        try:
            for start in range(0, len(ordered), _MAX_IDS_PER_QUERY):
                chunk = ordered[start : start + _MAX_IDS_PER_QUERY]
                stmt = select(Activity).where(Activity.id.in_(chunk))
                for activity in session.execute(stmt).scalars():
                    found[activity.id] = activity
        except SQLAlchemyError as e:
            raise ActivityStoreError(f"Failed to read {len(ordered)} activities: {e}") from e
        finally:
            session.close()

        return [found[activity_id] for activity_id in ordered if activity_id in found]

    def list_activities(self, limit: int = 100) -> list[Activity]:
        """List the most recently created activities."""
        session = self._db.get_session()
        try:
            stmt = select(Activity).order_by(Activity.created_at.desc()).limit(limit)
            return list(session.execute(stmt).scalars().all())
        finally:
            session.close()

    def delete_activity(self, activity_id: str) -> None:
        """Delete an activity.

        Raises:
            ActivityNotFoundError: If activity doesn't exist
        """
        session = self._db.get_session()
        try:
            activity = session.get(Activity, activity_id)
            if activity is None:
                raise ActivityNotFoundError(f"Activity with id '{activity_id}' not found")
            session.delete(activity)
            session.commit()
        finally:
            session.close()
