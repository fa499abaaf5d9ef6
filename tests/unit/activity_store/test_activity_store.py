"""Unit tests for ActivityStore."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from commentrelay.activity_store import (
    Activity,
    ActivityExistsError,
    ActivityNotFoundError,
    ActivityStore,
    ActivityStoreError,
)


@pytest.mark.unit
class TestAddActivity:
    """Tests for add_activity."""

    def test_add_activity_with_all_fields(self, store: ActivityStore) -> None:
        """All fields round-trip through the store."""
        activity = store.add_activity(
            id="a1",
            name="Login page",
            description="https://x/browse/ABC-1",
            activity_type="Development",
            summary="Built the form",
            commit_id="abc123",
            repository_url="https://git.example.com/repo",
        )

        fetched = store.get_activity("a1")
        assert isinstance(activity, Activity)
        assert fetched.name == "Login page"
        assert fetched.description == "https://x/browse/ABC-1"
        assert fetched.commit_id == "abc123"
        assert fetched.created_at is not None

    def test_generates_id(self, store: ActivityStore) -> None:
        """An ID is generated when none is given."""
        activity = store.add_activity(name="No id")

        assert len(activity.id) == 36

    def test_duplicate_id(self, store: ActivityStore) -> None:
        """Reusing an ID raises ActivityExistsError."""
        store.add_activity(id="a1")

        with pytest.raises(ActivityExistsError):
            store.add_activity(id="a1")


@pytest.mark.unit
class TestGetActivities:
    """Tests for the batched read."""

    def test_returns_in_request_order(self, store: ActivityStore) -> None:
        """Results follow the requested order, not insertion order."""
        for activity_id in ["a1", "a2", "a3"]:
            store.add_activity(id=activity_id)

        result = store.get_activities(["a3", "a1", "a2"])

        assert [a.id for a in result] == ["a3", "a1", "a2"]

    def test_unknown_ids_are_omitted(self, store: ActivityStore) -> None:
        """Partial results are returned without error."""
        store.add_activity(id="a1")

        result = store.get_activities(["missing", "a1"])

        assert [a.id for a in result] == ["a1"]

    def test_duplicates_returned_once(self, store: ActivityStore) -> None:
        """Repeated IDs do not duplicate records."""
        store.add_activity(id="a1")

        assert [a.id for a in store.get_activities(["a1", "a1"])] == ["a1"]

    def test_empty_request(self, store: ActivityStore) -> None:
        """No IDs means no query and no results."""
        assert store.get_activities([]) == []

    def test_large_request_is_chunked(self, store: ActivityStore) -> None:
        """More IDs than one query allows are still all returned."""
        ids = [f"a{i}" for i in range(1200)]
        for activity_id in ids[::100]:
            store.add_activity(id=activity_id)

        result = store.get_activities(ids)

        assert [a.id for a in result] == ids[::100]

    def test_database_error_is_wrapped(self, store: ActivityStore) -> None:
        """SQLAlchemy errors surface as ActivityStoreError."""
        error = OperationalError("SELECT", {}, Exception("disk I/O error"))
        with (
            patch("sqlalchemy.orm.Session.execute", side_effect=error),
            pytest.raises(ActivityStoreError),
        ):
            store.get_activities(["a1"])


@pytest.mark.unit
class TestGetAndDelete:
    """Tests for single-record access."""

    def test_get_missing(self, store: ActivityStore) -> None:
        """Unknown IDs raise ActivityNotFoundError."""
        with pytest.raises(ActivityNotFoundError):
            store.get_activity("nope")

    def test_delete(self, store: ActivityStore) -> None:
        """Deleted activities are gone."""
        store.add_activity(id="a1")

        store.delete_activity("a1")

        with pytest.raises(ActivityNotFoundError):
            store.get_activity("a1")

    def test_delete_missing(self, store: ActivityStore) -> None:
        """Deleting an unknown ID raises ActivityNotFoundError."""
        with pytest.raises(ActivityNotFoundError):
            store.delete_activity("nope")

    def test_list_activities_limit(self, store: ActivityStore) -> None:
        """list_activities honours the limit."""
        for i in range(5):
            store.add_activity(id=f"a{i}")

        assert len(store.list_activities(limit=3)) == 3
