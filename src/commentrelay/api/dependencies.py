"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator, Iterable  # noqa: TC003
from typing import TYPE_CHECKING, Annotated, Any, Protocol

from fastapi import Depends

from commentrelay.activity_store import ActivityStore

if TYPE_CHECKING:
    from commentrelay.relay import WorkUnit


class RelayProtocol(Protocol):
    """Interface for the comment relay."""

    def post_comment(self, activity_ids: Iterable[str] | None) -> list[WorkUnit]:
        """Queue comments for activities."""
        ...

    def status(self) -> dict[str, Any]:
        """Progress counters and queue depth."""
        ...


# Global ActivityStore instance (initialized on app startup)
_activity_store: ActivityStore | None = None


def init_activity_store(db_path: str = "commentrelay.db") -> ActivityStore:
    """Initialize the global ActivityStore instance."""
    global _activity_store  # noqa: PLW0603
    _activity_store = ActivityStore(db_path)
    return _activity_store


def close_activity_store() -> None:
    """Close the global ActivityStore instance."""
    global _activity_store  # noqa: PLW0603
    if _activity_store is not None:
        _activity_store.close()
        _activity_store = None


def get_activity_store() -> Generator[ActivityStore, None, None]:
    """Dependency that provides the ActivityStore instance."""
    if _activity_store is None:
        raise RuntimeError("ActivityStore not initialized. Call init_activity_store() first.")
    yield _activity_store


ActivityStoreDep = Annotated[ActivityStore, Depends(get_activity_store)]

# Global relay instance (initialized on app startup)
_relay: RelayProtocol | None = None


def init_relay(relay: RelayProtocol) -> None:
    """Initialize the global relay instance."""
    global _relay  # noqa: PLW0603
    _relay = relay


def close_relay() -> None:
    """Forget the global relay instance."""
    global _relay  # noqa: PLW0603
    _relay = None


def get_relay() -> Generator[RelayProtocol, None, None]:
    """Dependency that provides the relay instance."""
    if _relay is None:
        raise RuntimeError("Relay not initialized. Call init_relay() first.")
    yield _relay


RelayDep = Annotated[RelayProtocol, Depends(get_relay)]
