"""Activity Store - Persistent storage for source activity records."""

from commentrelay.activity_store.exceptions import (
    ActivityExistsError,
    ActivityNotFoundError,
    ActivityStoreError,
)
from commentrelay.activity_store.models import Activity
from commentrelay.activity_store.store import ActivityStore

__all__ = [
    "Activity",
    "ActivityExistsError",
    "ActivityNotFoundError",
    "ActivityStore",
    "ActivityStoreError",
]
