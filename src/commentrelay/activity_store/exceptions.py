"""Custom exceptions for Activity Store."""


class ActivityStoreError(Exception):
    """Base exception for Activity Store errors."""


class ActivityNotFoundError(ActivityStoreError):
    """Activity with given ID does not exist."""


class ActivityExistsError(ActivityStoreError):
    """Activity with given ID already exists."""
