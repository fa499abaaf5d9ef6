"""Custom exceptions for the tracker client."""


class TrackerError(Exception):
    """Base exception for tracker client errors."""


class TrackerConfigError(TrackerError):
    """Tracker connection settings are missing or invalid."""
