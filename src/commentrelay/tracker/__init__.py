"""Tracker client - Posts comments to issues over the tracker REST API."""

from commentrelay.tracker.client import COMMENT_PATH, CREATED, TrackerClient
from commentrelay.tracker.exceptions import TrackerConfigError, TrackerError

__all__ = [
    "COMMENT_PATH",
    "CREATED",
    "TrackerClient",
    "TrackerConfigError",
    "TrackerError",
]
