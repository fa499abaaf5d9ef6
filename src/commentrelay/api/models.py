"""Pydantic models for REST API."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Activity models


class ActivityCreate(BaseModel):
    """Request model for storing an activity record."""

    id: str | None = Field(default=None, min_length=1, max_length=36)
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    activity_type: str | None = Field(default=None, max_length=100)
    summary: str | None = None
    commit_id: str | None = Field(default=None, max_length=64)
    repository_url: str | None = Field(default=None, max_length=500)


class ActivityResponse(BaseModel):
    """Response model for an activity record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None
    description: str | None
    activity_type: str | None
    summary: str | None
    commit_id: str | None
    repository_url: str | None
    created_at: datetime


def activity_to_response(activity: Any) -> ActivityResponse:
    """Convert an Activity model to ActivityResponse."""
    return ActivityResponse.model_validate(activity)


# Relay models


class CommentRequest(BaseModel):
    """Request model for relaying activities as comments."""

    activity_ids: list[str] | None = None


class CommentQueuedResponse(BaseModel):
    """Response model for queued comment work."""

    units: int
    activity_ids: int


class RelayStatusResponse(BaseModel):
    """Response model for relay progress counters."""

    running: bool
    pending_units: int
    units_processed: int
    calls_attempted: int
    skipped: int
    posted: int
    rejected: int
    failed: int
    deferred: int
