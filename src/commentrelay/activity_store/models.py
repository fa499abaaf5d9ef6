"""SQLAlchemy models for Activity Store."""

from __future__ import annotations

import uuid
from datetime import datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from typing import Any

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Activity(Base):
    """Activity model - one unit of work done against a tracker issue.

    The description carries the tracker URL the activity refers to; the
    relay extracts the ticket key from it.
    """

    __tablename__ = "activities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    activity_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    commit_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    repository_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        id: str | None = None,
        name: str | None = None,
        description: str | None = None,
        activity_type: str | None = None,
        summary: str | None = None,
        commit_id: str | None = None,
        repository_url: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.name = name
        self.description = description
        self.activity_type = activity_type
        self.summary = summary
        self.commit_id = commit_id
        self.repository_url = repository_url

    def __repr__(self) -> str:
        return f"<Activity(id={self.id!r}, name={self.name!r}, type={self.activity_type!r})>"
