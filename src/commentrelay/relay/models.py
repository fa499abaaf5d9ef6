"""Data models for the relay."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


@dataclass(frozen=True)
class WorkUnit:
    """A bounded batch of activity IDs processed together in one task.

    Attributes:
        activity_ids: IDs in submission order.
        attempt: 1 for the first pass; incremented each time IDs are deferred.
    """

    activity_ids: tuple[str, ...]
    attempt: int = 1

    def __len__(self) -> int:
        return len(self.activity_ids)


@dataclass
class CommentDraft:
    """Comment text accumulated for one ticket key within one pass."""

    ticket_key: str
    body: str
    activity_ids: list[str] = field(default_factory=list)

    @property
    def representative_id(self) -> str:
        """First contributing activity, used for error attribution."""
        return self.activity_ids[0]

    def merge(self, activity_id: str, body: str) -> None:
        """Append another activity's comment after a blank line."""
        self.body = f"{self.body}\n\n{body}"
        self.activity_ids.append(activity_id)


@dataclass
class AggregationResult:
    """Drafts built from one work unit.

    Attributes:
        drafts: Ticket key -> draft, in the order keys were first encountered.
        skipped: Activity IDs that produced no draft (missing record, blank
            description or no ticket key).
    """

    drafts: dict[str, CommentDraft] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)

    def add(self, ticket_key: str, activity_id: str, body: str) -> None:
        """Create a draft for the key or merge into the existing one."""
        draft = self.drafts.get(ticket_key)
        if draft is None:
            self.drafts[ticket_key] = CommentDraft(
                ticket_key=ticket_key, body=body, activity_ids=[activity_id]
            )
        else:
            draft.merge(activity_id, body)


class OutcomeStatus(StrEnum):
    """What happened to a ticket key's comment in a pass."""

    POSTED = "posted"
    REJECTED = "rejected"
    FAILED = "failed"
    DEFERRED = "deferred"


@dataclass
class DispatchResult:
    """Outcome for a single ticket key."""

    ticket_key: str
    status: OutcomeStatus
    activity_id: str
    status_code: int | None = None
    response_body: str | None = None
    error: str | None = None


@dataclass
class DispatchReport:
    """Outcome of dispatching one aggregation.

    Attributes:
        results: One result per ticket key, in dispatch order.
        calls_attempted: Outbound calls made.
        deferred_ids: Activity IDs of keys the budget could not cover.
    """

    results: list[DispatchResult] = field(default_factory=list)
    calls_attempted: int = 0
    deferred_ids: list[str] = field(default_factory=list)

    def count(self, status: OutcomeStatus) -> int:
        """Number of keys that ended with ``status``."""
        return sum(1 for result in self.results if result.status == status)


@dataclass
class UnitReport:
    """Everything that happened while processing one work unit."""

    unit: WorkUnit
    skipped: list[str] = field(default_factory=list)
    dispatch: DispatchReport = field(default_factory=DispatchReport)
    resubmitted: list[WorkUnit] = field(default_factory=list)


class CallBudget:
    """Outbound calls still allowed in the current pass."""

    def __init__(self, remaining: int) -> None:
        self.remaining = max(0, remaining)
        self.used = 0

    @classmethod
    def for_pass(cls, allowance: int, safety_margin: int = 1) -> CallBudget:
        """Budget for a pass given the caller's remaining allowance."""
        return cls(allowance - safety_margin)

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0

    def consume(self) -> bool:
        """Take one call from the budget.

        Returns:
            False, without consuming, when the budget is already exhausted.
        """
        if self.exhausted:
            return False
        self.remaining -= 1
        self.used += 1
        return True

    def __repr__(self) -> str:
        return f"<CallBudget(remaining={self.remaining}, used={self.used})>"
