"""Relay - Batching, aggregation and budgeted dispatch of activity comments."""

from commentrelay.relay.aggregator import CommentAggregator, build_comment_body
from commentrelay.relay.dispatcher import RateLimitedDispatcher
from commentrelay.relay.keys import extract_ticket_key
from commentrelay.relay.models import (
    AggregationResult,
    CallBudget,
    CommentDraft,
    DispatchReport,
    DispatchResult,
    OutcomeStatus,
    UnitReport,
    WorkUnit,
)
from commentrelay.relay.relay import CommentRelay, RelayStats
from commentrelay.relay.splitter import BatchSplitter, split_into_units
from commentrelay.relay.work_queue import WorkQueue

__all__ = [
    "AggregationResult",
    "BatchSplitter",
    "CallBudget",
    "CommentAggregator",
    "CommentDraft",
    "CommentRelay",
    "DispatchReport",
    "DispatchResult",
    "OutcomeStatus",
    "RateLimitedDispatcher",
    "RelayStats",
    "UnitReport",
    "WorkQueue",
    "build_comment_body",
    "extract_ticket_key",
    "split_into_units",
]
