"""Rate-limited dispatch of comment drafts to the tracker."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import httpx

from commentrelay.logging import sanitize_for_log, truncate_output
from commentrelay.relay.models import (
    CommentDraft,
    DispatchReport,
    DispatchResult,
    OutcomeStatus,
)
from commentrelay.tracker import CREATED, TrackerError

if TYPE_CHECKING:
    from commentrelay.relay.models import AggregationResult, CallBudget

logger = logging.getLogger(__name__)


class CommentPoster(Protocol):
    """Outbound transport for comments."""

    def post_comment(self, issue_key: str, body: str) -> httpx.Response:
        """Post ``body`` as a comment on ``issue_key``."""
        ...


class RateLimitedDispatcher:
    """Posts one comment per ticket key while the call budget lasts.

    Keys the budget cannot cover are reported as deferred together with
    all of their contributing activity IDs, so a later pass re-aggregates
    them from scratch. Rejected and failed calls are final for the pass.
    """

    def __init__(self, poster: CommentPoster) -> None:
        self.poster = poster

    def dispatch(self, aggregation: AggregationResult, budget: CallBudget) -> DispatchReport:
        """Send the drafts in encounter order.

        Args:
            aggregation: Drafts for one pass.
            budget: Calls available to this pass; consumed as calls are made.

        Returns:
            Per-key outcomes, calls made and IDs to resubmit.
        """
        report = DispatchReport()

        for draft in aggregation.drafts.values():
            if not budget.consume():
                logger.info(
                    "Call budget exhausted, deferring %s (activity %s)",
                    draft.ticket_key,
                    draft.representative_id,
                )
                report.results.append(
                    DispatchResult(
                        ticket_key=draft.ticket_key,
                        status=OutcomeStatus.DEFERRED,
                        activity_id=draft.representative_id,
                    )
                )
                report.deferred_ids.extend(draft.activity_ids)
                continue

            report.calls_attempted += 1
            report.results.append(self._send(draft))

        if report.deferred_ids:
            logger.warning(
                "Deferred %d ticket(s) after %d call(s)",
                report.count(OutcomeStatus.DEFERRED),
                report.calls_attempted,
            )
        return report

    def _send(self, draft: CommentDraft) -> DispatchResult:
        try:
            response = self.poster.post_comment(draft.ticket_key, draft.body)
        except (httpx.HTTPError, TrackerError) as e:
            logger.exception(
                "Failed to post comment on %s (activity %s)",
                draft.ticket_key,
                draft.representative_id,
            )
            return DispatchResult(
                ticket_key=draft.ticket_key,
                status=OutcomeStatus.FAILED,
                activity_id=draft.representative_id,
                error=sanitize_for_log(str(e)),
            )
        except Exception as e:
            # Anything else still ends only this key; later keys keep going
            logger.exception(
                "Unexpected error posting comment on %s (activity %s)",
                draft.ticket_key,
                draft.representative_id,
            )
            return DispatchResult(
                ticket_key=draft.ticket_key,
                status=OutcomeStatus.FAILED,
                activity_id=draft.representative_id,
                error=sanitize_for_log(f"{type(e).__name__}: {e}"),
            )

        if response.status_code == CREATED:
            logger.info("Posted comment on %s", draft.ticket_key)
            return DispatchResult(
                ticket_key=draft.ticket_key,
                status=OutcomeStatus.POSTED,
                activity_id=draft.representative_id,
                status_code=response.status_code,
            )

        body = truncate_output(response.text)
        logger.warning(
            "Tracker rejected comment on %s (activity %s): %d - %s",
            draft.ticket_key,
            draft.representative_id,
            response.status_code,
            body,
        )
        return DispatchResult(
            ticket_key=draft.ticket_key,
            status=OutcomeStatus.REJECTED,
            activity_id=draft.representative_id,
            status_code=response.status_code,
            response_body=body,
        )
