"""Unit tests for RateLimitedDispatcher and CallBudget."""

from unittest.mock import MagicMock, call

import httpx
import pytest

from commentrelay.relay import (
    AggregationResult,
    CallBudget,
    OutcomeStatus,
    RateLimitedDispatcher,
)
from commentrelay.tracker import TrackerError


def _aggregation(*keys: str) -> AggregationResult:
    result = AggregationResult()
    for i, key in enumerate(keys):
        result.add(key, f"a{i}", f"comment for {key}")
    return result


@pytest.fixture
def dispatcher(mock_poster: MagicMock) -> RateLimitedDispatcher:
    """Create a dispatcher around the mock poster."""
    return RateLimitedDispatcher(mock_poster)


@pytest.mark.unit
class TestCallBudget:
    """Tests for CallBudget."""

    def test_for_pass_subtracts_margin(self) -> None:
        """The safety margin is held back."""
        assert CallBudget.for_pass(100, 1).remaining == 99

    def test_for_pass_never_negative(self) -> None:
        """An allowance below the margin leaves nothing."""
        budget = CallBudget.for_pass(0, 1)

        assert budget.remaining == 0
        assert budget.exhausted

    def test_consume_until_exhausted(self) -> None:
        """consume() succeeds exactly `remaining` times."""
        budget = CallBudget(2)

        assert [budget.consume() for _ in range(4)] == [True, True, False, False]
        assert budget.used == 2
        assert budget.remaining == 0


@pytest.mark.unit
class TestDispatch:
    """Tests for RateLimitedDispatcher.dispatch."""

    def test_posts_one_comment_per_key(
        self, dispatcher: RateLimitedDispatcher, mock_poster: MagicMock
    ) -> None:
        """Each key gets exactly one call with its draft body."""
        report = dispatcher.dispatch(_aggregation("ABC-1", "ABC-2"), CallBudget(10))

        assert mock_poster.post_comment.call_args_list == [
            call("ABC-1", "comment for ABC-1"),
            call("ABC-2", "comment for ABC-2"),
        ]
        assert report.calls_attempted == 2
        assert report.count(OutcomeStatus.POSTED) == 2
        assert report.deferred_ids == []

    def test_budget_limits_calls_and_defers_rest(
        self, dispatcher: RateLimitedDispatcher, mock_poster: MagicMock
    ) -> None:
        """With budget K and M > K keys, K calls are made and M-K keys deferred."""
        report = dispatcher.dispatch(
            _aggregation("K-1", "K-2", "K-3", "K-4", "K-5"), CallBudget(2)
        )

        assert mock_poster.post_comment.call_count == 2
        assert report.calls_attempted == 2
        assert report.count(OutcomeStatus.DEFERRED) == 3
        assert report.deferred_ids == ["a2", "a3", "a4"]
        assert [r.ticket_key for r in report.results if r.status == OutcomeStatus.DEFERRED] == [
            "K-3",
            "K-4",
            "K-5",
        ]

    def test_deferral_carries_all_contributors(
        self, dispatcher: RateLimitedDispatcher
    ) -> None:
        """A deferred merged draft resubmits every activity that fed it."""
        aggregation = AggregationResult()
        aggregation.add("ABC-1", "a1", "one")
        aggregation.add("ABC-2", "a2", "two")
        aggregation.add("ABC-2", "a3", "three")

        report = dispatcher.dispatch(aggregation, CallBudget(1))

        assert report.deferred_ids == ["a2", "a3"]
        deferred = report.results[1]
        assert deferred.status == OutcomeStatus.DEFERRED
        assert deferred.activity_id == "a2"

    def test_zero_budget_makes_no_calls(
        self, dispatcher: RateLimitedDispatcher, mock_poster: MagicMock
    ) -> None:
        """Everything is deferred when the budget starts empty."""
        report = dispatcher.dispatch(_aggregation("ABC-1"), CallBudget(0))

        mock_poster.post_comment.assert_not_called()
        assert report.deferred_ids == ["a0"]

    def test_non_201_is_rejected_not_deferred(
        self,
        dispatcher: RateLimitedDispatcher,
        mock_poster: MagicMock,
        make_response,
    ) -> None:
        """Any other status is a terminal rejection with status and body kept."""
        mock_poster.post_comment.return_value = make_response(404, '{"errorMessages":["nope"]}')

        report = dispatcher.dispatch(_aggregation("ABC-1"), CallBudget(5))

        result = report.results[0]
        assert result.status == OutcomeStatus.REJECTED
        assert result.status_code == 404
        assert "nope" in result.response_body
        assert report.deferred_ids == []

    def test_200_is_rejected(
        self,
        dispatcher: RateLimitedDispatcher,
        mock_poster: MagicMock,
        make_response,
    ) -> None:
        """Only 201 counts as success."""
        mock_poster.post_comment.return_value = make_response(200)

        report = dispatcher.dispatch(_aggregation("ABC-1"), CallBudget(5))

        assert report.results[0].status == OutcomeStatus.REJECTED

    @pytest.mark.parametrize(
        "error",
        [httpx.ConnectTimeout("timed out"), TrackerError("no transport")],
    )
    def test_transport_error_is_failed_and_not_retried(
        self,
        dispatcher: RateLimitedDispatcher,
        mock_poster: MagicMock,
        error: Exception,
    ) -> None:
        """Transport errors end the key for this pass and do not stop the others."""
        mock_poster.post_comment.side_effect = [error, MagicMock(status_code=201)]

        report = dispatcher.dispatch(_aggregation("ABC-1", "ABC-2"), CallBudget(5))

        assert [r.status for r in report.results] == [
            OutcomeStatus.FAILED,
            OutcomeStatus.POSTED,
        ]
        assert report.results[0].error
        assert report.calls_attempted == 2
        assert report.deferred_ids == []

    @pytest.mark.parametrize(
        "error",
        [httpx.InvalidURL("bad url"), ValueError("unexpected"), KeyError("missing")],
    )
    def test_unexpected_error_is_failed_and_later_keys_posted(
        self,
        dispatcher: RateLimitedDispatcher,
        mock_poster: MagicMock,
        make_response,
        error: Exception,
    ) -> None:
        """An error outside the transport family fails one key, not the rest."""
        mock_poster.post_comment.side_effect = [error, make_response(201), make_response(201)]

        report = dispatcher.dispatch(_aggregation("P-0", "P-1", "P-2"), CallBudget(5))

        assert mock_poster.post_comment.call_count == 3
        assert [r.status for r in report.results] == [
            OutcomeStatus.FAILED,
            OutcomeStatus.POSTED,
            OutcomeStatus.POSTED,
        ]
        assert type(error).__name__ in report.results[0].error
        assert report.calls_attempted == 3

    def test_failed_call_still_consumes_budget(
        self, dispatcher: RateLimitedDispatcher, mock_poster: MagicMock
    ) -> None:
        """An attempted call counts against the budget even when it fails."""
        mock_poster.post_comment.side_effect = httpx.ReadError("reset")
        budget = CallBudget(1)

        report = dispatcher.dispatch(_aggregation("ABC-1", "ABC-2"), budget)

        assert budget.used == 1
        assert report.deferred_ids == ["a1"]

    def test_empty_aggregation(
        self, dispatcher: RateLimitedDispatcher, mock_poster: MagicMock
    ) -> None:
        """No drafts means no calls."""
        report = dispatcher.dispatch(AggregationResult(), CallBudget(5))

        mock_poster.post_comment.assert_not_called()
        assert report.results == []
