"""Comment relay endpoints."""

from fastapi import APIRouter, status

from commentrelay.api.dependencies import RelayDep
from commentrelay.api.models import (
    APIResponse,
    CommentQueuedResponse,
    CommentRequest,
    RelayStatusResponse,
)

router = APIRouter(tags=["comments"])


@router.post(
    "/comments",
    response_model=APIResponse[CommentQueuedResponse],
    status_code=status.HTTP_202_ACCEPTED,
)
def post_comments(
    request: CommentRequest, relay: RelayDep
) -> APIResponse[CommentQueuedResponse]:
    """Queue comments for the given activities.

    Returns as soon as the work is queued; outcomes are only visible in
    the logs and the status counters.
    """
    units = relay.post_comment(request.activity_ids)
    return APIResponse(
        data=CommentQueuedResponse(
            units=len(units),
            activity_ids=sum(len(unit) for unit in units),
        )
    )


@router.get("/relay/status", response_model=APIResponse[RelayStatusResponse])
def relay_status(relay: RelayDep) -> APIResponse[RelayStatusResponse]:
    """Report worker state, queue depth and outcome counters."""
    return APIResponse(data=RelayStatusResponse(**relay.status()))
