"""Activity record endpoints."""

from fastapi import APIRouter, Query, status

from commentrelay.api.dependencies import ActivityStoreDep
from commentrelay.api.models import (
    APIResponse,
    ActivityCreate,
    ActivityResponse,
    activity_to_response,
)

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get("", response_model=APIResponse[list[ActivityResponse]])
def list_activities(
    store: ActivityStoreDep, limit: int = Query(default=100, ge=1, le=1000)
) -> APIResponse[list[ActivityResponse]]:
    """List the most recent activities."""
    activities = store.list_activities(limit=limit)
    return APIResponse(data=[activity_to_response(a) for a in activities])


@router.post(
    "",
    response_model=APIResponse[ActivityResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_activity(
    activity: ActivityCreate, store: ActivityStoreDep
) -> APIResponse[ActivityResponse]:
    """Store a new activity record."""
    created = store.add_activity(
        id=activity.id,
        name=activity.name,
        description=activity.description,
        activity_type=activity.activity_type,
        summary=activity.summary,
        commit_id=activity.commit_id,
        repository_url=activity.repository_url,
    )
    return APIResponse(data=activity_to_response(created))


@router.get("/{activity_id}", response_model=APIResponse[ActivityResponse])
def get_activity(activity_id: str, store: ActivityStoreDep) -> APIResponse[ActivityResponse]:
    """Get an activity by ID."""
    activity = store.get_activity(activity_id)
    return APIResponse(data=activity_to_response(activity))


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(activity_id: str, store: ActivityStoreDep) -> None:
    """Delete an activity."""
    store.delete_activity(activity_id)
