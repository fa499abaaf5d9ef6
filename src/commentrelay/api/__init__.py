"""REST API for Comment Relay."""

from commentrelay.api.app import app, create_app
from commentrelay.api.models import (
    APIResponse,
    ActivityCreate,
    ActivityResponse,
    CommentRequest,
)

__all__ = [
    "APIResponse",
    "ActivityCreate",
    "ActivityResponse",
    "CommentRequest",
    "app",
    "create_app",
]
