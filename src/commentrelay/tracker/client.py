"""TrackerClient - Interfaces with the issue tracker REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from commentrelay.tracker.exceptions import TrackerConfigError

logger = logging.getLogger("commentrelay.tracker")

COMMENT_PATH = "/rest/api/2/issue/{issue_id}/comment"

# Status the tracker returns when a comment is created
CREATED = 201


class TrackerClient:
    """Client for the tracker's issue comment endpoint.

    Authenticates with basic auth (account email plus API token) when an
    email is configured, otherwise sends the token as a bearer token.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str,
        email: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize Tracker Client.

        Args:
            base_url: Tracker base URL, e.g. "https://acme.atlassian.net"
            api_token: API token (basic auth) or personal access token (bearer)
            email: Account email for basic auth
            timeout: Request timeout in seconds
            transport: Custom httpx transport (for testing)

        Raises:
            TrackerConfigError: If base_url or api_token is missing
        """
        if not base_url:
            raise TrackerConfigError("Tracker base URL is not configured")
        if not api_token:
            raise TrackerConfigError("Tracker API token is not configured")

        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.email = email
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the REST API."""
        if self._client is None:
            kwargs: dict[str, Any] = {
                "base_url": self.base_url,
                "headers": {
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
                "timeout": self.timeout,
            }
            if self.email:
                kwargs["auth"] = httpx.BasicAuth(self.email, self.api_token)
            else:
                kwargs["headers"]["Authorization"] = f"Bearer {self.api_token}"
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.Client(**kwargs)
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> TrackerClient:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def post_comment(self, issue_key: str, body: str) -> httpx.Response:
        """Add a comment to an issue.

        The response is returned as-is; callers decide what a non-201
        status means.

        Args:
            issue_key: Issue key, e.g. "PROJ-123"
            body: Comment text

        Returns:
            The tracker's response

        Raises:
            httpx.HTTPError: If the request could not be completed
        """
        path = COMMENT_PATH.format(issue_id=issue_key)
        logger.debug("POST %s (%d chars)", path, len(body))
        return self.client.post(path, json={"body": body})
