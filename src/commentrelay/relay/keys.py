"""Ticket key extraction from free text."""

from __future__ import annotations

import re

TICKET_KEY_PATTERN = re.compile(r"[A-Z]+-\d+")


def extract_ticket_key(text: str | None) -> str | None:
    """Return the first ticket key (e.g. "TEST-123") found in ``text``.

    Matching is case-sensitive and does not depend on the surrounding URL,
    so ``https://x/browse/TEST-123?q=1`` yields ``TEST-123``.

    Returns:
        The key, or None for empty input or when nothing matches.
    """
    if not text:
        return None
    match = TICKET_KEY_PATTERN.search(text)
    return match.group(0) if match else None
