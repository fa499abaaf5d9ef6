"""Unit tests for ticket key extraction."""

import pytest

from commentrelay.relay import extract_ticket_key


@pytest.mark.unit
class TestExtractTicketKey:
    """Tests for extract_ticket_key."""

    def test_extracts_key_from_browse_url(self) -> None:
        """Key is found in a browse URL with a query string."""
        assert extract_ticket_key("https://x/browse/TEST-123?q=1") == "TEST-123"

    def test_url_without_key(self) -> None:
        """URL without a key yields no match."""
        assert extract_ticket_key("https://example.com/noissue") is None

    def test_none(self) -> None:
        """None yields no match."""
        assert extract_ticket_key(None) is None

    def test_empty_string(self) -> None:
        """Empty string yields no match."""
        assert extract_ticket_key("") is None

    def test_key_in_free_text(self) -> None:
        """Extraction does not depend on a URL."""
        assert extract_ticket_key("see ABC-42 for details") == "ABC-42"

    def test_first_match_wins(self) -> None:
        """When several keys appear, the first is returned."""
        assert extract_ticket_key("PROJ-1 duplicates PROJ-2") == "PROJ-1"

    def test_case_sensitive(self) -> None:
        """Lowercase project prefixes do not match."""
        assert extract_ticket_key("https://x/browse/test-123") is None

    def test_requires_digits(self) -> None:
        """A dash followed by letters is not a key."""
        assert extract_ticket_key("https://x/browse/TEST-abc") is None

    @pytest.mark.parametrize(
        "text",
        ["", " ", "-", "A-", "-1", "a-1", "ÄÖ-1", "\n\t", "https://x/browse/"],
    )
    def test_never_raises_on_odd_input(self, text: str) -> None:
        """Odd input returns None rather than raising."""
        assert extract_ticket_key(text) is None
