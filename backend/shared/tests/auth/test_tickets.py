"""Tests for login ticket issuance, reuse, and refresh."""

import re

from shared.auth.tickets import TICKET_PREFIX, TicketManager, generate_ticket

NOW = 1_700_000_000.0
DURATION = 3600
TICKET_PATTERN = re.compile(rf"^{re.escape(TICKET_PREFIX)}[0-9A-F]{{40}}$")


def _manager(now: float = NOW) -> TicketManager:
    return TicketManager(DURATION, clock=lambda: now)


class TestGenerateTicket:
    def test_prefix_and_hex_suffix(self):
        assert TICKET_PATTERN.match(generate_ticket())

    def test_consecutive_tickets_differ(self):
        assert generate_ticket() != generate_ticket()


class TestIssueOrReuse:
    def test_empty_ticket_issues_new(self):
        result = _manager().issue_or_reuse("", None)
        assert TICKET_PATTERN.match(result.ticket)
        assert result.expires_at == NOW + DURATION

    def test_missing_ticket_issues_new(self):
        result = _manager().issue_or_reuse(None, NOW + 100)
        assert TICKET_PATTERN.match(result.ticket)

    def test_two_new_tickets_differ(self):
        manager = _manager()
        assert manager.issue_or_reuse("", None).ticket != manager.issue_or_reuse("", None).ticket

    def test_valid_ticket_is_reused_with_extended_expiry(self):
        result = _manager().issue_or_reuse("TC-EXISTING", NOW + 10)
        assert result.ticket == "TC-EXISTING"
        assert result.expires_at == NOW + DURATION

    def test_ticket_expiring_now_is_replaced(self):
        result = _manager().issue_or_reuse("TC-EXISTING", NOW)
        assert result.ticket != "TC-EXISTING"
        assert TICKET_PATTERN.match(result.ticket)

    def test_expired_ticket_is_replaced(self):
        result = _manager().issue_or_reuse("TC-EXISTING", NOW - 1)
        assert result.ticket != "TC-EXISTING"

    def test_missing_expiry_is_treated_as_expired(self):
        result = _manager().issue_or_reuse("TC-EXISTING", None)
        assert result.ticket != "TC-EXISTING"


class TestRefresh:
    def test_future_expiry_is_extended_by_duration(self):
        assert _manager().refresh(NOW + 1) == NOW + DURATION

    def test_expiry_at_now_is_expired(self):
        assert _manager().refresh(NOW) is None

    def test_past_expiry_is_expired(self):
        assert _manager().refresh(NOW - 500) is None

    def test_unknown_ticket_is_expired(self):
        assert _manager().refresh(None) is None

    def test_duration_property(self):
        assert _manager().duration == DURATION
