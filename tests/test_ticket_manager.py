from unittest.mock import MagicMock

import pytest

from database.models import Account
from errors import ValidationError
from notifications.sms import AlertResult
from tickets.manager import TicketManager

ACCOUNT = Account(id="acc-1", mobile="9123456789", username="asha", password="hash")
FIELDS = {"ticket_type": "technical_issue", "remarks": "Screen stays blank"}


class TestTicketManager:
    def test_submit_sends_alert(self, ticket_store):
        notifier = MagicMock()
        notifier.send_alert.return_value = AlertResult(success=True)

        ticket, alert = TicketManager(ticket_store, notifier).submit_ticket(FIELDS, account=ACCOUNT)

        assert alert.success is True
        notifier.send_alert.assert_called_once_with(ticket)
        assert ticket.created_by == "asha"
        assert ticket.user_mobile == "9123456789"

    def test_alert_failure_keeps_ticket(self, ticket_store):
        notifier = MagicMock()
        notifier.send_alert.return_value = AlertResult(success=False, error="SMS API key not configured")

        ticket, alert = TicketManager(ticket_store, notifier).submit_ticket(FIELDS, account=ACCOUNT)

        assert alert.success is False
        assert ticket_store.get_by_id(ticket.id) == ticket

    def test_notifier_exception_keeps_ticket(self, ticket_store):
        notifier = MagicMock()
        notifier.send_alert.side_effect = RuntimeError("boom")

        ticket, alert = TicketManager(ticket_store, notifier).submit_ticket(FIELDS, account=ACCOUNT)

        assert alert.success is False
        assert alert.error == "boom"
        assert len(ticket_store) == 1

    def test_invalid_ticket_never_alerts(self, ticket_store):
        notifier = MagicMock()
        with pytest.raises(ValidationError):
            TicketManager(ticket_store, notifier).submit_ticket({"ticket_type": "other", "remarks": "short"})
        notifier.send_alert.assert_not_called()
        assert len(ticket_store) == 0

    def test_without_notifier(self, ticket_store):
        ticket, alert = TicketManager(ticket_store).submit_ticket(FIELDS)
        assert alert.skipped is True
        assert ticket.created_by == "Unknown"
