import logging

from notifications.sms import AlertResult

logger = logging.getLogger(__name__)


class TicketManager:
    """Create tickets for the logged-in account, then alert the administrator"""

    def __init__(self, ticket_store, notifier=None):
        self.ticket_store = ticket_store
        self.notifier = notifier

    def submit_ticket(self, fields, account=None):
        """
        Create the ticket, then try to send the alert.

        Returns ``(ticket, alert_result)``. Alert problems are reported in
        the result only; the ticket is already stored by then and stays.
        Raises ``ValidationError`` when the ticket itself is rejected.
        """
        ticket = self.ticket_store.create_ticket(
            fields,
            created_by=account.username if account else 'Unknown',
            user_mobile=account.mobile if account else '',
        )
        return ticket, self._send_alert(ticket)

    def _send_alert(self, ticket):
        if self.notifier is None:
            return AlertResult(success=False, error="No alert channel configured", skipped=True)
        try:
            return self.notifier.send_alert(ticket)
        except Exception as e:
            logger.exception("Alert for ticket %s raised", ticket.id)
            return AlertResult(success=False, error=str(e))
