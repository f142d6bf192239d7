import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import requests

from config import SmsConfig
from database.models import AlertRecord, utc_now
from errors import NotifierFailure
from tickets.catalog import type_label
from validation.rules import is_valid_mobile

logger = logging.getLogger(__name__)


@dataclass
class AlertResult:
    success: bool
    error: Optional[str] = None
    skipped: bool = False


def mask_mobile(mobile):
    return f"{mobile[:3]}****{mobile[-3:]}"


def create_ticket_message(ticket, now=None):
    now = now or datetime.now()
    lines = [
        "🎫 New Ticket Alert",
        "",
        f"ID: #{ticket.id[-6:]}",
        f"Type: {type_label(ticket.ticket_type, short=True)}",
        f"Priority: {ticket.priority.upper()}",
    ]
    if ticket.student_name:
        lines.append(f"Student: {ticket.student_name}")
    lines += [
        "",
        f"By: {ticket.created_by or 'Unknown'}",
        f"Time: {now.strftime('%H:%M:%S')}",
    ]
    return "\n".join(lines)


class SmsNotifier:
    """Send a ticket alert to the administrator's mobile over the SMS gateway"""

    def __init__(self, settings, sms_config=None):
        self.settings = settings
        self.config = sms_config or SmsConfig()

    def check_configuration(self):
        """Return an error message for the first configuration gap, else None"""
        if not self.settings.admin_mobile:
            return "Admin mobile number not configured"
        if not self.settings.sms_api_key:
            return "SMS API key not configured"
        if not is_valid_mobile(self.settings.admin_mobile):
            return "Invalid admin mobile number in settings"
        return None

    def _deliver(self, mobile, message):
        try:
            response = requests.post(
                self.config.api_url,
                headers={'authorization': self.settings.sms_api_key},
                json={'route': 'q', 'message': message, 'numbers': mobile},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            payload = response.json() if response.content else {}
        except (requests.RequestException, ValueError) as e:
            raise NotifierFailure(str(e)) from e

        # The gateway answers 200 with {"return": false, ...} when it refuses a message
        if isinstance(payload, dict) and payload.get('return') is False:
            error = payload.get('message') or "Gateway rejected the message"
            if isinstance(error, list):
                error = '; '.join(str(item) for item in error)
            raise NotifierFailure(str(error))

    def send_alert(self, ticket):
        if not self.settings.sms_enabled:
            logger.info("SMS notifications are disabled")
            return AlertResult(success=False, error="SMS notifications are disabled", skipped=True)

        problem = self.check_configuration()
        if problem:
            logger.warning(problem)
            return AlertResult(success=False, error=problem)

        message = create_ticket_message(ticket)
        admin_mobile = self.settings.admin_mobile
        try:
            self._deliver(admin_mobile, message)
        except NotifierFailure as e:
            logger.warning("SMS alert for ticket %s failed: %s", ticket.id, e)
            return AlertResult(success=False, error=str(e))

        self.settings.add_history(AlertRecord(
            id=uuid.uuid4().hex,
            to=admin_mobile,
            message=message,
            ticket_id=ticket.id,
            timestamp=utc_now(),
        ))
        logger.info("SMS alert sent to %s for ticket %s", mask_mobile(admin_mobile), ticket.id)
        return AlertResult(success=True)
