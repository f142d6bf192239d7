from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
import requests

from database.models import Ticket
from errors import ValidationError
from notifications.settings import AlertSettingsStore
from notifications.sms import SmsNotifier, create_ticket_message, mask_mobile


def make_ticket(**overrides):
    data = {
        "id": "abcdef0123456789",
        "ticket_type": "zenox_exam_not_found",
        "remarks": "Exam is missing from the dashboard",
        "priority": "urgent",
        "student_name": "Ravi Kumar",
        "created_by": "asha",
    }
    data.update(overrides)
    return Ticket(**data)


def gateway_response(payload=None, status_code=200):
    response = MagicMock()
    response.content = b"{}"
    response.json.return_value = payload if payload is not None else {"return": True}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


class TestCreateTicketMessage:
    def test_message_layout(self):
        message = create_ticket_message(make_ticket(), now=datetime(2024, 5, 1, 14, 30, 5))
        assert message.splitlines() == [
            "🎫 New Ticket Alert",
            "",
            "ID: #456789",
            "Type: Exam Not Found",
            "Priority: URGENT",
            "Student: Ravi Kumar",
            "",
            "By: asha",
            "Time: 14:30:05",
        ]

    def test_student_line_omitted(self):
        message = create_ticket_message(make_ticket(ticket_type="other", student_name=None))
        assert "Student:" not in message
        assert "Type: Other" in message

    def test_mask_mobile(self):
        assert mask_mobile("9876543210") == "987****210"


class TestAlertSettingsStore:
    def test_defaults_and_persistence(self, storage):
        settings = AlertSettingsStore(storage)
        settings.update(sms_enabled=True, admin_mobile="9876543210", sms_api_key="key")

        reloaded = AlertSettingsStore(storage)
        assert reloaded.sms_enabled is True
        assert reloaded.admin_mobile == "9876543210"
        assert reloaded.sms_api_key == "key"

    def test_invalid_admin_mobile(self, storage):
        settings = AlertSettingsStore(storage)
        with pytest.raises(ValidationError):
            settings.update(admin_mobile="12345")

    def test_unknown_setting(self, storage):
        with pytest.raises(ValueError):
            AlertSettingsStore(storage).update(theme="dark")


class TestSmsNotifier:
    def test_disabled_is_skipped(self, settings):
        settings.update(sms_enabled=False)
        with patch("notifications.sms.requests.post") as post:
            result = SmsNotifier(settings).send_alert(make_ticket())
        assert result.success is False
        assert result.skipped is True
        post.assert_not_called()

    @pytest.mark.parametrize("changes, error", [
        ({"admin_mobile": ""}, "Admin mobile number not configured"),
        ({"sms_api_key": ""}, "SMS API key not configured"),
    ])
    def test_configuration_gaps(self, settings, changes, error):
        settings.update(**changes)
        with patch("notifications.sms.requests.post") as post:
            result = SmsNotifier(settings).send_alert(make_ticket())
        assert result.success is False
        assert result.skipped is False
        assert result.error == error
        post.assert_not_called()

    def test_malformed_admin_mobile(self, settings):
        settings.admin_mobile = "98765"
        result = SmsNotifier(settings).send_alert(make_ticket())
        assert result.error == "Invalid admin mobile number in settings"

    def test_success_records_history(self, settings):
        with patch("notifications.sms.requests.post", return_value=gateway_response()) as post:
            result = SmsNotifier(settings).send_alert(make_ticket())

        assert result.success is True
        post.assert_called_once()
        assert post.call_args.kwargs["headers"] == {"authorization": "test-key"}
        assert post.call_args.kwargs["json"]["numbers"] == "9876543210"
        assert len(settings.history) == 1
        record = settings.history[0]
        assert record.to == "9876543210"
        assert record.ticket_id == "abcdef0123456789"
        assert record.status == "sent"
        assert AlertSettingsStore(settings.storage).history == settings.history

    def test_http_error(self, settings):
        with patch("notifications.sms.requests.post", return_value=gateway_response(status_code=401)):
            result = SmsNotifier(settings).send_alert(make_ticket())
        assert result.success is False
        assert "401" in result.error
        assert settings.history == []

    def test_network_error(self, settings):
        with patch("notifications.sms.requests.post", side_effect=requests.ConnectionError("unreachable")):
            result = SmsNotifier(settings).send_alert(make_ticket())
        assert result.success is False
        assert result.error == "unreachable"

    def test_gateway_rejection(self, settings):
        payload = {"return": False, "message": ["Invalid Authentication"]}
        with patch("notifications.sms.requests.post", return_value=gateway_response(payload)):
            result = SmsNotifier(settings).send_alert(make_ticket())
        assert result.success is False
        assert result.error == "Invalid Authentication"
