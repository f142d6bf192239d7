import pytest

from auth.store import AccountStore
from config import Config
from database.storage import SnapshotStorage
from notifications.settings import AlertSettingsStore
from tickets.store import TicketStore


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    monkeypatch.setattr(Config, 'PASSWORD_HASH_ITERATIONS', 1000)


@pytest.fixture
def storage(tmp_path):
    return SnapshotStorage(str(tmp_path / "storage"))


@pytest.fixture
def account_store(storage):
    return AccountStore(storage)


@pytest.fixture
def ticket_store(storage):
    return TicketStore(storage)


@pytest.fixture
def settings(storage):
    store = AlertSettingsStore(storage)
    store.update(sms_enabled=True, admin_mobile="9876543210", sms_api_key="test-key")
    return store


@pytest.fixture
def signup_fields():
    return {
        "mobile": "9123456789",
        "username": "asha",
        "password": "TestPass123!",
        "confirm_password": "TestPass123!",
    }


@pytest.fixture
def exam_ticket_fields():
    return {
        "ticket_type": "zenox_exam_not_found",
        "priority": "high",
        "subject_name": "Physics",
        "student_name": "Ravi Kumar",
        "student_mobile": "9000000001",
        "student_reg_number": "REG-2024-001",
        "remarks": "Exam is missing from the student dashboard",
    }
