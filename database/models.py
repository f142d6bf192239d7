from dataclasses import asdict, dataclass, fields, replace
from datetime import datetime, timezone
from typing import Optional

from tickets.catalog import PRIORITY_MEDIUM, STATUS_PENDING

ROLE_USER = 'user'
ROLE_ADMIN = 'admin'


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SnapshotModel:
    """Dict conversion shared by everything that lands in a snapshot"""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict):
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def copy(self, **changes):
        return replace(self, **changes)


@dataclass
class Account(SnapshotModel):
    id: str
    mobile: str
    username: str
    password: str
    role: str = ROLE_USER
    created_at: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass
class Session(SnapshotModel):
    account: Account
    token: str

    @property
    def role(self) -> str:
        return self.account.role

    def to_dict(self) -> dict:
        return {'account': self.account.to_dict(), 'token': self.token}

    @classmethod
    def from_dict(cls, data: dict):
        return cls(account=Account.from_dict(data['account']), token=data['token'])


@dataclass
class Ticket(SnapshotModel):
    id: str
    ticket_type: str
    remarks: str
    priority: str = PRIORITY_MEDIUM
    status: str = STATUS_PENDING
    subject_name: Optional[str] = None
    student_name: Optional[str] = None
    student_mobile: Optional[str] = None
    student_reg_number: Optional[str] = None
    created_by: Optional[str] = None
    user_mobile: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class AlertRecord(SnapshotModel):
    id: str
    to: str
    message: str
    ticket_id: str
    timestamp: Optional[str] = None
    status: str = 'sent'
    type: str = 'ticket_created'
