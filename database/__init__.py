"""
Database module for Ticket Desk
Handles snapshot persistence and the entity models
"""

from .storage import SnapshotStorage, get_storage
from .models import Account, Session, Ticket, AlertRecord

__all__ = [
    'SnapshotStorage',
    'get_storage',
    'Account',
    'Session',
    'Ticket',
    'AlertRecord'
]
