"""
Authentication module for Ticket Desk
Handles credential hashing, accounts and the login session
"""

from .authentication import AuthSystem
from .store import AccountStore

__all__ = ['AuthSystem', 'AccountStore']
