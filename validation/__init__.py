"""
Validation module for Ticket Desk
Pure input checks for accounts and tickets
"""

from .rules import (
    ValidationResult,
    is_detail_required,
    validate_account_input,
    validate_login_input,
    validate_ticket_input,
    password_strength
)

__all__ = [
    'ValidationResult',
    'is_detail_required',
    'validate_account_input',
    'validate_login_input',
    'validate_ticket_input',
    'password_strength'
]
