"""
UI module for Ticket Desk
Handles user interface components and pages
"""

from .components import UIComponents
from .pages import (
    get_stores,
    show_login_section,
    show_main_application,
    show_dashboard,
    show_ticket_form,
    show_my_tickets,
    show_ticket_management,
    show_profile,
    show_settings
)

__all__ = [
    'UIComponents',
    'get_stores',
    'show_login_section',
    'show_main_application',
    'show_dashboard',
    'show_ticket_form',
    'show_my_tickets',
    'show_ticket_management',
    'show_profile',
    'show_settings'
]
