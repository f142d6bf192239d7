"""
Notifications module for Ticket Desk
Handles alert settings and SMS delivery
"""

from .settings import AlertSettingsStore
from .sms import SmsNotifier, AlertResult

__all__ = ['AlertSettingsStore', 'SmsNotifier', 'AlertResult']
