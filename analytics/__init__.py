"""
Analytics module for Ticket Desk
Handles dashboard metrics over the ticket store
"""

from .engine import AnalyticsEngine

__all__ = ['AnalyticsEngine']