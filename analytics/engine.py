import logging
from datetime import datetime, timedelta, timezone

import pandas as pd

from tickets.catalog import TICKET_PRIORITIES, TICKET_STATUSES, type_label

logger = logging.getLogger(__name__)

TREND_DAYS = 30


class AnalyticsEngine:
    @staticmethod
    def tickets_frame(tickets):
        """One row per ticket, created_at parsed to UTC timestamps"""
        df = pd.DataFrame([ticket.to_dict() for ticket in tickets])
        if df.empty:
            return df
        df['created_at'] = pd.to_datetime(df['created_at'], utc=True)
        return df

    @staticmethod
    def get_dashboard_metrics(tickets, now=None):
        """Get comprehensive dashboard metrics"""
        df = AnalyticsEngine.tickets_frame(tickets)
        metrics = {
            'total_tickets': len(df),
            'status_distribution': dict.fromkeys(TICKET_STATUSES, 0),
            'priority_distribution': dict.fromkeys(TICKET_PRIORITIES, 0),
            'type_distribution': {},
            'daily_trends': [],
        }
        if df.empty:
            metrics.update({f"{status}_tickets": 0 for status in TICKET_STATUSES})
            return metrics

        metrics['status_distribution'].update(
            {status: int(count) for status, count in df['status'].value_counts().items()}
        )
        metrics['priority_distribution'].update(
            {priority: int(count) for priority, count in df['priority'].value_counts().items()}
        )
        metrics['type_distribution'] = {
            type_label(value, short=True): int(count)
            for value, count in df['ticket_type'].value_counts().items()
        }
        metrics.update({
            f"{status}_tickets": int(metrics['status_distribution'][status])
            for status in TICKET_STATUSES
        })

        # Daily ticket trends
        now = now or datetime.now(timezone.utc)
        since = pd.Timestamp(now - timedelta(days=TREND_DAYS))
        recent = df[df['created_at'] >= since]
        daily = recent.groupby(recent['created_at'].dt.date).size().sort_index()
        metrics['daily_trends'] = [(date, int(count)) for date, count in daily.items()]

        logger.debug("🔧 Debug: Retrieved %d metric groups", len(metrics))
        return metrics
