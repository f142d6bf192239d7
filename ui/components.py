import streamlit as st
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd

from tickets.catalog import PRIORITY_ICONS, STATUS_ICONS, TICKET_PRIORITIES, type_label
from validation.rules import PASSWORD_SPECIAL_CHARACTERS, password_strength

STRENGTH_REQUIREMENTS = [
    ('length', "At least 8 characters"),
    ('lowercase', "One lowercase letter"),
    ('uppercase', "One uppercase letter"),
    ('number', "One number"),
    ('special', f"One special character ({PASSWORD_SPECIAL_CHARACTERS})"),
]

TABLE_COLUMNS = {
    'id': "ID",
    'ticket_type': "Type",
    'priority': "Priority",
    'status': "Status",
    'created_by': "Created By",
    'user_mobile': "Mobile",
    'student_name': "Student",
    'created_at': "Created",
}


def format_timestamp(value):
    if not value:
        return ""
    return pd.to_datetime(value).strftime("%Y-%m-%d %H:%M")


def status_badge(status):
    return f"{STATUS_ICONS.get(status, '⚪')} {status.replace('_', ' ')}"


def priority_badge(priority):
    return f"{PRIORITY_ICONS.get(priority, '⚪')} {priority}"


class UIComponents:
    @staticmethod
    def styled_metric(value, label, delta=None, delta_color="normal"):
        """Create a styled metric card"""
        st.metric(
            label=label,
            value=value,
            delta=delta,
            delta_color=delta_color
        )

    @staticmethod
    def field_errors(errors):
        """Show one error line per invalid field"""
        for message in errors.values():
            st.error(f"❌ {message}")

    @staticmethod
    def password_strength_meter(password):
        if not password:
            return
        strength = password_strength(password)
        st.progress(strength.score / 5, text=f"Password Strength: {strength.label}")
        for key, label in STRENGTH_REQUIREMENTS:
            icon = "✅" if strength.checks[key] else "❌"
            st.caption(f"{icon} {label}")

    @staticmethod
    def tickets_dataframe(tickets):
        """Ticket table rows with display formatting applied"""
        df = pd.DataFrame([ticket.to_dict() for ticket in tickets], columns=list(TABLE_COLUMNS))
        if df.empty:
            return df.rename(columns=TABLE_COLUMNS)
        df['id'] = df['id'].apply(lambda x: f"#{x[-6:]}")
        df['ticket_type'] = df['ticket_type'].apply(type_label)
        df['priority'] = df['priority'].apply(priority_badge)
        df['status'] = df['status'].apply(status_badge)
        df['created_at'] = df['created_at'].apply(format_timestamp)
        return df.fillna("").rename(columns=TABLE_COLUMNS)

    @staticmethod
    def create_status_chart(status_distribution):
        """Donut chart of tickets per status"""
        data = [(status.replace('_', ' '), count) for status, count in status_distribution.items() if count]
        if not data:
            return None
        status_df = pd.DataFrame(data, columns=["Status", "Count"])
        fig = px.pie(
            status_df,
            values="Count",
            names="Status",
            title="Ticket Status",
            hole=0.4,
            color_discrete_sequence=px.colors.sequential.RdBu
        )
        fig.update_layout(height=320, margin=dict(l=10, r=10, t=60, b=20))
        return fig

    @staticmethod
    def create_priority_chart(priority_distribution):
        counts = [priority_distribution.get(priority, 0) for priority in TICKET_PRIORITIES]
        fig = go.Figure(go.Bar(
            x=[priority.title() for priority in TICKET_PRIORITIES],
            y=counts,
            marker_color=["#9e9e9e", "#2980b9", "#e67e22", "#e74c3c"],
        ))
        fig.update_layout(
            title="Tickets by Priority",
            height=320,
            template="plotly_white",
            yaxis=dict(rangemode="tozero", dtick=1),
            margin=dict(l=40, r=20, t=60, b=40)
        )
        return fig

    @staticmethod
    def create_trend_chart(daily_data):
        """Create an improved ticket trend chart"""
        if not daily_data:
            return None

        dates = [row[0] for row in daily_data]
        counts = [row[1] for row in daily_data]

        fig = px.area(
            x=dates,
            y=counts,
            title="📈 Ticket Trends (Last 30 Days)",
            labels={'x': 'Date', 'y': 'Number of Tickets'},
        )

        fig.update_traces(
            mode="lines+markers",
            line=dict(width=2, color="royalblue"),
            marker=dict(size=6, symbol="circle", color="darkblue")
        )
        fig.update_layout(
            height=400,
            template="plotly_white",
            xaxis=dict(showgrid=True, tickangle=-45, dtick="D1"),
            yaxis=dict(showgrid=True, rangemode="tozero"),
            margin=dict(l=40, r=20, t=60, b=40)
        )

        fig.update_traces(
            hovertemplate="Date: %{x}<br>Tickets: %{y}<extra></extra>"
        )

        return fig
