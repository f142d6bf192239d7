import time

import streamlit as st

from analytics.engine import AnalyticsEngine
from auth.store import AccountStore
from config import Config
from database.setup import reset_storage
from database.storage import get_storage
from errors import (
    DuplicateAccountError,
    HelpdeskError,
    IncorrectCredentialError,
    ValidationError,
)
from notifications.settings import AlertSettingsStore
from notifications.sms import SmsNotifier, mask_mobile
from tickets.catalog import (
    DETAIL_FIELDS,
    PRIORITY_MEDIUM,
    STATUS_PENDING,
    STATUS_RESOLVED,
    TICKET_PRIORITIES,
    TICKET_STATUSES,
    TICKET_TYPES,
    type_label,
)
from tickets.manager import TicketManager
from tickets.store import TicketStore
from ui.components import UIComponents, format_timestamp, priority_badge, status_badge
from validation.rules import (
    DETAIL_FIELD_LABELS,
    is_detail_required,
    validate_account_input,
    validate_login_input,
)

PAGE_DASHBOARD = "📊 Dashboard"
PAGE_NEW_TICKET = "➕ Raise Ticket"
PAGE_MY_TICKETS = "📋 My Tickets"
PAGE_ALL_TICKETS = "🎫 Ticket Management"
PAGE_PROFILE = "👤 Profile"
PAGE_SETTINGS = "⚙️ Settings"


def get_stores():
    """Build the stores once per browser session and keep them in session state"""
    if 'stores' not in st.session_state:
        storage = get_storage()
        settings = AlertSettingsStore(storage)
        tickets = TicketStore(storage)
        st.session_state.stores = {
            'accounts': AccountStore(storage, restore_session=False),
            'tickets': tickets,
            'settings': settings,
            'manager': TicketManager(tickets, SmsNotifier(settings)),
        }
    return st.session_state.stores


def simulate_latency(message):
    with st.spinner(message):
        time.sleep(Config.SUBMIT_DELAY_SECONDS)


# ================================
# AUTHENTICATION
# ================================

def show_login_section():
    """Login, signup and password recovery for visitors"""
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        st.markdown('<div class="main-header">🎫 Ticket Desk</div>', unsafe_allow_html=True)

        if st.session_state.get('pending_mobile'):
            show_create_credentials(st.session_state.pending_mobile)
            return

        tab1, tab2, tab3 = st.tabs(["🔐 Login", "📝 Sign Up", "🔑 Forgot Password"])
        with tab1:
            show_login_form()
        with tab2:
            show_signup_form()
        with tab3:
            show_forgot_password()


def show_login_form():
    accounts = get_stores()['accounts']

    with st.form("login_form", clear_on_submit=False):
        mobile = st.text_input(
            "📱 Mobile Number",
            placeholder="Enter 10-digit mobile number",
            key="login_mobile"
        )
        password = st.text_input(
            "🔑 Password",
            type="password",
            placeholder="Enter your password",
            key="login_password"
        )
        login_btn = st.form_submit_button("✅ Login", use_container_width=True)

    if not login_btn:
        return

    result = validate_login_input({'mobile': mobile, 'password': password})
    if not result.ok:
        UIComponents.field_errors(result.errors)
        return

    simulate_latency("🔐 Checking...")

    if not accounts.check_exists(mobile):
        # Unknown mobile: offer to create credentials for it
        st.session_state.pending_mobile = mobile
        st.rerun()

    account = accounts.authenticate(mobile, password)
    if account is None:
        st.error("❌ Invalid credentials. Please check your password.")
        return

    accounts.login(account)
    st.success(f"✅ Welcome back, {account.username}!")
    st.rerun()


def _register_and_login(fields):
    accounts = get_stores()['accounts']
    try:
        account = accounts.register_account(fields)
    except ValidationError as e:
        UIComponents.field_errors(e.errors)
        return False
    except DuplicateAccountError:
        st.error("❌ This mobile number is already registered. Please login instead.")
        return False

    accounts.login(account)
    st.session_state.pop('pending_mobile', None)
    st.success("✅ Account created successfully! Welcome to Ticket Desk")
    return True


def show_create_credentials(mobile):
    """Create an account for a mobile number that tried to log in"""
    st.subheader("🆕 Create Your Account")
    st.info(f"No account found for **{mobile}**. Choose a username and password to continue.")

    with st.form("create_credentials_form"):
        username = st.text_input("👤 Username", placeholder="3-20 characters")
        password = st.text_input("🔑 Password", type="password")
        confirm_password = st.text_input("🔑 Confirm Password", type="password")
        col1, col2 = st.columns(2)
        with col1:
            create_btn = st.form_submit_button("✅ Create Account", use_container_width=True)
        with col2:
            cancel_btn = st.form_submit_button("❌ Cancel", use_container_width=True)

    UIComponents.password_strength_meter(password)

    if cancel_btn:
        st.session_state.pop('pending_mobile', None)
        st.rerun()

    if create_btn:
        simulate_latency("📝 Creating account...")
        if _register_and_login({
            'mobile': mobile,
            'username': username,
            'password': password,
            'confirm_password': confirm_password,
        }):
            st.rerun()


def show_signup_form():
    with st.form("signup_form"):
        mobile = st.text_input("📱 Mobile Number", placeholder="Enter 10-digit mobile number")
        username = st.text_input("👤 Username", placeholder="3-20 characters")
        password = st.text_input("🔑 Password", type="password", key="signup_password")
        confirm_password = st.text_input("🔑 Confirm Password", type="password")
        signup_btn = st.form_submit_button("📝 Sign Up", use_container_width=True)

    UIComponents.password_strength_meter(password)

    if signup_btn:
        simulate_latency("📝 Creating account...")
        if _register_and_login({
            'mobile': mobile,
            'username': username,
            'password': password,
            'confirm_password': confirm_password,
        }):
            st.rerun()


def show_forgot_password():
    """Two steps: confirm the mobile is registered, then set a new password"""
    accounts = get_stores()['accounts']
    verified_mobile = st.session_state.get('reset_mobile')

    if not verified_mobile:
        st.info("ℹ️ Enter your registered mobile number to reset your password")
        with st.form("verify_mobile_form"):
            mobile = st.text_input("📱 Mobile Number", placeholder="Enter 10-digit mobile number")
            verify_btn = st.form_submit_button("🔍 Verify Mobile", use_container_width=True)

        if verify_btn:
            result = validate_account_input({'mobile': mobile})
            if not result.ok:
                UIComponents.field_errors(result.errors)
                return
            simulate_latency("🔍 Verifying...")
            if not accounts.check_exists(mobile):
                st.error("❌ Mobile number not found. Please sign up first.")
                return
            st.session_state.reset_mobile = mobile
            st.rerun()
        return

    st.success(f"✅ Mobile verified: {verified_mobile}")
    with st.form("reset_password_form"):
        password = st.text_input("🔑 New Password", type="password", key="reset_password")
        confirm_password = st.text_input("🔑 Confirm New Password", type="password")
        col1, col2 = st.columns(2)
        with col1:
            reset_btn = st.form_submit_button("💾 Reset Password", use_container_width=True)
        with col2:
            back_btn = st.form_submit_button("⬅️ Back", use_container_width=True)

    UIComponents.password_strength_meter(password)

    if back_btn:
        st.session_state.pop('reset_mobile', None)
        st.rerun()

    if reset_btn:
        result = validate_account_input({'password': password, 'confirm_password': confirm_password})
        if not result.ok:
            UIComponents.field_errors(result.errors)
            return
        simulate_latency("💾 Resetting...")
        try:
            accounts.reset_password(verified_mobile, password)
        except HelpdeskError as e:
            st.error(f"❌ Password reset failed: {e}")
            return
        st.session_state.pop('reset_mobile', None)
        st.success("✅ Password reset successful! You can now login.")


# ================================
# MAIN APPLICATION
# ================================

def show_main_application():
    """Main application after successful login"""
    stores = get_stores()
    accounts = stores['accounts']
    user = accounts.current_account

    st.sidebar.markdown(f"""
        <div class="user-info-card">
            <h4>👤 User Info</h4>
            <p><strong>Name:</strong> {user.username}</p>
            <p><strong>Role:</strong> {user.role}</p>
            <p><strong>Mobile:</strong> {user.mobile}</p>
        </div>
    """, unsafe_allow_html=True)

    st.sidebar.title("🧭 Navigation")

    # Role-based menu options
    if user.is_admin:
        menu_options = [PAGE_DASHBOARD, PAGE_NEW_TICKET, PAGE_ALL_TICKETS, PAGE_PROFILE, PAGE_SETTINGS]
    else:
        menu_options = [PAGE_DASHBOARD, PAGE_NEW_TICKET, PAGE_MY_TICKETS, PAGE_PROFILE]

    page = st.sidebar.radio("Go to", menu_options)

    if st.sidebar.button("🚪 Logout", use_container_width=True):
        accounts.logout()
        st.session_state.pop('selected_ticket_id', None)
        st.rerun()

    if page == PAGE_DASHBOARD:
        show_dashboard()
    elif page == PAGE_NEW_TICKET:
        show_ticket_form()
    elif page == PAGE_MY_TICKETS:
        show_my_tickets()
    elif page == PAGE_ALL_TICKETS and user.is_admin:
        show_ticket_management()
    elif page == PAGE_PROFILE:
        show_profile()
    elif page == PAGE_SETTINGS and user.is_admin:
        show_settings()


def show_dashboard():
    """Ticket statistics and trends"""
    stores = get_stores()
    user = stores['accounts'].current_account
    st.markdown('<div class="main-header">📊 DASHBOARD</div>', unsafe_allow_html=True)
    st.subheader(f"Welcome back, {user.username}!")

    analytics = AnalyticsEngine.get_dashboard_metrics(stores['tickets'].tickets)

    kpis = [
        ("📊", analytics["total_tickets"], "Total Tickets"),
        ("🟡", analytics["pending_tickets"], "Pending"),
        ("🔧", analytics["in_progress_tickets"], "In Progress"),
        ("✅", analytics["resolved_tickets"], "Resolved"),
    ]
    cols = st.columns(len(kpis))
    for col, (icon, value, label) in zip(cols, kpis):
        with col:
            UIComponents.styled_metric(f"{icon} {value}", label)

    if not analytics["total_tickets"]:
        st.info("📭 No tickets yet. Raise one from the sidebar.")
        return

    left, right = st.columns(2)
    with left:
        status_chart = UIComponents.create_status_chart(analytics["status_distribution"])
        if status_chart:
            st.plotly_chart(status_chart, use_container_width=True)
    with right:
        st.plotly_chart(
            UIComponents.create_priority_chart(analytics["priority_distribution"]),
            use_container_width=True
        )

    trend_chart = UIComponents.create_trend_chart(analytics["daily_trends"])
    if trend_chart:
        st.plotly_chart(trend_chart, use_container_width=True)


def show_ticket_form():
    """Raise a new ticket; detail fields appear only for types that need them"""
    stores = get_stores()
    user = stores['accounts'].current_account
    st.markdown('<div class="main-header">➕ RAISE A NEW TICKET</div>', unsafe_allow_html=True)

    type_values = [ticket_type.value for ticket_type in TICKET_TYPES]
    ticket_type = st.selectbox(
        "📂 Ticket Type",
        type_values,
        format_func=type_label,
        index=None,
        placeholder="Select ticket type"
    )

    with st.form("ticket_form"):
        priority = st.selectbox(
            "⚡ Priority",
            TICKET_PRIORITIES,
            index=TICKET_PRIORITIES.index(PRIORITY_MEDIUM),
            format_func=priority_badge
        )

        details = {}
        if is_detail_required(ticket_type):
            st.info("ℹ️ Please provide the following details for this ticket type")
            for name in DETAIL_FIELDS:
                details[name] = st.text_input(DETAIL_FIELD_LABELS[name])

        remarks = st.text_area("📝 Remarks", placeholder="Describe the issue (10-500 characters)", max_chars=500)
        submit_btn = st.form_submit_button("🚀 Submit Ticket", use_container_width=True)

    if not submit_btn:
        return

    simulate_latency("🚀 Submitting ticket...")
    try:
        ticket, alert = stores['manager'].submit_ticket(
            {'ticket_type': ticket_type, 'priority': priority, 'remarks': remarks, **details},
            account=user
        )
    except ValidationError as e:
        UIComponents.field_errors(e.errors)
        return

    st.success(f"✅ Ticket created successfully! Ticket ID: {ticket.id}")
    if alert.success:
        st.success(f"📱 SMS Alert Sent to {mask_mobile(stores['settings'].admin_mobile)}")
    elif not alert.skipped:
        st.warning(f"⚠️ Ticket saved, but the SMS alert failed: {alert.error}")


def show_my_tickets():
    stores = get_stores()
    user = stores['accounts'].current_account
    st.markdown('<div class="main-header">📋 MY TICKETS</div>', unsafe_allow_html=True)

    mine = [ticket for ticket in stores['tickets'].tickets if ticket.user_mobile == user.mobile]
    if not mine:
        st.info("📭 You have not raised any tickets yet.")
        return
    st.dataframe(UIComponents.tickets_dataframe(mine), use_container_width=True, hide_index=True)


# ================================
# TICKET MANAGEMENT (ADMIN)
# ================================

def show_ticket_management():
    """View, edit, and manage all support tickets"""
    ticket_store = get_stores()['tickets']
    st.markdown('<div class="main-header">🎫 TICKET MANAGEMENT</div>', unsafe_allow_html=True)

    if not len(ticket_store):
        st.info("📭 No tickets found in the system.")
        return

    col1, col2 = st.columns([3, 1])
    with col1:
        search = st.text_input("🔍 Search tickets", placeholder="Search all columns...")
    with col2:
        status_filter = st.selectbox("Status", ["all"] + TICKET_STATUSES, format_func=lambda s: s.replace('_', ' '))

    tickets = ticket_store.search(search)
    if status_filter != "all":
        tickets = [ticket for ticket in tickets if ticket.status == status_filter]

    st.caption(f"Showing {len(tickets)} of {len(ticket_store)} tickets")
    st.dataframe(UIComponents.tickets_dataframe(tickets), use_container_width=True, hide_index=True)

    if not tickets:
        return

    options = {f"#{ticket.id[-6:]} · {type_label(ticket.ticket_type)} · {ticket.created_by}": ticket.id
               for ticket in tickets}
    selected_label = st.selectbox("📋 Select Ticket", list(options))
    ticket = ticket_store.get_by_id(options[selected_label])

    tab1, tab2, tab3 = st.tabs(["👁️ Details", "✏️ Edit", "🗑️ Delete"])
    with tab1:
        show_ticket_details(ticket)
    with tab2:
        show_edit_ticket(ticket)
    with tab3:
        show_delete_ticket(ticket)


def show_ticket_details(ticket):
    col1, col2 = st.columns(2)
    with col1:
        st.markdown(f"**Ticket ID:** {ticket.id}")
        st.markdown(f"**Type:** {type_label(ticket.ticket_type)}")
        st.markdown(f"**Priority:** {priority_badge(ticket.priority)}")
        st.markdown(f"**Status:** {status_badge(ticket.status)}")
    with col2:
        st.markdown(f"**Created By:** {ticket.created_by} ({ticket.user_mobile})")
        st.markdown(f"**Created:** {format_timestamp(ticket.created_at)}")
        if ticket.updated_at:
            st.markdown(f"**Updated:** {format_timestamp(ticket.updated_at)}")

    if any(getattr(ticket, name) for name in DETAIL_FIELDS):
        st.markdown("**Student Details**")
        for name in DETAIL_FIELDS:
            st.markdown(f"- {DETAIL_FIELD_LABELS[name]}: {getattr(ticket, name) or '-'}")

    st.markdown("**Remarks**")
    st.write(ticket.remarks)


def show_edit_ticket(ticket):
    ticket_store = get_stores()['tickets']

    with st.form(f"edit_ticket_{ticket.id}"):
        status = st.selectbox(
            "Status",
            TICKET_STATUSES,
            index=TICKET_STATUSES.index(ticket.status) if ticket.status in TICKET_STATUSES else 0,
            format_func=status_badge
        )
        changes = {}
        if ticket.student_name:
            changes['student_name'] = st.text_input("Student Name", value=ticket.student_name)
        if ticket.student_mobile:
            changes['student_mobile'] = st.text_input("Student Mobile", value=ticket.student_mobile)
        remarks = st.text_area("Remarks", value=ticket.remarks, max_chars=500)
        save_btn = st.form_submit_button("💾 Save Changes", use_container_width=True)

    if save_btn:
        if not remarks.strip():
            st.error("❌ Remarks are required")
            return
        updated = ticket_store.update_ticket(ticket.id, {'status': status, 'remarks': remarks, **changes})
        if updated is None:
            st.warning("⚠️ This ticket no longer exists.")
            return
        st.success(f"✅ Ticket #{ticket.id[-6:]} updated")
        st.rerun()

    if ticket.status == STATUS_PENDING:
        if st.button("✅ Mark as Resolved", key=f"resolve_{ticket.id}"):
            ticket_store.update_ticket(ticket.id, {'status': STATUS_RESOLVED})
            st.rerun()


def show_delete_ticket(ticket):
    ticket_store = get_stores()['tickets']
    st.warning("⚠️ Deleting a ticket removes it permanently.")
    confirm = st.checkbox("Confirm delete", key=f"confirm_delete_{ticket.id}")
    if st.button("🗑️ Delete Ticket", key=f"delete_{ticket.id}", disabled=not confirm):
        ticket_store.delete_ticket(ticket.id)
        st.success(f"✅ Ticket #{ticket.id[-6:]} deleted")
        st.rerun()


# ================================
# PROFILE
# ================================

def show_profile():
    """View and update personal information"""
    accounts = get_stores()['accounts']
    user = accounts.current_account
    st.markdown('<div class="main-header">👤 MY PROFILE</div>', unsafe_allow_html=True)

    col1, col2 = st.columns(2)
    with col1:
        st.markdown(f"**Role:** {user.role}")
    with col2:
        st.markdown(f"**Member since:** {format_timestamp(user.created_at)}")

    tab1, tab2 = st.tabs(["✏️ Edit Profile", "🔑 Change Password"])

    with tab1:
        with st.form("profile_form"):
            username = st.text_input("👤 Username", value=user.username)
            mobile = st.text_input("📱 Mobile Number", value=user.mobile)
            save_btn = st.form_submit_button("💾 Save Changes", use_container_width=True)

        if save_btn:
            simulate_latency("💾 Saving...")
            try:
                accounts.update_account({'username': username, 'mobile': mobile})
            except ValidationError as e:
                UIComponents.field_errors(e.errors)
            except DuplicateAccountError:
                st.error("❌ Mobile number is already registered to another account")
            else:
                st.success("✅ Profile updated successfully!")
                st.rerun()

    with tab2:
        with st.form("change_password_form", clear_on_submit=True):
            current_password = st.text_input("🔑 Current Password", type="password")
            new_password = st.text_input("🔑 New Password", type="password", key="new_password")
            confirm_password = st.text_input("🔑 Confirm New Password", type="password")
            change_btn = st.form_submit_button("🔄 Change Password", use_container_width=True)

        if change_btn:
            if not current_password:
                st.error("❌ Current password is required")
                return
            result = validate_account_input({'password': new_password, 'confirm_password': confirm_password})
            if not result.ok:
                UIComponents.field_errors(result.errors)
                return
            simulate_latency("🔄 Updating password...")
            try:
                accounts.change_password(current_password, new_password)
            except IncorrectCredentialError:
                st.error("❌ Current password is incorrect")
            except ValidationError as e:
                UIComponents.field_errors(e.errors)
            else:
                st.success("✅ Password changed successfully!")


# ================================
# SETTINGS (ADMIN)
# ================================

def show_settings():
    """SMS alert configuration and system maintenance"""
    stores = get_stores()
    settings = stores['settings']
    st.markdown('<div class="main-header">⚙️ SETTINGS</div>', unsafe_allow_html=True)

    tab1, tab2, tab3 = st.tabs(["📱 SMS Alerts", "📜 Alert History", "🔄 System Maintenance"])

    with tab1:
        with st.form("sms_settings"):
            sms_enabled = st.checkbox("Enable SMS alerts for new tickets", value=settings.sms_enabled)
            admin_mobile = st.text_input("📱 Admin Mobile", value=settings.admin_mobile or "")
            sms_api_key = st.text_input("🔑 SMS API Key", value=settings.sms_api_key or "", type="password")
            save_btn = st.form_submit_button("💾 Save Settings")

        if save_btn:
            try:
                settings.update(sms_enabled=sms_enabled, admin_mobile=admin_mobile, sms_api_key=sms_api_key)
            except ValidationError as e:
                UIComponents.field_errors(e.errors)
            else:
                st.success("✅ Settings saved successfully!")

        problem = stores['manager'].notifier.check_configuration()
        if settings.sms_enabled and problem:
            st.warning(f"⚠️ {problem}")

    with tab2:
        if not settings.history:
            st.info("📭 No alerts sent yet.")
        for record in settings.history:
            with st.expander(f"📨 {format_timestamp(record.timestamp)} → {mask_mobile(record.to)}"):
                st.text(record.message)
        if settings.history and st.button("🗑️ Clear History"):
            settings.clear_history()
            st.rerun()

    with tab3:
        st.warning("⚠️ Resetting removes every account, ticket and setting.")
        if st.checkbox("Confirm reset"):
            if st.button("⚠️ Reset Storage"):
                reset_storage(stores['tickets'].storage)
                for key in list(st.session_state.keys()):
                    del st.session_state[key]
                st.rerun()
