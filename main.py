import logging

import streamlit as st

from config import Config
from database.setup import init_storage
from ui.pages import (
    get_stores,
    show_login_section,
    show_main_application
)


def configure_logging():
    logging.basicConfig(
        level=logging.DEBUG if Config.DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


# Initialize session state
def init_session_state():
    if "debug" not in st.session_state:
        st.session_state.debug = Config.DEBUG
    if "app_initialized" not in st.session_state:
        st.session_state.app_initialized = False


def main():
    # Page configuration
    st.set_page_config(
        page_title="Ticket Desk",
        page_icon="🎫",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    # Load custom CSS
    try:
        with open('static/style.css') as f:
            st.markdown(f'<style>{f.read()}</style>', unsafe_allow_html=True)
    except FileNotFoundError:
        logging.getLogger(__name__).debug("No custom stylesheet, using default styling")

    init_session_state()

    # Initialize storage only once per session
    if not st.session_state.get('app_initialized', False):
        init_storage()
        st.session_state.app_initialized = True

    accounts = get_stores()['accounts']

    # Debug panel (only show if debug mode is enabled)
    if st.session_state.get('debug', False):
        with st.sidebar.expander("🔧 Debug Panel"):
            st.write("Session State:", {key: value for key, value in st.session_state.items() if key != 'stores'})
            st.write("Authenticated:", accounts.is_authenticated, "Role:", accounts.role)
            if st.button("Clear Session"):
                for key in list(st.session_state.keys()):
                    del st.session_state[key]
                st.rerun()

    if not accounts.is_authenticated:
        show_login_section()
        return

    show_main_application()


if __name__ == "__main__":
    configure_logging()
    main()
