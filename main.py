"""
This is the main entry point for the Clinic Portal Streamlit application.

This script handles the following key responsibilities:
- Sets the overall page configuration for the Streamlit app.
- Initializes the shared resources: the configuration, the clinic API client,
  and the encrypted session file.
- Scopes the session store to the current browser.
- Builds (or resynchronizes) the router for the current browser session and
  hands control to the UI.
"""
# clinic-portal/main.py

import streamlit as st

import gui
from clinic.api import ClinicApiClient
from clinic.config import ClinicConfig, configure_logging
from clinic.encryption import get_encryptor
from clinic.storage import BrowserStorage, EncryptedFileStorage, SessionStore

st.set_page_config(
    page_title="Clinic Portal",
    layout="wide"
)


@st.cache_resource
def get_config():
    """Reads the configuration once per server process and sets up logging."""
    config = ClinicConfig.from_env()
    configure_logging(config.log_level)
    return config


@st.cache_resource
def get_api_client():
    """
    Initializes and returns the clinic API client.

    Decorated with `@st.cache_resource` so the underlying HTTP session and its
    connection pool are reused across reruns.
    """
    config = get_config()
    return ClinicApiClient(config.api_base_url, timeout=config.request_timeout)


@st.cache_resource
def get_session_file():
    """Returns the encrypted session file shared by every browser served by this process."""
    config = get_config()
    return EncryptedFileStorage(config.session_file, get_encryptor(config.secret_key_file))


api = get_api_client()
# Each browser only sees the sessions stored under its own id.
sessions = SessionStore(BrowserStorage(get_session_file(), gui.get_browser_id()))

# Main App Router
router = gui.get_router(sessions)
gui.show_app(router, api, sessions)
