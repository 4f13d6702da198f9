"""
End-to-end tests that run `main.py` with an isolated session file.
"""
import json

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from clinic.encryption import get_encryptor
from clinic.router import ViewState
from clinic.storage import BrowserStorage, EncryptedFileStorage

ANA_BROWSER = 'a' * 32
BEN_BROWSER = 'b' * 32


@pytest.fixture
def session_file(tmp_path, monkeypatch):
    """Points the app at a fresh session file and returns a way to reopen it."""
    monkeypatch.setenv("CLINIC_SESSION_FILE", str(tmp_path / "session.json"))
    monkeypatch.setenv("CLINIC_SECRET_KEY_FILE", str(tmp_path / "secret.key"))
    # Nothing listens here, so dashboard loads fail fast and show their error.
    monkeypatch.setenv("CLINIC_API_BASE_URL", "http://127.0.0.1:9/api")
    monkeypatch.setenv("CLINIC_REQUEST_TIMEOUT", "2")
    # The app caches the file per process; start each test from the new path.
    st.cache_resource.clear()
    yield lambda: EncryptedFileStorage(str(tmp_path / "session.json"), get_encryptor(str(tmp_path / "secret.key")))
    st.cache_resource.clear()


def _open_app(browser_id=None, page=None):
    app = AppTest.from_file("../main.py", default_timeout=30)
    if browser_id:
        app.session_state["browser_id"] = browser_id
    if page:
        app.query_params["page"] = page
    return app.run()


def test_app_entry_point_renders_home(session_file):
    """Runs `main.py` end to end with no stored sessions."""
    app = _open_app(page="/admin-dashboard")

    assert not app.exception
    assert app.session_state["router"].current == ViewState.HOME
    assert any("Wahing Medical Clinic" in md.value for md in app.markdown)


def test_app_sessions_are_scoped_to_each_browser(session_file):
    """
    Tests two browsers sharing one session file.

    Each browser only sees its own patient session, and logging out in one
    leaves the other's session in place.
    """
    shared = session_file()
    BrowserStorage(shared, ANA_BROWSER).set_item('patient', json.dumps({'patientId': 'P1', 'firstName': 'Ana'}))
    BrowserStorage(shared, BEN_BROWSER).set_item('patient', json.dumps({'patientId': 'P2', 'firstName': 'Ben'}))

    ana = _open_app(ANA_BROWSER, "/dashboard")
    ben = _open_app(BEN_BROWSER, "/dashboard")
    stranger = _open_app(page="/dashboard")

    assert ana.session_state["router"].current == ViewState.DASHBOARD
    assert any("Welcome back, Ana!" in md.value for md in ana.markdown)
    assert not any("Welcome back, Ana!" in md.value for md in ben.markdown)
    assert any("Welcome back, Ben!" in md.value for md in ben.markdown)
    assert stranger.session_state["router"].current == ViewState.HOME
    assert stranger.session_state["browser_id"] not in (ANA_BROWSER, BEN_BROWSER)

    next(b for b in ana.button if b.label == "Log Out").click().run()
    assert ana.session_state["router"].current == ViewState.HOME

    ben.run()
    assert ben.session_state["router"].current == ViewState.DASHBOARD
    assert any("Welcome back, Ben!" in md.value for md in ben.markdown)

    reopened = session_file()
    assert BrowserStorage(reopened, ANA_BROWSER).get_item('patient') is None
    assert BrowserStorage(reopened, BEN_BROWSER).get_item('patient') is not None
