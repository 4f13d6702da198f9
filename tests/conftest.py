"""
Pytest configuration file for the Clinic Portal test suite.

This file defines shared fixtures used across the test modules:
- In-memory session storage and history, so routing can be exercised without
  a browser or Streamlit.
- An encrypted, file-backed session store in a temporary directory.
- A fake `requests.Session` whose responses are scripted per test.
"""
import json
from unittest.mock import MagicMock

import pytest
import requests

from clinic.api import ClinicApiClient
from clinic.encryption import get_encryptor
from clinic.history import MemoryHistory
from clinic.router import ClientRouter
from clinic.storage import EncryptedFileStorage, MemoryStorage, SessionStore


class FakeResponse:
    """A minimal stand-in for `requests.Response`."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        if text is not None:
            self.text = text
        elif payload is not None:
            self.text = json.dumps(payload)
        else:
            self.text = ''
        self.content = self.text.encode()

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


@pytest.fixture
def storage():
    """Provides an empty in-memory key-value storage."""
    return MemoryStorage()


@pytest.fixture
def sessions(storage):
    """Provides a session store over the in-memory storage."""
    return SessionStore(storage)


@pytest.fixture
def make_router(sessions):
    """Returns a factory that mounts a router at a given URL."""
    def _make(url='/'):
        router = ClientRouter(MemoryHistory(url), sessions)
        router.mount()
        return router
    return _make


@pytest.fixture
def encrypted_storage(tmp_path):
    """Provides an encrypted file storage in an isolated temporary directory."""
    encryptor = get_encryptor(str(tmp_path / "secret.key"))
    return EncryptedFileStorage(str(tmp_path / "session.json"), encryptor)


@pytest.fixture
def http_session():
    """Provides a mocked `requests.Session`; tests script `request.return_value`."""
    session = MagicMock(spec=requests.Session)
    session.request.return_value = FakeResponse(200, [])
    return session


@pytest.fixture
def api(http_session):
    """Provides an API client that talks to the mocked HTTP session."""
    return ClinicApiClient("http://clinic.test/api", session=http_session)


@pytest.fixture
def fake_response():
    """Exposes the `FakeResponse` class to tests that script their own replies."""
    return FakeResponse
