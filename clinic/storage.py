"""
This module provides the client-side session store for the Clinic Portal.

It separates two layers:
- Key-value backends that hold raw string values, mirroring the browser's
  local storage: `MemoryStorage` for tests and `EncryptedFileStorage`, which
  keeps the values in a Fernet-encrypted JSON file between visits. The file
  is shared by every browser the server talks to, so each browser sees it
  through a `BrowserStorage` that prefixes keys with the browser's id.
- `SessionStore`, which maps roles to their storage keys, persists the
  remember-me markers, and turns stored values into typed session records.

A role counts as logged in whenever a non-null value exists at its key. The
store never checks tokens or expiry.
"""
# clinic/storage.py

import json
import logging
import threading

from cryptography.fernet import InvalidToken

from clinic.models import ROLES, record_type_for

logger = logging.getLogger(__name__)

SESSION_KEYS = {
    'patient': 'patient',
    'staff': 'staff',
    'admin': 'admin',
}

REMEMBER_KEYS = {
    'patient': 'rememberMe',
    'staff': 'rememberMeStaff',
    'admin': 'rememberMeAdmin',
}


class MemoryStorage:
    """An in-memory key-value storage, used in tests and as a scratch store."""

    def __init__(self, initial=None):
        self._items = dict(initial or {})

    def get_item(self, key):
        return self._items.get(key)

    def set_item(self, key, value):
        self._items[key] = str(value)

    def remove_item(self, key):
        self._items.pop(key, None)

    def keys(self):
        return list(self._items)


class EncryptedFileStorage:
    """A key-value storage persisted to an encrypted JSON file.

    Every write rewrites the whole file, which is small (a handful of keys).

    Args:
        path (str): The location of the encrypted data file.
        encryptor: An object with `encrypt`/`decrypt` methods (a Fernet instance).
    """

    def __init__(self, path, encryptor):
        self.path = path
        self.encryptor = encryptor
        self._lock = threading.Lock()
        self._items = self._load_data()

    def _load_data(self):
        """Loads and decrypts the data file.

        Returns:
            dict: The stored items, or an empty dictionary if the file is
                  missing, unreadable, or corrupt.
        """
        try:
            with open(self.path, 'r') as f:
                encrypted_data = f.read()
            if not encrypted_data:
                return {}
            decrypted_data = self.encryptor.decrypt(encrypted_data.encode()).decode()
            data = json.loads(decrypted_data)
        except FileNotFoundError:
            return {}
        except (InvalidToken, json.JSONDecodeError) as e:
            logger.warning("Could not load session file %s (%s); starting empty.", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Session file %s does not hold an object; starting empty.", self.path)
            return {}
        return {str(key): str(value) for key, value in data.items() if value is not None}

    def _save_data(self):
        """Encrypts and writes the current items to the data file."""
        data_to_encrypt = json.dumps(self._items, indent=4)
        encrypted_data = self.encryptor.encrypt(data_to_encrypt.encode())
        with open(self.path, 'w') as f:
            f.write(encrypted_data.decode())

    # Streamlit runs each browser's script in its own thread; writes rewrite
    # the whole file, so they are serialized.

    def get_item(self, key):
        with self._lock:
            return self._items.get(key)

    def set_item(self, key, value):
        with self._lock:
            self._items[key] = str(value)
            self._save_data()

    def remove_item(self, key):
        with self._lock:
            if key in self._items:
                del self._items[key]
                self._save_data()

    def keys(self):
        with self._lock:
            return list(self._items)


class BrowserStorage:
    """One browser's view of a shared key-value storage.

    Keys are stored as '<browser id>:<key>', so browsers never read or clear
    each other's sessions.

    Args:
        backend: The shared storage, normally an `EncryptedFileStorage`.
        browser_id (str): The identifier of the browser, see `gui.get_browser_id`.
    """

    def __init__(self, backend, browser_id):
        if not browser_id:
            raise ValueError("A browser id is required")
        self.backend = backend
        self.browser_id = browser_id
        self._prefix = f"{browser_id}:"

    def _key(self, key):
        return self._prefix + key

    def get_item(self, key):
        return self.backend.get_item(self._key(key))

    def set_item(self, key, value):
        self.backend.set_item(self._key(key), value)

    def remove_item(self, key):
        self.backend.remove_item(self._key(key))

    def keys(self):
        return [key[len(self._prefix):] for key in self.backend.keys() if key.startswith(self._prefix)]


class SessionResult:
    """The outcome of reading a role's session.

    Attributes:
        status (str): One of `SessionResult.OK`, `MISSING`, or `MALFORMED`.
        record (SessionRecord or None): The parsed record when status is OK.
        error (str or None): A description of the parse failure.
    """
    OK = 'ok'
    MISSING = 'missing'
    MALFORMED = 'malformed'

    def __init__(self, status, record=None, error=None):
        self.status = status
        self.record = record
        self.error = error

    @property
    def ok(self):
        return self.status == self.OK

    def __repr__(self):
        return f"SessionResult(status={self.status!r}, record={self.record!r})"


class SessionStore:
    """Role-level access to the session records kept in a key-value storage.

    Args:
        storage: A backend with `get_item`, `set_item`, and `remove_item`.
    """

    def __init__(self, storage):
        self.storage = storage

    @staticmethod
    def _check_role(role):
        if role not in ROLES:
            raise KeyError(f"Unknown session role: {role}")

    def get(self, role):
        """Returns the raw stored value for a role, or None."""
        self._check_role(role)
        return self.storage.get_item(SESSION_KEYS[role])

    def has(self, role):
        """Returns True if any value is stored for the role, parseable or not."""
        return self.get(role) is not None

    def set(self, role, value, remember=False):
        """Stores a role's session and updates its remember-me marker.

        Args:
            role (str): 'patient', 'staff', or 'admin'.
            value (SessionRecord or dict): The session to store.
            remember (bool): Whether to persist the remember-me marker.
        """
        self._check_role(role)
        payload = value.to_dict() if hasattr(value, 'to_dict') else value
        self.storage.set_item(SESSION_KEYS[role], json.dumps(payload))
        if remember:
            self.storage.set_item(REMEMBER_KEYS[role], 'true')
        else:
            self.storage.remove_item(REMEMBER_KEYS[role])

    def update(self, role, record):
        """Replaces the stored record without touching the remember-me marker."""
        self._check_role(role)
        self.storage.set_item(SESSION_KEYS[role], json.dumps(record.to_dict()))

    def clear(self, role):
        """Removes a role's session and its remember-me marker."""
        self._check_role(role)
        self.storage.remove_item(SESSION_KEYS[role])
        self.storage.remove_item(REMEMBER_KEYS[role])

    def remembered(self, role):
        """Returns True if the role's remember-me marker is set."""
        self._check_role(role)
        return self.storage.get_item(REMEMBER_KEYS[role]) == 'true'

    def load(self, role):
        """Parses a role's stored session into a typed result.

        Returns:
            SessionResult: OK with the record, MISSING when nothing is stored,
                           or MALFORMED when the value cannot be parsed.
        """
        raw = self.get(role)
        if raw is None:
            return SessionResult(SessionResult.MISSING)
        try:
            data = json.loads(raw)
            record = record_type_for(role).from_dict(data)
        except (json.JSONDecodeError, ValueError, TypeError) as e:
            return SessionResult(SessionResult.MALFORMED, error=str(e))
        return SessionResult(SessionResult.OK, record=record)
