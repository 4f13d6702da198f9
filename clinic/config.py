"""
Runtime configuration for the Clinic Portal, read from the environment.
"""
# clinic/config.py

import logging
import os

DEFAULT_API_BASE_URL = "http://localhost:3000/api"
DEFAULT_SESSION_FILE = "session.json"
DEFAULT_SECRET_KEY_FILE = "secret.key"


class ClinicConfig:
    """Settings for the API client, the session file, and logging.

    Attributes:
        api_base_url (str): Base URL of the clinic API, without a trailing slash.
        session_file (str): Path of the encrypted session file.
        secret_key_file (str): Path of the Fernet key file.
        request_timeout (float or None): Per-request timeout; None waits forever.
        log_level (str): Name of the root logging level.
    """

    def __init__(self, api_base_url=DEFAULT_API_BASE_URL, session_file=DEFAULT_SESSION_FILE,
                 secret_key_file=DEFAULT_SECRET_KEY_FILE, request_timeout=None, log_level="INFO"):
        self.api_base_url = api_base_url.rstrip('/')
        self.session_file = session_file
        self.secret_key_file = secret_key_file
        self.request_timeout = request_timeout
        self.log_level = log_level.upper()

    @classmethod
    def from_env(cls, environ=None):
        """Builds a configuration from `CLINIC_*` environment variables."""
        environ = os.environ if environ is None else environ
        timeout = environ.get("CLINIC_REQUEST_TIMEOUT")
        return cls(
            api_base_url=environ.get("CLINIC_API_BASE_URL", DEFAULT_API_BASE_URL),
            session_file=environ.get("CLINIC_SESSION_FILE", DEFAULT_SESSION_FILE),
            secret_key_file=environ.get("CLINIC_SECRET_KEY_FILE", DEFAULT_SECRET_KEY_FILE),
            request_timeout=float(timeout) if timeout else None,
            log_level=environ.get("CLINIC_LOG_LEVEL", "INFO"),
        )


def configure_logging(level="INFO"):
    """Configures root logging for the app process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
