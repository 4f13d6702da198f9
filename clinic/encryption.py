"""
This module handles the encryption key used for the persistent session file.

It uses the `cryptography` library (Fernet symmetric encryption) so that cached
session records are not readable at rest. The key lives in a key file next to
the session file; a new key is generated the first time one is requested.

The key file must not be committed to version control.
"""
# clinic/encryption.py

import logging
import os

from cryptography.fernet import Fernet

logger = logging.getLogger(__name__)

DEFAULT_KEY_FILE = "secret.key"


def write_key(key_path=DEFAULT_KEY_FILE):
    """Generates a new Fernet key and saves it to `key_path`."""
    key = Fernet.generate_key()
    with open(key_path, "wb") as key_file:
        key_file.write(key)
    return key


def load_key(key_path=DEFAULT_KEY_FILE) -> bytes:
    """Loads the Fernet key from `key_path`.

    Raises:
        FileNotFoundError: If the key file does not exist.
    """
    with open(key_path, "rb") as key_file:
        return key_file.read()


def get_encryptor(key_path=DEFAULT_KEY_FILE) -> Fernet:
    """Returns a Fernet instance, generating the key file on first use."""
    if not os.path.exists(key_path):
        logger.info("Encryption key not found at %s; generating a new one.", key_path)
        return Fernet(write_key(key_path))
    return Fernet(load_key(key_path))
