"""
Unit tests for configuration loading and logging setup.
"""
import logging

from clinic.config import DEFAULT_API_BASE_URL, ClinicConfig, configure_logging


def test_config_from_env_defaults():
    config = ClinicConfig.from_env({})
    assert config.api_base_url == DEFAULT_API_BASE_URL
    assert config.session_file == 'session.json'
    assert config.request_timeout is None
    assert config.log_level == 'INFO'


def test_config_from_env_overrides():
    config = ClinicConfig.from_env({
        'CLINIC_API_BASE_URL': 'https://clinic.example/api/',
        'CLINIC_SESSION_FILE': '/tmp/s.json',
        'CLINIC_SECRET_KEY_FILE': '/tmp/s.key',
        'CLINIC_REQUEST_TIMEOUT': '2.5',
        'CLINIC_LOG_LEVEL': 'debug',
    })
    assert config.api_base_url == 'https://clinic.example/api'
    assert config.secret_key_file == '/tmp/s.key'
    assert config.request_timeout == 2.5
    assert config.log_level == 'DEBUG'


def test_configure_logging_accepts_level_names(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, 'basicConfig', lambda **kwargs: calls.append(kwargs))
    configure_logging('warning')
    configure_logging('nonsense')
    assert calls[0]['level'] == logging.WARNING
    assert calls[1]['level'] == logging.INFO
