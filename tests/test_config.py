import logging

import pytest
from pydantic import ValidationError

from x509extra.common import config
from x509extra.common.config import Settings, configure_logging


def test_defaults(monkeypatch):
    for name in ["X509_KEY_SIZE", "X509_PUBLIC_EXPONENT", "X509_VALIDITY_DAYS",
                 "X509_CA_VALIDITY_DAYS", "X509_OUTPUT_DIR", "X509_LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env(dotenv=False)
    assert settings.key_size == 2048
    assert settings.public_exponent == 65537
    assert settings.validity_days == 365
    assert settings.ca_validity_days == 3650
    assert settings.output_dir == "certs"
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("X509_KEY_SIZE", "3072")
    monkeypatch.setenv("X509_OUTPUT_DIR", "/tmp/creds")
    monkeypatch.setenv("X509_LOG_LEVEL", "debug")

    settings = Settings.from_env(dotenv=False)
    assert settings.key_size == 3072
    assert settings.output_dir == "/tmp/creds"
    assert settings.log_level == "DEBUG"


def test_dotenv_file(tmp_path, monkeypatch):
    monkeypatch.delenv("X509_VALIDITY_DAYS", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("X509_VALIDITY_DAYS=30\n")

    try:
        assert Settings.from_env().validity_days == 30
    finally:
        monkeypatch.delenv("X509_VALIDITY_DAYS", raising=False)


def test_small_keys_rejected(monkeypatch):
    monkeypatch.setenv("X509_KEY_SIZE", "512")
    with pytest.raises(ValidationError):
        Settings.from_env(dotenv=False)


def test_configure_logging_is_idempotent(monkeypatch):
    logger = logging.getLogger("x509extra")
    monkeypatch.setattr(logger, "handlers", [])

    configure_logging("WARNING")
    configure_logging("WARNING")

    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_configure_logging_defaults_to_settings(monkeypatch):
    logger = logging.getLogger("x509extra")
    monkeypatch.setattr(logger, "handlers", [])
    monkeypatch.setattr(config, "get_settings", lambda: Settings(log_level="ERROR"))

    configure_logging()

    assert logger.level == logging.ERROR
