"""
Runtime configuration.

Values come from the environment (optionally a .env file in the working
directory, loaded with python-dotenv) and fall back to the defaults below.
"""

import logging
import os
from functools import lru_cache
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


class Settings(BaseModel):
    """Issuance defaults shared by the library and the scripts."""
    key_size: int = Field(2048, ge=1024, description="RSA modulus size in bits")
    public_exponent: int = Field(65537, description="RSA public exponent")
    validity_days: int = Field(365, gt=0, description="Leaf certificate lifetime")
    ca_validity_days: int = Field(3650, gt=0, description="CA certificate lifetime")
    output_dir: str = Field("certs", description="Where the scripts write credentials")
    log_level: str = Field("INFO", description="Console log level for the scripts")

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from X509_* environment variables.

        Args:
            dotenv: Load a .env file from the working directory first

        Returns:
            Settings instance
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        return cls(
            key_size=int(os.getenv("X509_KEY_SIZE", 2048)),
            public_exponent=int(os.getenv("X509_PUBLIC_EXPONENT", 65537)),
            validity_days=int(os.getenv("X509_VALIDITY_DAYS", 365)),
            ca_validity_days=int(os.getenv("X509_CA_VALIDITY_DAYS", 3650)),
            output_dir=os.getenv("X509_OUTPUT_DIR", "certs"),
            log_level=os.getenv("X509_LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings.from_env()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a console handler to the x509extra logger.

    Calling it more than once does not add duplicate handlers.
    """
    logger = logging.getLogger("x509extra")
    logger.setLevel((level or get_settings().log_level).upper())

    if logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
