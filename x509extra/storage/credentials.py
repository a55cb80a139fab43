"""
Credential Files

Writes PEM-encoded keys and certificates under a path prefix:

    <prefix>.pem  private key PEM, newline, certificate PEM
    <prefix>.key  private key PEM
    <prefix>.crt  certificate PEM

Parent directories are not created and I/O errors are not caught.
"""

import logging
from typing import Tuple

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from x509extra.crypto.pem import encode_pem


logger = logging.getLogger(__name__)


def _write(path: str, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)
    logger.info("Wrote %s (%d bytes)", path, len(data))


def write_credentials(prefix: str, credentials: Tuple[rsa.RSAPrivateKey, x509.Certificate]) -> None:
    """
    Write a private key and its certificate to <prefix>.pem, .key and .crt.

    Args:
        prefix: Output path without extension (e.g. certs/server)
        credentials: Tuple of (private_key, certificate)
    """
    key, cert = credentials
    key_bytes = encode_pem(key)
    cert_bytes = encode_pem(cert)

    _write(f"{prefix}.pem", b"\n".join([key_bytes, cert_bytes]))
    _write(f"{prefix}.key", key_bytes)
    _write(f"{prefix}.crt", cert_bytes)


def write_certificate(prefix: str, cert: x509.Certificate) -> None:
    """Write a certificate to <prefix>.crt."""
    _write(f"{prefix}.crt", encode_pem(cert))


def load_certificate(cert_path: str) -> x509.Certificate:
    """
    Load X.509 certificate from PEM file.

    Args:
        cert_path: Path to certificate file (.crt or combined .pem)

    Returns:
        Certificate object
    """
    with open(cert_path, "rb") as f:
        return x509.load_pem_x509_certificate(f.read())


def load_private_key(key_path: str) -> rsa.RSAPrivateKey:
    """
    Load RSA private key from PEM file.

    Args:
        key_path: Path to private key file (.key or combined .pem)

    Returns:
        RSA private key object
    """
    with open(key_path, "rb") as f:
        return serialization.load_pem_private_key(
            f.read(),
            password=None,
        )
