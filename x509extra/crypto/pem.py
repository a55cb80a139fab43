"""
PEM Encoding

Wraps DER-encodable artifacts in base64 with header and footer lines:

    -----BEGIN <LABEL>-----
    <base64, 64 characters per line>
    -----END <LABEL>-----

Supported artifacts are RSA private keys (PKCS#1) and signed X.509 certificates.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, TypeVar, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from x509extra.common.exceptions import PEMError
from x509extra.common.utils import b64decode, b64encode, chunks
from x509extra.crypto.der import encode_der_rsa_private_key


logger = logging.getLogger(__name__)

PEM_LINE_LENGTH = 64

RSA_PRIVATE_KEY_LABEL = "RSA PRIVATE KEY"
CERTIFICATE_LABEL = "CERTIFICATE"

T = TypeVar("T")


def pem_header(label: str) -> bytes:
    return f"-----BEGIN {label}-----".encode("ascii")


def pem_footer(label: str) -> bytes:
    return f"-----END {label}-----".encode("ascii")


def encode_pem_raw(header: bytes, encode_der: Callable[[T], bytes], footer: bytes, artifact: T) -> bytes:
    """
    Encode an artifact to PEM.

    Args:
        header: Header line, without newline
        encode_der: Function producing the artifact's DER bytes
        footer: Footer line, without newline
        artifact: Object to encode

    Returns:
        header, newline, base64 body in 64-character lines, newline, footer.
        No trailing newline.
    """
    body = b"\n".join(chunks(b64encode(encode_der(artifact)), PEM_LINE_LENGTH))
    return b"".join([header, b"\n", body, b"\n", footer])


class PEMEncodable(ABC):
    """
    An artifact with a DER encoding and a PEM label.

    Subclasses implement encode_der(); encode_pem() is shared.
    """

    label: str

    @abstractmethod
    def encode_der(self) -> bytes:
        """DER bytes of the wrapped artifact."""

    def encode_pem(self) -> bytes:
        return encode_pem_raw(
            pem_header(self.label),
            lambda artifact: artifact.encode_der(),
            pem_footer(self.label),
            self,
        )


class PrivateKeyPEM(PEMEncodable):
    """RSA private key in PKCS#1 form."""

    label = RSA_PRIVATE_KEY_LABEL

    def __init__(self, key: rsa.RSAPrivateKey):
        self.key = key

    def encode_der(self) -> bytes:
        return encode_der_rsa_private_key(self.key)


class CertificatePEM(PEMEncodable):
    """Signed X.509 certificate."""

    label = CERTIFICATE_LABEL

    def __init__(self, cert: x509.Certificate):
        self.cert = cert

    def encode_der(self) -> bytes:
        return self.cert.public_bytes(serialization.Encoding.DER)


def encode_pem(artifact: Union[rsa.RSAPrivateKey, x509.Certificate, PEMEncodable]) -> bytes:
    """
    Encode an RSA private key or a certificate to PEM.

    Args:
        artifact: RSAPrivateKey, x509.Certificate, or any PEMEncodable

    Returns:
        PEM bytes without a trailing newline

    Raises:
        TypeError: If the artifact has no PEM encoding
    """
    if isinstance(artifact, PEMEncodable):
        wrapper = artifact
    elif isinstance(artifact, rsa.RSAPrivateKey):
        wrapper = PrivateKeyPEM(artifact)
    elif isinstance(artifact, x509.Certificate):
        wrapper = CertificatePEM(artifact)
    else:
        raise TypeError(f"Cannot PEM-encode {type(artifact).__name__}")

    pem = wrapper.encode_pem()
    logger.debug("PEM-encoded %s (%d bytes)", wrapper.label, len(pem))
    return pem


def decode_pem(data: bytes, label: str) -> bytes:
    """
    Extract the DER bytes of the first `label` block in PEM text.

    Args:
        data: PEM text
        label: Expected label, e.g. "CERTIFICATE"

    Returns:
        Decoded DER bytes

    Raises:
        PEMError: If the delimiters are missing or the body is not base64
    """
    header, footer = pem_header(label), pem_footer(label)

    start = data.find(header)
    if start < 0:
        raise PEMError(f"No '{header.decode()}' line found")

    end = data.find(footer, start + len(header))
    if end < 0:
        raise PEMError(f"No '{footer.decode()}' line found")

    body = b"".join(data[start + len(header):end].split())
    try:
        return b64decode(body)
    except ValueError as e:
        raise PEMError(f"Invalid base64 in {label} block: {e}") from e
