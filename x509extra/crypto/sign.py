"""
RSA/SHA-256 Certificate Signing

Signs X.509 certificate templates with RSA-PKCS#1 v1.5 over SHA-256.
"""

import logging
from typing import Optional, Tuple

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import SignatureAlgorithmOID
from pydantic import BaseModel, ConfigDict

from x509extra.common.config import get_settings
from x509extra.common.exceptions import SigningError
from x509extra.common.models import FailedReason


logger = logging.getLogger(__name__)


class SignatureAlgorithm(BaseModel):
    """Hash and public-key algorithm pair of a certificate signature."""
    model_config = ConfigDict(frozen=True)

    hash_name: str
    pubkey_name: str
    oid: str

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        return {"sha256": hashes.SHA256()}[self.hash_name]


SIGNATURE_ALG_RSA256 = SignatureAlgorithm(
    hash_name="sha256",
    pubkey_name="rsa",
    oid=SignatureAlgorithmOID.RSA_WITH_SHA256.dotted_string,
)


def generate_key_pair(
    key_size: Optional[int] = None,
    public_exponent: Optional[int] = None,
) -> Tuple[rsa.RSAPublicKey, rsa.RSAPrivateKey]:
    """
    Generate a new RSA key pair.

    Args:
        key_size: Modulus size in bits (default from settings, 2048)
        public_exponent: Public exponent (default from settings, 65537)

    Returns:
        Tuple of (public_key, private_key)
    """
    settings = get_settings()
    private_key = rsa.generate_private_key(
        public_exponent=public_exponent or settings.public_exponent,
        key_size=key_size or settings.key_size,
    )
    logger.debug("Generated %d-bit RSA key pair", private_key.key_size)
    return private_key.public_key(), private_key


def sign_certificate(key: rsa.RSAPrivateKey, builder: x509.CertificateBuilder) -> x509.Certificate:
    """
    Sign a certificate template using RSA-PKCS#1 v1.5 with SHA-256.

    The TBS structure is DER-encoded, signed, and packaged with the
    sha256WithRSAEncryption algorithm identifier.

    Args:
        key: Issuer's RSA private key
        builder: Unsigned certificate (subject, issuer, validity, public key, extensions)

    Returns:
        Signed certificate

    Raises:
        SigningError: If the key or template is rejected by the signing primitive
    """
    if not isinstance(key, rsa.RSAPrivateKey):
        raise SigningError(f"RSA private key required, got {type(key).__name__}")

    try:
        cert = builder.sign(
            private_key=key,
            algorithm=SIGNATURE_ALG_RSA256.hash_algorithm(),
            rsa_padding=padding.PKCS1v15(),
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise SigningError(str(e)) from e

    if cert.signature_algorithm_oid.dotted_string != SIGNATURE_ALG_RSA256.oid:
        raise SigningError(f"Unexpected signature algorithm {cert.signature_algorithm_oid.dotted_string}")

    logger.debug("Signed certificate serial=%d subject=%s", cert.serial_number, cert.subject.rfc4514_string())
    return cert


def verify_certificate_signature(
    cert: x509.Certificate,
    issuer: x509.Certificate,
) -> Optional[FailedReason]:
    """
    Check that `cert` was signed by `issuer`'s key.

    Args:
        cert: Certificate whose signature is checked
        issuer: Candidate issuer certificate

    Returns:
        None if the signature verifies, an INVALID_SIGNATURE reason otherwise
    """
    try:
        cert.verify_directly_issued_by(issuer)
    except InvalidSignature:
        return FailedReason.invalid_signature("signature does not verify under issuer key")
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        return FailedReason.invalid_signature(str(e))
    return None
