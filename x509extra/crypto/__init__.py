"""
Cryptographic operations for x509extra.

This package provides:
- DER encoding of RSA private keys (PKCS#1)
- PEM encoding of keys and certificates
- Subject Alternative Name parsing
- RSA/SHA-256 certificate signing
- Certificate name validation with IP-address support
- X.509 chain validation (PKI)
"""

from .der import encode_der_rsa_private_key, decode_der_rsa_private_key
from .pem import PEMEncodable, PrivateKeyPEM, CertificatePEM, encode_pem, encode_pem_raw, decode_pem
from .san import AltName, AltNameDNS, AltNameIP, parse_san, subject_alternative_name
from .sign import SIGNATURE_ALG_RSA256, generate_key_pair, sign_certificate
from .names import validate_certificate_name, default_hooks, ip_aware_hooks
from .pki import (
    CertificateStore,
    make_certificate_store,
    validate,
    validate_default_with_ip,
    validate_certificate,
    fail_if_reasons,
)

__all__ = [
    'encode_der_rsa_private_key',
    'decode_der_rsa_private_key',
    'PEMEncodable',
    'PrivateKeyPEM',
    'CertificatePEM',
    'encode_pem',
    'encode_pem_raw',
    'decode_pem',
    'AltName',
    'AltNameDNS',
    'AltNameIP',
    'parse_san',
    'subject_alternative_name',
    'SIGNATURE_ALG_RSA256',
    'generate_key_pair',
    'sign_certificate',
    'validate_certificate_name',
    'default_hooks',
    'ip_aware_hooks',
    'CertificateStore',
    'make_certificate_store',
    'validate',
    'validate_default_with_ip',
    'validate_certificate',
    'fail_if_reasons',
]
