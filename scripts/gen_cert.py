#!/usr/bin/env python3
"""
Issue X.509 Certificates Signed by Root CA

Generates an RSA key pair and issues a certificate signed by the root CA.
Every --san value is classified as an IP address or a DNS name. The new
certificate is validated against the CA for its CN before it is written.

Usage:
    python scripts/gen_cert.py --cn server.local --san 127.0.0.1 --san localhost --server --out certs/server
    python scripts/gen_cert.py --cn client.local --out certs/client
"""

import argparse
import os
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from x509extra.common.config import configure_logging, get_settings
from x509extra.common.models import ServiceID, ValidationChecks
from x509extra.crypto import (
    fail_if_reasons,
    generate_key_pair,
    sign_certificate,
    subject_alternative_name,
    validate_certificate,
)
from x509extra.crypto.names import get_common_name
from x509extra.storage import load_certificate, load_private_key, write_credentials


def build_leaf_template(
    common_name: str,
    ca_cert: x509.Certificate,
    public_key,
    sans: List[str],
    validity_days: int,
    is_server: bool,
) -> x509.CertificateBuilder:
    """Unsigned end-entity certificate issued by ca_cert."""
    now = datetime.now(timezone.utc)
    purpose = ExtendedKeyUsageOID.SERVER_AUTH if is_server else ExtendedKeyUsageOID.CLIENT_AUTH

    builder = (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)]))
        .issuer_name(ca_cert.subject)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=validity_days))
        .add_extension(
            x509.BasicConstraints(ca=False, path_length=None),
            critical=True,
        )
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                key_encipherment=True,
                content_commitment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=False,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(
            x509.ExtendedKeyUsage([purpose]),
            critical=False,
        )
    )

    if sans:
        builder = builder.add_extension(subject_alternative_name(sans), critical=False)
    return builder


def issue_certificate(
    common_name: str,
    ca_cert: x509.Certificate,
    ca_key,
    sans: List[str] = (),
    validity_days: Optional[int] = None,
    is_server: bool = False,
):
    """
    Issue a certificate signed by the CA and check it against the CA.

    Args:
        common_name: Common Name (CN), a hostname or an IP address
        ca_cert: CA certificate object
        ca_key: CA private key object
        sans: Subject Alternative Names (hostnames and/or IP addresses)
        validity_days: Certificate validity period in days
        is_server: Server (serverAuth) or client (clientAuth) certificate

    Returns:
        Tuple of (private_key, certificate)
    """
    validity_days = validity_days or get_settings().validity_days

    print(f"[*] Generating RSA private key for '{common_name}'...")
    public_key, private_key = generate_key_pair()

    # A CN that is not listed as a SAN would be ignored by DNS matching
    sans = list(sans)
    if sans and common_name not in sans:
        sans.insert(0, common_name)

    print(f"[*] Creating certificate for '{common_name}'...")
    template = build_leaf_template(common_name, ca_cert, public_key, sans, validity_days, is_server)
    cert = sign_certificate(ca_key, template)

    purpose = ExtendedKeyUsageOID.SERVER_AUTH if is_server else ExtendedKeyUsageOID.CLIENT_AUTH
    checks = ValidationChecks(
        leaf_key_usage=["digital_signature"],
        leaf_key_purpose=[purpose.dotted_string],
    )
    for name in [common_name] + sans:
        fail_if_reasons(validate_certificate(ca_cert, checks, ServiceID(host=name), cert))

    print(f"[+] Certificate issued successfully!")
    print(f"    Issued to: {common_name}")
    print(f"    Issued by: {get_common_name(ca_cert)}")
    print(f"    Valid from: {cert.not_valid_before_utc}")
    print(f"    Valid until: {cert.not_valid_after_utc}")
    print(f"    Serial: {cert.serial_number}")

    return private_key, cert


def main():
    parser = argparse.ArgumentParser(
        description="Issue certificates signed by Root CA"
    )
    parser.add_argument(
        "--cn",
        required=True,
        help="Common Name (CN) for the certificate (e.g., server.local, 10.0.0.5)"
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Output prefix for the credential files (e.g., certs/server)"
    )
    parser.add_argument(
        "--san",
        action="append",
        default=[],
        help="Subject Alternative Name, hostname or IP address (repeatable)"
    )
    parser.add_argument(
        "--server",
        action="store_true",
        help="Issue a server (serverAuth) certificate"
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Validity period in days (default: X509_VALIDITY_DAYS or 365)"
    )
    parser.add_argument(
        "--ca-cert",
        default="certs/ca.crt",
        help="Path to CA certificate"
    )
    parser.add_argument(
        "--ca-key",
        default="certs/ca.key",
        help="Path to CA private key"
    )

    args = parser.parse_args()
    configure_logging()

    print(f"[*] Loading CA certificate and key...")
    ca_cert = load_certificate(args.ca_cert)
    ca_key = load_private_key(args.ca_key)

    private_key, cert = issue_certificate(
        common_name=args.cn,
        ca_cert=ca_cert,
        ca_key=ca_key,
        sans=args.san,
        validity_days=args.days,
        is_server=args.server,
    )

    output_dir = os.path.dirname(args.out)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    write_credentials(args.out, (private_key, cert))

    print(f"\n[✓] Certificate issued and saved to {args.out}.pem / .key / .crt")


if __name__ == "__main__":
    main()
