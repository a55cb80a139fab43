#!/usr/bin/env python3
"""
Generate Root Certificate Authority (CA)

Creates a self-signed RSA/SHA-256 root CA certificate used to sign and
validate server/client certificates. The certificate is validated against
itself before anything is written.

Usage:
    python scripts/gen_ca.py --name "x509extra Root CA" --days 3650 --out certs/ca
"""

import argparse
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from cryptography import x509
from cryptography.x509.oid import NameOID

from x509extra.common.config import configure_logging, get_settings
from x509extra.common.models import ServiceID, ValidationChecks
from x509extra.crypto import fail_if_reasons, generate_key_pair, sign_certificate, validate_certificate
from x509extra.storage import write_credentials


def build_ca_template(common_name: str, organization: str, public_key, validity_days: int) -> x509.CertificateBuilder:
    """Unsigned self-issued CA certificate."""
    subject = issuer = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    now = datetime.now(timezone.utc)

    return (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=validity_days))
        .add_extension(
            x509.BasicConstraints(ca=True, path_length=None),
            critical=True,
        )
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                key_cert_sign=True,
                crl_sign=True,
                key_encipherment=False,
                content_commitment=False,
                data_encipherment=False,
                key_agreement=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=True,
        )
        .add_extension(
            x509.SubjectKeyIdentifier.from_public_key(public_key),
            critical=False,
        )
    )


def generate_root_ca(
    common_name: str,
    organization: str = "x509extra",
    validity_days: Optional[int] = None,
    output_prefix: Optional[str] = None,
):
    """
    Generate and save a self-signed root CA.

    Args:
        common_name: Common Name (CN) for the CA
        organization: Organization name
        validity_days: Certificate validity period in days
        output_prefix: Path prefix for the .pem/.key/.crt files

    Returns:
        Tuple of (private_key, certificate)
    """
    settings = get_settings()
    validity_days = validity_days or settings.ca_validity_days
    output_prefix = output_prefix or os.path.join(settings.output_dir, "ca")

    output_dir = os.path.dirname(output_prefix)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    print(f"[*] Generating RSA private key ({settings.key_size} bits)...")
    public_key, private_key = generate_key_pair()

    print(f"[*] Creating self-signed certificate for '{common_name}'...")
    template = build_ca_template(common_name, organization, public_key, validity_days)
    cert = sign_certificate(private_key, template)

    # The CA is its own trust anchor; its CN is not a hostname
    checks = ValidationChecks(fqhn=False)
    fail_if_reasons(validate_certificate(cert, checks, ServiceID(host=common_name), cert))

    write_credentials(output_prefix, (private_key, cert))
    print(f"[+] CA credentials saved to: {output_prefix}.pem / .key / .crt")

    print(f"\n[✓] Root CA created successfully!")
    print(f"    Valid from: {cert.not_valid_before_utc}")
    print(f"    Valid until: {cert.not_valid_after_utc}")
    print(f"    Serial: {cert.serial_number}")

    return private_key, cert


def main():
    parser = argparse.ArgumentParser(
        description="Generate a self-signed Root Certificate Authority"
    )
    parser.add_argument(
        "--name",
        default="x509extra Root CA",
        help="Common Name (CN) for the CA certificate"
    )
    parser.add_argument(
        "--org",
        default="x509extra",
        help="Organization name"
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Validity period in days (default: X509_CA_VALIDITY_DAYS or 3650)"
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Output prefix for the credential files (default: <X509_OUTPUT_DIR>/ca)"
    )

    args = parser.parse_args()
    configure_logging()

    generate_root_ca(
        common_name=args.name,
        organization=args.org,
        validity_days=args.days,
        output_prefix=args.out,
    )


if __name__ == "__main__":
    main()
