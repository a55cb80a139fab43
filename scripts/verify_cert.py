#!/usr/bin/env python3
"""
Verify a Certificate Against a CA

Validates a certificate (optionally followed by intermediates) against a
trusted CA for a hostname or IP address, and prints every failure reason.

Usage:
    python scripts/verify_cert.py --cert certs/server.crt --ca certs/ca.crt --host 127.0.0.1
    python scripts/verify_cert.py --cert certs/server.crt --chain certs/int.crt --ca certs/ca.crt --host server.local
"""

import argparse
import sys

from cryptography.hazmat.primitives import hashes

from x509extra.common.config import configure_logging
from x509extra.common.models import ServiceID, ValidationChecks
from x509extra.common.utils import hex_fingerprint
from x509extra.crypto import ip_aware_hooks, make_certificate_store, validate
from x509extra.crypto.names import get_common_name
from x509extra.storage import ValidationCache, load_certificate


def main():
    parser = argparse.ArgumentParser(
        description="Validate a certificate chain for a host or IP address"
    )
    parser.add_argument("--cert", required=True, help="Leaf certificate (PEM)")
    parser.add_argument("--chain", action="append", default=[], help="Intermediate certificate (PEM, repeatable)")
    parser.add_argument("--ca", required=True, action="append", help="Trusted CA certificate (PEM, repeatable)")
    parser.add_argument("--host", required=True, help="Expected hostname or IP address")
    parser.add_argument("--port", type=int, default=None, help="Service port")

    args = parser.parse_args()
    configure_logging("ERROR")

    leaf = load_certificate(args.cert)
    chain = [leaf] + [load_certificate(path) for path in args.chain]
    store = make_certificate_store(load_certificate(path) for path in args.ca)
    service_id = ServiceID(host=args.host, port=args.port)

    print(f"[*] Certificate: {get_common_name(leaf)}")
    print(f"    SHA-256: {hex_fingerprint(leaf.fingerprint(hashes.SHA256()))}")
    print(f"[*] Validating for {service_id} against {len(store)} trusted CA(s)...")

    checks = ValidationChecks(exhaustive=True)
    reasons = validate(hashes.SHA256(), ip_aware_hooks(), checks, store, ValidationCache.empty(), service_id, chain)

    if not reasons:
        print(f"[✓] Certificate is VALID for {service_id}")
        sys.exit(0)

    print(f"[✗] Certificate is INVALID for {service_id}:")
    for reason in reasons:
        print(f"    - {reason}")
    sys.exit(1)


if __name__ == "__main__":
    main()
