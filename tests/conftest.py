import ipaddress
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from x509extra.crypto.sign import sign_certificate


def _key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ca_key():
    return _key()


@pytest.fixture(scope="session")
def leaf_key():
    return _key()


@pytest.fixture(scope="session")
def other_key():
    return _key()


def make_name(common_name):
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def make_builder(
    subject,
    issuer,
    public_key,
    sans=None,
    ca=None,
    path_length=None,
    key_cert_sign=True,
    not_before=None,
    not_after=None,
    extended_usage=None,
):
    """Certificate template; `ca` None means no BasicConstraints at all."""
    now = datetime.now(timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(make_name(subject) if isinstance(subject, str) else subject)
        .issuer_name(make_name(issuer) if isinstance(issuer, str) else issuer)
        .public_key(public_key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before or now - timedelta(minutes=5))
        .not_valid_after(not_after or now + timedelta(days=30))
    )
    if ca is not None:
        builder = builder.add_extension(x509.BasicConstraints(ca=ca, path_length=path_length), critical=True)
    if ca:
        builder = builder.add_extension(
            x509.KeyUsage(
                digital_signature=True,
                key_cert_sign=key_cert_sign,
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
    if sans:
        names = []
        for san in sans:
            try:
                names.append(x509.IPAddress(ipaddress.ip_address(san)))
            except ValueError:
                names.append(x509.DNSName(san))
        builder = builder.add_extension(x509.SubjectAlternativeName(names), critical=False)
    if extended_usage:
        builder = builder.add_extension(x509.ExtendedKeyUsage(extended_usage), critical=False)
    return builder


@pytest.fixture(scope="session")
def ca_cert(ca_key):
    builder = make_builder("Test Root CA", "Test Root CA", ca_key.public_key(), ca=True)
    return sign_certificate(ca_key, builder)


@pytest.fixture
def issue(ca_key, leaf_key):
    """Sign a leaf for `subject` under the test CA."""
    def _issue(subject="server.test", sans=None, key=None, issuer="Test Root CA", **kwargs):
        builder = make_builder(subject, issuer, leaf_key.public_key(), sans=sans, ca=False, **kwargs)
        return sign_certificate(key or ca_key, builder)
    return _issue
