"""
X.509 Chain Validation (PKI)

Validates a certificate chain against a set of trust anchors:
- Validity period of every certificate in the chain
- Leaf version, key usage and extended key usage
- Issuer signatures up to a trusted CA, with CA constraints
- Leaf identity against the requested host (DNS name or IP address)

Validation never raises for a failed check: every entry point returns the
list of FailedReason values, and an empty list means the chain is trusted.
fail_if_reasons() turns a non-empty list into a CertificateError for callers
that want a hard failure.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Iterator, List, Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes

from x509extra.common.exceptions import CertificateError
from x509extra.common.models import (
    FailedReason,
    FailureKind,
    ServiceID,
    ValidationChecks,
    default_checks,
)
from x509extra.crypto.names import ValidationHooks, ip_aware_hooks
from x509extra.crypto.sign import verify_certificate_signature
from x509extra.storage.cache import CacheStatus, ValidationCache


logger = logging.getLogger(__name__)


class CertificateStore:
    """In-memory set of trust anchors, looked up by subject name."""

    def __init__(self, certs: Iterable[x509.Certificate] = ()):
        self._certs: List[x509.Certificate] = []
        for cert in certs:
            if cert not in self._certs:
                self._certs.append(cert)

    def find_issuers(self, name: x509.Name) -> List[x509.Certificate]:
        """Anchors whose subject equals `name`."""
        return [cert for cert in self._certs if cert.subject == name]

    def __contains__(self, cert: x509.Certificate) -> bool:
        return cert in self._certs

    def __iter__(self) -> Iterator[x509.Certificate]:
        return iter(self._certs)

    def __len__(self) -> int:
        return len(self._certs)


def make_certificate_store(certs: Iterable[x509.Certificate]) -> CertificateStore:
    return CertificateStore(certs)


def _is_self_issued(cert: x509.Certificate) -> bool:
    return cert.subject == cert.issuer


def _extension(cert: x509.Certificate, ext_class):
    try:
        return cert.extensions.get_extension_for_class(ext_class).value
    except x509.ExtensionNotFound:
        return None


def _key_usage_flag(key_usage: x509.KeyUsage, name: str) -> bool:
    # encipher_only/decipher_only raise unless key_agreement is set
    try:
        return bool(getattr(key_usage, name))
    except ValueError:
        return False


def validation_time(checks: ValidationChecks) -> datetime:
    """The instant to validate at, as an aware UTC datetime."""
    if checks.at_time is None:
        return datetime.now(timezone.utc)
    if checks.at_time.tzinfo is None:
        return checks.at_time.replace(tzinfo=timezone.utc)
    return checks.at_time


def check_time_validity(cert: x509.Certificate, at_time: datetime) -> List[FailedReason]:
    if at_time < cert.not_valid_before_utc:
        return [FailedReason.of(FailureKind.IN_FUTURE)]
    if at_time > cert.not_valid_after_utc:
        return [FailedReason.of(FailureKind.EXPIRED)]
    return []


def check_critical_extensions(cert: x509.Certificate) -> List[FailedReason]:
    return [
        FailedReason.of(FailureKind.UNKNOWN_CRITICAL_EXTENSION)
        for ext in cert.extensions
        if ext.critical and isinstance(ext.value, x509.UnrecognizedExtension)
    ]


def check_leaf_key_usage(cert: x509.Certificate, required: List[str]) -> List[FailedReason]:
    """Every required KeyUsage flag must be set. A leaf without KeyUsage passes."""
    if not required:
        return []
    key_usage = _extension(cert, x509.KeyUsage)
    if key_usage is None:
        return []
    if all(_key_usage_flag(key_usage, name) for name in required):
        return []
    return [FailedReason.of(FailureKind.LEAF_KEY_USAGE_NOT_ALLOWED)]


def check_leaf_key_purpose(cert: x509.Certificate, required: List[str]) -> List[FailedReason]:
    """Every required purpose OID must be listed. A leaf without ExtendedKeyUsage passes."""
    if not required:
        return []
    extended = _extension(cert, x509.ExtendedKeyUsage)
    if extended is None:
        return []
    present = {oid.dotted_string for oid in extended}
    if all(oid in present for oid in required):
        return []
    return [FailedReason.of(FailureKind.LEAF_KEY_PURPOSE_NOT_ALLOWED)]


def check_ca_constraints(issuer: x509.Certificate, level: int) -> List[FailedReason]:
    """
    Check that `issuer` may sign certificates `level` CAs below it.

    level is 0 for the direct issuer of the leaf.
    """
    constraints = _extension(issuer, x509.BasicConstraints)
    if constraints is None or not constraints.ca:
        return [FailedReason.of(FailureKind.NOT_AN_AUTHORITY)]

    reasons = []
    key_usage = _extension(issuer, x509.KeyUsage)
    if key_usage is not None and not key_usage.key_cert_sign:
        reasons.append(FailedReason.of(FailureKind.NOT_ALLOWED_TO_SIGN))
    if constraints.path_length is not None and constraints.path_length < level:
        reasons.append(FailedReason.of(FailureKind.AUTHORITY_TOO_DEEP))
    return reasons


def check_chain(
    checks: ValidationChecks,
    store: CertificateStore,
    chain: List[x509.Certificate],
    at_time: datetime,
) -> List[FailedReason]:
    """
    Walk from the leaf to a trust anchor.

    Issuers are looked up in the store first, then in the rest of the chain.
    """
    reasons: List[FailedReason] = []
    current = chain[0]
    remaining = list(chain[1:])
    level = 0

    while True:
        if _is_self_issued(current):
            if current in store:
                return reasons
            reasons.append(FailedReason.of(FailureKind.SELF_SIGNED))
            return reasons

        # trust anchors are not constrained by their own certificate
        anchors = store.find_issuers(current.issuer)
        if anchors:
            failure = None
            for anchor in anchors:
                failure = verify_certificate_signature(current, anchor)
                if failure is None:
                    return reasons
            reasons.append(failure)
            return reasons

        issuer = next((c for c in remaining if c.subject == current.issuer), None)
        if issuer is None:
            reasons.append(FailedReason.of(FailureKind.UNKNOWN_CA))
            return reasons

        failure = verify_certificate_signature(current, issuer)
        if failure is not None:
            reasons.append(failure)
            return reasons
        if checks.ca_constraints:
            reasons.extend(check_ca_constraints(issuer, level))
        if checks.time_validity:
            reasons.extend(check_time_validity(issuer, at_time))

        remaining.remove(issuer)
        current = issuer
        level += 1


def _check_leaf(
    hooks: ValidationHooks,
    checks: ValidationChecks,
    service_id: ServiceID,
    leaf: x509.Certificate,
    at_time: datetime,
) -> List[FailedReason]:
    reasons: List[FailedReason] = []
    if checks.leaf_v3 and leaf.version != x509.Version.v3:
        reasons.append(FailedReason.of(FailureKind.LEAF_NOT_V3))
    if checks.fqhn:
        reasons.extend(hooks.validate_name(service_id.host, leaf))
    if checks.time_validity:
        reasons.extend(check_time_validity(leaf, at_time))
    reasons.extend(check_leaf_key_usage(leaf, checks.leaf_key_usage))
    reasons.extend(check_leaf_key_purpose(leaf, checks.leaf_key_purpose))
    return reasons


def validate(
    hash_alg: hashes.HashAlgorithm,
    hooks: ValidationHooks,
    checks: ValidationChecks,
    store: CertificateStore,
    cache: ValidationCache,
    service_id: ServiceID,
    chain: List[x509.Certificate],
) -> List[FailedReason]:
    """
    Validate a certificate chain.

    Args:
        hash_alg: Hash used for the leaf fingerprint in the cache
        hooks: Pluggable validation steps (name validation)
        checks: Which checks run
        store: Trust anchors
        cache: Validation cache, queried before and updated after validation
        service_id: Identity the leaf must cover
        chain: Leaf first, then any intermediates

    Returns:
        List of FailedReason values, empty if the chain is trusted
    """
    if not chain:
        return [FailedReason.of(FailureKind.EMPTY_CHAIN)]

    leaf = chain[0]
    fingerprint = leaf.fingerprint(hash_alg)

    cached = cache.query(service_id, fingerprint, leaf)
    if cached.status == CacheStatus.PASS:
        return []
    if cached.status == CacheStatus.DENIED:
        return [FailedReason.cache_says_no(cached.reason or "denied")]

    at_time = validation_time(checks)

    reasons = _check_leaf(hooks, checks, service_id, leaf, at_time)
    for cert in chain:
        reasons.extend(check_critical_extensions(cert))
    reasons.extend(check_chain(checks, store, chain, at_time))

    if not checks.exhaustive:
        reasons = reasons[:1]

    if reasons:
        logger.warning(
            "Certificate %s rejected for %s: %s",
            leaf.subject.rfc4514_string(),
            service_id,
            ", ".join(str(r) for r in reasons),
        )
    else:
        cache.add(service_id, fingerprint, leaf)
    return reasons


def validate_default_with_ip(
    store: CertificateStore,
    cache: ValidationCache,
    service_id: ServiceID,
    chain: List[x509.Certificate],
) -> List[FailedReason]:
    """
    Default validation with IP-address support in name matching.

    SHA-256 fingerprints, default checks, caller-supplied store and cache.
    """
    return validate(hashes.SHA256(), ip_aware_hooks(), default_checks(), store, cache, service_id, chain)


def validate_certificate(
    ca_cert: x509.Certificate,
    checks: ValidationChecks,
    service_id: ServiceID,
    cert: x509.Certificate,
) -> List[FailedReason]:
    """
    Validate a single certificate against a single CA.

    Meant to check freshly issued certificates, not as a general
    relying-party validator: the chain is [cert] and no cache is used.

    Args:
        ca_cert: Trusted CA certificate
        checks: Which checks run
        service_id: Identity the certificate must cover
        cert: Certificate to validate

    Returns:
        List of FailedReason values, empty if valid
    """
    store = make_certificate_store([ca_cert])
    return validate(hashes.SHA256(), ip_aware_hooks(), checks, store, ValidationCache.empty(), service_id, [cert])


def fail_if_reasons(reasons: List[FailedReason], message: Optional[str] = None) -> None:
    """
    Raise CertificateError if there is any reason, do nothing otherwise.

    Raises:
        CertificateError: Carrying the reasons in its `reasons` attribute
    """
    if not reasons:
        return
    prefix = message or "Generated invalid certificate"
    raise CertificateError(f"{prefix}: " + ", ".join(str(r) for r in reasons), reasons)
