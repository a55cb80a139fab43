"""
Certificate Name Validation

Decides whether a certificate's identity claims (Common Name and Subject
Alternative Names) cover a requested hostname or IP address.

DNSNameValidator implements standard TLS hostname verification and only
understands DNS names. validate_certificate_name classifies the request
first and sends IP addresses to IPNameValidator instead.
"""

from typing import Callable, List, Optional

from cryptography import x509
from cryptography.x509.oid import NameOID
from pydantic import BaseModel, ConfigDict

from x509extra.common.models import FailedReason, FailureKind
from x509extra.crypto.san import AltNameDNS, AltNameIP, alt_names_from_certificate, parse_san


NameValidator = Callable[[str, x509.Certificate], List[FailedReason]]


def get_common_name(cert: x509.Certificate) -> Optional[str]:
    """First Common Name of the subject, or None."""
    attributes = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attributes:
        return None
    value = attributes[0].value
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return value


def _split_dot(name: str) -> List[str]:
    return name.lower().split(".")


class DNSNameValidator:
    """
    Hostname verification against DNS SANs, falling back to the Common Name.

    A leading "*" label matches exactly one label. Wildcards over fewer than
    two labels ("*.com"), or over a short two-label suffix ("*.co.uk"), never
    match, and neither do names with empty labels. When no entry matches the
    only reason reported is NameMismatch for the requested host.
    """

    def __call__(self, hostname: str, cert: x509.Certificate) -> List[FailedReason]:
        requested = _split_dot(hostname[:-1] if hostname.endswith(".") else hostname)

        dns_names = [n.name for n in alt_names_from_certificate(cert) if isinstance(n, AltNameDNS)]
        if not dns_names:
            common_name = get_common_name(cert)
            if common_name is None:
                return [FailedReason.of(FailureKind.NO_COMMON_NAME)]
            dns_names = [common_name]

        if any(self.match_domain(_split_dot(name), requested) for name in dns_names):
            return []
        return [FailedReason.name_mismatch(hostname)]

    def match_domain(self, labels: List[str], requested: List[str]) -> bool:
        if "" in labels:
            return False
        if labels[0] == "*":
            return self.match_wildcard(labels[1:], requested)
        return labels == requested

    def match_wildcard(self, labels: List[str], requested: List[str]) -> bool:
        if len(labels) < 2:
            return False
        if len(labels) < 3 and len(labels[0]) <= 2 and len(labels[1]) <= 3:
            return False
        return labels == requested[1:]


class IPNameValidator:
    """
    Exact IP matching against IP SANs and an IP-valued Common Name.
    """

    def __call__(self, requested: AltNameIP, cert: x509.Certificate) -> List[FailedReason]:
        candidates = [n for n in alt_names_from_certificate(cert) if isinstance(n, AltNameIP)]

        common_name = get_common_name(cert)
        if common_name is not None:
            parsed = parse_san(common_name)
            if isinstance(parsed, AltNameIP):
                candidates.append(parsed)

        if any(candidate.ip == requested.ip for candidate in candidates):
            return []
        return [FailedReason.name_mismatch(str(requested))]


dns_name_validator = DNSNameValidator()
ip_name_validator = IPNameValidator()


def validate_certificate_name(hostname: str, cert: x509.Certificate) -> List[FailedReason]:
    """
    Validate a certificate against a hostname or an IP address.

    Args:
        hostname: Requested DNS name or textual IP address
        cert: Leaf certificate

    Returns:
        List of FailedReason values, empty on success
    """
    alt_name = parse_san(hostname)
    if isinstance(alt_name, AltNameIP):
        # model_construct() skips the 4/16-byte check on the packed address
        try:
            alt_name.ip
        except ValueError:
            return [FailedReason.invalid_name(hostname)]
        return ip_name_validator(alt_name, cert)
    return dns_name_validator(hostname, cert)


class ValidationHooks(BaseModel):
    """Pluggable steps of chain validation."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    validate_name: NameValidator


def default_hooks() -> ValidationHooks:
    """DNS-only name validation."""
    return ValidationHooks(validate_name=dns_name_validator)


def ip_aware_hooks() -> ValidationHooks:
    """Default hooks with IP-address support in name validation."""
    return ValidationHooks(validate_name=validate_certificate_name)
