"""
Subject Alternative Names

Classifies identity strings as IP addresses or DNS names.
"""

import ipaddress
from typing import List, Union

from cryptography import x509
from pydantic import BaseModel, ConfigDict, field_validator


class AltNameDNS(BaseModel):
    """DNS-name SAN. The name is kept verbatim."""
    model_config = ConfigDict(frozen=True)

    name: str

    def __str__(self) -> str:
        return self.name

    def to_general_name(self) -> x509.DNSName:
        return x509.DNSName(self.name)


class AltNameIP(BaseModel):
    """IP-address SAN holding the packed address (4 or 16 bytes, network order)."""
    model_config = ConfigDict(frozen=True)

    address: bytes

    @field_validator("address")
    @classmethod
    def _check_length(cls, value: bytes) -> bytes:
        if len(value) not in (4, 16):
            raise ValueError(f"IP address must be 4 or 16 bytes, got {len(value)}")
        return value

    @property
    def ip(self) -> Union[ipaddress.IPv4Address, ipaddress.IPv6Address]:
        return ipaddress.ip_address(self.address)

    def __str__(self) -> str:
        return str(self.ip)

    def to_general_name(self) -> x509.IPAddress:
        return x509.IPAddress(self.ip)


AltName = Union[AltNameDNS, AltNameIP]


def parse_san(name: str) -> AltName:
    """
    Parse a Subject Alternative Name from a raw string.

    IPv4 and IPv6 textual addresses become AltNameIP; anything else is taken
    as a DNS name without further checking.

    Args:
        name: Hostname or IP address

    Returns:
        AltNameIP or AltNameDNS
    """
    try:
        ip = ipaddress.ip_address(name)
    except ValueError:
        return AltNameDNS(name=name)
    return AltNameIP(address=ip.packed)


def alt_names_from_certificate(cert: x509.Certificate) -> List[AltName]:
    """
    DNS and IP entries of a certificate's SubjectAlternativeName extension.

    Other GeneralName types are skipped. A certificate without the
    extension yields an empty list.
    """
    try:
        san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    except x509.ExtensionNotFound:
        return []

    names: List[AltName] = []
    for general_name in san:
        if isinstance(general_name, x509.DNSName):
            names.append(AltNameDNS(name=general_name.value))
        elif isinstance(general_name, x509.IPAddress) and not isinstance(
            general_name.value, (ipaddress.IPv4Network, ipaddress.IPv6Network)
        ):
            names.append(AltNameIP(address=general_name.value.packed))
    return names


def subject_alternative_name(names: List[str]) -> x509.SubjectAlternativeName:
    """Build a SubjectAlternativeName extension value from raw identity strings."""
    return x509.SubjectAlternativeName([parse_san(name).to_general_name() for name in names])
