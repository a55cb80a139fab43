"""
Validation Cache

Lets the chain validator skip or short-circuit validation for leaf
certificates it has already seen for a given service. Entries are keyed by
(ServiceID, fingerprint), where the fingerprint is the hash of the leaf's DER
encoding under the validator's hash algorithm.
"""

import threading
from enum import Enum
from typing import Callable, Iterable, Optional, Tuple

from cryptography import x509
from pydantic import BaseModel, ConfigDict

from x509extra.common.models import ServiceID


class CacheStatus(str, Enum):
    PASS = "pass"
    DENIED = "denied"
    UNKNOWN = "unknown"


class CacheResult(BaseModel):
    """Answer of a cache query."""
    model_config = ConfigDict(frozen=True)

    status: CacheStatus
    reason: Optional[str] = None

    @classmethod
    def passed(cls) -> "CacheResult":
        return cls(status=CacheStatus.PASS)

    @classmethod
    def denied(cls, reason: str) -> "CacheResult":
        return cls(status=CacheStatus.DENIED, reason=reason)

    @classmethod
    def unknown(cls) -> "CacheResult":
        return cls(status=CacheStatus.UNKNOWN)


Fingerprint = bytes
CacheEntry = Tuple[ServiceID, Fingerprint]
QueryCallback = Callable[[ServiceID, Fingerprint, x509.Certificate], CacheResult]
AddCallback = Callable[[ServiceID, Fingerprint, x509.Certificate], None]


def _lookup(entries: dict, service_id: ServiceID, fingerprint: Fingerprint) -> CacheResult:
    known = entries.get(service_id)
    if known is None:
        return CacheResult.unknown()
    if known == fingerprint:
        return CacheResult.passed()
    return CacheResult.denied(f"fingerprint mismatch for {service_id}")


class ValidationCache:
    """
    Pair of query/add callbacks used by the chain validator.

    Use one of the constructors:
    - empty(): no caching at all
    - exposed(entries): a fixed set of accepted fingerprints
    - tofu(entries): trust on first use, remembering every accepted leaf
    """

    def __init__(self, query: QueryCallback, add: AddCallback):
        self._query = query
        self._add = add

    def query(self, service_id: ServiceID, fingerprint: Fingerprint, cert: x509.Certificate) -> CacheResult:
        return self._query(service_id, fingerprint, cert)

    def add(self, service_id: ServiceID, fingerprint: Fingerprint, cert: x509.Certificate) -> None:
        self._add(service_id, fingerprint, cert)

    @classmethod
    def empty(cls) -> "ValidationCache":
        return cls(
            query=lambda service_id, fingerprint, cert: CacheResult.unknown(),
            add=lambda service_id, fingerprint, cert: None,
        )

    @classmethod
    def exposed(cls, entries: Iterable[CacheEntry]) -> "ValidationCache":
        known = dict(entries)
        return cls(
            query=lambda service_id, fingerprint, cert: _lookup(known, service_id, fingerprint),
            add=lambda service_id, fingerprint, cert: None,
        )

    @classmethod
    def tofu(cls, entries: Iterable[CacheEntry] = ()) -> "ValidationCache":
        known = dict(entries)
        lock = threading.Lock()

        def query(service_id, fingerprint, cert):
            with lock:
                return _lookup(known, service_id, fingerprint)

        def add(service_id, fingerprint, cert):
            with lock:
                known.setdefault(service_id, fingerprint)

        return cls(query=query, add=add)
