"""
Validation data types using Pydantic.

A validation result is a plain list of FailedReason values; an empty list
means the certificate was accepted.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FailureKind(str, Enum):
    """Discrete causes of a validation failure."""
    UNKNOWN_CRITICAL_EXTENSION = "UnknownCriticalExtension"
    EXPIRED = "Expired"
    IN_FUTURE = "InFuture"
    SELF_SIGNED = "SelfSigned"
    UNKNOWN_CA = "UnknownCA"
    NOT_ALLOWED_TO_SIGN = "NotAllowedToSign"
    NOT_AN_AUTHORITY = "NotAnAuthority"
    AUTHORITY_TOO_DEEP = "AuthorityTooDeep"
    NO_COMMON_NAME = "NoCommonName"
    INVALID_NAME = "InvalidName"
    NAME_MISMATCH = "NameMismatch"
    INVALID_WILDCARD = "InvalidWildcard"
    LEAF_KEY_USAGE_NOT_ALLOWED = "LeafKeyUsageNotAllowed"
    LEAF_KEY_PURPOSE_NOT_ALLOWED = "LeafKeyPurposeNotAllowed"
    LEAF_NOT_V3 = "LeafNotV3"
    EMPTY_CHAIN = "EmptyChain"
    CACHE_SAYS_NO = "CacheSaysNo"
    INVALID_SIGNATURE = "InvalidSignature"


class FailedReason(BaseModel):
    """One reason a certificate chain was not accepted."""
    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    detail: Optional[str] = Field(None, description="Offending name, OID or diagnostic")

    def __str__(self) -> str:
        if self.detail is None:
            return self.kind.value
        return f"{self.kind.value} {self.detail!r}"

    # Constructors for the reasons that carry a detail

    @classmethod
    def name_mismatch(cls, name: str) -> "FailedReason":
        return cls(kind=FailureKind.NAME_MISMATCH, detail=name)

    @classmethod
    def invalid_name(cls, name: str) -> "FailedReason":
        return cls(kind=FailureKind.INVALID_NAME, detail=name)

    @classmethod
    def invalid_signature(cls, message: str) -> "FailedReason":
        return cls(kind=FailureKind.INVALID_SIGNATURE, detail=message)

    @classmethod
    def cache_says_no(cls, message: str) -> "FailedReason":
        return cls(kind=FailureKind.CACHE_SAYS_NO, detail=message)

    @classmethod
    def of(cls, kind: FailureKind) -> "FailedReason":
        return cls(kind=kind)


class ServiceID(BaseModel):
    """The identity a certificate is validated for: hostname or IP, plus optional port."""
    model_config = ConfigDict(frozen=True)

    host: str
    port: Optional[int] = Field(None, ge=0, le=65535)

    def __str__(self) -> str:
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"


class ValidationChecks(BaseModel):
    """
    Which checks the chain validator runs.

    leaf_key_usage holds cryptography KeyUsage attribute names
    (e.g. "digital_signature"); leaf_key_purpose holds dotted
    ExtendedKeyUsage OIDs (e.g. "1.3.6.1.5.5.7.3.1").
    """
    model_config = ConfigDict(frozen=True)

    at_time: Optional[datetime] = Field(None, description="Validation instant, now when unset")
    time_validity: bool = True
    exhaustive: bool = Field(False, description="Report every reason instead of the first")
    leaf_v3: bool = True
    leaf_key_usage: List[str] = Field(default_factory=list)
    leaf_key_purpose: List[str] = Field(default_factory=list)
    ca_constraints: bool = True
    fqhn: bool = Field(True, description="Match the leaf against the service host")


def default_checks() -> ValidationChecks:
    """Checks used when the caller does not override any."""
    return ValidationChecks()
