"""
Common types, configuration and utilities for x509extra.
"""

from .models import FailureKind, FailedReason, ServiceID, ValidationChecks, default_checks
from .utils import b64encode, b64decode, chunks, hex_fingerprint
from .exceptions import *

__all__ = [
    'FailureKind',
    'FailedReason',
    'ServiceID',
    'ValidationChecks',
    'default_checks',
    'b64encode',
    'b64decode',
    'chunks',
    'hex_fingerprint',
]
