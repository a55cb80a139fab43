"""
Storage modules for x509extra.

Includes:
- Validation caches keyed by service and leaf fingerprint
- Credential files (.pem / .key / .crt)
"""

from .cache import CacheResult, CacheStatus, ValidationCache
from .credentials import write_credentials, write_certificate, load_certificate, load_private_key

__all__ = [
    'CacheResult',
    'CacheStatus',
    'ValidationCache',
    'write_credentials',
    'write_certificate',
    'load_certificate',
    'load_private_key',
]
