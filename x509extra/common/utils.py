"""
Utility functions for x509extra.
"""

import base64
from typing import List


def b64encode(data: bytes) -> bytes:
    """
    Base64 encode bytes (RFC 4648, with '=' padding).

    Args:
        data: Bytes to encode

    Returns:
        Base64-encoded ASCII bytes
    """
    return base64.b64encode(data)


def b64decode(data: bytes) -> bytes:
    """
    Strict base64 decode.

    Args:
        data: Base64-encoded bytes

    Returns:
        Decoded bytes

    Raises:
        binascii.Error: If data is not valid base64
    """
    return base64.b64decode(data, validate=True)


def chunks(data: bytes, size: int) -> List[bytes]:
    """
    Split data into consecutive pieces of `size` bytes, the last one possibly shorter.

    An empty input yields an empty list.
    """
    if size <= 0:
        raise ValueError("chunk size must be positive")
    return [data[i:i + size] for i in range(0, len(data), size)]


def hex_fingerprint(fingerprint: bytes) -> str:
    """Colon-separated uppercase hex, the way openssl prints fingerprints."""
    return ":".join(f"{b:02X}" for b in fingerprint)


__all__ = ["b64encode", "b64decode", "chunks", "hex_fingerprint"]
