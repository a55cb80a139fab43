"""
Custom exceptions for x509extra.

Validation failures are never raised: they are returned as lists of
FailedReason values. These exceptions cover the hard failures only.
"""


class X509ExtraException(Exception):
    """Base exception for x509extra errors."""
    pass


class CertificateError(X509ExtraException):
    """A certificate was rejected by a caller that treats reasons as fatal."""

    def __init__(self, message: str, reasons=None):
        super().__init__(message)
        self.reasons = list(reasons or [])


class SigningError(X509ExtraException):
    """The signing primitive rejected the key or the certificate template."""
    pass


class KeyEncodingError(X509ExtraException):
    """An RSA private key could not be DER encoded or decoded."""
    pass


class PEMError(X509ExtraException):
    """PEM text is missing its delimiters or carries a bad base64 body."""
    pass
