"""
x509extra

RSA/SHA-256 certificate issuance and validation helpers:
- Signing X.509 certificates with RSA-PKCS#1 v1.5 and SHA-256
- PEM encoding of RSA private keys and certificates
- Chain validation with IP-address Subject Alternative Names
- Credential files on disk (.pem / .key / .crt)
"""

__version__ = "1.0.0"
