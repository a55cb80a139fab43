"""
DER encoding of RSA private keys (PKCS#1, RFC 3447 Appendix A.1)

    RSAPrivateKey ::= SEQUENCE {
        version           Version,  -- two-prime(0)
        modulus           INTEGER,  -- n
        publicExponent    INTEGER,  -- e
        privateExponent   INTEGER,  -- d
        prime1            INTEGER,  -- p
        prime2            INTEGER,  -- q
        exponent1         INTEGER,  -- d mod (p-1)
        exponent2         INTEGER,  -- d mod (q-1)
        coefficient       INTEGER,  -- (inverse of q) mod p
        otherPrimeInfos   OtherPrimeInfos OPTIONAL
    }

Only the two-prime form is produced; otherPrimeInfos is never emitted.
"""

import logging

from cryptography.hazmat.primitives.asymmetric import rsa
from pyasn1.codec.der import decoder, encoder
from pyasn1.error import PyAsn1Error
from pyasn1_modules import rfc3447

from x509extra.common.exceptions import KeyEncodingError


logger = logging.getLogger(__name__)

TWO_PRIME_VERSION = 0


def rsa_private_key_to_asn1(key: rsa.RSAPrivateKey) -> rfc3447.RSAPrivateKey:
    """
    Build the ASN.1 RSAPrivateKey structure for a key.

    Args:
        key: RSA private key object

    Returns:
        Populated rfc3447.RSAPrivateKey
    """
    numbers = key.private_numbers()
    public = numbers.public_numbers

    asn = rfc3447.RSAPrivateKey()
    asn['version'] = TWO_PRIME_VERSION
    asn['modulus'] = public.n
    asn['publicExponent'] = public.e
    asn['privateExponent'] = numbers.d
    asn['prime1'] = numbers.p
    asn['prime2'] = numbers.q
    asn['exponent1'] = numbers.dmp1
    asn['exponent2'] = numbers.dmq1
    asn['coefficient'] = numbers.iqmp
    return asn


def encode_der_rsa_private_key(key: rsa.RSAPrivateKey) -> bytes:
    """
    Encode an RSA private key as DER.

    Args:
        key: RSA private key object

    Returns:
        DER bytes of the PKCS#1 RSAPrivateKey structure
    """
    der = encoder.encode(rsa_private_key_to_asn1(key))
    logger.debug("Encoded %d-bit RSA private key to %d DER bytes", key.key_size, len(der))
    return der


def decode_der_rsa_private_key(der: bytes) -> rsa.RSAPrivateKey:
    """
    Decode a PKCS#1 RSAPrivateKey DER structure back into a key object.

    Args:
        der: DER bytes

    Returns:
        RSA private key object

    Raises:
        KeyEncodingError: If the bytes are not a consistent two-prime RSA key
    """
    try:
        asn, rest = decoder.decode(der, asn1Spec=rfc3447.RSAPrivateKey())
    except PyAsn1Error as e:
        raise KeyEncodingError(f"Malformed RSAPrivateKey DER: {e}") from e

    if rest:
        raise KeyEncodingError(f"{len(rest)} trailing bytes after RSAPrivateKey")

    other_primes = asn.getComponentByName('otherPrimeInfos', default=None, instantiate=False)
    if int(asn['version']) != TWO_PRIME_VERSION or other_primes is not None:
        raise KeyEncodingError("Only two-prime RSA private keys are supported")

    numbers = rsa.RSAPrivateNumbers(
        p=int(asn['prime1']),
        q=int(asn['prime2']),
        d=int(asn['privateExponent']),
        dmp1=int(asn['exponent1']),
        dmq1=int(asn['exponent2']),
        iqmp=int(asn['coefficient']),
        public_numbers=rsa.RSAPublicNumbers(
            e=int(asn['publicExponent']),
            n=int(asn['modulus']),
        ),
    )

    try:
        return numbers.private_key()
    except ValueError as e:
        raise KeyEncodingError(f"Inconsistent RSA key parameters: {e}") from e
