"""Verification of signed attestation reports.

An attestation response carries its report in the body. Its headers hold a
URL-encoded chain of PEM certificates and a base64 signature of the body.
The chain must lead to the attestation root CA, and the first certificate's
key must have signed the body.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum, auto
from functools import lru_cache

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

from attestkit.base64util import base64_decode
from attestkit.response import Response
from attestkit.urldecode import url_decode

SIGNING_CERTIFICATE_HEADER = "X-IASReport-Signing-Certificate"
SIGNATURE_HEADER = "X-IASReport-Signature"

_PEM_BEGIN = "-----BEGIN"

_ROOT_CA_PEM = (
    "-----BEGIN CERTIFICATE-----\n"
    "MIIFSzCCA7OgAwIBAgIJANEHdl0yo7CUMA0GCSqGSIb3DQEBCwUAMH4xCzAJBgNV\n"
    "BAYTAlVTMQswCQYDVQQIDAJDQTEUMBIGA1UEBwwLU2FudGEgQ2xhcmExGjAYBgNV\n"
    "BAoMEUludGVsIENvcnBvcmF0aW9uMTAwLgYDVQQDDCdJbnRlbCBTR1ggQXR0ZXN0\n"
    "YXRpb24gUmVwb3J0IFNpZ25pbmcgQ0EwIBcNMTYxMTE0MTUzNzMxWhgPMjA0OTEy\n"
    "MzEyMzU5NTlaMH4xCzAJBgNVBAYTAlVTMQswCQYDVQQIDAJDQTEUMBIGA1UEBwwL\n"
    "U2FudGEgQ2xhcmExGjAYBgNVBAoMEUludGVsIENvcnBvcmF0aW9uMTAwLgYDVQQD\n"
    "DCdJbnRlbCBTR1ggQXR0ZXN0YXRpb24gUmVwb3J0IFNpZ25pbmcgQ0EwggGiMA0G\n"
    "CSqGSIb3DQEBAQUAA4IBjwAwggGKAoIBgQCfPGR+tXc8u1EtJzLA10Feu1Wg+p7e\n"
    "LmSRmeaCHbkQ1TF3Nwl3RmpqXkeGzNLd69QUnWovYyVSndEMyYc3sHecGgfinEeh\n"
    "rgBJSEdsSJ9FpaFdesjsxqzGRa20PYdnnfWcCTvFoulpbFR4VBuXnnVLVzkUvlXT\n"
    "L/TAnd8nIZk0zZkFJ7P5LtePvykkar7LcSQO85wtcQe0R1Raf/sQ6wYKaKmFgCGe\n"
    "NpEJUmg4ktal4qgIAxk+QHUxQE42sxViN5mqglB0QJdUot/o9a/V/mMeH8KvOAiQ\n"
    "byinkNndn+Bgk5sSV5DFgF0DffVqmVMblt5p3jPtImzBIH0QQrXJq39AT8cRwP5H\n"
    "afuVeLHcDsRp6hol4P+ZFIhu8mmbI1u0hH3W/0C2BuYXB5PC+5izFFh/nP0lc2Lf\n"
    "6rELO9LZdnOhpL1ExFOq9H/B8tPQ84T3Sgb4nAifDabNt/zu6MmCGo5U8lwEFtGM\n"
    "RoOaX4AS+909x00lYnmtwsDVWv9vBiJCXRsCAwEAAaOByTCBxjBgBgNVHR8EWTBX\n"
    "MFWgU6BRhk9odHRwOi8vdHJ1c3RlZHNlcnZpY2VzLmludGVsLmNvbS9jb250ZW50\n"
    "L0NSTC9TR1gvQXR0ZXN0YXRpb25SZXBvcnRTaWduaW5nQ0EuY3JsMB0GA1UdDgQW\n"
    "BBR4Q3t2pn680K9+QjfrNXw7hwFRPDAfBgNVHSMEGDAWgBR4Q3t2pn680K9+Qjfr\n"
    "NXw7hwFRPDAOBgNVHQ8BAf8EBAMCAQYwEgYDVR0TAQH/BAgwBgEB/wIBADANBgkq\n"
    "hkiG9w0BAQsFAAOCAYEAeF8tYMXICvQqeXYQITkV2oLJsp6J4JAqJabHWxYJHGir\n"
    "IEqucRiJSSx+HjIJEUVaj8E0QjEud6Y5lNmXlcjqRXaCPOqK0eGRz6hi+ripMtPZ\n"
    "sFNaBwLQVV905SDjAzDzNIDnrcnXyB4gcDFCvwDFKKgLRjOB/WAqgscDUoGq5ZVi\n"
    "zLUzTqiQPmULAQaB9c6Oti6snEFJiCQ67JLyW/E83/frzCmO5Ru6WjU4tmsmy8Ra\n"
    "Ud4APK0wZTGtfPXU7w+IBdG5Ez0kE1qzxGQaL4gINJ1zMyleDnbuS8UicjJijvqA\n"
    "152Sq049ESDz+1rRGc2NVEqh1KaGXmtXvqxXcTB+Ljy5Bw2ke0v8iGngFBPqCTVB\n"
    "3op5KBG3RjbF6RRSzwzuWfL7QErNC8WEy5yDVARzTA5+xmBc388v9Dm21HGfcC8O\n"
    "DD+gT9sSpssq0ascmvH49MOgjt1yoysLtdCtJW/9FZpoOypaHx0R+mJTLwPXVMrv\n"
    "DaVzWh5aiEx+idkSGMnX\n"
    "-----END CERTIFICATE-----\n"
)


class AttestationCode(Enum):
    """Why an attestation step was rejected, or that it was not."""

    NO_ERROR = auto()
    MSG0_EXTENDED_EPID_GROUP_ID_NOT_ZERO = auto()
    MSG1_SESSION_KEY_INVALID = auto()
    MSG3_SESSION_KEY_MISMATCH = auto()
    MSG3_EPID_GROUP_ID_MISMATCH = auto()
    MSG3_INVALID_REPORT_DATA = auto()
    ATTR_PARSE_FAILED = auto()
    ATTR_SIGNING_CERTIFICATE_NOT_FOUND = auto()
    ATTR_CERTIFICATE_HEADER_INVALID = auto()
    ATTR_CERTIFICATION_VERIFY_FAILED = auto()
    ATTR_SIGNATURE_NOT_FOUND = auto()
    ATTR_SIGNATURE_INVALID = auto()
    ATTR_OPENSSL_ERROR = auto()
    ATTR_SIGNATURE_VERIFY_FAILED = auto()


class AttestationFailure(Exception):
    """An attestation step failed; ``code`` tells which check it was."""

    def __init__(self, code: AttestationCode, message: str | None = None) -> None:
        super().__init__(message or code.name)
        self.code = code


def load_certificate(pem: str | bytes) -> x509.Certificate:
    """Load the first PEM certificate in ``pem``; raises ValueError if none."""
    data = pem.encode("latin-1") if isinstance(pem, str) else bytes(pem)
    try:
        return x509.load_pem_x509_certificate(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ValueError(f"cannot load certificate: {exc}") from exc


@lru_cache(maxsize=1)
def load_root_ca() -> x509.Certificate:
    """The attestation report signing root CA."""
    return load_certificate(_ROOT_CA_PEM)


def split_certificate_chain(chain: str) -> list[str]:
    """Split concatenated PEM text at each BEGIN marker after the start."""
    starts = [0]
    pos = chain.find(_PEM_BEGIN, 1)
    while pos != -1:
        starts.append(pos)
        pos = chain.find(_PEM_BEGIN, pos + 1)
    ends = starts[1:] + [len(chain)]
    return [chain[start:end] for start, end in zip(starts, ends)]


def _is_current(cert: x509.Certificate, now: datetime) -> bool:
    return cert.not_valid_before_utc <= now <= cert.not_valid_after_utc


def _is_ca(cert: x509.Certificate) -> bool:
    try:
        ext = cert.extensions.get_extension_for_class(x509.BasicConstraints)
    except x509.ExtensionNotFound:
        return cert.version is x509.Version.v1
    return ext.value.ca


def _issued_by(cert: x509.Certificate, issuer: x509.Certificate) -> bool:
    if not _is_ca(issuer):
        return False
    try:
        cert.verify_directly_issued_by(issuer)
    except (ValueError, TypeError, InvalidSignature, UnsupportedAlgorithm):
        return False
    return True


def verify_chain(
    chain: Sequence[x509.Certificate], root_ca: x509.Certificate | None = None
) -> bool:
    """True when ``chain[0]`` leads to ``root_ca`` through the other certificates.

    Every certificate on the path must be within its validity period and be
    signed by the next one; issuers must be CA certificates.
    """
    certs = list(chain)
    if not certs:
        raise ValueError("empty certificate chain")
    root = load_root_ca() if root_ca is None else root_ca
    now = datetime.now(timezone.utc)
    if not _is_current(root, now):
        return False

    current = certs[0]
    untrusted = certs[1:]
    for _ in range(len(certs) + 1):
        if not _is_current(current, now):
            return False
        if current == root or _issued_by(current, root):
            return True
        issuer = next(
            (c for c in untrusted if c != current and _issued_by(current, c)), None
        )
        if issuer is None:
            return False
        untrusted.remove(issuer)
        current = issuer
    return False


def sha256_verify(message: bytes, signature: bytes, public_key) -> bool:
    """Check a SHA-256 signature made with an RSA (PKCS#1 v1.5) or EC key.

    Returns False for a wrong signature; raises TypeError for other key types.
    """
    try:
        if isinstance(public_key, rsa.RSAPublicKey):
            public_key.verify(
                bytes(signature), bytes(message), padding.PKCS1v15(), hashes.SHA256()
            )
        elif isinstance(public_key, ec.EllipticCurvePublicKey):
            public_key.verify(bytes(signature), bytes(message), ec.ECDSA(hashes.SHA256()))
        else:
            raise TypeError(f"unsupported key type {type(public_key).__name__}")
    except InvalidSignature:
        return False
    return True


def verify_certificate(
    response: Response, root_ca: x509.Certificate | None = None
) -> AttestationCode:
    """Check the signing chain and the body signature of an attestation response.

    Raises AttestationFailure when the certificates or the signature cannot
    be used at all. A well-formed signature that does not match the body is
    reported by returning ATTR_SIGNATURE_VERIFY_FAILED; a match gives NO_ERROR.
    """
    chain_text = response.headers_as_string(SIGNING_CERTIFICATE_HEADER)
    if not chain_text:
        raise AttestationFailure(AttestationCode.ATTR_SIGNING_CERTIFICATE_NOT_FOUND)

    try:
        certs = [load_certificate(piece) for piece in split_certificate_chain(url_decode(chain_text))]
    except ValueError as exc:
        raise AttestationFailure(
            AttestationCode.ATTR_CERTIFICATE_HEADER_INVALID, str(exc)
        ) from exc

    root = load_root_ca() if root_ca is None else root_ca
    if not verify_chain(certs, root):
        raise AttestationFailure(AttestationCode.ATTR_CERTIFICATION_VERIFY_FAILED)
    signing_cert = certs[0]

    signature_text = response.headers_as_string(SIGNATURE_HEADER)
    if not signature_text:
        raise AttestationFailure(AttestationCode.ATTR_SIGNATURE_NOT_FOUND)
    try:
        signature = base64_decode(signature_text)
    except ValueError as exc:
        raise AttestationFailure(AttestationCode.ATTR_SIGNATURE_INVALID, str(exc)) from exc

    try:
        public_key = signing_cert.public_key()
        valid = sha256_verify(bytes(response.content), signature, public_key)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise AttestationFailure(AttestationCode.ATTR_OPENSSL_ERROR, str(exc)) from exc

    return AttestationCode.NO_ERROR if valid else AttestationCode.ATTR_SIGNATURE_VERIFY_FAILED