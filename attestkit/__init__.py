"""Attestation report verification: HTTP response parsing, lenient JSON, certificate and signature checks, robust I/O and sockets."""

__version__ = "0.1.0"