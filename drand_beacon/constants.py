"""
drand beacon constants.

This module centralizes:
- Scheme identifiers as published by the drand network in chain info
- Hash-to-curve domain separation tags
- Compressed point sizes for BLS12-381
- Well-known public endpoints

Keep the tags stable; changing them would make every historical beacon fail
verification.
"""

from __future__ import annotations

# -----------------------------
# Scheme identifiers
# -----------------------------
SCHEME_PEDERSEN_BLS_CHAINED: str = "pedersen-bls-chained"
SCHEME_PEDERSEN_BLS_UNCHAINED: str = "pedersen-bls-unchained"
SCHEME_BLS_UNCHAINED_ON_G1: str = "bls-unchained-on-g1"
SCHEME_BLS_UNCHAINED_ON_G1_RFC9380: str = "bls-unchained-on-g1-rfc9380"

# The network publishes the RFC 9380 scheme under this shorter id.
SCHEME_BLS_UNCHAINED_G1_RFC9380_ALIAS: str = "bls-unchained-g1-rfc9380"

# -----------------------------
# Hash-to-curve domain tags
# -----------------------------
# drand historically used the G2 tag for every scheme, including the first
# G1-signature scheme. RFC 9380 schemes use the tag of the target group.
DST_G2: bytes = b"BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_NUL_"
DST_G1: bytes = b"BLS_SIG_BLS12381G1_XMD:SHA-256_SSWU_RO_NUL_"

# -----------------------------
# Sizes (compressed encodings)
# -----------------------------
G1_COMPRESSED_SIZE: int = 48
G2_COMPRESSED_SIZE: int = 96
ROUND_BYTES: int = 8        # u64 big-endian

# -----------------------------
# Network defaults
# -----------------------------
DEFAULT_BASE_URL: str = "https://api.drand.sh"
DEFAULT_TIMEOUT_S: float = 10.0
DEFAULT_RETRIES: int = 3
DEFAULT_BACKOFF_S: float = 0.5

# Newest beacon may lag the computed current round by this many rounds while
# the network aggregates partial signatures.
DEFAULT_LATEST_TOLERANCE_ROUNDS: int = 1

__all__ = [
    "SCHEME_PEDERSEN_BLS_CHAINED",
    "SCHEME_PEDERSEN_BLS_UNCHAINED",
    "SCHEME_BLS_UNCHAINED_ON_G1",
    "SCHEME_BLS_UNCHAINED_ON_G1_RFC9380",
    "SCHEME_BLS_UNCHAINED_G1_RFC9380_ALIAS",
    "DST_G2",
    "DST_G1",
    "G1_COMPRESSED_SIZE",
    "G2_COMPRESSED_SIZE",
    "ROUND_BYTES",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_S",
    "DEFAULT_RETRIES",
    "DEFAULT_BACKOFF_S",
    "DEFAULT_LATEST_TOLERANCE_ROUNDS",
]
