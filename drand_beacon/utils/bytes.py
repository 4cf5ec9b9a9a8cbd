"""
drand_beacon.utils.bytes
========================

Hex/bytes helpers with strict validation, big-endian round encoding and a
timing-safe equality. Standard library only.
"""

from __future__ import annotations

import hashlib
import hmac
import re
from typing import Union

from ..constants import ROUND_BYTES

BytesLike = Union[bytes, bytearray, memoryview]

__all__ = [
    "from_hex",
    "to_hex",
    "as_bytes",
    "u64be",
    "sha256",
    "consteq",
]

_HEX_RE = re.compile(r"^(?:0[xX])?[0-9a-fA-F]*$")
_U64_MAX = (1 << (8 * ROUND_BYTES)) - 1


def from_hex(s: str) -> bytes:
    """
    Convert a hex string (with optional ``0x``) to bytes.

    Strict rules: no whitespace, only hex digits, even number of nibbles.
    """
    if not isinstance(s, str):
        raise TypeError("from_hex expects a str")
    if not _HEX_RE.match(s):
        raise ValueError("invalid hex string (characters or whitespace)")
    body = s[2:] if s.startswith(("0x", "0X")) else s
    if len(body) % 2 != 0:
        raise ValueError("hex string must have an even number of nibbles")
    return bytes.fromhex(body)


def to_hex(b: BytesLike, *, prefix: str = "") -> str:
    """Encode bytes as lowercase hex (no prefix by default, as drand serves it)."""
    return (prefix or "") + as_bytes(b).hex()


def as_bytes(x: BytesLike) -> bytes:
    """Normalize bytes-like to immutable :class:`bytes`."""
    if isinstance(x, bytes):
        return x
    if isinstance(x, (bytearray, memoryview)):
        return bytes(x)
    raise TypeError(f"expected bytes-like, got {type(x)!r}")


def u64be(n: int) -> bytes:
    """Encode a round number as ROUND_BYTES big-endian bytes."""
    if not 0 <= n <= _U64_MAX:
        raise ValueError(f"value out of u64 range: {n}")
    return int(n).to_bytes(ROUND_BYTES, "big", signed=False)


def sha256(data: BytesLike) -> bytes:
    """Return SHA-256(data)."""
    return hashlib.sha256(as_bytes(data)).digest()


def consteq(a: BytesLike, b: BytesLike) -> bool:
    """Timing-safe equality for two bytes-like values."""
    return hmac.compare_digest(as_bytes(a), as_bytes(b))
