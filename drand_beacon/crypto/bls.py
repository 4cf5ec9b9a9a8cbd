"""
drand_beacon.crypto.bls
=======================

Thin BLS12-381 wrapper over `py_ecc` used by the beacon verifier.

- Backend: `py_ecc.optimized_bls12_381` (projective coordinates, pure Python)
- Point codecs: ZCash-style compressed encodings via `py_ecc.bls.g2_primitives`
- Hash-to-curve: `py_ecc.bls.hash_to_curve` (SHA-256 XMD, SSWU, random oracle)

Public API
----------
- Group                                  (G1 / G2, with `other` and `compressed_size`)
- decode_point(data, group) -> Point     raises ValueError on any invalid encoding
- encode_point(point, group) -> bytes
- generator(group) -> Point
- in_subgroup(point) -> bool
- is_identity(point) -> bool
- hash_to_group(message, group, dst) -> Point
- pairing_check(signature, public_key, message_point, signature_group) -> bool

Notes
-----
- Point ordering follows e(P, Q) with P in G1 and Q in G2. The underlying
  `py_ecc` pairing call expects (Q, P); `_pair` handles it.
- The pairing check is written once and parameterised by the signature group:
  the hashed message always lives in the signature group, the public key and
  the fixed generator in the other one.
"""

from __future__ import annotations

import hashlib
from enum import Enum
from typing import Any

from py_ecc.bls.g2_primitives import (
    G1_to_pubkey,
    G2_to_signature,
    pubkey_to_G1,
    signature_to_G2,
)
from py_ecc.bls.hash_to_curve import hash_to_G1, hash_to_G2
from py_ecc.optimized_bls12_381 import (
    FQ12,
    G1,
    G2,
    b,
    b2,
    curve_order,
    final_exponentiate,
    is_inf,
    is_on_curve,
    multiply,
    neg,
    pairing,
)

from ..constants import G1_COMPRESSED_SIZE, G2_COMPRESSED_SIZE

# We do not strictly type the point internals; treat them as opaque tuples
# that py_ecc understands.
Point = Any

__all__ = [
    "Group",
    "Point",
    "decode_point",
    "encode_point",
    "generator",
    "in_subgroup",
    "is_identity",
    "hash_to_group",
    "pairing_check",
]


class Group(str, Enum):
    """The two source groups of the BLS12-381 pairing."""

    G1 = "G1"
    G2 = "G2"

    @property
    def other(self) -> "Group":
        return Group.G2 if self is Group.G1 else Group.G1

    @property
    def compressed_size(self) -> int:
        return G1_COMPRESSED_SIZE if self is Group.G1 else G2_COMPRESSED_SIZE


# -------------------------
# Codecs
# -------------------------


def decode_point(data: bytes, group: Group) -> Point:
    """
    Decompress a point of `group`.

    Raises ValueError if the length is wrong, the flags or coordinates are
    invalid, or the point is not on the curve.
    """
    if len(data) != group.compressed_size:
        raise ValueError(
            f"{group.value} point must be {group.compressed_size} bytes (got {len(data)})"
        )
    if group is Group.G1:
        pt = pubkey_to_G1(bytes(data))
        on_curve = is_on_curve(pt, b)
    else:
        pt = signature_to_G2(bytes(data))
        on_curve = is_on_curve(pt, b2)
    if not on_curve:
        raise ValueError(f"{group.value} point is not on the curve")
    return pt


def encode_point(point: Point, group: Group) -> bytes:
    """Compress a point of `group` (48 bytes for G1, 96 for G2)."""
    if group is Group.G1:
        return bytes(G1_to_pubkey(point))
    return bytes(G2_to_signature(point))


def generator(group: Group) -> Point:
    return G1 if group is Group.G1 else G2


def in_subgroup(point: Point) -> bool:
    """Return True if `point` lies in the prime-order subgroup."""
    return bool(is_inf(multiply(point, curve_order)))


def is_identity(point: Point) -> bool:
    return bool(is_inf(point))


def hash_to_group(message: bytes, group: Group, dst: bytes) -> Point:
    """Hash `message` onto `group` with the given domain separation tag."""
    if group is Group.G1:
        return hash_to_G1(bytes(message), dst, hashlib.sha256)
    return hash_to_G2(bytes(message), dst, hashlib.sha256)


# -------------------------
# Pairing
# -------------------------


def _pair(sig_side: Point, other_side: Point, signature_group: Group) -> FQ12:
    """Miller loop of e(sig_side, other_side), arguments placed by group."""
    if signature_group is Group.G2:
        return pairing(sig_side, other_side, final_exponentiate=False)
    return pairing(other_side, sig_side, final_exponentiate=False)


def pairing_check(
    signature: Point,
    public_key: Point,
    message_point: Point,
    signature_group: Group,
) -> bool:
    """
    Check e(signature, g) == e(H(m), public_key).

    `signature` and `message_point` live in `signature_group`; `public_key`
    and the generator g live in the other group. Evaluated as a product of
    two Miller loops with a single final exponentiation:

        FE( ML(signature, g) * ML(H(m), -public_key) ) == 1
    """
    g = generator(signature_group.other)
    acc = _pair(signature, g, signature_group) * _pair(
        message_point, neg(public_key), signature_group
    )
    return final_exponentiate(acc) == FQ12.one()
