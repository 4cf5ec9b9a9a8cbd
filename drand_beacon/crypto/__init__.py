"""
drand_beacon.crypto
===================

BLS12-381 primitives (`bls`) and the closed scheme table (`schemes`).
"""

from .bls import (
    Group,
    decode_point,
    encode_point,
    hash_to_group,
    in_subgroup,
    is_identity,
    pairing_check,
)
from .schemes import SUPPORTED_SCHEME_IDS, ChainingMode, HashMethod, Scheme, SchemeDescriptor

__all__ = [
    "Group",
    "decode_point",
    "encode_point",
    "hash_to_group",
    "in_subgroup",
    "is_identity",
    "pairing_check",
    "ChainingMode",
    "HashMethod",
    "Scheme",
    "SchemeDescriptor",
    "SUPPORTED_SCHEME_IDS",
]
