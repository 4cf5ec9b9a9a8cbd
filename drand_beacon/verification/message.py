"""
Signed-message construction.

drand signs a 32-byte digest, never the raw round bytes:

  chained    M = SHA-256( previous_signature || u64be(round) )
  unchained  M = SHA-256( u64be(round) )

The digest is then hashed onto the signature group by the verifier.
"""

from __future__ import annotations

from typing import Optional

from ..crypto.schemes import Scheme
from ..errors import MalformedInput
from ..utils.bytes import sha256, u64be


def round_preimage(round_number: int) -> bytes:
    """8-byte big-endian encoding of a round, as mixed into every message."""
    try:
        return u64be(round_number)
    except ValueError as e:
        raise MalformedInput(round_number=round_number, detail=str(e)) from e


def build_message(scheme: Scheme, round_number: int, previous_signature: Optional[bytes] = None) -> bytes:
    """
    Return the digest the beacon signature commits to.

    `previous_signature` must be given for chained schemes (the genesis seed
    for round 1) and must be None for unchained ones. Rounds start at 1.
    """
    if round_number < 1:
        raise MalformedInput(round_number=round_number, detail="round must be >= 1")
    if scheme.chained:
        if previous_signature is None:
            raise MalformedInput(
                round_number=round_number,
                detail="chained scheme requires previous_signature",
            )
        return sha256(bytes(previous_signature) + round_preimage(round_number))
    if previous_signature is not None:
        raise MalformedInput(
            round_number=round_number,
            detail=f"{scheme.scheme_id} messages take no previous_signature",
        )
    return sha256(round_preimage(round_number))


__all__ = ["round_preimage", "build_message"]
