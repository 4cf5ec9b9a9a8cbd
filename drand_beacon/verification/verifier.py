"""
drand_beacon.verification.verifier
==================================

Beacon verification: decide whether one beacon is authentic for a chain.

Checks, in order (the first failing check determines the verdict):

  0) the chain's scheme id is recognized            → UnsupportedScheme
     the round is >= 1                               → MalformedInput
  1) randomness == SHA-256(signature)                → RandomnessMismatch
  2) chained only: the previous-signature link
       round 1 : link is the chain's genesis seed   → ChainLinkBroken
       round >1: previous_signature present          → MalformedInput
                 predecessor beacon supplied         → PredecessorUnavailable
                 predecessor round and signature     → ChainLinkBroken
  3) message construction (see `message.py`)
  4) signature decodes to a subgroup point           → MalformedInput (length)
                                                       SignatureInvalid (point)
     public key decodes to a non-identity point      → MalformedInput
  5) e(signature, g) == e(H(m), public_key)          → SignatureInvalid

Everything is pure and synchronous. `Verifier` binds one `ChainInfo`,
resolves its scheme and decodes its public key once, and may be shared across
threads. Problems with the chain parameters found at construction are
remembered and reported at their place in the order above, so a beacon with a
bad randomness field is reported as such even when the public key is bad too.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..crypto.bls import Point, decode_point, hash_to_group, in_subgroup, is_identity, pairing_check
from ..crypto.schemes import Scheme
from ..errors import (
    ChainLinkBroken,
    MalformedInput,
    PredecessorUnavailable,
    RandomnessMismatch,
    SignatureInvalid,
    VerificationError,
)
from ..metrics import METRICS
from ..types.core import Beacon, ChainInfo
from ..types.verdict import Verdict
from ..utils.bytes import consteq, sha256
from .message import build_message

logger = logging.getLogger(__name__)


def _decode_public_key(scheme: Scheme, public_key: bytes) -> Point:
    group = scheme.public_key_group
    if not public_key:
        raise MalformedInput(detail="public key is empty")
    try:
        pt = decode_point(public_key, group)
    except ValueError as e:
        raise MalformedInput(detail=f"invalid {group.value} public key: {e}") from e
    if is_identity(pt):
        raise MalformedInput(detail="public key is the identity element")
    if not in_subgroup(pt):
        raise MalformedInput(detail="public key is not in the prime-order subgroup")
    return pt


def _decode_signature(scheme: Scheme, beacon: Beacon) -> Point:
    group = scheme.signature_group
    rnd = beacon.round_number
    if len(beacon.signature) != group.compressed_size:
        raise MalformedInput(
            round_number=rnd,
            detail=(
                f"signature must be {group.compressed_size} bytes for {scheme.scheme_id} "
                f"(got {len(beacon.signature)})"
            ),
        )
    try:
        pt = decode_point(beacon.signature, group)
    except ValueError as e:
        raise SignatureInvalid(round_number=rnd, detail=f"undecodable signature: {e}") from e
    if is_identity(pt) or not in_subgroup(pt):
        raise SignatureInvalid(round_number=rnd, detail="signature is not a valid subgroup element")
    return pt


@dataclass(frozen=True)
class Verifier:
    """
    Verifier bound to one chain.

    Attributes:
        chain_info: The chain parameters every beacon is checked against.
        scheme: The resolved scheme, or None when the scheme id is unknown.
    """

    chain_info: ChainInfo
    scheme: Optional[Scheme] = field(init=False, default=None)
    _public_key: Optional[Point] = field(init=False, default=None, repr=False, compare=False)
    _setup_error: Optional[VerificationError] = field(init=False, default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            scheme = Scheme.from_id(self.chain_info.scheme_id)
        except VerificationError as e:
            object.__setattr__(self, "_setup_error", e)
            return
        object.__setattr__(self, "scheme", scheme)
        try:
            object.__setattr__(self, "_public_key", _decode_public_key(scheme, self.chain_info.public_key))
        except VerificationError as e:
            object.__setattr__(self, "_setup_error", e)

    # ------------------------- public API -------------------------

    def verify(self, beacon: Beacon, previous_beacon: Optional[Beacon] = None) -> Verdict:
        """Return the verdict for `beacon`; never raises for an invalid beacon."""
        with METRICS.verify_timer():
            try:
                self._check(beacon, previous_beacon)
                verdict = Verdict.valid(beacon.round_number)
            except VerificationError as e:
                rnd = beacon.round_number if e.round_number is None else e.round_number
                verdict = Verdict(e.kind, rnd, e.detail)
        METRICS.record_verdict(verdict.kind.value)
        if not verdict.ok:
            logger.debug("beacon rejected: %s", verdict)
        return verdict

    def verify_or_raise(self, beacon: Beacon, previous_beacon: Optional[Beacon] = None) -> Beacon:
        self.verify(beacon, previous_beacon).raise_for_invalid()
        return beacon

    # ------------------------- checks -------------------------

    def _check(self, beacon: Beacon, previous_beacon: Optional[Beacon]) -> None:
        rnd = beacon.round_number
        if self.scheme is None:
            raise self._setup_failure(rnd)
        scheme = self.scheme
        if rnd < 1:
            raise MalformedInput(round_number=rnd, detail="round must be >= 1")

        if not consteq(sha256(beacon.signature), beacon.randomness):
            raise RandomnessMismatch(round_number=rnd, detail="randomness != sha256(signature)")

        link = self._chain_link(beacon, previous_beacon) if scheme.chained else None
        message = build_message(scheme, rnd, link)

        signature = _decode_signature(scheme, beacon)
        if self._setup_error is not None:
            raise self._setup_failure(rnd)

        h = hash_to_group(message, scheme.signature_group, scheme.dst)
        if not pairing_check(signature, self._public_key, h, scheme.signature_group):
            raise SignatureInvalid(round_number=rnd, detail="pairing check failed")

    def _setup_failure(self, rnd: int) -> VerificationError:
        err = self._setup_error
        assert err is not None
        return type(err)(round_number=rnd, detail=err.detail)

    def _chain_link(self, beacon: Beacon, previous_beacon: Optional[Beacon]) -> bytes:
        """Return the predecessor bytes the beacon's message is built from."""
        rnd = beacon.round_number
        if rnd == 1:
            seed = self.chain_info.genesis_seed
            if beacon.previous_signature is not None and not consteq(beacon.previous_signature, seed):
                raise ChainLinkBroken(
                    round_number=rnd, detail="previous_signature does not match the genesis seed"
                )
            return seed

        if beacon.previous_signature is None:
            raise MalformedInput(round_number=rnd, detail="chained beacon without previous_signature")
        if previous_beacon is None:
            raise PredecessorUnavailable(round_number=rnd, detail=f"round {rnd - 1} was not supplied")
        if previous_beacon.round_number != rnd - 1:
            raise ChainLinkBroken(
                round_number=rnd,
                detail=f"predecessor is round {previous_beacon.round_number}, expected {rnd - 1}",
            )
        if not consteq(previous_beacon.signature, beacon.previous_signature):
            raise ChainLinkBroken(
                round_number=rnd, detail="previous_signature does not match the predecessor's signature"
            )
        return beacon.previous_signature


# ----------------------------- functional API -----------------------------


def verify(chain_info: ChainInfo, beacon: Beacon, previous_beacon: Optional[Beacon] = None) -> Verdict:
    """
    Verify one beacon against `chain_info`.

    `previous_beacon` is the beacon of round `beacon.round_number - 1`; it is
    needed for chained schemes past round 1 and ignored otherwise.
    """
    return Verifier(chain_info).verify(beacon, previous_beacon)


def verify_or_raise(chain_info: ChainInfo, beacon: Beacon, previous_beacon: Optional[Beacon] = None) -> Beacon:
    """Like `verify`, but raise the matching `VerificationError` subclass on failure."""
    return Verifier(chain_info).verify_or_raise(beacon, previous_beacon)


__all__ = ["Verifier", "verify", "verify_or_raise"]
