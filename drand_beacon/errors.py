"""
drand beacon errors.

This module defines the verdict-kind taxonomy and a small, typed hierarchy of
exceptions raised by the package. Callers can catch the base `DrandError` to
handle everything, `VerificationError` for verdicts about a specific beacon,
or `ClientError` for fetch-layer failures.

Every `VerificationError` subclass maps 1:1 to a `VerdictKind`, so a verdict
can always be turned back into the precise exception (and vice versa).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Dict, Optional, Type

if TYPE_CHECKING:  # pragma: no cover
    from .types.verdict import Verdict


class VerdictKind(str, Enum):
    """Outcome of verifying one beacon."""

    VALID = "valid"
    UNSUPPORTED_SCHEME = "unsupported_scheme"
    MALFORMED_INPUT = "malformed_input"
    RANDOMNESS_MISMATCH = "randomness_mismatch"
    CHAIN_LINK_BROKEN = "chain_link_broken"
    PREDECESSOR_UNAVAILABLE = "predecessor_unavailable"
    SIGNATURE_INVALID = "signature_invalid"


class DrandError(Exception):
    """Base class for all drand-beacon errors."""
    pass


class InvalidRecord(DrandError, ValueError):
    """Raised when a chain-info or beacon record cannot be decoded."""
    pass


# ---- Verification errors -----------------------------------------------------


@dataclass(frozen=True)
class VerificationError(DrandError):
    """
    A terminal, non-retryable verdict about a specific beacon.

    Attributes:
        round_number: The beacon round the verdict is about (None if unknown).
        detail: Short human-readable explanation.
    """
    round_number: Optional[int] = None
    detail: str = ""

    kind: ClassVar[VerdictKind] = VerdictKind.MALFORMED_INPUT

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        base = f"{type(self).__name__}: round={self.round_number}"
        return f"{base} {self.detail}" if self.detail else base


class UnsupportedScheme(VerificationError):
    """The chain's scheme id is not one of the recognized schemes."""
    kind = VerdictKind.UNSUPPORTED_SCHEME


class MalformedInput(VerificationError):
    """Structurally invalid input: bad round, sizes, presence of fields, keys."""
    kind = VerdictKind.MALFORMED_INPUT


class RandomnessMismatch(VerificationError):
    """The randomness field is not SHA-256 of the signature."""
    kind = VerdictKind.RANDOMNESS_MISMATCH


class ChainLinkBroken(VerificationError):
    """The previous-signature link does not match the predecessor beacon."""
    kind = VerdictKind.CHAIN_LINK_BROKEN


class PredecessorUnavailable(VerificationError):
    """A chained beacon was presented without its predecessor."""
    kind = VerdictKind.PREDECESSOR_UNAVAILABLE


class SignatureInvalid(VerificationError):
    """The pairing check failed or the signature is not a valid group element."""
    kind = VerdictKind.SIGNATURE_INVALID


_ERROR_BY_KIND: Dict[VerdictKind, Type[VerificationError]] = {
    cls.kind: cls
    for cls in (
        UnsupportedScheme,
        MalformedInput,
        RandomnessMismatch,
        ChainLinkBroken,
        PredecessorUnavailable,
        SignatureInvalid,
    )
}


def error_for_kind(kind: VerdictKind) -> Type[VerificationError]:
    """Return the exception class for a failing verdict kind."""
    try:
        return _ERROR_BY_KIND[VerdictKind(kind)]
    except KeyError:
        raise ValueError(f"no error type for verdict kind {kind!r}") from None


# ---- Client errors -----------------------------------------------------------


class ClientError(DrandError):
    """Base class for fetch-layer failures."""
    pass


class NotResponding(ClientError):
    """The endpoint could not be reached or returned an unexpected status."""
    pass


class NotFound(NotResponding):
    """The endpoint answered 404 (e.g., a round that does not exist yet)."""
    pass


class InvalidChainInfo(ClientError):
    """The chain info record could not be decoded."""
    pass


class InvalidBeacon(ClientError):
    """The beacon record could not be decoded or is not the requested round."""
    pass


class InvalidRound(ClientError):
    """The requested round number is not valid (rounds start at 1)."""
    pass


@dataclass(frozen=True)
class RoundBeforeGenesis(ClientError):
    """
    Raised when a round is computed for a time before the chain's genesis.

    Attributes:
        now: The timestamp (unix seconds) that was mapped to a round.
        genesis_time: The chain's genesis timestamp.
    """
    now: float
    genesis_time: int

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"RoundBeforeGenesis: now={self.now} < genesis_time={self.genesis_time}"


@dataclass(frozen=True)
class ChainInfoMismatch(ClientError):
    """
    Raised when the fetched chain info hash differs from the pinned one.

    Attributes:
        expected_hex: Pinned chain hash (hex).
        got_hex: Chain hash served by the endpoint (hex).
    """
    expected_hex: str
    got_hex: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"ChainInfoMismatch: expected={self.expected_hex} got={self.got_hex}"


@dataclass(frozen=True)
class FailedVerification(ClientError):
    """
    Raised by the client when a fetched beacon does not verify.

    Attributes:
        verdict: The failing verdict, carrying its kind and detail.
    """
    verdict: "Verdict"

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"FailedVerification: {self.verdict}"


__all__ = [
    "VerdictKind",
    "DrandError",
    "InvalidRecord",
    "VerificationError",
    "UnsupportedScheme",
    "MalformedInput",
    "RandomnessMismatch",
    "ChainLinkBroken",
    "PredecessorUnavailable",
    "SignatureInvalid",
    "error_for_kind",
    "ClientError",
    "NotResponding",
    "NotFound",
    "InvalidChainInfo",
    "InvalidBeacon",
    "InvalidRound",
    "RoundBeforeGenesis",
    "ChainInfoMismatch",
    "FailedVerification",
]
