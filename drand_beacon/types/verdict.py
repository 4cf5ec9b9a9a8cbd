"""
Verification verdicts.

A `Verdict` is the typed outcome of verifying one beacon: `VALID`, or one of
the failure kinds of :class:`drand_beacon.errors.VerdictKind` together with a
short detail string. It is not truthy or falsy; use :attr:`ok`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import VerdictKind, VerificationError, error_for_kind


@dataclass(frozen=True, slots=True)
class Verdict:
    kind: VerdictKind
    round_number: Optional[int] = None
    detail: str = ""

    @classmethod
    def valid(cls, round_number: int) -> "Verdict":
        return cls(VerdictKind.VALID, round_number)

    @classmethod
    def from_error(cls, err: VerificationError) -> "Verdict":
        return cls(err.kind, err.round_number, err.detail)

    @property
    def ok(self) -> bool:
        return self.kind is VerdictKind.VALID

    def to_error(self) -> VerificationError:
        """Return the exception matching this (failing) verdict."""
        if self.ok:
            raise ValueError("a valid verdict has no error")
        return error_for_kind(self.kind)(round_number=self.round_number, detail=self.detail)

    def raise_for_invalid(self) -> None:
        if not self.ok:
            raise self.to_error()

    def to_dict(self) -> Dict[str, Any]:
        return {"round": self.round_number, "verdict": self.kind.value, "detail": self.detail}

    def __str__(self) -> str:
        base = f"round {self.round_number}: {self.kind.value}"
        return f"{base} ({self.detail})" if self.detail else base


__all__ = ["Verdict", "VerdictKind"]
