"""
drand beacon: types package

Typed records shared across the verifier, the walker and the fetch layer:

  • core    : RoundId, ChainInfo, Beacon
  • verdict : Verdict (and the VerdictKind taxonomy from errors)

    from drand_beacon.types import ChainInfo, Beacon, Verdict
"""

from __future__ import annotations

from .core import Beacon, ChainInfo, RoundId
from .verdict import Verdict, VerdictKind

__all__ = [
    "RoundId",
    "ChainInfo",
    "Beacon",
    "Verdict",
    "VerdictKind",
]
