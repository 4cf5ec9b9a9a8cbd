"""
drand beacon verification package.

Verifies randomness beacons published by a drand network against the chain's
public key, for all four drand schemes:
- pedersen-bls-chained,
- pedersen-bls-unchained,
- bls-unchained-on-g1,
- bls-unchained-on-g1-rfc9380.

Only the core records and the verification entry points are surfaced here;
the HTTP client lives in `drand_beacon.client`, the CLI in `drand_beacon.cli`.
"""

from __future__ import annotations

from .errors import VerdictKind, VerificationError
from .types.core import Beacon, ChainInfo
from .types.verdict import Verdict
from .verification import Verifier, WalkReport, verify, verify_or_raise, walk
from .version import __version__

__all__ = [
    "__version__",
    "Beacon",
    "ChainInfo",
    "Verdict",
    "VerdictKind",
    "VerificationError",
    "Verifier",
    "WalkReport",
    "verify",
    "verify_or_raise",
    "walk",
]
