"""
drand_beacon.verification
=========================

Message construction, single-beacon verification and batch walking.
"""

from .message import build_message, round_preimage
from .verifier import Verifier, verify, verify_or_raise
from .walker import WalkReport, walk

__all__ = [
    "build_message",
    "round_preimage",
    "Verifier",
    "verify",
    "verify_or_raise",
    "WalkReport",
    "walk",
]
