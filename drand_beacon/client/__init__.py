"""
drand_beacon.client
-------------------

HTTP fetch layer: transports and the fetch-and-verify `DrandClient`.
"""

from .client import DrandClient, round_for_time, time_of_round
from .transport import HttpTransport, Transport

__all__ = [
    "DrandClient",
    "HttpTransport",
    "Transport",
    "round_for_time",
    "time_of_round",
]
