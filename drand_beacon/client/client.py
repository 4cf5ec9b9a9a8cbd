"""
drand_beacon.client.client
--------------------------

Fetch-and-verify client for one drand chain.

    client = DrandClient(ClientConfig(base_url="https://api.drand.sh"))
    info = client.chain_info()
    beacon = client.randomness(1000)        # verified, or FailedVerification
    latest = client.latest_randomness()

Every beacon the client returns has passed `Verifier.verify`. For chained
schemes the predecessor round is fetched too (unless `verify_predecessor` is
off, in which case the beacon's own `previous_signature` is taken as the
link; the pairing still binds the signature to it).
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, List, Optional

from ..config import ClientConfig
from ..errors import (
    ChainInfoMismatch,
    FailedVerification,
    InvalidBeacon,
    InvalidChainInfo,
    InvalidRecord,
    InvalidRound,
    RoundBeforeGenesis,
)
from ..types.core import Beacon, ChainInfo
from ..utils.bytes import from_hex, sha256, to_hex
from ..verification.verifier import Verifier
from ..verification.walker import WalkReport, walk
from .transport import HttpTransport, Transport

logger = logging.getLogger(__name__)

__all__ = ["DrandClient", "round_for_time", "time_of_round"]


# -------------------------
# Round <-> time arithmetic
# -------------------------


def round_for_time(chain_info: ChainInfo, now: float) -> int:
    """
    Round that is current at unix time `now`.

    Round 1 starts at `genesis_time`; a new round starts every `period`
    seconds. Raises RoundBeforeGenesis for times before genesis.
    """
    if now < chain_info.genesis_time:
        raise RoundBeforeGenesis(now=now, genesis_time=chain_info.genesis_time)
    return int((now - chain_info.genesis_time) // chain_info.period) + 1


def time_of_round(chain_info: ChainInfo, round_number: int) -> int:
    """Unix time at which `round_number` is due."""
    if round_number < 1:
        raise InvalidRound(f"rounds start at 1 (got {round_number})")
    return chain_info.genesis_time + (round_number - 1) * chain_info.period


# -------------------------
# Client
# -------------------------


class DrandClient:
    """
    Args:
        config:     endpoint, retry and verification settings.
        transport:  object with `fetch(url)`; an HttpTransport is built from
                    `config` when omitted.
        chain_info: pre-trusted chain parameters; skips the `/info` fetch.
        clock:      returns the current unix time (for `latest_randomness`).
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[Transport] = None,
        chain_info: Optional[ChainInfo] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or ClientConfig()
        self.config.validate()
        self.transport: Transport = transport or HttpTransport(
            timeout_s=self.config.timeout_s,
            retries=self.config.retries,
            backoff_s=self.config.backoff_s,
        )
        self._chain_info = chain_info
        self._verifier: Optional[Verifier] = None
        self._clock = clock

    # ----- chain info -------------------------------------------------------

    def chain_info(self) -> ChainInfo:
        """Fetch `<base>/info` once per client and check the pinned chain hash."""
        if self._chain_info is None:
            raw = self.transport.fetch(f"{self.config.endpoint}/info")
            try:
                info = ChainInfo.from_dict(raw)
            except InvalidRecord as e:
                raise InvalidChainInfo(str(e)) from e
            self._check_chain_hash(info)
            logger.info(
                "chain %s: scheme=%s period=%ds genesis=%d",
                to_hex(info.hash), info.scheme_id, info.period, info.genesis_time,
            )
            self._chain_info = info
        return self._chain_info

    def _check_chain_hash(self, info: ChainInfo) -> None:
        pinned = self.config.expected_chain_hash
        if pinned is None:
            return
        if from_hex(pinned) != info.hash:
            raise ChainInfoMismatch(expected_hex=pinned.lower(), got_hex=to_hex(info.hash))

    @property
    def verifier(self) -> Verifier:
        if self._verifier is None:
            self._verifier = Verifier(self.chain_info())
        return self._verifier

    # ----- beacons ----------------------------------------------------------

    def randomness(self, round_number: int) -> Beacon:
        """Fetch and verify the beacon of `round_number` (rounds start at 1)."""
        if round_number < 1:
            raise InvalidRound(f"rounds start at 1 (got {round_number})")
        self.chain_info()
        beacon = self._fetch_round(round_number)
        return self._verified(beacon)

    def latest_randomness(self) -> Beacon:
        """
        Fetch and verify the newest beacon.

        The network needs a moment to aggregate each round, so the beacon may
        lag the computed current round by `latest_tolerance_rounds`.
        """
        info = self.chain_info()
        expected = round_for_time(info, self._clock())
        beacon = self._fetch_beacon("latest")
        if beacon.round_number < expected - self.config.latest_tolerance_rounds:
            raise InvalidBeacon(
                f"latest beacon is round {beacon.round_number}, expected at least "
                f"{expected - self.config.latest_tolerance_rounds}"
            )
        return self._verified(beacon)

    def walk(self, rounds: Iterable[int]) -> WalkReport:
        """
        Fetch `rounds` and verify them as a batch.

        For chained schemes the round before the lowest requested one is also
        fetched and used as the walk's anchor.
        """
        wanted = sorted(set(rounds))
        for r in wanted:
            if r < 1:
                raise InvalidRound(f"rounds start at 1 (got {r})")
        info = self.chain_info()
        beacons: List[Beacon] = [self._fetch_round(r) for r in wanted]
        anchor = None
        if wanted and self._chained and wanted[0] > 1 and self.config.verify_predecessor:
            anchor = self._fetch_round(wanted[0] - 1)
        return walk(info, beacons, anchor=anchor)

    # ----- helpers ----------------------------------------------------------

    @property
    def _chained(self) -> bool:
        scheme = self.verifier.scheme
        return scheme is not None and scheme.chained

    def _verified(self, beacon: Beacon) -> Beacon:
        previous = self._predecessor_of(beacon)
        verdict = self.verifier.verify(beacon, previous)
        if not verdict.ok:
            logger.warning("beacon failed verification: %s", verdict)
            raise FailedVerification(verdict=verdict)
        return beacon

    def _predecessor_of(self, beacon: Beacon) -> Optional[Beacon]:
        if not self._chained or beacon.round_number <= 1:
            return None
        if self.config.verify_predecessor:
            return self._fetch_round(beacon.round_number - 1)
        if beacon.previous_signature is None:
            return None
        prev_sig = beacon.previous_signature
        return Beacon(beacon.round_number - 1, prev_sig, sha256(prev_sig))

    def _fetch_round(self, round_number: int) -> Beacon:
        beacon = self._fetch_beacon(str(round_number))
        if beacon.round_number != round_number:
            raise InvalidBeacon(
                f"requested round {round_number}, endpoint served round {beacon.round_number}"
            )
        return beacon

    def _fetch_beacon(self, tag: str) -> Beacon:
        raw = self.transport.fetch(f"{self.config.endpoint}/public/{tag}")
        try:
            return Beacon.from_dict(raw)
        except InvalidRecord as e:
            raise InvalidBeacon(str(e)) from e
