"""
drand_beacon.verification.walker
================================

Verify a batch of fetched beacons for one chain.

The batch need not be contiguous or sorted. Beacons are taken in ascending
round order and each is verified independently; for chained schemes a beacon
past round 1 is handed the fetched beacon of the round right before it. If
that round was not fetched (and is not the trusted `anchor`), the verdict is
`PredecessorUnavailable`: a chained beacon is never accepted on trust.

Verdicts are reported per round. A failing predecessor does not poison its
successor: the successor's link is checked against the predecessor's
signature bytes, which is all the message depends on.

    report = walk(info, beacons)
    if not report.ok:
        print(report.first_failure)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import VerdictKind
from ..types.core import Beacon, ChainInfo
from ..types.verdict import Verdict
from .verifier import Verifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkReport:
    """
    Outcome of walking a batch of beacons.

    verdicts : one (round, verdict) pair per input beacon, ascending by round;
               duplicates keep their input order after the first occurrence.
    """

    verdicts: Tuple[Tuple[int, Verdict], ...]

    @property
    def ok(self) -> bool:
        return all(v.ok for _, v in self.verdicts)

    @property
    def valid_rounds(self) -> List[int]:
        return [r for r, v in self.verdicts if v.ok]

    @property
    def first_failure(self) -> Optional[Verdict]:
        for _, v in self.verdicts:
            if not v.ok:
                return v
        return None

    def verdict_for(self, round_number: int) -> Optional[Verdict]:
        for r, v in self.verdicts:
            if r == round_number:
                return v
        return None

    def to_dict(self) -> Dict[str, object]:
        return {
            "ok": self.ok,
            "valid_rounds": self.valid_rounds,
            "verdicts": [v.to_dict() for _, v in self.verdicts],
        }


def walk(
    chain_info: ChainInfo,
    beacons: Iterable[Beacon],
    *,
    anchor: Optional[Beacon] = None,
) -> WalkReport:
    """
    Verify every beacon in `beacons` against `chain_info`.

    Parameters
    ----------
    chain_info : ChainInfo
        Parameters of the chain the beacons claim to belong to.
    beacons : Iterable[Beacon]
        Fetched beacons in any order.
    anchor : Optional[Beacon]
        A trusted beacon (e.g., a previously verified checkpoint) that may
        serve as the predecessor of the lowest fetched round. It is not itself
        verified or reported.
    """
    verifier = Verifier(chain_info)
    ordered = sorted(beacons, key=lambda b: b.round_number)

    by_round: Dict[int, Beacon] = {}
    if anchor is not None:
        by_round[anchor.round_number] = anchor

    duplicates = set()
    for i, beacon in enumerate(ordered):
        if i > 0 and ordered[i - 1].round_number == beacon.round_number:
            duplicates.add(i)
        else:
            by_round[beacon.round_number] = beacon

    results: List[Tuple[int, Verdict]] = []
    for i, beacon in enumerate(ordered):
        rnd = beacon.round_number
        if i in duplicates:
            verdict = Verdict(VerdictKind.MALFORMED_INPUT, rnd, "duplicate round in batch")
        else:
            verdict = verifier.verify(beacon, by_round.get(rnd - 1))
        results.append((rnd, verdict))

    report = WalkReport(tuple(results))
    if not report.ok:
        logger.debug(
            "walk over %d beacons: %d valid, first failure %s",
            len(results),
            len(report.valid_rounds),
            report.first_failure,
        )
    return report


__all__ = ["WalkReport", "walk"]
