from dataclasses import replace

from drand_beacon.errors import VerdictKind
from drand_beacon.utils.bytes import sha256
from drand_beacon.verification.walker import walk


def test_walk_contiguous_chain_in_any_order(toy_chained):
    beacons = [toy_chained[3], toy_chained[1], toy_chained[4], toy_chained[2]]
    report = walk(toy_chained.info, beacons)
    assert report.ok
    assert report.valid_rounds == [1, 2, 3, 4]
    assert report.first_failure is None
    assert [r for r, _ in report.verdicts] == [1, 2, 3, 4]


def test_walk_gap_is_predecessor_unavailable(toy_chained):
    report = walk(toy_chained.info, [toy_chained[1], toy_chained[2], toy_chained[4]])
    assert not report.ok
    assert report.valid_rounds == [1, 2]
    assert report.verdict_for(4).kind is VerdictKind.PREDECESSOR_UNAVAILABLE
    assert report.first_failure.round_number == 4


def test_walk_anchor_supplies_first_predecessor(toy_chained):
    no_anchor = walk(toy_chained.info, [toy_chained[3], toy_chained[4]])
    assert no_anchor.verdict_for(3).kind is VerdictKind.PREDECESSOR_UNAVAILABLE

    report = walk(toy_chained.info, [toy_chained[3], toy_chained[4]], anchor=toy_chained[2])
    assert report.ok
    assert report.valid_rounds == [3, 4]
    assert report.verdict_for(2) is None


def test_walk_tampered_link_reported_per_round(toy_chained):
    bad3 = replace(toy_chained[3], previous_signature=toy_chained[1].signature)
    report = walk(toy_chained.info, [toy_chained[2], bad3, toy_chained[4]], anchor=toy_chained[1])
    assert report.verdict_for(2).ok
    assert report.verdict_for(3).kind is VerdictKind.CHAIN_LINK_BROKEN
    # round 4 links to the bytes of bad3's signature, which are untouched
    assert report.verdict_for(4).ok


def test_walk_duplicates_are_malformed(toy_chained):
    report = walk(toy_chained.info, [toy_chained[1], toy_chained[2], toy_chained[2]])
    kinds = [v.kind for _, v in report.verdicts]
    assert kinds == [VerdictKind.VALID, VerdictKind.VALID, VerdictKind.MALFORMED_INPUT]


def test_walk_unchained_needs_no_predecessor(toy_g1):
    report = walk(toy_g1.info, [toy_g1[2]])
    assert report.ok


def test_walk_empty_batch(toy_chained):
    report = walk(toy_chained.info, [])
    assert report.ok
    assert report.valid_rounds == []
    assert report.to_dict() == {"ok": True, "valid_rounds": [], "verdicts": []}


def test_walk_report_serializes(toy_g1):
    b = toy_g1[1]
    bad = replace(b, randomness=sha256(b"nope"))
    d = walk(toy_g1.info, [bad]).to_dict()
    assert d["ok"] is False
    assert d["verdicts"][0]["verdict"] == "randomness_mismatch"
