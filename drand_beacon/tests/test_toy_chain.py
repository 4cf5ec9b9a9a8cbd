"""
Properties checked against chains signed locally with a known key: every
scheme, the empty genesis seed, chain-link tampering and signature bit flips.
"""

from dataclasses import replace

import pytest

from drand_beacon.crypto.schemes import Scheme
from drand_beacon.errors import VerdictKind
from drand_beacon.types.core import Beacon
from drand_beacon.utils.bytes import sha256
from drand_beacon.verification.message import build_message
from drand_beacon.verification.verifier import Verifier, verify

from .conftest import make_toy_chain

REJECTED_ON_FLIP = {VerdictKind.SIGNATURE_INVALID, VerdictKind.RANDOMNESS_MISMATCH}


def test_chained_round1_uses_empty_genesis(toy_chained):
    b1 = toy_chained[1]
    assert toy_chained.info.genesis_seed == b""
    assert b1.previous_signature == b""
    assert verify(toy_chained.info, b1).ok
    # previous_signature omitted entirely is equivalent
    assert verify(toy_chained.info, replace(b1, previous_signature=None)).ok


def test_chained_rounds_with_predecessor(toy_chained):
    v = Verifier(toy_chained.info)
    for r in (2, 3, 4):
        assert v.verify(toy_chained[r], toy_chained[r - 1]).ok


def test_chained_round_without_predecessor(toy_chained):
    verdict = verify(toy_chained.info, toy_chained[3])
    assert verdict.kind is VerdictKind.PREDECESSOR_UNAVAILABLE


def test_link_broken_even_when_signature_is_self_consistent(toy_chained):
    # Round 3 correctly signed over round 1's signature instead of round 2's.
    forged = toy_chained.sign(3, toy_chained[1].signature)
    v = Verifier(toy_chained.info)
    assert v.verify(forged, Beacon(2, toy_chained[1].signature, sha256(toy_chained[1].signature))).ok
    verdict = v.verify(forged, toy_chained[2])
    assert verdict.kind is VerdictKind.CHAIN_LINK_BROKEN


def test_chained_round1_with_non_empty_seed_chain():
    seed = sha256(b"group file")
    chain = make_toy_chain(Scheme.PEDERSEN_BLS_CHAINED, genesis_seed=seed).extend(1)
    assert chain[1].previous_signature == seed
    assert verify(chain.info, chain[1]).ok
    # the same signature does not verify under the empty convention
    empty = replace(chain.info, genesis_seed=b"")
    assert verify(empty, replace(chain[1], previous_signature=None)).kind is VerdictKind.SIGNATURE_INVALID


@pytest.mark.parametrize("fixture_name", ["toy_unchained", "toy_g1", "toy_rfc9380"])
def test_unchained_schemes_verify(request, fixture_name):
    chain = request.getfixturevalue(fixture_name)
    b = chain[1]
    verdict = verify(chain.info, b)
    assert verdict.ok, verdict
    assert sha256(b.signature) == b.randomness


def test_g1_classic_and_rfc_tags_are_not_interchangeable(toy_g1):
    info = replace(toy_g1.info, scheme_id="bls-unchained-on-g1-rfc9380")
    assert verify(info, toy_g1[1]).kind is VerdictKind.SIGNATURE_INVALID


def test_unchained_signature_not_valid_for_other_round(toy_g1):
    moved = replace(toy_g1[1], round_number=2)
    assert verify(toy_g1.info, moved).kind is VerdictKind.SIGNATURE_INVALID


def test_unchained_ignores_predecessor(toy_g1):
    assert verify(toy_g1.info, toy_g1[2], toy_g1[1]).ok
    assert verify(toy_g1.info, toy_g1[2]).ok


@pytest.mark.parametrize("fixture_name", ["toy_chained", "toy_unchained", "toy_g1", "toy_rfc9380"])
def test_every_single_bit_flip_is_rejected(request, fixture_name):
    chain = request.getfixturevalue(fixture_name)
    b = chain[1]
    v = Verifier(chain.info)
    for i in range(len(b.signature) * 8):
        sig = bytearray(b.signature)
        sig[i // 8] ^= 1 << (i % 8)
        verdict = v.verify(replace(b, signature=bytes(sig)))
        assert verdict.kind in REJECTED_ON_FLIP, (i, verdict)


@pytest.mark.parametrize("bit", [0, 1, 2, 7, 100, 383])
def test_bit_flip_with_recomputed_randomness(toy_g1, bit):
    b = toy_g1[1]
    sig = bytearray(b.signature)
    sig[bit // 8] ^= 1 << (bit % 8)
    tampered = replace(b, signature=bytes(sig), randomness=sha256(bytes(sig)))
    assert verify(toy_g1.info, tampered).kind is VerdictKind.SIGNATURE_INVALID


def test_wrong_key_rejects(toy_g1):
    other = make_toy_chain(Scheme.BLS_UNCHAINED_ON_G1, secret=12345)
    assert verify(other.info, toy_g1[1]).kind is VerdictKind.SIGNATURE_INVALID


def test_identity_signature_rejected(toy_g1):
    ident = bytes([0xC0]) + b"\x00" * 47
    b = Beacon(1, ident, sha256(ident))
    assert verify(toy_g1.info, b).kind is VerdictKind.SIGNATURE_INVALID


def test_toy_signatures_match_message_builder(toy_chained):
    b2 = toy_chained[2]
    msg = build_message(Scheme.PEDERSEN_BLS_CHAINED, 2, toy_chained[1].signature)
    assert toy_chained.sign_message(msg) == b2.signature
