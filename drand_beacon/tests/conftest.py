import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest
from prometheus_client import CollectorRegistry
from py_ecc.optimized_bls12_381 import multiply

from drand_beacon.verification import verifier as verifier_mod
from drand_beacon.crypto.bls import encode_point, generator, hash_to_group
from drand_beacon.crypto.schemes import Scheme
from drand_beacon.errors import NotFound
from drand_beacon.metrics import Metrics
from drand_beacon.types.core import Beacon, ChainInfo
from drand_beacon.utils.bytes import from_hex, sha256
from drand_beacon.verification.message import build_message

# Arbitrary scalar below the curve order; test-only signing key.
TOY_SECRET = 0x1F2E3D4C5B6A79881726354453627180_9A8B7C6D5E4F3021
TOY_GENESIS_TIME = 1_700_000_000
TOY_PERIOD = 3


def _vectors_path() -> str:
    here = os.path.dirname(__file__)
    return os.path.join(here, "..", "test_vectors", "beacons.json")


def load_vectors() -> Dict[str, Any]:
    with open(_vectors_path(), "r", encoding="utf-8") as f:
        return json.load(f)


def hb(s: str) -> bytes:
    return from_hex(s)


# ---------------------------------------------------------------------------
# Toy chains signed locally
# ---------------------------------------------------------------------------


@dataclass
class ToyChain:
    scheme: Scheme
    info: ChainInfo
    secret: int
    beacons: Dict[int, Beacon] = field(default_factory=dict)

    def sign_message(self, message: bytes) -> bytes:
        group = self.scheme.signature_group
        point = multiply(hash_to_group(message, group, self.scheme.dst), self.secret)
        return encode_point(point, group)

    def sign(self, round_number: int, previous_signature: Optional[bytes] = None) -> Beacon:
        """Sign `round_number`; chained rounds link to `previous_signature`."""
        if self.scheme.chained:
            link = self.info.genesis_seed if round_number == 1 else previous_signature
            sig = self.sign_message(build_message(self.scheme, round_number, link))
            return Beacon(round_number, sig, sha256(sig), link)
        sig = self.sign_message(build_message(self.scheme, round_number))
        return Beacon(round_number, sig, sha256(sig))

    def extend(self, upto: int) -> "ToyChain":
        start = max(self.beacons, default=0) + 1
        for r in range(start, upto + 1):
            prev = self.beacons.get(r - 1)
            self.beacons[r] = self.sign(r, prev.signature if prev else None)
        return self

    def __getitem__(self, round_number: int) -> Beacon:
        return self.beacons[round_number]


def make_toy_chain(scheme: Scheme, *, secret: int = TOY_SECRET, genesis_seed: bytes = b"") -> ToyChain:
    pk_group = scheme.public_key_group
    pk = encode_point(multiply(generator(pk_group), secret), pk_group)
    info = ChainInfo(
        public_key=pk,
        scheme_id=scheme.scheme_id,
        period=TOY_PERIOD,
        genesis_time=TOY_GENESIS_TIME,
        hash=sha256(b"toy chain " + scheme.scheme_id.encode()),
        genesis_seed=genesis_seed,
    )
    return ToyChain(scheme=scheme, info=info, secret=secret)


@pytest.fixture(scope="session")
def toy_chained() -> ToyChain:
    """pedersen-bls-chained, empty genesis seed, rounds 1..4."""
    return make_toy_chain(Scheme.PEDERSEN_BLS_CHAINED).extend(4)


@pytest.fixture(scope="session")
def toy_g1() -> ToyChain:
    """bls-unchained-on-g1 (classic tag), rounds 1..2."""
    return make_toy_chain(Scheme.BLS_UNCHAINED_ON_G1).extend(2)


@pytest.fixture(scope="session")
def toy_unchained() -> ToyChain:
    return make_toy_chain(Scheme.PEDERSEN_BLS_UNCHAINED).extend(1)


@pytest.fixture(scope="session")
def toy_rfc9380() -> ToyChain:
    return make_toy_chain(Scheme.BLS_UNCHAINED_ON_G1_RFC9380).extend(1)


# ---------------------------------------------------------------------------
# Real published vectors
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def vectors() -> Dict[str, Any]:
    return load_vectors()


@pytest.fixture(scope="session")
def mainnet_info(vectors) -> ChainInfo:
    return ChainInfo.from_dict(vectors["chains"]["mainnet-default"])


@pytest.fixture(scope="session")
def mainnet_round1(vectors) -> Beacon:
    return Beacon.from_dict(vectors["vectors"][0]["beacon"])


@pytest.fixture(scope="session")
def mainnet_round2(vectors) -> Beacon:
    return Beacon.from_dict(vectors["vectors"][1]["beacon"])


# ---------------------------------------------------------------------------
# Metrics isolation and fake HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def metrics(monkeypatch) -> Metrics:
    """Fresh metrics on a private registry, patched into the verifier."""
    m = Metrics(registry=CollectorRegistry())
    monkeypatch.setattr(verifier_mod, "METRICS", m)
    return m


class FakeTransport:
    """Serves canned JSON bodies by URL; unknown URLs are 404."""

    def __init__(self, routes: Optional[Dict[str, Any]] = None) -> None:
        self.routes: Dict[str, Any] = dict(routes or {})
        self.calls: List[str] = []

    def fetch(self, url: str) -> Any:
        self.calls.append(url)
        if url not in self.routes:
            raise NotFound(f"{url}: HTTP 404")
        return self.routes[url]


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()
