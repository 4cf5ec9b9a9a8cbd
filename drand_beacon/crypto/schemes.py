"""
drand_beacon.crypto.schemes
===========================

The closed set of verification schemes a drand chain can use.

Each `Scheme` member carries a frozen `SchemeDescriptor` with the group that
holds signatures, the group that holds the public key, whether rounds are
chained, and the hash-to-curve method. This table is the only place that
knows group assignments; everything else asks the descriptor.

| scheme id                    | signature | public key | chaining  | hash-to-curve |
|------------------------------|-----------|------------|-----------|---------------|
| pedersen-bls-chained         | G2        | G1         | chained   | classic       |
| pedersen-bls-unchained       | G2        | G1         | unchained | classic       |
| bls-unchained-on-g1          | G1        | G2         | unchained | classic       |
| bls-unchained-on-g1-rfc9380  | G1        | G2         | unchained | RFC 9380      |
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from ..constants import (
    DST_G1,
    DST_G2,
    SCHEME_BLS_UNCHAINED_G1_RFC9380_ALIAS,
    SCHEME_BLS_UNCHAINED_ON_G1,
    SCHEME_BLS_UNCHAINED_ON_G1_RFC9380,
    SCHEME_PEDERSEN_BLS_CHAINED,
    SCHEME_PEDERSEN_BLS_UNCHAINED,
)
from ..errors import UnsupportedScheme
from .bls import Group


class ChainingMode(str, Enum):
    CHAINED = "chained"
    UNCHAINED = "unchained"


class HashMethod(str, Enum):
    """
    Hash-to-curve flavour.

    CLASSIC uses drand's historical G2 domain tag whatever the target group;
    RFC9380 uses the tag of the group being hashed onto.
    """

    CLASSIC = "classic"
    RFC9380 = "rfc9380"

    def dst(self, group: Group) -> bytes:
        if self is HashMethod.CLASSIC:
            return DST_G2
        return DST_G1 if group is Group.G1 else DST_G2


@dataclass(frozen=True)
class SchemeDescriptor:
    scheme_id: str
    signature_group: Group
    public_key_group: Group
    chaining_mode: ChainingMode
    hash_method: HashMethod

    @property
    def chained(self) -> bool:
        return self.chaining_mode is ChainingMode.CHAINED

    @property
    def dst(self) -> bytes:
        """Domain separation tag used when hashing the message onto the signature group."""
        return self.hash_method.dst(self.signature_group)


class Scheme(Enum):
    PEDERSEN_BLS_CHAINED = SchemeDescriptor(
        SCHEME_PEDERSEN_BLS_CHAINED, Group.G2, Group.G1, ChainingMode.CHAINED, HashMethod.CLASSIC
    )
    PEDERSEN_BLS_UNCHAINED = SchemeDescriptor(
        SCHEME_PEDERSEN_BLS_UNCHAINED, Group.G2, Group.G1, ChainingMode.UNCHAINED, HashMethod.CLASSIC
    )
    BLS_UNCHAINED_ON_G1 = SchemeDescriptor(
        SCHEME_BLS_UNCHAINED_ON_G1, Group.G1, Group.G2, ChainingMode.UNCHAINED, HashMethod.CLASSIC
    )
    BLS_UNCHAINED_ON_G1_RFC9380 = SchemeDescriptor(
        SCHEME_BLS_UNCHAINED_ON_G1_RFC9380, Group.G1, Group.G2, ChainingMode.UNCHAINED, HashMethod.RFC9380
    )

    @property
    def descriptor(self) -> SchemeDescriptor:
        return self.value

    @property
    def scheme_id(self) -> str:
        return self.value.scheme_id

    @property
    def signature_group(self) -> Group:
        return self.value.signature_group

    @property
    def public_key_group(self) -> Group:
        return self.value.public_key_group

    @property
    def chained(self) -> bool:
        return self.value.chained

    @property
    def dst(self) -> bytes:
        return self.value.dst

    @classmethod
    def from_id(cls, scheme_id: str) -> "Scheme":
        """Resolve a published scheme id; unknown ids raise UnsupportedScheme."""
        try:
            return _BY_ID[scheme_id]
        except (KeyError, TypeError):
            raise UnsupportedScheme(detail=f"unknown scheme id {scheme_id!r}") from None


_BY_ID: Dict[str, Scheme] = {s.scheme_id: s for s in Scheme}
_BY_ID[SCHEME_BLS_UNCHAINED_G1_RFC9380_ALIAS] = Scheme.BLS_UNCHAINED_ON_G1_RFC9380

SUPPORTED_SCHEME_IDS = tuple(sorted(_BY_ID))

__all__ = [
    "ChainingMode",
    "HashMethod",
    "SchemeDescriptor",
    "Scheme",
    "SUPPORTED_SCHEME_IDS",
]
