from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, NewType, Optional

from ..errors import InvalidRecord
from ..utils.bytes import from_hex, to_hex

"""
Core records for drand beacon verification.

These are immutable and free of curve dependencies so they can be shared
across the verifier, the chain walker, the fetch layer and tests.

Types provided:
  • RoundId   : integer-typed identifier for a beacon round
  • ChainInfo : public parameters of one drand chain
  • Beacon    : one round's published randomness record
"""

# ---- Simple newtypes ---------------------------------------------------------

RoundId = NewType("RoundId", int)


def _require_bytes(name: str, v: Any) -> bytes:
    if not isinstance(v, (bytes, bytearray)):
        raise TypeError(f"{name} must be bytes")
    return bytes(v)


def _require_int(name: str, v: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if not isinstance(v, int) or isinstance(v, bool):
        raise TypeError(f"{name} must be an int")
    return v


def _pick(d: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in d:
            return d[k]
    return default


def _hex_field(d: Mapping[str, Any], *keys: str, required: bool = True) -> Optional[bytes]:
    raw = _pick(d, *keys)
    if raw is None:
        if required:
            raise InvalidRecord(f"missing field {keys[0]!r}")
        return None
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw)
    try:
        return from_hex(raw)
    except (TypeError, ValueError) as e:
        raise InvalidRecord(f"field {keys[0]!r} is not valid hex: {e}") from e


def _int_field(d: Mapping[str, Any], *keys: str) -> int:
    raw = _pick(d, *keys)
    if raw is None:
        raise InvalidRecord(f"missing field {keys[0]!r}")
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise InvalidRecord(f"field {keys[0]!r} must be an integer (got {type(raw).__name__})")
    return raw


# ---- Chain info --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ChainInfo:
    """
    Public parameters of a drand chain, fetched once per client session.

    Fields:
      public_key   : compressed group public key (group fixed by the scheme)
      scheme_id    : scheme identifier as published (validated at verify time)
      period       : seconds between rounds
      genesis_time : unix time of round 1
      hash         : chain hash, identifies this chain instance
      group_hash   : hash of the group file that produced the chain
      genesis_seed : predecessor bytes for round 1 of chained schemes
      beacon_id    : beacon id from the chain metadata
    """

    public_key: bytes
    scheme_id: str
    period: int
    genesis_time: int
    hash: bytes = b""
    group_hash: bytes = b""
    genesis_seed: bytes = b""
    beacon_id: str = "default"

    def __post_init__(self) -> None:  # type: ignore[override]
        object.__setattr__(self, "public_key", _require_bytes("public_key", self.public_key))
        object.__setattr__(self, "hash", _require_bytes("hash", self.hash))
        object.__setattr__(self, "group_hash", _require_bytes("group_hash", self.group_hash))
        object.__setattr__(self, "genesis_seed", _require_bytes("genesis_seed", self.genesis_seed))
        if not isinstance(self.scheme_id, str):
            raise TypeError("scheme_id must be a str")
        _require_int("period", self.period)
        _require_int("genesis_time", self.genesis_time)
        if self.period <= 0:
            raise ValueError(f"period must be positive (got {self.period})")

    # ------------------------- serialization -------------------------

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ChainInfo":
        """
        Decode the `/info` record served by a drand endpoint.

        Accepts both the served camelCase keys (``schemeID``, ``groupHash``,
        ``metadata.beaconID``) and the snake_case names of this class. When no
        explicit genesis seed is given, the group hash is used: drand seeds the
        first chained round with it.
        """
        if not isinstance(d, Mapping):
            raise InvalidRecord("chain info must be a JSON object")
        scheme_id = _pick(d, "schemeID", "scheme_id")
        if not isinstance(scheme_id, str) or not scheme_id:
            raise InvalidRecord("missing field 'schemeID'")
        group_hash = _hex_field(d, "groupHash", "group_hash", required=False) or b""
        seed = _hex_field(d, "genesis_seed", "genesisSeed", required=False)
        metadata = d.get("metadata") or {}
        beacon_id = metadata.get("beaconID", "default") if isinstance(metadata, Mapping) else "default"
        try:
            return cls(
                public_key=_hex_field(d, "public_key", "publicKey"),  # type: ignore[arg-type]
                scheme_id=scheme_id,
                period=_int_field(d, "period", "period_seconds"),
                genesis_time=_int_field(d, "genesis_time", "genesisTime"),
                hash=_hex_field(d, "hash", "chain_hash", required=False) or b"",
                group_hash=group_hash,
                genesis_seed=group_hash if seed is None else seed,
                beacon_id=str(beacon_id or "default"),
            )
        except (TypeError, ValueError) as e:
            if isinstance(e, InvalidRecord):
                raise
            raise InvalidRecord(f"invalid chain info: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "public_key": to_hex(self.public_key),
            "period": self.period,
            "genesis_time": self.genesis_time,
            "hash": to_hex(self.hash),
            "groupHash": to_hex(self.group_hash),
            "genesis_seed": to_hex(self.genesis_seed),
            "schemeID": self.scheme_id,
            "metadata": {"beaconID": self.beacon_id},
        }


# ---- Beacon ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Beacon:
    """
    One round's published randomness record.

    Fields:
      round_number       : beacon round (rounds start at 1; validated at verify time)
      signature          : compressed signature point
      randomness         : SHA-256(signature), 32 bytes when well-formed
      previous_signature : chain link for chained schemes; None when absent
    """

    round_number: int
    signature: bytes
    randomness: bytes
    previous_signature: Optional[bytes] = field(default=None)

    def __post_init__(self) -> None:  # type: ignore[override]
        _require_int("round_number", self.round_number)
        object.__setattr__(self, "signature", _require_bytes("signature", self.signature))
        object.__setattr__(self, "randomness", _require_bytes("randomness", self.randomness))
        if self.previous_signature is not None:
            object.__setattr__(
                self,
                "previous_signature",
                _require_bytes("previous_signature", self.previous_signature),
            )

    @property
    def round_id(self) -> RoundId:
        return RoundId(self.round_number)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Beacon":
        """Decode a `/public/<round>` record (``round`` is accepted for ``round_number``)."""
        if not isinstance(d, Mapping):
            raise InvalidRecord("beacon must be a JSON object")
        try:
            return cls(
                round_number=_int_field(d, "round", "round_number"),
                signature=_hex_field(d, "signature"),  # type: ignore[arg-type]
                randomness=_hex_field(d, "randomness"),  # type: ignore[arg-type]
                previous_signature=_hex_field(
                    d, "previous_signature", "previousSignature", required=False
                ),
            )
        except TypeError as e:
            raise InvalidRecord(f"invalid beacon: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "round": self.round_number,
            "randomness": to_hex(self.randomness),
            "signature": to_hex(self.signature),
        }
        if self.previous_signature is not None:
            out["previous_signature"] = to_hex(self.previous_signature)
        return out


__all__ = [
    "RoundId",
    "ChainInfo",
    "Beacon",
]
