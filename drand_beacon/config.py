"""
drand client configuration.

This file defines the typed configuration for the fetch layer:
- Endpoint (base URL, optionally including a chain-hash path segment)
- HTTP timeout and bounded retry/backoff
- Optional pinned chain hash (detects being pointed at the wrong chain)
- Tolerance for the newest beacon lagging the computed current round

It provides:
- A dataclass with validation
- Loading from environment variables (prefix configurable)
- Loading from a JSON or YAML file (YAML via PyYAML)
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from .constants import (
    DEFAULT_BACKOFF_S,
    DEFAULT_BASE_URL,
    DEFAULT_LATEST_TOLERANCE_ROUNDS,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_S,
)
from .utils.bytes import from_hex


@dataclass
class ClientConfig:
    """
    base_url: drand HTTP endpoint, e.g. https://api.drand.sh or
              https://api.drand.sh/<chain-hash> for a non-default chain
    timeout_s: per-request HTTP timeout
    retries: extra attempts after a failed request (404 is never retried)
    backoff_s: linear backoff step between attempts (attempt n sleeps n*backoff_s)
    expected_chain_hash: hex chain hash the served chain info must carry (optional)
    latest_tolerance_rounds: how far `latest` may lag the computed current round
    verify_predecessor: fetch and link-check the predecessor of chained rounds
    """

    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    retries: int = DEFAULT_RETRIES
    backoff_s: float = DEFAULT_BACKOFF_S
    expected_chain_hash: Optional[str] = None
    latest_tolerance_rounds: int = DEFAULT_LATEST_TOLERANCE_ROUNDS
    verify_predecessor: bool = True

    def validate(self) -> None:
        u = urlparse(self.base_url)
        if u.scheme not in {"http", "https"} or not u.netloc:
            raise ValueError(f"base_url must be an http(s) URL (got {self.base_url!r})")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        if self.retries < 0:
            raise ValueError("retries must be >= 0")
        if self.backoff_s < 0:
            raise ValueError("backoff_s must be >= 0")
        if self.latest_tolerance_rounds < 0:
            raise ValueError("latest_tolerance_rounds must be >= 0")
        if self.expected_chain_hash is not None:
            try:
                raw = from_hex(self.expected_chain_hash)
            except (TypeError, ValueError) as e:
                raise ValueError(f"expected_chain_hash is not valid hex: {e}") from e
            if len(raw) != 32:
                raise ValueError("expected_chain_hash must be 32 bytes")

    @property
    def endpoint(self) -> str:
        """`base_url` without a trailing slash."""
        return self.base_url.rstrip("/")

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_env(prefix: str = "DRAND_") -> "ClientConfig":
        """
        Load configuration from environment variables. All variables are optional.

        Supported keys:
          - DRAND_URL=https://api.drand.sh
          - DRAND_TIMEOUT_S=10
          - DRAND_RETRIES=3
          - DRAND_BACKOFF_S=0.5
          - DRAND_CHAIN_HASH=8990e7a9aaed2ffed73dbd7092123d6f289930540d7651336225dc172e51b2ce
          - DRAND_LATEST_TOLERANCE_ROUNDS=1
          - DRAND_VERIFY_PREDECESSOR=true
        """

        def _get(name: str, cast: Any, default: Any) -> Any:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None:
                return default
            try:
                if cast is bool:
                    return raw.lower() in {"1", "true", "yes", "on"}
                return cast(raw)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        cfg = ClientConfig(
            base_url=_get("URL", str, DEFAULT_BASE_URL),
            timeout_s=_get("TIMEOUT_S", float, DEFAULT_TIMEOUT_S),
            retries=_get("RETRIES", int, DEFAULT_RETRIES),
            backoff_s=_get("BACKOFF_S", float, DEFAULT_BACKOFF_S),
            expected_chain_hash=_get("CHAIN_HASH", str, None),
            latest_tolerance_rounds=_get(
                "LATEST_TOLERANCE_ROUNDS", int, DEFAULT_LATEST_TOLERANCE_ROUNDS
            ),
            verify_predecessor=_get("VERIFY_PREDECESSOR", bool, True),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def from_file(path: str) -> "ClientConfig":
        """
        Load configuration from a JSON or YAML file. Keys mirror the dataclass
        fields. Example (YAML):

            base_url: https://api.drand.sh
            timeout_s: 5
            retries: 2
            expected_chain_hash: 8990e7a9aaed2ffed73dbd7092123d6f289930540d7651336225dc172e51b2ce
        """
        data = _parse_json_or_yaml(_read_text(path), path)
        if not isinstance(data, dict):
            raise ValueError(f"{path!r} must contain a mapping at top level")
        unknown = set(data) - set(ClientConfig.__dataclass_fields__)
        if unknown:
            raise ValueError(f"unknown config keys in {path!r}: {sorted(unknown)}")
        cfg = ClientConfig(**data)
        cfg.validate()
        return cfg


# -------------------------
# Utilities
# -------------------------


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _parse_json_or_yaml(text: str, path_hint: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    import yaml

    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {path_hint!r} as JSON or YAML: {e}") from e


__all__ = [
    "ClientConfig",
]
