"""
drand_beacon.cli
----------------

Command-line front end for fetching and verifying drand beacons.

Commands:
  - info   : Print the chain info of the endpoint.
  - get    : Fetch and verify one round (latest if omitted).
  - verify : Verify JSON records offline (no network).
  - walk   : Fetch a range of rounds and print one verdict per round.

Environment:
  DRAND_URL, DRAND_TIMEOUT_S, DRAND_RETRIES, DRAND_CHAIN_HASH, ... (see
  `drand_beacon.config.ClientConfig.from_env`). `--url` overrides DRAND_URL.

Example:
  drand-beacon get --round 1000
  drand-beacon --url https://api.drand.sh/52db9ba70e0cc0f6eaf7803dd07447a1f5477735fd3f661792ba94600c84e971 get
  drand-beacon verify --chain-info info.json --beacon 1000.json
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from typing import Any, Dict, Optional

import typer

from ..client import DrandClient
from ..config import ClientConfig
from ..errors import ClientError, FailedVerification, InvalidRecord
from ..types.core import Beacon, ChainInfo
from ..types.verdict import Verdict
from ..verification.verifier import verify as verify_beacon

__all__ = ["app", "main"]

app = typer.Typer(
    name="drand-beacon",
    help="Fetch and verify drand randomness beacons.",
    no_args_is_help=True,
    add_completion=False,
)


def _dump(obj: Any, pretty: bool = True) -> str:
    return json.dumps(obj, indent=2 if pretty else None, sort_keys=False)


def _load_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"cannot read JSON from {path!r}: {e}")


def _client(ctx: typer.Context) -> DrandClient:
    return DrandClient(ctx.obj["config"])


def _fail(msg: str, code: int = 2) -> None:
    typer.echo(msg, err=True)
    raise typer.Exit(code)


@app.callback()
def _root(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", "-u", help="drand HTTP endpoint (default: $DRAND_URL or https://api.drand.sh)."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level."),
) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = ClientConfig.from_env()
        if url:
            cfg = replace(cfg, base_url=url)
            cfg.validate()
    except ValueError as e:
        raise typer.BadParameter(str(e))
    ctx.obj = {"config": cfg}


@app.command("info")
def cmd_info(
    ctx: typer.Context,
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print JSON output."),
) -> None:
    """Print the chain info served by the endpoint."""
    try:
        info = _client(ctx).chain_info()
    except ClientError as e:
        _fail(f"error: {e}")
    typer.echo(_dump(info.to_dict(), pretty))


@app.command("get")
def cmd_get(
    ctx: typer.Context,
    round_id: Optional[int] = typer.Option(None, "--round", "-r", help="Round to fetch (default: latest)."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print JSON output."),
) -> None:
    """Fetch one beacon, verify it and print it with its verdict."""
    client = _client(ctx)
    try:
        beacon = client.latest_randomness() if round_id is None else client.randomness(round_id)
    except FailedVerification as e:
        typer.echo(_dump({"verdict": e.verdict.to_dict()}, pretty))
        raise typer.Exit(1)
    except ClientError as e:
        _fail(f"error: {e}")
    verdict = Verdict.valid(beacon.round_number)
    typer.echo(_dump({"beacon": beacon.to_dict(), "verdict": verdict.to_dict()}, pretty))


@app.command("verify")
def cmd_verify(
    chain_info_path: str = typer.Option(..., "--chain-info", "-c", help="Chain info JSON file (as served by /info)."),
    beacon_path: str = typer.Option(..., "--beacon", "-b", help="Beacon JSON file (as served by /public/<round>)."),
    previous_path: Optional[str] = typer.Option(None, "--previous", "-p", help="Predecessor beacon JSON (chained schemes)."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print JSON output."),
) -> None:
    """Verify a beacon offline against chain info; exit code 1 when invalid."""
    try:
        info = ChainInfo.from_dict(_load_json(chain_info_path))
        beacon = Beacon.from_dict(_load_json(beacon_path))
        previous = Beacon.from_dict(_load_json(previous_path)) if previous_path else None
    except InvalidRecord as e:
        _fail(f"error: {e}")
    verdict = verify_beacon(info, beacon, previous)
    typer.echo(_dump(verdict.to_dict(), pretty))
    if not verdict.ok:
        raise typer.Exit(1)


@app.command("walk")
def cmd_walk(
    ctx: typer.Context,
    start: int = typer.Option(..., "--from", help="First round (inclusive)."),
    end: int = typer.Option(..., "--to", help="Last round (inclusive)."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print JSON output."),
) -> None:
    """Fetch rounds FROM..TO and print one verdict per round."""
    if end < start:
        raise typer.BadParameter("--to must be >= --from")
    if end - start >= 1000:
        raise typer.BadParameter("at most 1000 rounds per walk")
    try:
        report = _client(ctx).walk(range(start, end + 1))
    except ClientError as e:
        _fail(f"error: {e}")
    typer.echo(_dump(report.to_dict(), pretty))
    if not report.ok:
        raise typer.Exit(1)


def main() -> None:  # pragma: no cover - thin wrapper
    """Entry-point for the `drand-beacon` script and `python -m drand_beacon.cli`."""
    try:
        app(prog_name="drand-beacon")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
