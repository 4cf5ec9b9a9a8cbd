import json

import pytest
from typer.testing import CliRunner

import drand_beacon.cli as cli_mod
from drand_beacon.client import DrandClient

from .conftest import FakeTransport, load_vectors

runner = CliRunner()
BASE = "https://api.drand.sh"
_DATA = load_vectors()
MAINNET_INFO = _DATA["chains"]["mainnet-default"]
ROUND1 = _DATA["vectors"][0]["beacon"]
ROUND2 = _DATA["vectors"][1]["beacon"]


@pytest.fixture
def transport(monkeypatch):
    t = FakeTransport(
        {
            f"{BASE}/info": MAINNET_INFO,
            f"{BASE}/public/1": ROUND1,
            f"{BASE}/public/2": ROUND2,
        }
    )
    monkeypatch.delenv("DRAND_URL", raising=False)
    monkeypatch.setattr(cli_mod, "_client", lambda ctx: DrandClient(ctx.obj["config"], transport=t))
    return t


def _write(tmp_path, name, obj):
    p = tmp_path / name
    p.write_text(json.dumps(obj), encoding="utf-8")
    return str(p)


def test_info(transport):
    res = runner.invoke(cli_mod.app, ["info"])
    assert res.exit_code == 0, res.output
    out = json.loads(res.output)
    assert out["schemeID"] == "pedersen-bls-chained"
    assert out["hash"] == MAINNET_INFO["hash"]


def test_get_round(transport):
    res = runner.invoke(cli_mod.app, ["get", "--round", "2", "--no-pretty"])
    assert res.exit_code == 0, res.output
    out = json.loads(res.output)
    assert out["verdict"]["verdict"] == "valid"
    assert out["beacon"]["randomness"] == ROUND2["randomness"]


def test_get_failed_verification(transport):
    transport.routes[f"{BASE}/public/1"] = dict(ROUND1, randomness="00" * 32)
    res = runner.invoke(cli_mod.app, ["--log-level", "ERROR", "get", "-r", "1"])
    assert res.exit_code == 1
    assert json.loads(res.output)["verdict"]["verdict"] == "randomness_mismatch"


def test_get_missing_round(transport):
    res = runner.invoke(cli_mod.app, ["get", "-r", "99"])
    assert res.exit_code == 2


def test_walk(transport):
    res = runner.invoke(cli_mod.app, ["walk", "--from", "1", "--to", "2"])
    assert res.exit_code == 0, res.output
    assert json.loads(res.output)["valid_rounds"] == [1, 2]


def test_verify_offline(tmp_path):
    info = _write(tmp_path, "info.json", MAINNET_INFO)
    b2 = _write(tmp_path, "2.json", ROUND2)
    b1 = _write(tmp_path, "1.json", ROUND1)
    ok = runner.invoke(cli_mod.app, ["verify", "-c", info, "-b", b2, "-p", b1])
    assert ok.exit_code == 0, ok.output
    assert json.loads(ok.output)["verdict"] == "valid"

    missing = runner.invoke(cli_mod.app, ["verify", "-c", info, "-b", b2])
    assert missing.exit_code == 1
    assert json.loads(missing.output)["verdict"] == "predecessor_unavailable"


def test_verify_offline_bad_record(tmp_path):
    info = _write(tmp_path, "info.json", {"period": 30})
    b1 = _write(tmp_path, "1.json", ROUND1)
    res = runner.invoke(cli_mod.app, ["verify", "-c", info, "-b", b1])
    assert res.exit_code == 2


def test_bad_url_rejected():
    res = runner.invoke(cli_mod.app, ["--url", "ftp://nowhere", "info"])
    assert res.exit_code != 0
