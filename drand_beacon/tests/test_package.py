import importlib

import drand_beacon
from drand_beacon.verification import verifier as verifier_mod


def test_top_level_verify_is_the_function():
    assert callable(drand_beacon.verify)
    assert drand_beacon.verify is verifier_mod.verify
    assert drand_beacon.walk.__module__ == "drand_beacon.verification.walker"


def test_verification_submodules_import_by_dotted_path():
    for name in ("message", "verifier", "walker"):
        mod = importlib.import_module(f"drand_beacon.verification.{name}")
        assert mod.__name__ == f"drand_beacon.verification.{name}"


def test_package_exports():
    for name in drand_beacon.__all__:
        assert hasattr(drand_beacon, name), name
