import importlib
import sys

from golfbets.config import get_settings, reset_settings_cache

_ORIGINAL = sys.modules["golfbets.config"]


def _fresh_config():
    sys.modules.pop("golfbets.config", None)
    return importlib.import_module("golfbets.config")


def test_money_places_default(monkeypatch):
    monkeypatch.delenv("GOLFBETS_MONEY_PLACES", raising=False)
    config = _fresh_config()
    assert config.MONEY_PLACES == 2


def test_int_env_falls_back_on_garbage(monkeypatch):
    monkeypatch.setenv("GOLFBETS_MONEY_PLACES", "two")
    config = _fresh_config()
    assert config.MONEY_PLACES == 2


def test_invariant_enforcement_can_be_disabled(monkeypatch):
    monkeypatch.setenv("GOLFBETS_ENFORCE_INVARIANTS", "off")
    config = _fresh_config()
    assert config.ENFORCE_INVARIANTS is False


def test_env_bool_truthy_values(monkeypatch):
    monkeypatch.setenv("GOLFBETS_ENFORCE_INVARIANTS", "YeS")
    config = _fresh_config()
    assert config.ENFORCE_INVARIANTS is True


def test_settings_read_allowances_from_env(monkeypatch):
    monkeypatch.setenv("GOLFBETS_DEFAULT_ALLOWANCE", "90")
    reset_settings_cache()
    settings = get_settings()
    assert settings.default_allowance_percent == 90
    assert settings.match_play_allowance_percent == 75
    assert get_settings() is settings


def teardown_module(module):  # noqa: D401 - test cleanup helper
    """Restore the original golfbets.config module."""

    sys.modules["golfbets.config"] = _ORIGINAL
