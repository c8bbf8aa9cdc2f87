"""Advisor settings."""
import logging

import pytest

from hanafuda_advisor.config import AdvisorConfig


def test_defaults():
    cfg = AdvisorConfig()
    assert cfg.best_move_simulations == 800
    assert cfg.prediction_simulations == 1000
    assert cfg.hand_size == 8
    assert cfg.workers == 1
    assert cfg.time_budget is None


def test_from_dict_ignores_unknown_keys(caplog):
    with caplog.at_level(logging.WARNING, logger="hanafuda_advisor.config"):
        cfg = AdvisorConfig.from_dict({"best_move_simulations": 50, "variant": "holo"})
    assert cfg.best_move_simulations == 50
    assert "variant" in caplog.text


def test_from_dict_keeps_base_values():
    base = AdvisorConfig(workers=3)
    cfg = AdvisorConfig.from_dict({"time_budget": 0.5}, base=base)
    assert cfg.workers == 3 and cfg.time_budget == 0.5


@pytest.mark.parametrize("bad", [
    {"workers": 0},
    {"hand_size": -1},
    {"best_move_simulations": "many"},
    {"time_budget": "soon"},
])
def test_invalid_values(bad):
    with pytest.raises(ValueError):
        AdvisorConfig.from_dict(bad)


def test_from_env():
    cfg = AdvisorConfig.from_env({"HANAFUDA_SIMULATIONS": "40", "HANAFUDA_WORKERS": "2"})
    assert cfg.best_move_simulations == cfg.prediction_simulations == 40
    assert cfg.workers == 2
    assert AdvisorConfig.from_env({}) == AdvisorConfig()
