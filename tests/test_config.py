"""
Tests for run configuration.
"""

import json

import pytest

from snfclust.config import SNFConfig, load_config, save_config
from snfclust.errors import InvalidInputError


def test_defaults():
    config = SNFConfig()
    assert config.mu == 0.5
    assert config.K == 20
    assert config.t == 20
    assert config.tol is None


@pytest.mark.parametrize(
    "kwargs",
    [{"mu": 0.0}, {"mu": -1.0}, {"K": 0}, {"t": -1}, {"tol": 0.0}],
)
def test_invalid_values(kwargs):
    with pytest.raises(InvalidInputError):
        SNFConfig(**kwargs)


def test_save_and_load(tmp_path):
    config = SNFConfig(mu=0.4, K=15, t=30, tol=1e-6)
    path = save_config(config, tmp_path / "nested" / "config.json")
    assert json.loads(path.read_text())["K"] == 15
    assert load_config(path) == config


def test_unknown_keys_rejected():
    with pytest.raises(InvalidInputError):
        SNFConfig.from_mapping({"mu": 0.5, "alpha": 1.0})


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.json")
