"""
Tests for configuration loading and the compressor built from it.
"""

import json
import logging
import shutil
from pathlib import Path

import pytest

from barkit.resample.compressor import DEFAULT_REFERENCE_YEAR, Compressor, get_default_compressor
from configs import CONFIG_DIR, ConfigLoader, config_loader


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Config directory holding the shipped schema but no config file."""
    shutil.copy(CONFIG_DIR / "resampling.schema.json", tmp_path / "resampling.schema.json")
    return tmp_path


def _write(config_dir: Path, content) -> None:
    text = content if isinstance(content, str) else json.dumps(content)
    (config_dir / "resampling.json").write_text(text, encoding="utf-8")


def test_shipped_config_is_valid() -> None:
    assert config_loader.get_config("resampling") == {
        "reference_year": 2001,
        "midnight_adjustment": True,
    }
    assert "resampling" in config_loader.get_all_configs()


def test_custom_config_is_loaded(config_dir: Path) -> None:
    _write(config_dir, {"reference_year": 1999, "midnight_adjustment": False})

    loader = ConfigLoader(config_dir)
    compressor = Compressor.from_config(loader.get_config("resampling"))

    assert compressor.reference_year == 1999
    assert compressor.midnight_adjustment is False


def test_missing_config_falls_back(config_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="configs"):
        loader = ConfigLoader(config_dir)

    assert loader.get_config("resampling") == {}
    assert any(r.message == "config_missing" for r in caplog.records)


@pytest.mark.parametrize("content", [
    "{not json",
    {"reference_year": "2001"},
    {"reference_year": 0},
    {"midnight_adjustment": "yes"},
    {"reference_year": 2001, "bucket_size": 3},
])
def test_invalid_config_falls_back(config_dir: Path, caplog: pytest.LogCaptureFixture, content) -> None:
    _write(config_dir, content)

    with caplog.at_level(logging.WARNING, logger="configs"):
        loader = ConfigLoader(config_dir)

    assert loader.get_config("resampling") == {}
    records = [r for r in caplog.records if r.message == "config_invalid"]
    assert records
    assert getattr(records[0], "config", None) == "resampling"


def test_reload_config(config_dir: Path) -> None:
    _write(config_dir, {"reference_year": 2001})
    loader = ConfigLoader(config_dir)
    assert loader.get_config("resampling") == {"reference_year": 2001}

    _write(config_dir, {"reference_year": 2010})
    loader.reload_config("resampling")
    assert loader.get_config("resampling") == {"reference_year": 2010}


def test_get_all_configs_is_a_copy(config_dir: Path) -> None:
    _write(config_dir, {})
    loader = ConfigLoader(config_dir)

    configs = loader.get_all_configs()
    configs["resampling"] = {"reference_year": 1}
    assert loader.get_config("resampling") == {}
    assert loader.get_config("unknown") == {}


def test_from_config_defaults() -> None:
    compressor = Compressor.from_config({})
    assert compressor.reference_year == DEFAULT_REFERENCE_YEAR
    assert compressor.midnight_adjustment is True


def test_default_compressor_follows_shipped_config() -> None:
    compressor = get_default_compressor()
    assert compressor is get_default_compressor()
    assert compressor.reference_year == 2001
    assert compressor.midnight_adjustment is True
