"""Tests for doctype_sync.config: runtime config resolution and validation.

NOT to be confused with test_config_loader.py (hierarchical YAML config)
or test_config_schema.py (Pydantic models). This tests load_config()
precedence and validate_config().
"""

import logging
from pathlib import Path

import pytest

from doctype_sync.config import Config, load_config, validate_config

_ENV_VARS = (
    "DOCTYPE_SYNC_MODELS",
    "DOCTYPE_SYNC_HOST_STORE",
    "DOCTYPE_SYNC_STATE_DIR",
    "DOCTYPE_SYNC_PROFILE",
    "DOCTYPE_SYNC_REFRESH_BEFORE_LINKING",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def models_dir(tmp_path):
    path = tmp_path / "doctypes"
    path.mkdir()
    return path


# -------------------------------------------------------------------------
# validate_config()
# -------------------------------------------------------------------------


class TestValidateConfig:
    """Tests for validate_config()."""

    def _config(self, models_dir, **overrides):
        values = {
            "models_path": models_dir,
            "host_store_path": models_dir.parent / "host.json",
            "state_dir": models_dir.parent / ".doctype_sync",
        }
        values.update(overrides)
        return Config(**values)

    def test_valid_config(self, models_dir):
        validate_config(self._config(models_dir))

    def test_missing_models_path(self, models_dir):
        config = self._config(models_dir, models_path=models_dir / "nope")
        with pytest.raises(ValueError, match="does not exist"):
            validate_config(config)

    def test_host_store_is_directory(self, models_dir):
        config = self._config(models_dir, host_store_path=models_dir)
        with pytest.raises(ValueError, match="is a directory"):
            validate_config(config)

    @pytest.mark.parametrize("profile", ["", "a/b", "has space", "../x"])
    def test_bad_profile_name(self, models_dir, profile):
        config = self._config(models_dir, profile=profile)
        with pytest.raises(ValueError, match="Invalid profile name"):
            validate_config(config)

    def test_refresh_logged(self, models_dir, caplog):
        config = self._config(models_dir, refresh_before_linking=True)
        with caplog.at_level(logging.INFO, logger="doctype_sync.config"):
            validate_config(config)
        assert "refresh_before_linking" in caplog.text


# -------------------------------------------------------------------------
# load_config()
# -------------------------------------------------------------------------


class TestLoadConfig:
    """Precedence: CLI > env > YAML > default."""

    def test_cli_args(self, models_dir, tmp_path):
        config = load_config(
            models=str(models_dir),
            host_store=str(tmp_path / "host.json"),
            profile="staging",
        )
        assert config.models_path == models_dir
        assert config.host_store_path == tmp_path / "host.json"
        assert config.profile == "staging"
        assert config.state_dir == Path(".doctype_sync")
        assert config.refresh_before_linking is False
        assert config.dry_run is False

    def test_env_vars(self, models_dir, tmp_path, monkeypatch):
        monkeypatch.setenv("DOCTYPE_SYNC_MODELS", str(models_dir))
        monkeypatch.setenv("DOCTYPE_SYNC_HOST_STORE", str(tmp_path / "h.json"))
        monkeypatch.setenv("DOCTYPE_SYNC_STATE_DIR", str(tmp_path / "state"))
        monkeypatch.setenv("DOCTYPE_SYNC_PROFILE", "prod")
        monkeypatch.setenv("DOCTYPE_SYNC_REFRESH_BEFORE_LINKING", "yes")

        config = load_config()
        assert config.models_path == models_dir
        assert config.state_dir == tmp_path / "state"
        assert config.profile == "prod"
        assert config.refresh_before_linking is True

    def test_cli_beats_env(self, models_dir, tmp_path, monkeypatch):
        monkeypatch.setenv("DOCTYPE_SYNC_MODELS", str(tmp_path / "other"))
        monkeypatch.setenv("DOCTYPE_SYNC_PROFILE", "env")

        config = load_config(
            models=str(models_dir),
            host_store=str(tmp_path / "host.json"),
            profile="cli",
        )
        assert config.models_path == models_dir
        assert config.profile == "cli"

    def test_env_beats_yaml(self, models_dir, tmp_path, monkeypatch):
        monkeypatch.setenv("DOCTYPE_SYNC_PROFILE", "env")
        config = load_config(
            yaml_fallbacks={
                "models": str(models_dir),
                "host_store": str(tmp_path / "host.json"),
                "profile": "yaml",
            }
        )
        assert config.profile == "env"
        assert config.models_path == models_dir

    def test_yaml_fallbacks(self, models_dir, tmp_path):
        config = load_config(
            yaml_fallbacks={
                "models": str(models_dir),
                "host_store": str(tmp_path / "host.json"),
                "state_dir": str(tmp_path / "state"),
                "refresh_before_linking": True,
                "dry_run": True,
            }
        )
        assert config.state_dir == tmp_path / "state"
        assert config.refresh_before_linking is True
        assert config.dry_run is True

    def test_env_false_beats_yaml_true(self, models_dir, tmp_path, monkeypatch):
        monkeypatch.setenv("DOCTYPE_SYNC_REFRESH_BEFORE_LINKING", "false")
        config = load_config(
            models=str(models_dir),
            host_store=str(tmp_path / "host.json"),
            yaml_fallbacks={"refresh_before_linking": True},
        )
        assert config.refresh_before_linking is False

    def test_cli_flags(self, models_dir, tmp_path, monkeypatch):
        monkeypatch.setenv("DOCTYPE_SYNC_REFRESH_BEFORE_LINKING", "false")
        config = load_config(
            models=str(models_dir),
            host_store=str(tmp_path / "host.json"),
            refresh_before_linking=True,
            dry_run=True,
        )
        assert config.refresh_before_linking is True
        assert config.dry_run is True

    def test_missing_models_raises(self, tmp_path):
        with pytest.raises(ValueError, match="Model path not found"):
            load_config(host_store=str(tmp_path / "host.json"))

    def test_missing_host_store_raises(self, models_dir):
        with pytest.raises(ValueError, match="Host store not found"):
            load_config(models=str(models_dir))

    def test_whitespace_stripped(self, models_dir, tmp_path):
        config = load_config(
            models=f"  {models_dir}  ",
            host_store=str(tmp_path / "host.json"),
            profile=" staging ",
        )
        assert config.models_path == models_dir
        assert config.profile == "staging"

    def test_invalid_values_rejected(self, models_dir, tmp_path):
        with pytest.raises(ValueError, match="Invalid profile name"):
            load_config(
                models=str(models_dir),
                host_store=str(tmp_path / "host.json"),
                profile="a/b",
            )
