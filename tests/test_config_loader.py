"""Tests for doctype_sync.config_loader: hierarchical config loading."""

import textwrap

import pytest
import yaml

from doctype_sync.config_loader import (
    _STARTER_CONFIG,
    discover_config_files,
    ensure_config,
    interpolate_env_vars,
    interpolate_recursive,
    load_hierarchical_config,
    load_yaml_with_includes,
    resolve_config_path,
)


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Empty CWD and HOME with no DOCTYPE_SYNC_CONFIG set."""
    monkeypatch.delenv("DOCTYPE_SYNC_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return tmp_path


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


# -------------------------------------------------------------------------
# Env var interpolation
# -------------------------------------------------------------------------


class TestInterpolateEnvVars:
    """Tests for ${VAR} and ${VAR:-default} substitution."""

    def test_replaces_set_var(self, monkeypatch):
        monkeypatch.setenv("SITE_ROOT", "/srv/site")
        assert interpolate_env_vars("${SITE_ROOT}/host.json") == "/srv/site/host.json"

    def test_unset_var_replaced_with_empty(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR_XYZ", raising=False)
        assert interpolate_env_vars("${UNSET_VAR_XYZ}") == ""

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR_XYZ", raising=False)
        assert interpolate_env_vars("${UNSET_VAR_XYZ:-fallback}") == "fallback"

    def test_empty_env_var_uses_default(self, monkeypatch):
        monkeypatch.setenv("EMPTY_VAR", "")
        assert interpolate_env_vars("${EMPTY_VAR:-fallback}") == "fallback"

    def test_default_ignored_when_set(self, monkeypatch):
        monkeypatch.setenv("SYNC_PROFILE", "staging")
        assert interpolate_env_vars("${SYNC_PROFILE:-default}") == "staging"

    def test_literal_dollar_brace_no_closing(self):
        assert interpolate_env_vars("${NO_CLOSE") == "${NO_CLOSE"

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("MODEL_DIR", "doctypes")
        data = {
            "sync": {"models": "${MODEL_DIR}", "dry_run": True},
            "tags": ["${MODEL_DIR}", 3],
        }
        assert interpolate_recursive(data) == {
            "sync": {"models": "doctypes", "dry_run": True},
            "tags": ["doctypes", 3],
        }


# -------------------------------------------------------------------------
# YAML !include support
# -------------------------------------------------------------------------


class TestIncludeDirective:
    """Tests for !include YAML loading via ConfigLoader subclass."""

    def test_include_relative_file(self, tmp_path):
        _write(tmp_path / "logging.yml", "level: DEBUG\n")
        main = _write(tmp_path / "config.yml", "logging: !include logging.yml\n")

        assert load_yaml_with_includes(main) == {"logging": {"level": "DEBUG"}}

    def test_include_from_subdirectory(self, tmp_path):
        _write(tmp_path / "types" / "article.yml", "name: Article\nalias: article\n")
        main = _write(
            tmp_path / "models.yml",
            "document_types:\n  - !include types/article.yml\n",
        )

        assert load_yaml_with_includes(main) == {
            "document_types": [{"name": "Article", "alias": "article"}]
        }

    def test_include_nonexistent_raises(self, tmp_path):
        main = _write(tmp_path / "config.yml", "data: !include missing.yml\n")

        with pytest.raises(FileNotFoundError, match="missing.yml"):
            load_yaml_with_includes(main)

    def test_circular_include_raises(self, tmp_path):
        a = _write(tmp_path / "a.yml", "x: !include b.yml\n")
        _write(tmp_path / "b.yml", "y: !include a.yml\n")

        with pytest.raises(ValueError, match="Circular include"):
            load_yaml_with_includes(a)

    def test_self_include_raises(self, tmp_path):
        a = _write(tmp_path / "a.yml", "x: !include a.yml\n")

        with pytest.raises(ValueError, match="Circular include"):
            load_yaml_with_includes(a)

    def test_global_safe_loader_not_polluted(self, tmp_path):
        """!include is NOT registered on yaml.SafeLoader."""
        cfg = _write(tmp_path / "test.yml", "x: !include other.yml\n")

        with pytest.raises(yaml.constructor.ConstructorError):
            with open(cfg) as fh:
                yaml.safe_load(fh)

    def test_latin1_file_is_decoded(self, tmp_path):
        path = tmp_path / "models.yml"
        path.write_bytes(
            "description: Übersicht der Beiträge für Leser\n".encode("latin-1")
        )

        result = load_yaml_with_includes(path)
        assert result["description"].startswith("Übersicht")


# -------------------------------------------------------------------------
# Convention-based file discovery
# -------------------------------------------------------------------------


class TestDiscoverConfigFiles:
    """Tests for discover_config_files() precedence and filtering."""

    def test_env_var_takes_highest_precedence(self, isolated, monkeypatch):
        custom = _write(isolated / "custom.yml", "custom: true\n")
        _write(isolated / ".doctype_sync" / "config.yml", "project: true\n")
        monkeypatch.setenv("DOCTYPE_SYNC_CONFIG", str(custom))

        assert discover_config_files()[0] == custom.resolve()

    def test_project_before_global(self, isolated):
        proj = _write(isolated / ".doctype_sync" / "config.yml", "a: 1\n")
        glob = _write(
            isolated / "home" / ".config" / "doctype_sync" / "config.yml",
            "b: 2\n",
        )

        result = discover_config_files()
        assert result.index(proj.resolve()) < result.index(glob.resolve())

    def test_yaml_extension_discovered(self, isolated):
        proj = _write(isolated / ".doctype_sync" / "config.yaml", "a: 1\n")
        assert proj.resolve() in discover_config_files()

    def test_no_files_returns_empty(self, isolated):
        assert discover_config_files() == []


# -------------------------------------------------------------------------
# Hierarchical merge
# -------------------------------------------------------------------------


class TestLoadHierarchicalConfig:
    """Tests for load_hierarchical_config() merge and interpolation."""

    def test_zero_config_returns_empty_dict(self, isolated):
        assert load_hierarchical_config() == {}

    def test_project_overrides_global_at_section_level(self, isolated):
        _write(
            isolated / "home" / ".config" / "doctype_sync" / "config.yml",
            """\
            sync:
              models: global-models
              profile: global
            logging:
              level: DEBUG
            """,
        )
        _write(
            isolated / ".doctype_sync" / "config.yml",
            """\
            sync:
              models: project-models
            """,
        )

        result = load_hierarchical_config()
        # Whole 'sync' section replaced, not deep-merged
        assert result["sync"] == {"models": "project-models"}
        assert result["logging"] == {"level": "DEBUG"}

    def test_env_var_interpolation_after_merge(self, isolated, monkeypatch):
        monkeypatch.setenv("HOST_STORE_PATH", "/srv/host.json")
        _write(
            isolated / ".doctype_sync" / "config.yml",
            """\
            sync:
              host_store: ${HOST_STORE_PATH}
              profile: ${SYNC_PROFILE_UNSET:-default}
            """,
        )

        result = load_hierarchical_config()
        assert result["sync"]["host_store"] == "/srv/host.json"
        assert result["sync"]["profile"] == "default"

    def test_non_dict_root_skipped(self, isolated):
        _write(isolated / ".doctype_sync" / "config.yml", "- just\n- a list\n")
        assert load_hierarchical_config() == {}

    def test_invalid_yaml_raises(self, isolated):
        _write(isolated / ".doctype_sync" / "config.yml", "sync: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_hierarchical_config()


# -------------------------------------------------------------------------
# Bootstrapping
# -------------------------------------------------------------------------


class TestResolveConfigPath:
    def test_returns_existing_file(self, isolated):
        proj = _write(isolated / ".doctype_sync" / "config.yaml", "a: 1\n")
        assert resolve_config_path() == proj.resolve()

    def test_returns_default_when_no_files(self, isolated):
        assert resolve_config_path() == isolated / ".doctype_sync" / "config.yml"


class TestEnsureConfig:
    def test_creates_directory_and_file(self, isolated):
        path = ensure_config()

        assert path == isolated / ".doctype_sync" / "config.yml"
        assert path.read_text(encoding="utf-8") == _STARTER_CONFIG

    def test_starter_config_loads_as_empty(self, isolated):
        ensure_config()
        # Everything in the starter file is commented out
        assert load_hierarchical_config() == {}

    def test_noop_when_exists(self, isolated):
        existing = _write(isolated / ".doctype_sync" / "config.yml", "a: 1\n")

        assert ensure_config() == existing.resolve()
        assert existing.read_text(encoding="utf-8") == "a: 1\n"

    def test_uses_explicit_target(self, isolated):
        target = isolated / "custom" / "nested" / "config.yml"
        assert ensure_config(target) == target
        assert target.exists()
