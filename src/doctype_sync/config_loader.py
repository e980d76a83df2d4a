"""
Hierarchical configuration loader for doctype_sync.

Provides convention-based config file discovery, YAML !include support,
env var interpolation, and hierarchical merge with "project wins" semantics.
The same YAML loader is used for model definition files.

Usage:
    from doctype_sync.config_loader import load_hierarchical_config

    config = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from doctype_sync.file_handler import read_file_with_encoding

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# 1. Env var interpolation
# ---------------------------------------------------------------------------

# Matches ${VAR} and ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` patterns with env values.

    * ``${VAR}`` is replaced with ``os.environ.get(VAR, "")``.
    * ``${VAR:-default}`` uses *default* when VAR is unset or empty.
    * Literal ``${`` with no closing ``}`` is left untouched.
    """

    def _replace(match: re.Match) -> str:
        env_val = os.environ.get(match.group(1))
        if env_val:
            return env_val
        return match.group(2) or ""

    return _ENV_VAR_PATTERN.sub(_replace, value)


def interpolate_recursive(obj: Any) -> Any:
    """Walk a nested dict/list and interpolate env vars in all strings."""
    if isinstance(obj, str):
        return interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: interpolate_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [interpolate_recursive(item) for item in obj]
    return obj


# ---------------------------------------------------------------------------
# 2. YAML !include support (dedicated SafeLoader subclass)
# ---------------------------------------------------------------------------


class ConfigLoader(yaml.SafeLoader):
    """YAML SafeLoader subclass with ``!include`` support.

    Uses a dedicated subclass so the global ``yaml.SafeLoader`` is never
    modified.  Tracks an *include stack* per-load to detect circular includes.
    """


def _include_constructor(
    loader: ConfigLoader, node: yaml.ScalarNode
) -> Any:
    """Handle ``!include path/to/file.yml`` directives."""
    include_path_str: str = loader.construct_scalar(node)

    # Resolve relative to the file that contains the !include
    if os.path.isabs(include_path_str):
        include_path = Path(include_path_str)
    else:
        # loader.name is the path of the file being parsed
        parent_dir = Path(loader.name).resolve().parent
        include_path = parent_dir / include_path_str

    include_path = include_path.resolve()

    # Circular include detection
    include_stack: list[Path] = getattr(loader, "_include_stack", [])
    if include_path in include_stack:
        chain = (
            " -> ".join(str(p) for p in include_stack)
            + f" -> {include_path}"
        )
        raise ValueError(f"Circular include detected: {chain}")

    if not include_path.exists():
        source_file = Path(loader.name).resolve()
        raise FileNotFoundError(
            f"Include file not found: {include_path} (referenced from {source_file})"
        )

    return load_yaml_with_includes(
        include_path, _include_stack=include_stack + [include_path]
    )


ConfigLoader.add_constructor("!include", _include_constructor)


def load_yaml_with_includes(
    path: Path,
    *,
    _include_stack: list[Path] | None = None,
) -> Any:
    """Load a YAML file using the ``ConfigLoader`` (with ``!include``).

    The file is decoded with charset detection so files saved in legacy
    encodings still load.
    """
    path = path.resolve()
    if _include_stack is None:
        _include_stack = [path]

    content, _ = read_file_with_encoding(path)
    loader = ConfigLoader(content)
    # Relative includes are resolved against loader.name
    loader.name = str(path)
    loader._include_stack = _include_stack  # type: ignore[attr-defined]
    try:
        return loader.get_single_data()
    finally:
        loader.dispose()


# ---------------------------------------------------------------------------
# 3. Convention-based file discovery
# ---------------------------------------------------------------------------


def discover_config_files() -> list[Path]:
    """Return existing config file paths in precedence order (highest first).

    Search order:
        1. ``DOCTYPE_SYNC_CONFIG`` env var (explicit single path).
        2. ``.doctype_sync/config.yml`` in CWD (project-level)
        3. ``.doctype_sync/config.yaml`` in CWD (alternate extension)
        4. ``~/.config/doctype_sync/config.yml`` (XDG global)

    Only paths that exist on disk are returned.
    """
    candidates: list[Path] = []

    # 1. Env var override
    env_path = os.environ.get("DOCTYPE_SYNC_CONFIG")
    if env_path:
        candidates.append(Path(env_path).expanduser().resolve())

    # 2-3. Project-level (CWD)
    cwd = Path.cwd()
    candidates.append(cwd / ".doctype_sync" / "config.yml")
    candidates.append(cwd / ".doctype_sync" / "config.yaml")

    # 4. XDG global
    candidates.append(
        Path.home() / ".config" / "doctype_sync" / "config.yml"
    )

    return [p for p in candidates if p.exists()]


# ---------------------------------------------------------------------------
# 3a. Config bootstrapping
# ---------------------------------------------------------------------------

_STARTER_CONFIG = """\
# doctype-sync configuration
#
# Settings can also be given as environment variables:
#   DOCTYPE_SYNC_MODELS, DOCTYPE_SYNC_HOST_STORE, DOCTYPE_SYNC_STATE_DIR,
#   DOCTYPE_SYNC_PROFILE, DOCTYPE_SYNC_REFRESH_BEFORE_LINKING
#
# sync:
#   models: doctypes/
#   host_store: .doctype_sync/host.json
#   state_dir: .doctype_sync
#   profile: default
#   refresh_before_linking: false
#
# logging:
#   level: INFO
#   file: null
#   format: text
"""


def resolve_config_path() -> Path:
    """Return the single config file path that should be used.

    The highest-precedence existing file wins; otherwise the default
    project-level path ``CWD / .doctype_sync / config.yml``.

    This does NOT create the file -- use ``ensure_config()`` for that.
    """
    existing = discover_config_files()
    if existing:
        return existing[0]
    return Path.cwd() / ".doctype_sync" / "config.yml"


def ensure_config(target: Path | None = None) -> Path:
    """Ensure a config file exists, creating directory and starter file if needed.

    Args:
        target: Explicit path to create. If ``None``, uses
            ``resolve_config_path()``.

    Returns:
        Path to the config file (existing or newly created).
    """
    existing = discover_config_files()
    if existing:
        logger.debug("Config file already exists: %s", existing[0])
        return existing[0]

    config_path = target or resolve_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    config_path.write_text(_STARTER_CONFIG, encoding="utf-8")
    logger.info("Created starter config: %s", config_path)

    return config_path


# ---------------------------------------------------------------------------
# 4. Hierarchical merge
# ---------------------------------------------------------------------------


def load_hierarchical_config() -> dict[str, Any]:
    """Load and merge all discovered config files.

    Merge strategy ("project wins"):
        Files are loaded from lowest precedence to highest.  Each file's
        top-level keys **replace** (not deep-merge) those from earlier files.

    After merging, env var interpolation is applied to all string values.

    Returns an empty dict when no config files exist (zero-config).
    """
    paths = discover_config_files()

    if not paths:
        logger.debug(
            "No config files found, using zero-config defaults"
        )
        return {}

    # Merge from lowest precedence (last) to highest (first)
    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        try:
            data = load_yaml_with_includes(path)
        except Exception:
            logger.exception("Failed to load config file %s", path)
            raise

        if isinstance(data, dict):
            # Shallow merge: top-level keys from higher-precedence win
            merged.update(data)
        elif data is not None:
            logger.warning(
                "Config file %s has non-dict root (%s), skipping",
                path,
                type(data).__name__,
            )

    # Apply env var interpolation after merge
    return interpolate_recursive(merged)
