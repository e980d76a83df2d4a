"""Resolved runtime configuration.

Combines CLI args, environment variables, .env files, and the YAML
``sync`` section into one validated ``Config``.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    DOCTYPE_SYNC_MODELS: YAML model file or directory (required)
    DOCTYPE_SYNC_HOST_STORE: JSON host store path (required)
    DOCTYPE_SYNC_STATE_DIR: Identity state directory (default: .doctype_sync)
    DOCTYPE_SYNC_PROFILE: Identity profile name (default: default)
    DOCTYPE_SYNC_REFRESH_BEFORE_LINKING: Re-read types before linking
        (default: false)
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_PROFILE_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


@dataclass
class Config:
    models_path: Path
    host_store_path: Path
    state_dir: Path
    profile: str = "default"
    refresh_before_linking: bool = False
    dry_run: bool = False


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If the models path is missing or the profile name is
            not usable as a filename component.
    """
    if not config.models_path.exists():
        raise ValueError(
            f"Model path '{config.models_path}' does not exist"
        )

    if config.host_store_path.exists() and config.host_store_path.is_dir():
        raise ValueError(
            f"Host store '{config.host_store_path}' is a directory, expected a JSON file"
        )

    if not _PROFILE_PATTERN.match(config.profile):
        raise ValueError(
            f"Invalid profile name '{config.profile}': use letters, digits, '.', '_' or '-'"
        )

    if config.refresh_before_linking:
        logger.info(
            "refresh_before_linking enabled: live types are re-read before linking allowed children"
        )


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def load_config(
    models: str | None = None,
    host_store: str | None = None,
    state_dir: str | None = None,
    profile: str | None = None,
    refresh_before_linking: bool = False,
    dry_run: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        models: Override model path.
        host_store: Override host store path.
        state_dir: Override identity state directory.
        profile: Override identity profile name.
        refresh_before_linking: CLI flag.
        dry_run: CLI flag.
        yaml_fallbacks: Dict of values from the YAML ``sync`` section.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If required config (models, host store) is missing
            after checking all sources, or a value is invalid.
    """
    fb = yaml_fallbacks or {}

    # --- Path fields: CLI > env > YAML > error/default ---

    models_raw = models or os.getenv("DOCTYPE_SYNC_MODELS") or fb.get("models")
    if not models_raw:
        raise ValueError(
            "Model path not found. Set DOCTYPE_SYNC_MODELS environment variable, "
            "pass --models CLI argument, or add 'sync.models' to config.yml."
        )

    host_raw = (
        host_store
        or os.getenv("DOCTYPE_SYNC_HOST_STORE")
        or fb.get("host_store")
    )
    if not host_raw:
        raise ValueError(
            "Host store not found. Set DOCTYPE_SYNC_HOST_STORE environment variable, "
            "pass --host-store CLI argument, or add 'sync.host_store' to config.yml."
        )

    state_raw = (
        state_dir
        or os.getenv("DOCTYPE_SYNC_STATE_DIR")
        or fb.get("state_dir")
        or ".doctype_sync"
    )
    final_profile = (
        profile
        or os.getenv("DOCTYPE_SYNC_PROFILE")
        or fb.get("profile")
        or "default"
    ).strip()

    # --- Boolean fields: CLI > env > YAML > default ---

    if refresh_before_linking:
        final_refresh = True
    else:
        env_refresh = _get_bool_env("DOCTYPE_SYNC_REFRESH_BEFORE_LINKING")
        if env_refresh is not None:
            final_refresh = env_refresh
        else:
            final_refresh = bool(fb.get("refresh_before_linking", False))

    final_dry_run = dry_run or bool(fb.get("dry_run", False))

    # Normalize paths: strip whitespace, expand ~
    config = Config(
        models_path=Path(models_raw.strip()).expanduser(),
        host_store_path=Path(host_raw.strip()).expanduser(),
        state_dir=Path(state_raw.strip()).expanduser(),
        profile=final_profile,
        refresh_before_linking=final_refresh,
        dry_run=final_dry_run,
    )

    validate_config(config)

    return config
