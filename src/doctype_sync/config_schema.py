"""Unified configuration schema for doctype_sync.

Defines Pydantic models for the config structure with dedicated sections
for synchronization and logging.

Usage:
    from doctype_sync.config_loader import load_hierarchical_config
    from doctype_sync.config_schema import build_config

    unified = build_config(load_hierarchical_config())
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class SyncConfig(BaseModel):
    """Synchronization settings.

    All fields are optional to support zero-config: env vars and CLI args
    can supply them at runtime instead.
    """

    models: str | None = Field(
        default=None,
        description="YAML model file or directory of model files",
    )
    host_store: str | None = Field(
        default=None, description="Path of the JSON host store"
    )
    state_dir: str = Field(
        default=".doctype_sync",
        description="Directory holding identity mapping state",
    )
    profile: str = Field(
        default="default",
        pattern=r"^[A-Za-z0-9_.-]+$",
        description="Identity profile name (used in the state filename)",
    )
    refresh_before_linking: bool = Field(
        default=False,
        description="Re-read live types before linking allowed children",
    )
    dry_run: bool = Field(
        default=False, description="Plan only; write nothing"
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: ``"text"`` or ``"json"``.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: Literal["text", "json"] = Field(
        default="text", description="Log line format"
    )

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has sensible defaults, so ``UnifiedConfig()``
    (zero-config) is always valid.
    """

    sync: SyncConfig = Field(default_factory=SyncConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Handles missing sections gracefully; anything absent gets defaults.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)
