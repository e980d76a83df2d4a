"""Model discovery: where declared document types come from.

- ``StaticModelDiscovery`` wraps models built in Python code.
- ``YamlModelDiscovery`` reads them from YAML files (``!include`` and
  ``${VAR}`` interpolation supported, as in config files).

A YAML model file looks like::

    document_types:
      - name: Article
        alias: article
        id: 0f8c1f0e-9f64-4c6b-9d5e-1a1f0f0c8b11
        templates: [Article]
        default_template: Article
        allowed_child_types: [comment]
        properties:
          - name: Body
            alias: body
            data_type: Richtext editor
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

import yaml
from pydantic import ValidationError

from doctype_sync.config_loader import (
    interpolate_recursive,
    load_yaml_with_includes,
)
from doctype_sync.errors import InvalidArgumentError
from doctype_sync.models import DocumentTypeModel

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = (".yml", ".yaml")


class ModelDiscovery(Protocol):
    """Source of declared document types."""

    def get_declared_types(self) -> list[DocumentTypeModel]:
        """Return declared models.  Pure read, no side effects."""
        ...  # pragma: no cover


class StaticModelDiscovery:
    """Serve a fixed list of models."""

    def __init__(self, models: Iterable[DocumentTypeModel] = ()) -> None:
        self._models = list(models)

    def get_declared_types(self) -> list[DocumentTypeModel]:
        return list(self._models)


class YamlModelDiscovery:
    """Load models from a YAML file or a directory of YAML files.

    Directories are read non-recursively in filename order; each file
    contributes its ``document_types`` list.

    Args:
        path: File or directory path.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def get_declared_types(self) -> list[DocumentTypeModel]:
        """Parse every model file.

        Raises:
            InvalidArgumentError: If the path is missing or a model entry
                is malformed.
        """
        models: list[DocumentTypeModel] = []
        for file_path in self._files():
            models.extend(self._load_file(file_path))
        logger.debug(
            "Discovered %d document types in %s", len(models), self.path
        )
        return models

    def _files(self) -> list[Path]:
        if self.path.is_dir():
            return sorted(
                p
                for p in self.path.iterdir()
                if p.is_file() and p.suffix in _YAML_SUFFIXES
            )
        if self.path.is_file():
            return [self.path]
        raise InvalidArgumentError(f"Model path not found: {self.path}")

    @staticmethod
    def _load_file(file_path: Path) -> list[DocumentTypeModel]:
        try:
            raw = load_yaml_with_includes(file_path)
        except (yaml.YAMLError, ValueError, FileNotFoundError) as exc:
            raise InvalidArgumentError(
                f"Cannot read model file {file_path}: {exc}"
            ) from exc

        data = interpolate_recursive(raw)
        if data is None:
            return []
        if not isinstance(data, dict):
            raise InvalidArgumentError(
                f"{file_path}: expected a mapping with 'document_types', "
                f"got {type(data).__name__}"
            )

        entries = data.get("document_types") or []
        if not isinstance(entries, list):
            raise InvalidArgumentError(
                f"{file_path}: 'document_types' must be a list"
            )

        models = []
        for index, entry in enumerate(entries):
            try:
                models.append(DocumentTypeModel.model_validate(entry))
            except ValidationError as exc:
                raise InvalidArgumentError(
                    f"{file_path}: invalid document type #{index}: {exc}"
                ) from exc
        return models
