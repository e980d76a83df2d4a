"""Uniqueness validation for declared document types.

Checks run as an ordered pipeline so the first reported conflict is
deterministic:

1. External IDs across document types.
2. Aliases across document types (case-insensitive).
3. Property aliases within each document type (case-insensitive).
4. Property IDs within each document type (only properties with an ID).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from doctype_sync.errors import IdentityConflictError, InvalidArgumentError
from doctype_sync.models import DocumentTypeModel

logger = logging.getLogger(__name__)


class TypeModelValidator:
    """Reject declared model sets that cannot be synchronized unambiguously."""

    def validate(self, models: Sequence[DocumentTypeModel]) -> None:
        """Validate *models*; raise on the first conflict found.

        Raises:
            InvalidArgumentError: If *models* is ``None``.
            IdentityConflictError: On the first ID or alias collision.
        """
        if models is None:
            raise InvalidArgumentError("models cannot be None")

        self._validate_by_id(models)
        self._validate_by_alias(models)
        for model in models:
            self._validate_properties_by_alias(model)
        for model in models:
            self._validate_properties_by_id(model)

        logger.debug("Validated %d document types", len(models))

    # ------------------------------------------------------------------
    # Document types
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_by_id(models: Sequence[DocumentTypeModel]) -> None:
        seen = set()
        for model in models:
            if model.id is None:
                continue
            if model.id in seen:
                names = [m.name for m in models if m.id == model.id]
                raise IdentityConflictError(
                    "id", "document type", names, str(model.id)
                )
            seen.add(model.id)

    @staticmethod
    def _validate_by_alias(models: Sequence[DocumentTypeModel]) -> None:
        seen = set()
        for model in models:
            key = model.alias.casefold()
            if key in seen:
                names = [m.name for m in models if m.alias.casefold() == key]
                raise IdentityConflictError(
                    "alias", "document type", names, model.alias
                )
            seen.add(key)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_properties_by_alias(model: DocumentTypeModel) -> None:
        seen = set()
        for prop in model.properties:
            key = prop.alias.casefold()
            if key in seen:
                names = [
                    p.name
                    for p in model.properties
                    if p.alias.casefold() == key
                ]
                raise IdentityConflictError(
                    "alias", "property", names, prop.alias
                )
            seen.add(key)

    @staticmethod
    def _validate_properties_by_id(model: DocumentTypeModel) -> None:
        seen = set()
        for prop in model.properties:
            if prop.id is None:
                continue
            if prop.id in seen:
                names = [p.name for p in model.properties if p.id == prop.id]
                raise IdentityConflictError(
                    "id", "property", names, str(prop.id)
                )
            seen.add(prop.id)
