"""Host-side collaborator protocols.

The sync engine talks to the CMS host only through these two protocols.
Implementations are passed in explicitly; nothing here is a singleton.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from doctype_sync.models import LiveContentType, Template


class ContentTypeStore(Protocol):
    """The host's content-type service."""

    def get_all(self) -> list[LiveContentType]:
        """Return every persisted content type."""
        ...  # pragma: no cover

    def get_by_alias(self, alias: str) -> LiveContentType | None:
        """Return the content type with *alias*, or ``None``."""
        ...  # pragma: no cover

    def create(self, parent_id: int = -1) -> LiveContentType:
        """Return a new, unsaved content type under *parent_id*."""
        ...  # pragma: no cover

    def save(self, content_type: LiveContentType) -> None:
        """Persist *content_type*, assigning IDs to new entities.

        Raises a host-defined error on constraint violations such as a
        duplicate alias.
        """
        ...  # pragma: no cover


class TemplateStore(Protocol):
    """The host's template lookup."""

    def get_template(self, name: str) -> Template | None:
        """Return the template named *name*, or ``None``."""
        ...  # pragma: no cover

    def get_templates(self, names: Sequence[str]) -> list[Template]:
        """Return the templates that resolve; unknown names are omitted."""
        ...  # pragma: no cover
