"""File-backed host store.

Persists content types and templates to a single JSON document so the
CLI can run a full sync without a live CMS.  The document shape is::

    {
      "content_types": [ {LiveContentType fields}, ... ],
      "templates": [ {"id": 1, "alias": "Article", "name": "Article"} ]
    }

Every ``save()`` rewrites the file atomically.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from doctype_sync.file_handler import read_json, write_json_atomic
from doctype_sync.models import LiveContentType, Template

from .memory import InMemoryContentTypeStore, InMemoryTemplateStore

logger = logging.getLogger(__name__)


class JsonHostStore(InMemoryContentTypeStore):
    """Content-type and template store backed by a JSON file.

    Satisfies both ``ContentTypeStore`` and ``TemplateStore``.

    Args:
        path: Location of the JSON document.  A missing file is treated
            as an empty host.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        data = read_json(path) if path.exists() else {}
        super().__init__(
            LiveContentType(**raw) for raw in data.get("content_types", [])
        )
        self.templates = InMemoryTemplateStore(
            Template(**raw) for raw in data.get("templates", [])
        )
        logger.debug(
            "Loaded host store %s (%d content types)",
            path,
            len(self.get_all()),
        )

    def save(self, content_type: LiveContentType) -> None:
        super().save(content_type)
        self.flush()

    def remove(self, content_type_id: int) -> None:
        super().remove(content_type_id)
        self.flush()

    def flush(self) -> None:
        """Write the current host state to ``path``."""
        write_json_atomic(
            self.path,
            {
                "content_types": [
                    ct.model_dump(mode="json") for ct in self.get_all()
                ],
                "templates": [
                    t.model_dump(mode="json") for t in self.templates.all()
                ],
            },
        )

    # TemplateStore

    def get_template(self, name: str) -> Template | None:
        return self.templates.get_template(name)

    def get_templates(self, names: Sequence[str]) -> list[Template]:
        return self.templates.get_templates(names)
