"""In-memory host stores.

``InMemoryContentTypeStore`` behaves like a persisted store: callers only
ever receive copies, IDs are assigned on ``save()``, and alias uniqueness
is enforced the way a real host database would enforce it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from doctype_sync.errors import HostOperationError
from doctype_sync.models import LiveContentType, Template

logger = logging.getLogger(__name__)


class InMemoryContentTypeStore:
    """Dict-backed content-type store.

    Args:
        content_types: Initial content types.  Entries without an ID are
            assigned one as if saved.
    """

    def __init__(
        self, content_types: Iterable[LiveContentType] = ()
    ) -> None:
        self._types: dict[int, LiveContentType] = {}
        self._next_id = 1000
        self._next_property_id = 1
        self.save_count = 0
        for content_type in content_types:
            self._store(content_type.model_copy(deep=True))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all(self) -> list[LiveContentType]:
        return [
            self._types[key].model_copy(deep=True)
            for key in sorted(self._types)
        ]

    def get_by_alias(self, alias: str) -> LiveContentType | None:
        stored = self._find_alias(alias)
        return stored.model_copy(deep=True) if stored else None

    def get_by_id(self, content_type_id: int) -> LiveContentType | None:
        stored = self._types.get(content_type_id)
        return stored.model_copy(deep=True) if stored else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, parent_id: int = -1) -> LiveContentType:
        return LiveContentType(parent_id=parent_id)

    def save(self, content_type: LiveContentType) -> None:
        """Persist a copy of *content_type*.

        IDs assigned here are written back onto *content_type* too.

        Raises:
            HostOperationError: On an empty alias, a duplicate alias, a
                duplicate property alias, or an unknown ID.
        """
        if not content_type.alias.strip():
            raise HostOperationError("Content type alias cannot be empty")

        existing = self._find_alias(content_type.alias)
        if existing is not None and existing.id != content_type.id:
            raise HostOperationError(
                f"Content type alias {content_type.alias!r} is already "
                f"in use by content type {existing.id}"
            )
        if (
            content_type.id is not None
            and content_type.id not in self._types
        ):
            raise HostOperationError(
                f"Content type {content_type.id} does not exist"
            )

        seen = set()
        for prop in content_type.property_types:
            key = prop.alias.casefold()
            if key in seen:
                raise HostOperationError(
                    f"Duplicate property alias {prop.alias!r} on "
                    f"content type {content_type.alias!r}"
                )
            seen.add(key)

        self._store(content_type)
        self._types[content_type.id] = content_type.model_copy(deep=True)
        self.save_count += 1
        logger.debug(
            "Saved content type %s (%s)", content_type.id, content_type.alias
        )

    def remove(self, content_type_id: int) -> None:
        """Delete a content type, as an administrator might out-of-band."""
        self._types.pop(content_type_id, None)
        for stored in self._types.values():
            if content_type_id in stored.allowed_content_type_ids:
                stored.allowed_content_type_ids = [
                    i
                    for i in stored.allowed_content_type_ids
                    if i != content_type_id
                ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _store(self, content_type: LiveContentType) -> None:
        """Assign missing IDs and keep the ID counters ahead of them."""
        if content_type.id is None:
            content_type.id = self._next_id
        self._next_id = max(self._next_id, content_type.id + 1)
        for prop in content_type.property_types:
            if prop.id is None:
                prop.id = self._next_property_id
            self._next_property_id = max(self._next_property_id, prop.id + 1)
        if content_type.id not in self._types:
            self._types[content_type.id] = content_type

    def _find_alias(self, alias: str) -> LiveContentType | None:
        wanted = alias.casefold()
        for stored in self._types.values():
            if stored.alias.casefold() == wanted:
                return stored
        return None


class InMemoryTemplateStore:
    """Template lookup by alias (case-insensitive)."""

    def __init__(self, templates: Iterable[Template] = ()) -> None:
        self._templates: dict[str, Template] = {}
        self._next_id = 1
        for template in templates:
            self._templates[template.alias.casefold()] = template
            self._next_id = max(self._next_id, template.id + 1)

    def add(self, alias: str, name: str | None = None) -> Template:
        """Register a template and return it."""
        template = Template(id=self._next_id, alias=alias, name=name or alias)
        self._next_id += 1
        self._templates[alias.casefold()] = template
        return template

    def all(self) -> list[Template]:
        return sorted(self._templates.values(), key=lambda t: t.id)

    def get_template(self, name: str) -> Template | None:
        return self._templates.get(name.casefold())

    def get_templates(self, names: Sequence[str]) -> list[Template]:
        found = (self.get_template(name) for name in names)
        return [t for t in found if t is not None]
