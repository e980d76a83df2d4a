"""Identity mapping persistence.

Maps stable external IDs (GUIDs chosen by developers) to the integer IDs
the host assigns on first save.  Content-type mappings are global;
property-type mappings are scoped by the owning content type's internal ID.

Two implementations:

* ``InMemoryIdentityStore`` -- dict-backed, for tests and embedding.
* ``JsonIdentityStore`` -- one JSON file per profile in ``state_dir``
  (``identity_{profile}.json``), written atomically after every change.

Mappings are upserted, never deleted.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol
from uuid import UUID

from doctype_sync.file_handler import read_json, write_json_atomic

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class IdentityMappingStore(Protocol):
    """Protocol that all identity mapping stores must satisfy."""

    def get_content_type_id(self, external_id: UUID) -> int | None:
        """Return the internal content-type ID for *external_id*."""
        ...  # pragma: no cover

    def set_content_type_id(
        self, external_id: UUID, internal_id: int
    ) -> None:
        """Upsert the content-type mapping for *external_id*."""
        ...  # pragma: no cover

    def get_property_type_id(
        self, content_type_id: int, external_id: UUID
    ) -> int | None:
        """Return the internal property-type ID within *content_type_id*."""
        ...  # pragma: no cover

    def set_property_type_id(
        self, content_type_id: int, external_id: UUID, internal_id: int
    ) -> None:
        """Upsert the property-type mapping within *content_type_id*."""
        ...  # pragma: no cover


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------


class InMemoryIdentityStore:
    """Dict-backed identity store.

    State has the same shape as the JSON file written by
    ``JsonIdentityStore``, so both share the lookup logic.
    """

    def __init__(self, state: dict | None = None) -> None:
        self._state = state if state is not None else _empty_state()

    @property
    def state(self) -> dict:
        return self._state

    def get_content_type_id(self, external_id: UUID) -> int | None:
        return self._state["content_types"].get(str(external_id))

    def set_content_type_id(
        self, external_id: UUID, internal_id: int
    ) -> None:
        self._state["content_types"][str(external_id)] = internal_id
        self._persist()

    def get_property_type_id(
        self, content_type_id: int, external_id: UUID
    ) -> int | None:
        scope = self._state["property_types"].get(str(content_type_id), {})
        return scope.get(str(external_id))

    def set_property_type_id(
        self, content_type_id: int, external_id: UUID, internal_id: int
    ) -> None:
        scope = self._state["property_types"].setdefault(
            str(content_type_id), {}
        )
        scope[str(external_id)] = internal_id
        self._persist()

    def _persist(self) -> None:
        """Hook for subclasses that write state somewhere durable."""


# ---------------------------------------------------------------------------
# JSON file store
# ---------------------------------------------------------------------------


class JsonIdentityStore(InMemoryIdentityStore):
    """Identity store persisted as a JSON file.

    Args:
        state_dir: Directory holding the state file (typically
            ``.doctype_sync/``).
        profile_name: Profile name used in the filename.
    """

    def __init__(self, state_dir: Path, profile_name: str = "default") -> None:
        self._state_dir = state_dir
        self._profile_name = profile_name
        super().__init__(self.load())

    @property
    def path(self) -> Path:
        """Return the path to the state file for this profile."""
        return self._state_dir / f"identity_{self._profile_name}.json"

    def load(self) -> dict:
        """Load mapping state from disk.

        Returns:
            The state dict.  If the file does not exist an empty state
            with ``version=1`` is returned.
        """
        if not self.path.exists():
            return _empty_state(self._profile_name)
        state = read_json(self.path)
        state.setdefault("content_types", {})
        state.setdefault("property_types", {})
        logger.debug(
            "Loaded %d content-type mappings from %s",
            len(state["content_types"]),
            self.path,
        )
        return state

    def _persist(self) -> None:
        self._state["last_update"] = datetime.now(timezone.utc).isoformat()
        write_json_atomic(self.path, self._state)


def _empty_state(profile_name: str = "default") -> dict:
    return {
        "version": 1,
        "last_update": None,
        "profile": profile_name,
        "content_types": {},
        "property_types": {},
    }
