"""Identity resolution shared by content types and property types.

A declared entity is matched to at most one live entity:

- When it carries an external ID, the identity mapping gives an internal
  ID, which is looked up among the candidates.
- When it has no external ID, or ``fallback_to_alias`` is set and the ID
  path found nothing, the alias is compared against the candidates.

Content types resolve strictly (an ID-bearing model never falls back to
its alias); property types fall back to the alias so an ID can be added
to an existing property without duplicating it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar
from uuid import UUID

T = TypeVar("T")


@dataclass(frozen=True)
class Resolution(Generic[T]):
    """Outcome of resolving one declared entity.

    Attributes:
        match: The live entity, or ``None`` when nothing matched.
        mapped_id: Internal ID from the identity mapping, if any.  A
            mapping with no ``match`` means the live entity was removed
            out-of-band.
        matched_by: ``"id"``, ``"alias"``, or ``None``.
    """

    match: T | None
    mapped_id: int | None = None
    matched_by: str | None = None

    @property
    def is_stale(self) -> bool:
        """True when a mapping exists but its live entity is gone."""
        return self.mapped_id is not None and self.match is None


class IdentityResolver(Generic[T]):
    """Resolve declared entities against a fixed list of live candidates.

    Args:
        candidates: Live entities to search (a snapshot; never refreshed).
        lookup: Maps an external ID to an internal ID, or ``None``.
        get_id: Returns a candidate's internal ID.
        get_alias: Returns a candidate's alias.
        ignore_case: Compare aliases case-insensitively.
        fallback_to_alias: Try the alias when the ID path finds nothing.
    """

    def __init__(
        self,
        candidates: Sequence[T],
        lookup: Callable[[UUID], int | None],
        get_id: Callable[[T], int | None] = lambda c: c.id,  # type: ignore[attr-defined]
        get_alias: Callable[[T], str] = lambda c: c.alias,  # type: ignore[attr-defined]
        *,
        ignore_case: bool = False,
        fallback_to_alias: bool = False,
    ) -> None:
        self._candidates = candidates
        self._lookup = lookup
        self._get_id = get_id
        self._get_alias = get_alias
        self._ignore_case = ignore_case
        self._fallback_to_alias = fallback_to_alias

    def resolve(
        self, external_id: UUID | None, alias: str | None
    ) -> Resolution[T]:
        """Resolve by ID mapping first, then by alias where allowed."""
        mapped_id = None
        if external_id is not None:
            mapped_id = self._lookup(external_id)
            if mapped_id is not None:
                match = self.find_by_id(mapped_id)
                if match is not None:
                    return Resolution(match, mapped_id, "id")
            if not self._fallback_to_alias:
                return Resolution(None, mapped_id)

        if alias is not None:
            match = self.find_by_alias(alias)
            if match is not None:
                return Resolution(match, mapped_id, "alias")

        return Resolution(None, mapped_id)

    def find_by_id(self, internal_id: int) -> T | None:
        for candidate in self._candidates:
            if self._get_id(candidate) == internal_id:
                return candidate
        return None

    def find_by_alias(self, alias: str) -> T | None:
        wanted = alias.casefold() if self._ignore_case else alias
        for candidate in self._candidates:
            current = self._get_alias(candidate)
            if self._ignore_case:
                current = current.casefold()
            if current == wanted:
                return candidate
        return None
