"""Wire allowed child content types once every document type exists.

Each document type may declare ``allowed_child_types``: aliases or
external-ID strings of other document types.  References are resolved
with the same ID-then-alias strategy the engine uses for document types.
References that resolve to nothing are dropped, not errors.

The linker only sees the content types it is given.  When that list is
the engine's start-of-run snapshot, types created during the run are not
visible and references to them are dropped until the next run.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from doctype_sync.errors import InvalidArgumentError
from doctype_sync.host.interfaces import ContentTypeStore
from doctype_sync.models import DocumentTypeModel, LiveContentType
from doctype_sync.sync.identity import IdentityMappingStore
from doctype_sync.sync.models import SyncAction, SyncResult
from doctype_sync.sync.resolver import IdentityResolver

logger = logging.getLogger(__name__)


class AllowedContentTypeLinker:
    """Set allowed child content types on live types.

    Args:
        content_type_store: Host store used to save changed types.
        identity_store: Identity mapping used for ID references.
    """

    def __init__(
        self,
        content_type_store: ContentTypeStore,
        identity_store: IdentityMappingStore,
    ) -> None:
        self._store = content_type_store
        self._identity = identity_store

    def link(
        self,
        content_types: Sequence[LiveContentType],
        models: Sequence[DocumentTypeModel],
    ) -> list[SyncResult]:
        """Apply allowed children for every model that declares them.

        Returns:
            One ``LINK_CHILDREN`` result per live type that was saved.
        """
        if content_types is None:
            raise InvalidArgumentError("content_types cannot be None")
        if models is None:
            raise InvalidArgumentError("models cannot be None")

        resolver = IdentityResolver(
            content_types, self._identity.get_content_type_id
        )
        results = []

        for model in models:
            if model.allowed_child_types is None:
                continue

            content_type = resolver.resolve(model.id, model.alias).match
            if content_type is None:
                logger.warning(
                    "No live content type for %s; allowed children not set",
                    model.alias,
                )
                continue

            allowed: list[int] = []
            dropped: list[str] = []
            for reference in model.allowed_child_types:
                child = self._resolve_reference(resolver, reference)
                if child is None or child.id is None:
                    dropped.append(reference)
                elif child.id not in allowed:
                    allowed.append(child.id)

            if dropped:
                logger.warning(
                    "Dropped unresolved child types for %s: %s",
                    model.alias,
                    ", ".join(dropped),
                )

            if allowed == content_type.allowed_content_type_ids:
                continue

            content_type.allowed_content_type_ids = allowed
            self._store.save(content_type)
            logger.info(
                "Set %d allowed child types on %s",
                len(allowed),
                content_type.alias,
            )
            results.append(
                SyncResult(
                    alias=model.alias,
                    name=model.name,
                    external_id=str(model.id) if model.id else None,
                    action=SyncAction.LINK_CHILDREN,
                    content_type_id=content_type.id,
                    detail=(
                        f"dropped: {', '.join(dropped)}" if dropped else None
                    ),
                )
            )

        return results

    @staticmethod
    def _resolve_reference(
        resolver: IdentityResolver[LiveContentType], reference: str
    ) -> LiveContentType | None:
        try:
            external_id = UUID(reference)
        except ValueError:
            return resolver.resolve(None, reference).match
        return resolver.resolve(external_id, None).match
