"""Content-type synchronization service.

``ContentTypeSynchronizationService`` reconciles declared document types
against the host's live content types:

1. Discovers declared models; an empty set is a no-op.
2. Validates them (fail-fast, before any mutation).
3. Snapshots the live content types once.
4. Synchronizes models with an external ID first, then alias-only models.
5. Creates or updates each live type, attaching templates and recording
   identity mappings after the host has assigned IDs.
6. Runs the allowed-child-type linker once over all models.

Error handling is fail-fast: a host failure aborts the run.  Types saved
before the failure stay saved; there is no rollback.  Live types whose
model disappeared are never deleted.

Snapshot staleness: the snapshot taken in step 3 is not refreshed.
Types created during the run are invisible to later lookups against it,
including the linker, unless ``refresh_before_linking`` is set.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from functools import partial
from uuid import UUID

from doctype_sync.discovery import ModelDiscovery
from doctype_sync.errors import HostOperationError, InvalidArgumentError
from doctype_sync.host.interfaces import ContentTypeStore, TemplateStore
from doctype_sync.models import (
    DocumentTypeModel,
    LiveContentType,
    LivePropertyType,
)
from doctype_sync.sync.identity import IdentityMappingStore
from doctype_sync.sync.linker import AllowedContentTypeLinker
from doctype_sync.sync.models import SyncAction, SyncReport, SyncResult
from doctype_sync.sync.resolver import IdentityResolver
from doctype_sync.sync.templates import TemplateResolver
from doctype_sync.sync.validator import TypeModelValidator

logger = logging.getLogger(__name__)

_PROPERTY_FIELDS = (
    "name",
    "description",
    "data_type",
    "mandatory",
    "validation",
    "group",
    "sort_order",
)


def _no_mapping(external_id: UUID) -> int | None:
    """Property lookup for a type the host has not saved yet."""
    return None


class ContentTypeSynchronizationService:
    """Synchronize declared document types into the host.

    Args:
        discovery: Source of declared document types.
        content_type_store: Host content-type service.
        template_store: Host template lookup.
        identity_store: External-to-internal ID mapping store.
        validator: Model validator (defaults to ``TypeModelValidator``).
        profile_name: Name reported in the ``SyncReport``.
        refresh_before_linking: Re-read live types before linking allowed
            children instead of reusing the start-of-run snapshot.
    """

    def __init__(
        self,
        discovery: ModelDiscovery,
        content_type_store: ContentTypeStore,
        template_store: TemplateStore,
        identity_store: IdentityMappingStore,
        validator: TypeModelValidator | None = None,
        *,
        profile_name: str = "default",
        refresh_before_linking: bool = False,
    ) -> None:
        for arg_name, value in (
            ("discovery", discovery),
            ("content_type_store", content_type_store),
            ("template_store", template_store),
            ("identity_store", identity_store),
        ):
            if value is None:
                raise InvalidArgumentError(f"{arg_name} cannot be None")

        self.discovery = discovery
        self.store = content_type_store
        self.identity = identity_store
        self.validator = validator or TypeModelValidator()
        self.templates = TemplateResolver(template_store)
        self.linker = AllowedContentTypeLinker(
            content_type_store, identity_store
        )
        self.profile_name = profile_name
        self.refresh_before_linking = refresh_before_linking

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def synchronize(self, dry_run: bool = False) -> SyncReport:
        """Run a full synchronization pass.

        Args:
            dry_run: If ``True``, validate and plan but write nothing.

        Returns:
            A ``SyncReport`` of what was (or would be) done.

        Raises:
            IdentityConflictError: If declared models collide.
            Exception: Any host store error, unchanged.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        models = list(self.discovery.get_declared_types())

        # No document types; there's nothing to sync.
        if not models:
            logger.info("No document types declared; nothing to sync")
            return self._report([], started_at, dry_run)

        self.validator.validate(models)

        content_types = self.store.get_all()
        logger.info(
            "Synchronizing %d document types against %d content types%s",
            len(models),
            len(content_types),
            " (dry run)" if dry_run else "",
        )

        results: list[SyncResult] = []
        try:
            for model in (m for m in models if m.id is not None):
                results.append(
                    self.synchronize_by_id(content_types, model, dry_run)
                )
            for model in (m for m in models if m.id is None):
                results.append(
                    self.synchronize_by_alias(content_types, model, dry_run)
                )

            if not dry_run:
                if self.refresh_before_linking:
                    content_types = self.store.get_all()
                results.extend(self.linker.link(content_types, models))
        except Exception as exc:
            logger.error(
                "Synchronization aborted after %d of %d document types: %s",
                len(results),
                len(models),
                exc,
            )
            raise

        return self._report(results, started_at, dry_run)

    # ------------------------------------------------------------------
    # Per-model dispatch
    # ------------------------------------------------------------------

    def synchronize_by_id(
        self,
        content_types: Sequence[LiveContentType],
        model: DocumentTypeModel,
        dry_run: bool = False,
    ) -> SyncResult:
        """Synchronize a model that carries an external ID.

        The identity mapping decides the match; the alias is never used.
        """
        if content_types is None:
            raise InvalidArgumentError("content_types cannot be None")
        if model is None:
            raise InvalidArgumentError("model cannot be None")
        if model.id is None:
            raise InvalidArgumentError(
                f"Document type {model.alias} ID cannot be None"
            )

        resolution = IdentityResolver(
            content_types, self.identity.get_content_type_id
        ).resolve(model.id, model.alias)

        if resolution.match is not None:
            if not dry_run:
                self.update_content_type(resolution.match, model)
            return self._result(
                model, SyncAction.UPDATE, resolution.match.id, "id"
            )

        action = SyncAction.CREATE
        if resolution.is_stale:
            # Synchronized before, but removed out-of-band since.
            logger.info(
                "Content type %s for %s no longer exists; recreating",
                resolution.mapped_id,
                model.alias,
            )
            action = SyncAction.RELINK

        if dry_run:
            return self._result(model, action, None, None)

        created = self.create_content_type(model)
        self.identity.set_content_type_id(model.id, created.id)
        return self._result(model, action, created.id, None)

    def synchronize_by_alias(
        self,
        content_types: Sequence[LiveContentType],
        model: DocumentTypeModel,
        dry_run: bool = False,
    ) -> SyncResult:
        """Synchronize a model identified only by its alias."""
        if content_types is None:
            raise InvalidArgumentError("content_types cannot be None")
        if model is None:
            raise InvalidArgumentError("model cannot be None")
        if model.id is not None:
            raise InvalidArgumentError(
                f"Document type {model.alias} ID must be None"
            )

        resolution = IdentityResolver(
            content_types, self.identity.get_content_type_id
        ).resolve(None, model.alias)

        if resolution.match is not None:
            if not dry_run:
                self.update_content_type(resolution.match, model)
            return self._result(
                model, SyncAction.UPDATE, resolution.match.id, "alias"
            )

        if dry_run:
            return self._result(model, SyncAction.CREATE, None, None)

        created = self.create_content_type(model)
        return self._result(model, SyncAction.CREATE, created.id, None)

    # ------------------------------------------------------------------
    # Create / update
    # ------------------------------------------------------------------

    def create_content_type(
        self, model: DocumentTypeModel
    ) -> LiveContentType:
        """Create, save, and re-fetch a live type for *model*."""
        if model is None:
            raise InvalidArgumentError("model cannot be None")

        content_type = self.store.create(parent_id=-1)
        self._apply_model(content_type, model)
        self.templates.attach_templates(content_type, model)
        self.store.save(content_type)

        saved = self._refetch(model)
        self._record_property_ids(saved, model)
        logger.info("Created content type %s (%s)", saved.alias, saved.id)
        return saved

    def update_content_type(
        self, content_type: LiveContentType, model: DocumentTypeModel
    ) -> LiveContentType:
        """Merge *model* onto *content_type* in place, save, and re-fetch."""
        if content_type is None:
            raise InvalidArgumentError("content_type cannot be None")
        if model is None:
            raise InvalidArgumentError("model cannot be None")

        self._apply_model(content_type, model)
        self.templates.attach_templates(content_type, model)
        self.store.save(content_type)

        saved = self._refetch(model)
        self._record_property_ids(saved, model)
        logger.info("Updated content type %s (%s)", saved.alias, saved.id)
        return saved

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply_model(
        self, content_type: LiveContentType, model: DocumentTypeModel
    ) -> None:
        """Copy type fields and merge declared properties.

        Properties are matched in two passes: first every ID-bearing
        property through its mapping, then the rest by alias among the
        live properties the first pass left unclaimed.  Unmatched
        declared properties are added; host-only properties are kept.
        """
        content_type.name = model.name
        content_type.alias = model.alias
        content_type.description = model.description
        content_type.icon = model.icon
        content_type.allow_at_root = model.allow_at_root
        content_type.is_container = model.is_container

        if content_type.id is None:
            lookup = _no_mapping
        else:
            lookup = partial(
                self.identity.get_property_type_id, content_type.id
            )

        matches: dict[int, LivePropertyType] = {}
        by_mapping = IdentityResolver(content_type.property_types, lookup)
        for index, prop in enumerate(model.properties):
            if prop.id is None:
                continue
            live = by_mapping.resolve(prop.id, None).match
            if live is not None:
                matches[index] = live

        for index, prop in enumerate(model.properties):
            if index in matches:
                continue
            unclaimed = [
                p
                for p in content_type.property_types
                if all(p is not m for m in matches.values())
            ]
            live = IdentityResolver(
                unclaimed, lookup, ignore_case=True, fallback_to_alias=True
            ).resolve(prop.id, prop.alias).match
            if live is not None:
                matches[index] = live

        for index, prop in enumerate(model.properties):
            live = matches.get(index)
            if live is None:
                live = LivePropertyType(alias=prop.alias, name=prop.name)
                content_type.property_types.append(live)
            live.alias = prop.alias
            for field in _PROPERTY_FIELDS:
                setattr(live, field, getattr(prop, field))

    def _refetch(self, model: DocumentTypeModel) -> LiveContentType:
        """Re-read a saved type; property IDs are only assigned on save."""
        saved = self.store.get_by_alias(model.alias)
        if saved is None or saved.id is None:
            raise HostOperationError(
                f"Content type {model.alias} was saved but cannot be read back"
            )
        return saved

    def _record_property_ids(
        self, content_type: LiveContentType, model: DocumentTypeModel
    ) -> None:
        for prop in model.properties:
            if prop.id is None:
                continue
            live = content_type.get_property_type(prop.alias)
            if live is None or live.id is None:
                raise HostOperationError(
                    f"Property {prop.alias} missing from saved content "
                    f"type {content_type.alias}"
                )
            current = self.identity.get_property_type_id(
                content_type.id, prop.id
            )
            if current != live.id:
                self.identity.set_property_type_id(
                    content_type.id, prop.id, live.id
                )

    @staticmethod
    def _result(
        model: DocumentTypeModel,
        action: SyncAction,
        content_type_id: int | None,
        matched_by: str | None,
    ) -> SyncResult:
        return SyncResult(
            alias=model.alias,
            name=model.name,
            external_id=str(model.id) if model.id else None,
            action=action,
            content_type_id=content_type_id,
            matched_by=matched_by,
        )

    def _report(
        self, results: list[SyncResult], started_at: str, dry_run: bool
    ) -> SyncReport:
        return SyncReport(
            profile_name=self.profile_name,
            dry_run=dry_run,
            results=results,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )
