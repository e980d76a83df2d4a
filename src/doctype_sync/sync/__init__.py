"""Document-type synchronization engine.

Public API for reconciling declared document types with a CMS host's
live content types.

Architecture
------------
Declared models carry an optional stable external ID (a GUID) and an
alias.  The host identifies content types by integer ID.  The identity
mapping store links the two so a type survives alias renames; models
without an external ID are matched by alias on every run.

Modules:

- ``engine``    -- ``ContentTypeSynchronizationService``: orchestrates a run.
- ``validator`` -- ``TypeModelValidator``: ordered uniqueness checks.
- ``identity``  -- ``IdentityMappingStore`` protocol, in-memory and JSON stores.
- ``resolver``  -- ``IdentityResolver``: shared ID-then-alias matching.
- ``templates`` -- ``TemplateResolver``: allowed/default templates.
- ``linker``    -- ``AllowedContentTypeLinker``: allowed child types.
- ``models``    -- ``SyncAction``, ``SyncResult``, ``SyncReport``.
- ``reporter``  -- Human-readable and JSON report formatting.

Usage example
-------------
::

    from pathlib import Path
    from doctype_sync.discovery import YamlModelDiscovery
    from doctype_sync.host import JsonHostStore
    from doctype_sync.sync import (
        ContentTypeSynchronizationService,
        JsonIdentityStore,
        format_sync_report,
    )

    host = JsonHostStore(Path(".doctype_sync/host.json"))
    service = ContentTypeSynchronizationService(
        discovery=YamlModelDiscovery(Path("doctypes/")),
        content_type_store=host,
        template_store=host,
        identity_store=JsonIdentityStore(Path(".doctype_sync")),
    )

    print(format_sync_report(service.synchronize(dry_run=True)))
    print(format_sync_report(service.synchronize()))
"""

from .engine import ContentTypeSynchronizationService
from .identity import (
    IdentityMappingStore,
    InMemoryIdentityStore,
    JsonIdentityStore,
)
from .linker import AllowedContentTypeLinker
from .models import SyncAction, SyncReport, SyncResult
from .reporter import (
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)
from .resolver import IdentityResolver, Resolution
from .templates import TemplateResolver
from .validator import TypeModelValidator

__all__ = [
    "AllowedContentTypeLinker",
    "ContentTypeSynchronizationService",
    "IdentityMappingStore",
    "IdentityResolver",
    "InMemoryIdentityStore",
    "JsonIdentityStore",
    "Resolution",
    "SyncAction",
    "SyncReport",
    "SyncResult",
    "TemplateResolver",
    "TypeModelValidator",
    "format_dry_run_preview",
    "format_sync_report",
    "report_to_json",
]
