"""Pydantic models describing the outcome of a sync run.

- ``SyncAction``: Enum of possible per-type operations.
- ``SyncResult``: Outcome of synchronizing one document type.
- ``SyncReport``: Aggregate results for a full run.

All models are frozen (immutable).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class SyncAction(str, Enum):
    """Possible operations on one document type."""

    CREATE = "create"
    UPDATE = "update"
    RELINK = "relink"
    LINK_CHILDREN = "link_children"


class SyncResult(BaseModel):
    """Result of synchronizing one document type.

    Attributes:
        alias: Document type alias.
        name: Document type display name.
        external_id: External ID as a string, when declared.
        action: Operation that was performed (or planned, on dry run).
        content_type_id: Host internal ID after the operation.  ``None``
            for planned creates.
        matched_by: How the live type was found (``"id"``/``"alias"``).
        detail: Free-form note, e.g. dropped child references.
    """

    alias: str
    name: str
    external_id: str | None = None
    action: SyncAction
    content_type_id: int | None = None
    matched_by: str | None = None
    detail: str | None = None

    model_config = {"frozen": True}


class SyncReport(BaseModel):
    """Aggregate report for a full sync run.

    Attributes:
        profile_name: Name of the identity profile used.
        dry_run: Whether this was a dry-run (no changes applied).
        results: Individual results, in processing order.
        started_at: ISO 8601 timestamp when sync started.
        completed_at: ISO 8601 timestamp when sync completed.
    """

    profile_name: str
    dry_run: bool = False
    results: list[SyncResult] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def created(self) -> list[SyncResult]:
        """Results where action is CREATE or RELINK."""
        return [
            r
            for r in self.results
            if r.action in (SyncAction.CREATE, SyncAction.RELINK)
        ]

    @property
    def relinked(self) -> list[SyncResult]:
        """Results where a stale mapping was replaced."""
        return [r for r in self.results if r.action == SyncAction.RELINK]

    @property
    def updated(self) -> list[SyncResult]:
        """Results where action is UPDATE."""
        return [r for r in self.results if r.action == SyncAction.UPDATE]

    @property
    def linked(self) -> list[SyncResult]:
        """Results where allowed child types were changed."""
        return [
            r for r in self.results if r.action == SyncAction.LINK_CHILDREN
        ]

    def summary(self) -> str:
        """Format a human-readable summary of the sync run.

        Returns:
            Multi-line summary string with counts by action.
        """
        lines = [
            f"Sync report for profile '{self.profile_name}'"
            + (" (dry run)" if self.dry_run else ""),
            f"  Created:  {len(self.created)}",
            f"  Relinked: {len(self.relinked)}",
            f"  Updated:  {len(self.updated)}",
            f"  Linked:   {len(self.linked)}",
            f"  Total:    {len(self.results)}",
        ]
        return "\n".join(lines)
