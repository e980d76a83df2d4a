"""Sync report formatting functions.

Provides human-readable and machine-readable output for sync runs:

- ``format_sync_report`` -- full post-sync summary.
- ``format_dry_run_preview`` -- dry-run preview grouped by action.
- ``report_to_json`` -- structured dict for JSON output.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import SyncReport, SyncResult

from .models import SyncAction

# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def _describe(result: SyncResult) -> str:
    label = f"{result.alias} ({result.name})"
    if result.content_type_id is not None:
        label += f" -> #{result.content_type_id}"
    if result.matched_by:
        label += f" [by {result.matched_by}]"
    if result.detail:
        label += f": {result.detail}"
    return label


def format_sync_report(report: SyncReport) -> str:
    """Format a complete sync report as human-readable text.

    Sections are only included when they contain at least one result.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    header = f"Sync report for '{report.profile_name}'"
    if report.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    if not report.results:
        lines.append("No document types to synchronize.")
        return "\n".join(lines)

    lines.append(
        f"Synchronized {len(report.results) - len(report.linked)} document types: "
        f"{len(report.created)} created ({len(report.relinked)} relinked), "
        f"{len(report.updated)} updated, "
        f"{len(report.linked)} child links changed"
    )
    lines.append("")

    sections = [
        ("Created:", [r for r in report.created if r.action == SyncAction.CREATE]),
        ("Recreated (mapping was stale):", report.relinked),
        ("Updated:", report.updated),
        ("Allowed child types changed:", report.linked),
    ]
    for title, results in sections:
        if not results:
            continue
        lines.append(title)
        for r in results:
            lines.append(f"  {_describe(r)}")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# Dry-run preview
# ------------------------------------------------------------------


def format_dry_run_preview(report: SyncReport) -> str:
    """Format a dry-run preview grouped by action type.

    Each planned action is shown as ``[ACTION] alias (name)``.

    Args:
        report: A dry-run sync report (``dry_run=True``).

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []
    lines.append("DRY RUN -- No changes will be made")
    lines.append(f"Profile: {report.profile_name}")
    lines.append("")

    groups: dict[SyncAction, list[SyncResult]] = defaultdict(list)
    for r in report.results:
        groups[r.action].append(r)

    for action in (SyncAction.CREATE, SyncAction.RELINK, SyncAction.UPDATE):
        if action not in groups:
            continue
        label = action.value.upper().replace("_", " ")
        lines.append(f"[{label}]")
        for r in groups[action]:
            lines.append(f"  {_describe(r)}")
        lines.append("")

    if not groups:
        lines.append("No document types to synchronize.")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a structured dict for JSON serialisation.

    Args:
        report: The sync report.

    Returns:
        Dict with profile info, counts, and per-result details.
    """
    results_list = []
    for r in report.results:
        entry: dict = {
            "alias": r.alias,
            "name": r.name,
            "action": r.action.value,
            "content_type_id": r.content_type_id,
        }
        if r.external_id:
            entry["external_id"] = r.external_id
        if r.matched_by:
            entry["matched_by"] = r.matched_by
        if r.detail:
            entry["detail"] = r.detail
        results_list.append(entry)

    return {
        "profile_name": report.profile_name,
        "dry_run": report.dry_run,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "total": len(report.results),
            "created": len(report.created),
            "relinked": len(report.relinked),
            "updated": len(report.updated),
            "linked": len(report.linked),
        },
        "results": results_list,
    }
