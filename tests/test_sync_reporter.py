"""Tests for sync report formatting."""

import json

from doctype_sync.sync.models import SyncAction, SyncReport, SyncResult
from doctype_sync.sync.reporter import (
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)


def _result(alias, action, content_type_id=None, **kwargs):
    return SyncResult(
        alias=alias,
        name=alias.title(),
        action=action,
        content_type_id=content_type_id,
        **kwargs,
    )


def _report(results, dry_run=False):
    return SyncReport(
        profile_name="default",
        dry_run=dry_run,
        results=results,
        started_at="2026-01-01T00:00:00+00:00",
        completed_at="2026-01-01T00:00:01+00:00",
    )


def _mixed_report():
    return _report(
        [
            _result(
                "article",
                SyncAction.CREATE,
                1001,
                external_id="11111111-1111-4111-8111-111111111111",
            ),
            _result("news", SyncAction.RELINK, 1002),
            _result("home", SyncAction.UPDATE, 1000, matched_by="alias"),
            _result(
                "home",
                SyncAction.LINK_CHILDREN,
                1000,
                detail="dropped: missing",
            ),
        ]
    )


class TestSyncReport:
    def test_action_groups(self):
        report = _mixed_report()
        assert [r.alias for r in report.created] == ["article", "news"]
        assert [r.alias for r in report.relinked] == ["news"]
        assert [r.alias for r in report.updated] == ["home"]
        assert len(report.linked) == 1

    def test_summary(self):
        summary = _mixed_report().summary()
        assert "Created:  2" in summary
        assert "Relinked: 1" in summary
        assert "Total:    4" in summary


class TestFormatSyncReport:
    """Tests for format_sync_report()."""

    def test_empty_report(self):
        text = format_sync_report(_report([]))
        assert "No document types to synchronize." in text

    def test_sections_and_details(self):
        text = format_sync_report(_mixed_report())

        assert text.startswith("Sync report for 'default'")
        assert "Synchronized 3 document types: 2 created (1 relinked)" in text
        assert "Created:\n  article (Article) -> #1001" in text
        assert "Recreated (mapping was stale):\n  news (News) -> #1002" in text
        assert "home (Home) -> #1000 [by alias]" in text
        assert "home (Home) -> #1000: dropped: missing" in text

    def test_empty_sections_omitted(self):
        text = format_sync_report(
            _report([_result("home", SyncAction.UPDATE, 1000)])
        )
        assert "Created:" not in text
        assert "Updated:" in text

    def test_dry_run_header(self):
        text = format_sync_report(_report([], dry_run=True))
        assert "(DRY RUN)" in text


class TestFormatDryRunPreview:
    def test_grouped_by_action(self):
        report = _report(
            [
                _result("home", SyncAction.UPDATE, 1000, matched_by="alias"),
                _result("article", SyncAction.CREATE),
            ],
            dry_run=True,
        )
        text = format_dry_run_preview(report)

        assert text.startswith("DRY RUN -- No changes will be made")
        assert text.index("[CREATE]") < text.index("[UPDATE]")
        assert "  article (Article)\n" in text

    def test_nothing_planned(self):
        text = format_dry_run_preview(_report([], dry_run=True))
        assert text.endswith("No document types to synchronize.")


class TestReportToJson:
    def test_counts_and_entries(self):
        data = report_to_json(_mixed_report())

        assert data["counts"] == {
            "total": 4,
            "created": 2,
            "relinked": 1,
            "updated": 1,
            "linked": 1,
        }
        first = data["results"][0]
        assert first["action"] == "create"
        assert first["external_id"] == "11111111-1111-4111-8111-111111111111"
        assert "matched_by" not in first
        assert data["results"][3]["detail"] == "dropped: missing"

    def test_json_serialisable(self):
        json.dumps(report_to_json(_mixed_report()))
