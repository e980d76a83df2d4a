"""Command-line entry point: ``doctype-sync``.

Subcommands:

- ``sync``     -- synchronize declared document types into the host store.
- ``validate`` -- check declared document types for ID/alias conflicts.
- ``init``     -- write a starter ``.doctype_sync/config.yml``.

Reports go to stdout; logs go to stderr.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .config import load_config
from .config_loader import ensure_config, load_hierarchical_config
from .config_schema import build_config
from .discovery import YamlModelDiscovery
from .errors import DoctypeSyncError, IdentityConflictError
from .host import JsonHostStore
from .logger import setup_logging
from .sync import (
    ContentTypeSynchronizationService,
    JsonIdentityStore,
    TypeModelValidator,
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doctype-sync",
        description="Synchronize declared document types into a CMS host",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview what would change
  doctype-sync --models doctypes/ --host-store host.json sync --dry-run

  # Synchronize using settings from .doctype_sync/config.yml
  doctype-sync sync

  # Check models for ID/alias conflicts only
  doctype-sync --models doctypes/ validate
        """,
    )
    parser.add_argument(
        "--models",
        help="YAML model file or directory (overrides DOCTYPE_SYNC_MODELS and config files)",
    )
    parser.add_argument(
        "--host-store",
        help="JSON host store path (overrides DOCTYPE_SYNC_HOST_STORE and config files)",
    )
    parser.add_argument(
        "--state-dir",
        help="Identity mapping state directory (default: .doctype_sync)",
    )
    parser.add_argument(
        "--profile", help="Identity profile name (default: default)"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        help="Log line format (default: text)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"doctype-sync version {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync", help="Synchronize document types"
    )
    sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Plan only; do not write to the host or identity store",
    )
    sync_parser.add_argument(
        "--json", action="store_true", help="Print the report as JSON"
    )
    sync_parser.add_argument(
        "--refresh-before-linking",
        action="store_true",
        help="Re-read live types before linking allowed child types",
    )

    subparsers.add_parser("validate", help="Validate document types only")
    subparsers.add_parser("init", help="Write a starter config file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    load_dotenv()

    try:
        unified = build_config(load_hierarchical_config())
    except (ValueError, OSError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    setup_logging(
        debug=args.debug,
        log_file=args.log_file or unified.logging.file,
        debug_format=args.log_format or unified.logging.format,
        level=unified.logging.level,
    )

    if args.command == "init":
        path = ensure_config()
        print(f"Config file: {path}")
        return EXIT_OK

    if args.command == "validate":
        return _run_validate(args, unified.sync.models)

    try:
        config = load_config(
            models=args.models,
            host_store=args.host_store,
            state_dir=args.state_dir,
            profile=args.profile,
            refresh_before_linking=args.refresh_before_linking,
            dry_run=args.dry_run,
            yaml_fallbacks=unified.sync.model_dump(),
        )
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    try:
        host = JsonHostStore(config.host_store_path)
        identity = JsonIdentityStore(config.state_dir, config.profile)
    except (ValueError, OSError) as exc:
        print(f"Cannot load state: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    service = ContentTypeSynchronizationService(
        discovery=YamlModelDiscovery(config.models_path),
        content_type_store=host,
        template_store=host,
        identity_store=identity,
        profile_name=config.profile,
        refresh_before_linking=config.refresh_before_linking,
    )

    try:
        report = service.synchronize(dry_run=config.dry_run)
    except (DoctypeSyncError, OSError) as exc:
        print(f"Synchronization failed: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json:
        print(json.dumps(report_to_json(report), indent=2))
    elif report.dry_run:
        print(format_dry_run_preview(report))
    else:
        print(format_sync_report(report))
    return EXIT_OK


def _run_validate(args: argparse.Namespace, yaml_models: str | None) -> int:
    models_path = (
        args.models or os.getenv("DOCTYPE_SYNC_MODELS") or yaml_models
    )
    if not models_path:
        print(
            "Configuration error: no model path given (--models or sync.models)",
            file=sys.stderr,
        )
        return EXIT_CONFIG

    try:
        models = YamlModelDiscovery(Path(models_path)).get_declared_types()
        TypeModelValidator().validate(models)
    except IdentityConflictError as exc:
        print(f"Conflict: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    except DoctypeSyncError as exc:
        print(f"Invalid models: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    print(f"{len(models)} document types OK")
    return EXIT_OK


def run() -> None:
    """Console-script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
