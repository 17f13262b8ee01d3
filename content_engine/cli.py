#!/usr/bin/env python3
"""
Content Engine CLI

Command-line interface for classifying, converting, validating and
migrating content.

Usage:
    content-engine classify note.txt
    content-engine convert note.md --format markdown
    content-engine validate note.html --mode storage
    content-engine migrate records.json --backup backup.json --report report.md
    content-engine rollback backup.json --output restored.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from config.settings import settings
from .engine import ContentFormatEngine
from .migration import ContentRecord, MigrationResult, MigrationStatus, RecordState
from .shared import BackupError, ContentFormat, ValidationResult

FORMAT_CHOICES = [f.value for f in ContentFormat]


def read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def write_text(path: str, text: str):
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")


def load_records(path: str) -> List[ContentRecord]:
    """Records file: a JSON list of record objects."""
    data = json.loads(read_text(path))
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of records")
    return [ContentRecord.from_dict(item) for item in data]


def print_validation(result: ValidationResult):
    """Print validation details"""
    print(f"  Valid: {'Yes' if result.is_valid else 'No'} | Severity: {result.severity.value}")
    if result.detected_format:
        print(f"  Detected format: {result.detected_format.value}")
    for error in result.errors:
        print(f"  [X] {error}")
    for warning in result.warnings:
        print(f"  [!] {warning}")


def cmd_classify(args, engine: ContentFormatEngine) -> int:
    """Classify a file"""
    detection = engine.classify(read_text(args.file))
    print(f"\n[i] {args.file}")
    print(f"  Format: {detection.format.value}")
    print(f"  Confidence: {detection.confidence:.2f}")
    for issue in detection.issues:
        print(f"  [!] {issue}")
    return 0


def cmd_convert(args, engine: ContentFormatEngine) -> int:
    """Convert a file to canonical markup"""
    result = engine.to_canonical(read_text(args.file), args.format)
    print(result.html)
    if result.validation_result and not result.validation_result.is_valid:
        print(f"[!] Converted markup has validation errors (from {result.format.value})", file=sys.stderr)
    return 0


def cmd_validate(args, engine: ContentFormatEngine) -> int:
    """Validate a file for editing or storage"""
    content = read_text(args.file)
    if args.mode == "edit":
        declared = args.format or engine.classify(content).format.value
        result = engine.validate_for_edit(content, declared)
    else:
        result = engine.validate_for_storage(content)

    print(f"\n[i] {args.mode} validation: {args.file}")
    print_validation(result)
    return 0 if result.is_valid else 1


def cmd_migrate(args, engine: ContentFormatEngine) -> int:
    """Migrate a records file"""
    records = load_records(args.records)
    overrides = {"dry_run": args.dry_run or settings.migration_dry_run}
    if args.no_strict:
        overrides["content_validation"] = False
    if args.batch_size:
        overrides["batch_size"] = args.batch_size
    if args.backup:
        overrides["enable_backup"] = True
    config = engine.migration_config(**overrides)

    print(f"\n[>] Migrating {len(records)} record(s)"
          f"{' (dry run)' if config.dry_run else ''}...\n")

    def on_progress(status: MigrationStatus, result: MigrationResult):
        icon = {
            RecordState.CONVERTED: "[OK]",
            RecordState.SKIPPED: "[--]",
            RecordState.FAILED: "[X]",
        }.get(result.state, "[?]")
        print(f"  {icon} {result.id}: {result.original_format} -> {result.final_format}"
              f" ({status.completed}/{status.total})")

    outcome = engine.run_migration(records, config, on_progress)
    integrity = engine.verify(records, outcome.results)
    report = engine.generate_report(outcome.results, integrity)

    if args.backup and outcome.backup:
        write_text(args.backup, outcome.backup)
        print(f"\n[i] Backup written: {args.backup}")
    if args.report:
        write_text(args.report, report)
        print(f"[i] Report written: {args.report}")
    else:
        print("\n" + report)

    if args.output and not outcome.dry_run:
        by_id = {r.id: r for r in outcome.results}
        migrated = []
        for record in records:
            data = record.to_dict()
            result = by_id.get(record.id)
            if result and result.success and result.migrated_content is not None:
                data["content"] = result.migrated_content
            migrated.append(data)
        write_text(args.output, json.dumps(migrated, indent=2, ensure_ascii=False))
        print(f"[i] Migrated records written: {args.output}")
    elif args.output:
        print("[i] Dry run: migrated records not written")

    status = outcome.status
    print(f"\n[i] Summary: {status.migrated} migrated, {status.skipped} skipped, {status.failed} failed")
    return 0 if status.failed == 0 else 1


def cmd_rollback(args, engine: ContentFormatEngine) -> int:
    """Restore records from a backup snapshot"""
    try:
        records = engine.rollback(read_text(args.backup))
    except BackupError as e:
        print(f"[X] {e}", file=sys.stderr)
        for detail in e.details:
            print(f"    {detail}", file=sys.stderr)
        return 1

    payload = json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)
    if args.output:
        write_text(args.output, payload)
        print(f"[OK] Restored {len(records)} record(s) to {args.output}")
    else:
        print(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-engine",
        description="Classify, convert, validate and migrate user content"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Classify command
    classify_parser = subparsers.add_parser("classify", help="Detect content format")
    classify_parser.add_argument("file", help="Content file")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert to canonical markup")
    convert_parser.add_argument("file", help="Content file")
    convert_parser.add_argument("-f", "--format", choices=FORMAT_CHOICES,
                                help="Declared input format (detected if omitted)")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate content")
    validate_parser.add_argument("file", help="Content file")
    validate_parser.add_argument("-m", "--mode", default="storage",
                                 choices=["edit", "storage"],
                                 help="Validation layer")
    validate_parser.add_argument("-f", "--format", choices=FORMAT_CHOICES,
                                 help="Declared format for edit validation")

    # Migrate command
    migrate_parser = subparsers.add_parser("migrate", help="Migrate a records file")
    migrate_parser.add_argument("records", help="JSON list of records")
    migrate_parser.add_argument("--backup", help="Write the backup snapshot here")
    migrate_parser.add_argument("--report", help="Write the Markdown report here")
    migrate_parser.add_argument("--output", help="Write migrated records here")
    migrate_parser.add_argument("--dry-run", action="store_true",
                                help="Run the full pipeline without writing records")
    migrate_parser.add_argument("--no-strict", action="store_true",
                                help="Keep records whose converted content fails validation")
    migrate_parser.add_argument("--batch-size", type=int, help="Records per batch")

    # Rollback command
    rollback_parser = subparsers.add_parser("rollback", help="Restore records from a backup")
    rollback_parser.add_argument("backup", help="Backup snapshot file")
    rollback_parser.add_argument("--output", help="Write restored records here")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    engine = ContentFormatEngine()

    # Execute command
    commands = {
        "classify": cmd_classify,
        "convert": cmd_convert,
        "validate": cmd_validate,
        "migrate": cmd_migrate,
        "rollback": cmd_rollback,
    }

    cmd_func = commands.get(args.command)
    try:
        return cmd_func(args, engine)
    except (OSError, ValueError, KeyError) as e:
        print(f"[X] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
