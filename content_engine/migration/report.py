"""
Human-readable migration report (Markdown).
"""

from collections import Counter
from typing import Sequence

from .models import IntegrityReport, MigrationResult, RecordState


def generate_report(results: Sequence[MigrationResult], integrity: IntegrityReport) -> str:
    """
    Summarize a migration run.

    Sections: summary counts, original format breakdown, integrity
    results, the literal issue list and recommendations.
    """
    total = len(results)
    successful = sum(1 for r in results if r.success)
    failed = total - successful
    skipped = sum(1 for r in results if r.state == RecordState.SKIPPED)
    success_rate = round(successful / total * 100) if total else 0
    formats = Counter(r.original_format for r in results)

    lines = [
        "# Migration Report",
        "",
        "## Summary",
        f"- **Total Records**: {total}",
        f"- **Successfully Migrated**: {successful}",
        f"- **Already Canonical (skipped)**: {skipped}",
        f"- **Failed**: {failed}",
        f"- **Success Rate**: {success_rate}%",
        "",
        "## Original Format Breakdown",
    ]
    if formats:
        lines.extend(f"- {fmt}: {count}" for fmt, count in sorted(formats.items()))
    else:
        lines.append("No records processed")

    lines.extend([
        "",
        "## Validation Results",
        f"- **Total Checked**: {integrity.total_checked}",
        f"- **Passed Validation**: {integrity.passed}",
        f"- **Failed Validation**: {integrity.failed}",
        f"- **Overall Valid**: {'Yes' if integrity.is_valid else 'No'}",
        "",
        "## Issues Found",
    ])
    if integrity.issues:
        lines.extend(f"- {issue}" for issue in integrity.issues)
    else:
        lines.append("No issues detected")

    lines.extend(["", "## Recommendations"])
    if failed:
        lines.append("Review failed migrations and consider manual intervention for problematic content.")
    else:
        lines.append("All migrations completed successfully.")
    lines.append("")
    if integrity.is_valid:
        lines.append("Content integrity maintained through migration.")
    else:
        lines.append("Content integrity issues detected. Review the specific issues above.")

    return "\n".join(lines) + "\n"
