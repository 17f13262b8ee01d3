"""
Post-migration integrity verification.

For every original record, checks that a result exists, that migrated
content kept enough of the original words, and that the placeholder
count did not change.
"""

import re
from typing import Dict, List, Sequence

from config.constants import MIGRATION_WORD_PRESERVATION
from config.logging_config import get_logger
from ..markup import count_placeholders
from .models import ContentRecord, IntegrityReport, MigrationResult

logger = get_logger(__name__)

TAG_PATTERN = re.compile(r'<[^>]*>')
WORD_CHAR_PATTERN = re.compile(r'\w')


def extract_words(content: str) -> List[str]:
    """
    Whitespace-separated words of content with markup removed.

    Tokens without any letter or digit (``#``, ``-``, ``>``) are
    formatting markers rather than words, so they are dropped.
    """
    text = TAG_PATTERN.sub(' ', content or '')
    return [word for word in text.split() if WORD_CHAR_PATTERN.search(word)]


def preservation_ratio(original: str, migrated: str) -> float:
    """Smaller word count divided by larger (1.0 when both are empty)."""
    original_count = len(extract_words(original))
    migrated_count = len(extract_words(migrated))
    larger = max(original_count, migrated_count)
    if larger == 0:
        return 1.0
    return min(original_count, migrated_count) / larger


def verify(
    original_records: Sequence[ContentRecord],
    results: Sequence[MigrationResult],
) -> IntegrityReport:
    """
    Compare original records with their migration results.

    Args:
        original_records: Records as they were before migration.
        results: One MigrationResult per record (matched by id).

    Returns:
        IntegrityReport; is_valid only when no issue was found.
    """
    by_id: Dict[str, MigrationResult] = {result.id: result for result in results}
    issues: List[str] = []
    passed = failed = 0

    for original in original_records:
        result = by_id.get(original.id)

        if result is None:
            issues.append(f"No migration result found for record {original.id}")
            failed += 1
            continue

        if not result.success:
            issues.append(f"Migration failed for record {original.id}: {result.error}")
            failed += 1
            continue

        if result.migrated_content is None:
            passed += 1
            continue

        ratio = preservation_ratio(original.content or '', result.migrated_content)
        if ratio < MIGRATION_WORD_PRESERVATION:
            issues.append(
                f"Content preservation issue for record {original.id}: {round(ratio * 100)}% preserved"
            )
            failed += 1
        else:
            passed += 1

        # Reported alongside; does not change pass/fail
        before = count_placeholders(original.content or '')
        after = count_placeholders(result.migrated_content)
        if before != after:
            issues.append(f"Variable count mismatch for record {original.id}: {before} -> {after}")

    report = IntegrityReport(
        is_valid=not issues,
        issues=issues,
        total_checked=len(original_records),
        passed=passed,
        failed=failed,
    )
    logger.info(
        f"Integrity check: {report.passed}/{report.total_checked} passed, {len(issues)} issues"
    )
    return report
