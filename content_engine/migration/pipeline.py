"""
Migration pipeline: normalizes legacy records to canonical markup.

Per record: pending -> converted | skipped | failed.
Batches run sequentially with a fixed pause between them, which bounds
the burst load on whatever I/O layer persists the results.

Usage:
    pipeline = MigrationPipeline(classifier, converter, validator, backups)
    outcome = await pipeline.migrate_batch(records, MigrationConfig(dry_run=True))
    report = generate_report(outcome.results, verify(records, outcome.results))
"""

import asyncio
from typing import List, Optional, Sequence

from config.constants import MIGRATION_IDENTIFY_CONFIDENCE, MIGRATION_SKIP_CONFIDENCE
from config.logging_config import get_logger
from ..classifier import FormatClassifier
from ..converter import FormatConverter
from ..shared import ContentFormat, Severity
from ..validator import ContentValidator
from .backup import BackupManager
from .models import (
    ContentRecord,
    MigrationBatchOutcome,
    MigrationConfig,
    MigrationProgressCallback,
    MigrationResult,
    MigrationStatus,
    RecordState,
)

logger = get_logger(__name__)


class MigrationPipeline:
    """
    Classify -> convert -> validate, per record and per batch.

    Attributes:
        classifier: Detects each record's current format.
        converter: Produces canonical markup.
        validator: Storage-time validation of the converted content.
        backups: Creates the pre-migration snapshot.
    """

    def __init__(
        self,
        classifier: Optional[FormatClassifier] = None,
        converter: Optional[FormatConverter] = None,
        validator: Optional[ContentValidator] = None,
        backups: Optional[BackupManager] = None,
    ):
        self.classifier = classifier or FormatClassifier()
        self.validator = validator or ContentValidator(self.classifier)
        self.converter = converter or FormatConverter(self.classifier, self.validator)
        self.backups = backups or BackupManager(self.classifier)

    def migrate_record(self, record: ContentRecord, config: Optional[MigrationConfig] = None) -> MigrationResult:
        """
        Migrate one record. Never raises; failures land in the result.

        Args:
            record: Record to migrate.
            config: Run configuration (content_validation = strict mode).
        """
        config = config or MigrationConfig()

        try:
            content = record.content
            if not isinstance(content, str) or not content.strip():
                return MigrationResult(
                    id=record.id,
                    success=False,
                    original_format="empty",
                    final_format="empty",
                    issues=("Empty content",),
                    error="No content to migrate",
                    state=RecordState.FAILED,
                )

            detection = self.classifier.classify(content)
            original_format = detection.format.value

            if detection.format == ContentFormat.HTML and detection.confidence > MIGRATION_SKIP_CONFIDENCE:
                current = self.validator.validate_for_storage(content)
                if current.is_valid:
                    if current.warnings:
                        logger.info(
                            f"Record {record.id} skipped with warnings: {', '.join(current.warnings)}"
                        )
                    return MigrationResult(
                        id=record.id,
                        success=True,
                        original_format=original_format,
                        final_format=original_format,
                        issues=("Content already in correct format",),
                        migrated_content=content,
                        state=RecordState.SKIPPED,
                    )

            metadata = self.converter.analyze_for_storage(content)
            conversion = self.converter.to_canonical(content, detection.format)
            validation = self.validator.validate_for_storage(conversion.html)

            if not validation.is_valid and config.content_validation:
                return MigrationResult(
                    id=record.id,
                    success=False,
                    original_format=original_format,
                    final_format=ContentFormat.HTML.value,
                    issues=("Content validation failed", *validation.errors),
                    error=f"Validation errors: {', '.join(validation.errors)}",
                    state=RecordState.FAILED,
                )

            html = conversion.html
            notes = list(metadata.conversion_notes)

            # Non-strict runs still never store content that fails security checks
            if validation.severity == Severity.CRITICAL:
                html = self.validator.recover_problematic_content(html, validation)
                recovered = self.validator.validate_for_storage(html)
                if recovered.severity == Severity.CRITICAL:
                    return MigrationResult(
                        id=record.id,
                        success=False,
                        original_format=original_format,
                        final_format=ContentFormat.HTML.value,
                        issues=("Content failed security validation", *validation.errors),
                        error=f"Security validation failed: {', '.join(validation.errors)}",
                        state=RecordState.FAILED,
                    )
                notes.append(f"Recovered from critical validation errors: {', '.join(validation.errors)}")
                validation = recovered

            if not validation.is_valid:
                notes.append(f"Stored despite validation errors: {', '.join(validation.errors)}")
            notes.extend(w for w in validation.warnings if w not in notes)

            return MigrationResult(
                id=record.id,
                success=True,
                original_format=original_format,
                final_format=ContentFormat.HTML.value,
                issues=tuple(notes),
                migrated_content=html,
                state=RecordState.CONVERTED,
            )

        except Exception as e:
            logger.exception(f"Migration failed for record {record.id}")
            return MigrationResult(
                id=record.id,
                success=False,
                original_format="unknown",
                final_format="unknown",
                issues=("Migration failed",),
                error=str(e) or e.__class__.__name__,
                state=RecordState.FAILED,
            )

    async def migrate_batch(
        self,
        records: Sequence[ContentRecord],
        config: Optional[MigrationConfig] = None,
        progress_callback: Optional[MigrationProgressCallback] = None,
    ) -> MigrationBatchOutcome:
        """
        Migrate records in sequential batches.

        Counters are updated per record, so the status is safe to inspect
        at any point. In dry-run mode the full pipeline still runs (the
        report stays accurate) but the outcome tells the caller not to
        persist anything.
        """
        config = config or MigrationConfig()
        status = MigrationStatus(total=len(records))
        results: List[MigrationResult] = []

        backup = self.backups.create_backup(records) if config.enable_backup else None

        logger.info(
            f"Starting migration of {len(records)} records "
            f"(batch_size={config.batch_size}, dry_run={config.dry_run}, "
            f"strict={config.content_validation})"
        )

        for start in range(0, len(records), config.batch_size):
            batch = records[start:start + config.batch_size]

            for record in batch:
                status.in_progress += 1
                result = self.migrate_record(record, config)
                results.append(result)

                if result.state == RecordState.SKIPPED:
                    status.skipped += 1
                elif result.success:
                    status.migrated += 1
                else:
                    status.failed += 1
                    logger.warning(f"Record {record.id} failed: {result.error}")
                status.in_progress -= 1

                if progress_callback:
                    try:
                        progress_callback(status, result)
                    except Exception as e:
                        logger.warning(f"Progress callback error: {e}")

            logger.info(f"Batch done: {status.completed}/{status.total} records processed")

            # Pause between batches, not after the last one
            if start + config.batch_size < len(records):
                await asyncio.sleep(config.batch_delay)

        logger.info(
            f"Migration finished: {status.migrated} migrated, "
            f"{status.skipped} skipped, {status.failed} failed"
        )
        return MigrationBatchOutcome(
            results=results,
            status=status,
            dry_run=config.dry_run,
            backup=backup,
        )

    def run_migration(
        self,
        records: Sequence[ContentRecord],
        config: Optional[MigrationConfig] = None,
        progress_callback: Optional[MigrationProgressCallback] = None,
    ) -> MigrationBatchOutcome:
        """Synchronous wrapper around migrate_batch()."""
        return asyncio.run(self.migrate_batch(records, config, progress_callback))

    def identify_records_for_migration(self, records: Sequence[ContentRecord]) -> List[ContentRecord]:
        """
        Non-empty records that are not canonical yet: not html, detected
        with low confidence, or failing storage validation.
        """
        needing = []
        for record in records:
            if not record.content or not record.content.strip():
                continue
            detection = self.classifier.classify(record.content)
            if (
                detection.format != ContentFormat.HTML
                or detection.confidence < MIGRATION_IDENTIFY_CONFIDENCE
                or not self.validator.validate_for_storage(record.content).is_valid
            ):
                needing.append(record)
        return needing
