"""
Unit tests for content_engine.migration.pipeline module.

Tests MigrationPipeline per-record state machine, batch driver
counters, dry-run signalling and record identification.
"""

import asyncio

import pytest
from unittest.mock import patch

from content_engine.migration import (
    ContentRecord,
    MigrationConfig,
    MigrationResult,
    RecordState,
)
from content_engine.shared import ContentFormat, ConversionResult
from content_engine.validator import ContentValidator


@pytest.fixture
def pipeline(engine):
    return engine.pipeline


def record(content, record_id="r1"):
    return ContentRecord(id=record_id, title="T", content=content)


class TestMigrationConfig:

    def test_defaults(self):
        config = MigrationConfig()
        assert config.batch_size > 0
        assert config.batch_delay >= 0
        assert config.enable_backup is True
        assert config.dry_run is False
        assert config.content_validation is True

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            MigrationConfig(batch_size=0)

    def test_from_settings(self, test_settings):
        config = MigrationConfig.from_settings(test_settings)
        assert config.batch_size == test_settings.migration_batch_size
        assert config.batch_delay == test_settings.migration_batch_delay


class TestMigrateRecord:

    @pytest.mark.parametrize("content", ["", None, "   \n "])
    def test_empty_record_fails(self, pipeline, content):
        result = pipeline.migrate_record(record(content))
        assert not result.success
        assert result.state == RecordState.FAILED
        assert result.original_format == "empty"
        assert result.issues == ("Empty content",)
        assert result.error == "No content to migrate"

    def test_valid_markup_skipped(self, pipeline):
        content = "<p>This is <strong>HTML</strong> content with {{variable}}.</p>"
        result = pipeline.migrate_record(record(content))
        assert result.success
        assert result.state == RecordState.SKIPPED
        assert result.migrated_content == content
        assert result.issues == ("Content already in correct format",)
        assert result.original_format == result.final_format == "html"

    def test_plain_text_converted(self, pipeline):
        result = pipeline.migrate_record(record("A plain text prompt with {{variable}} placeholder."))
        assert result.success
        assert result.state == RecordState.CONVERTED
        assert result.original_format == "plain-text"
        assert result.final_format == "html"
        assert result.migrated_content == "<p>A plain text prompt with {{variable}} placeholder.</p>"
        assert "Converting from plain-text to HTML for storage" in result.issues

    def test_markdown_converted(self, pipeline):
        result = pipeline.migrate_record(record("# Title\n\n- first item\n- second item"))
        assert result.state == RecordState.CONVERTED
        assert result.migrated_content.startswith("<h1>Title</h1>")

    def test_invalid_output_fails_in_strict_mode(self, pipeline):
        result = pipeline.migrate_record(record("Hello {{bad name}} and welcome to the team"))
        assert not result.success
        assert result.state == RecordState.FAILED
        assert result.issues[0] == "Content validation failed"
        assert "Invalid variable syntax: {{bad name}}" in result.issues
        assert result.error.startswith("Validation errors: ")

    def test_invalid_output_kept_when_not_strict(self, pipeline):
        config = MigrationConfig(content_validation=False, batch_delay=0)
        result = pipeline.migrate_record(record("Hello {{bad name}} and welcome to the team"), config)
        assert result.success
        assert result.migrated_content == "<p>Hello {{bad name}} and welcome to the team</p>"
        assert any("Invalid variable syntax" in issue for issue in result.issues)

    def test_tag_like_text_stored_inert_when_not_strict(self, pipeline):
        config = MigrationConfig(content_validation=False, batch_delay=0)
        rec = record("Look at this picture <img src=x onerror=alert(1)> of {{name}} today")
        result = pipeline.migrate_record(rec, config)
        assert result.success
        assert result.migrated_content == (
            "<p>Look at this picture &lt;img src=x onerror=alert(1)&gt; of {{name}} today</p>"
        )
        assert ContentValidator.find_dangerous_constructs(result.migrated_content) == []

    def test_critical_content_fails_even_when_not_strict(self, pipeline):
        config = MigrationConfig(content_validation=False, batch_delay=0)
        result = pipeline.migrate_record(record("Please visit vbscript:msgbox for {{name}} details"), config)
        assert not result.success
        assert result.state == RecordState.FAILED
        assert result.issues[0] == "Content failed security validation"
        assert result.error.startswith("Security validation failed: ")

    def test_critical_content_recovered_when_not_strict(self, pipeline):
        config = MigrationConfig(content_validation=False, batch_delay=0)
        dangerous = ConversionResult(
            html='<p onclick="x()">Hello there friend, welcome aboard</p>',
            format=ContentFormat.PLAIN_TEXT,
        )
        with patch.object(pipeline.converter, "to_canonical", return_value=dangerous):
            result = pipeline.migrate_record(record("Hello there friend, welcome aboard"), config)
        assert result.success
        assert result.migrated_content == "<p>Hello there friend, welcome aboard</p>"
        assert any(i.startswith("Recovered from critical validation errors") for i in result.issues)

    def test_critical_content_fails_in_strict_mode(self, pipeline):
        result = pipeline.migrate_record(record("Please visit vbscript:msgbox for {{name}} details"))
        assert not result.success
        assert result.issues[0] == "Content validation failed"

    def test_unexpected_error_reported_in_result(self, pipeline):
        with patch.object(pipeline.converter, "to_canonical", side_effect=RuntimeError("disk on fire")):
            result = pipeline.migrate_record(record("Plain content needing conversion"))
        assert not result.success
        assert result.issues == ("Migration failed",)
        assert result.error == "disk on fire"
        assert result.original_format == "unknown"

    def test_result_is_immutable(self, pipeline):
        result = pipeline.migrate_record(record("Plain content needing conversion"))
        with pytest.raises(Exception):
            result.success = False

    def test_skipped_with_warnings_logged(self, pipeline, caplog):
        content = "<p>Unclosed <strong>bold words in a paragraph</p>"
        with caplog.at_level("INFO"):
            result = pipeline.migrate_record(record(content, "warn-1"))
        assert result.state == RecordState.SKIPPED
        assert "Record warn-1 skipped with warnings" in caplog.text


class TestMigrateBatch:

    @pytest.mark.asyncio
    async def test_status_counters(self, pipeline, legacy_records, fast_config):
        outcome = await pipeline.migrate_batch(legacy_records, fast_config)
        status = outcome.status
        assert status.total == 5
        assert status.migrated == 2
        assert status.skipped == 2
        assert status.failed == 1
        assert status.in_progress == 0
        assert [r.id for r in outcome.results] == ["1", "2", "3", "4", "5"]

    @pytest.mark.asyncio
    async def test_backup_created_when_enabled(self, pipeline, legacy_records, fast_config):
        outcome = await pipeline.migrate_batch(legacy_records, fast_config)
        assert outcome.backup is not None
        assert len(pipeline.backups.rollback(outcome.backup)) == 5

    @pytest.mark.asyncio
    async def test_no_backup_when_disabled(self, pipeline, legacy_records):
        config = MigrationConfig(batch_delay=0, enable_backup=False)
        outcome = await pipeline.migrate_batch(legacy_records, config)
        assert outcome.backup is None

    @pytest.mark.asyncio
    async def test_dry_run_still_runs_pipeline(self, pipeline, legacy_records):
        config = MigrationConfig(batch_delay=0, dry_run=True)
        outcome = await pipeline.migrate_batch(legacy_records, config)
        assert outcome.dry_run is True
        assert outcome.status.migrated == 2
        assert outcome.results[0].migrated_content is not None

    @pytest.mark.asyncio
    async def test_pause_between_batches_only(self, pipeline, legacy_records):
        config = MigrationConfig(batch_size=2, batch_delay=0.01)
        calls = []
        real_sleep = asyncio.sleep

        async def fake_sleep(delay):
            calls.append(delay)
            await real_sleep(0)

        with patch("content_engine.migration.pipeline.asyncio.sleep", fake_sleep):
            await pipeline.migrate_batch(legacy_records, config)

        # 5 records in batches of 2 -> 3 batches -> 2 pauses
        assert calls == [0.01, 0.01]

    @pytest.mark.asyncio
    async def test_progress_callback_sees_per_record_counters(self, pipeline, legacy_records, fast_config):
        seen = []

        def on_progress(status, result):
            seen.append((status.completed, status.in_progress, result.id))

        await pipeline.migrate_batch(legacy_records, fast_config, on_progress)
        assert seen == [(i + 1, 0, str(i + 1)) for i in range(5)]

    @pytest.mark.asyncio
    async def test_callback_errors_do_not_abort(self, pipeline, legacy_records, fast_config):
        def broken(status, result):
            raise RuntimeError("ui gone")

        outcome = await pipeline.migrate_batch(legacy_records, fast_config, broken)
        assert len(outcome.results) == 5

    @pytest.mark.asyncio
    async def test_record_failure_does_not_abort_batch(self, pipeline, legacy_records, fast_config):
        original = pipeline.migrate_record

        def flaky(rec, config=None):
            if rec.id == "1":
                return MigrationResult(
                    id=rec.id, success=False, original_format="unknown", final_format="unknown",
                    issues=("Migration failed",), error="boom", state=RecordState.FAILED,
                )
            return original(rec, config)

        with patch.object(pipeline, "migrate_record", side_effect=flaky):
            outcome = await pipeline.migrate_batch(legacy_records, fast_config)
        assert outcome.status.failed == 2
        assert len(outcome.results) == 5

    def test_run_migration_sync_wrapper(self, pipeline, legacy_records, fast_config):
        outcome = pipeline.run_migration(legacy_records, fast_config)
        assert outcome.status.total == 5
        assert outcome.status.in_progress == 0

    def test_empty_record_list(self, pipeline, fast_config):
        outcome = pipeline.run_migration([], fast_config)
        assert outcome.results == []
        assert outcome.status.total == 0


class TestIdentifyRecords:

    def test_identifies_non_canonical_records(self, pipeline, legacy_records):
        needing = pipeline.identify_records_for_migration(legacy_records)
        assert [r.id for r in needing] == ["1", "3"]
