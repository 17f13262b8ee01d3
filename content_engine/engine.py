#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
ContentFormatEngine - composition root.

Owns the one classification cache and wires the classifier, rich-markup
converter, validator, format converter and migration pipeline around it.
Callers that share an engine share its cache; tests build a fresh engine
(or pass a fresh cache) to start clean.

Usage:
    from content_engine import ContentFormatEngine

    engine = ContentFormatEngine()
    detection = engine.classify("# Title\\n\\n- item with {{name}}")
    result = engine.to_canonical("Hello {{name}}")
    outcome = engine.run_migration(records, engine.migration_config(dry_run=True))
"""

from typing import List, Optional, Sequence, Union

from config.logging_config import get_logger, set_level
from config.settings import Settings, settings as default_settings
from .cache import CacheInterface, CacheStats, ClassificationCache
from .classifier import FormatClassifier
from .converter import FormatConverter
from .markup import RichMarkupConverter
from .migration import (
    BackupManager,
    ContentRecord,
    IntegrityReport,
    MigrationBatchOutcome,
    MigrationConfig,
    MigrationPipeline,
    MigrationProgressCallback,
    MigrationResult,
    generate_report,
    verify,
)
from .shared import (
    ContentFormat,
    ConversionResult,
    FormatDetection,
    SanitizationOptions,
    ValidationResult,
)
from .validator import ContentValidator

logger = get_logger(__name__)


class ContentFormatEngine:
    """
    Single entry point for classification, conversion, validation and migration.

    Attributes:
        settings: Settings the engine was built with.
        cache: Classification cache shared by every component.
        markup, classifier, validator, converter, backups, pipeline:
            The wired components, exposed for callers needing more than
            the convenience methods below.
    """

    def __init__(self, settings: Optional[Settings] = None, cache: Optional[CacheInterface] = None):
        self.settings = settings or default_settings
        set_level(self.settings.log_level)

        self.cache = cache if cache is not None else ClassificationCache(self.settings.classifier_cache_size)
        self.markup = RichMarkupConverter()
        self.classifier = FormatClassifier(cache=self.cache, markup=self.markup)
        self.validator = ContentValidator(self.classifier, self.markup)
        self.converter = FormatConverter(self.classifier, self.validator, self.markup)
        self.backups = BackupManager(self.classifier)
        self.pipeline = MigrationPipeline(self.classifier, self.converter, self.validator, self.backups)

        logger.debug(f"ContentFormatEngine initialized (cache max_size={self.cache.stats().max_size})")

    # ========== Classification ==========

    def classify(self, content) -> FormatDetection:
        return self.classifier.classify(content)

    def is_markup(self, content) -> bool:
        return self.classifier.is_markup(content)

    # ========== Conversion ==========

    def to_canonical(
        self,
        content,
        known_format: Optional[Union[ContentFormat, str]] = None,
        options: Optional[SanitizationOptions] = None,
    ) -> ConversionResult:
        return self.converter.to_canonical(content, known_format, options)

    def to_markup(self, text: str) -> str:
        return self.markup.to_markup(text)

    def to_lightweight(self, markup: str) -> str:
        return self.markup.to_lightweight(markup)

    def sanitize(self, markup: str) -> str:
        return self.markup.sanitize(markup)

    # ========== Validation ==========

    def validate_for_edit(self, content, declared_format: Union[ContentFormat, str]) -> ValidationResult:
        return self.validator.validate_for_edit(content, declared_format)

    def validate_for_storage(self, content) -> ValidationResult:
        return self.validator.validate_for_storage(content)

    def validate_markup(self, content, options: Optional[SanitizationOptions] = None) -> ValidationResult:
        return self.validator.validate_markup(content, options)

    # ========== Migration ==========

    def migration_config(self, **overrides) -> MigrationConfig:
        """MigrationConfig from settings, with keyword overrides."""
        config = MigrationConfig.from_settings(self.settings)
        for key, value in overrides.items():
            if not hasattr(config, key):
                raise TypeError(f"Unknown migration option: {key}")
            setattr(config, key, value)
        config.__post_init__()
        return config

    def migrate_record(self, record: ContentRecord, config: Optional[MigrationConfig] = None) -> MigrationResult:
        return self.pipeline.migrate_record(record, config or self.migration_config())

    async def migrate_batch(
        self,
        records: Sequence[ContentRecord],
        config: Optional[MigrationConfig] = None,
        progress_callback: Optional[MigrationProgressCallback] = None,
    ) -> MigrationBatchOutcome:
        return await self.pipeline.migrate_batch(records, config or self.migration_config(), progress_callback)

    def run_migration(
        self,
        records: Sequence[ContentRecord],
        config: Optional[MigrationConfig] = None,
        progress_callback: Optional[MigrationProgressCallback] = None,
    ) -> MigrationBatchOutcome:
        return self.pipeline.run_migration(records, config or self.migration_config(), progress_callback)

    def identify_records_for_migration(self, records: Sequence[ContentRecord]) -> List[ContentRecord]:
        return self.pipeline.identify_records_for_migration(records)

    def create_backup(self, records: Sequence[ContentRecord]) -> str:
        return self.backups.create_backup(records)

    def rollback(self, snapshot) -> List[ContentRecord]:
        return self.backups.rollback(snapshot)

    def verify(self, original_records: Sequence[ContentRecord], results: Sequence[MigrationResult]) -> IntegrityReport:
        return verify(original_records, results)

    def generate_report(self, results: Sequence[MigrationResult], integrity: IntegrityReport) -> str:
        return generate_report(results, integrity)

    # ========== Cache ==========

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self) -> int:
        return self.cache.clear()
