"""
Content Format Engine

Classifies user content (html / markdown / plain-text), converts it to a
single canonical markup dialect without touching {{placeholders}},
validates it before editing or storage, and migrates legacy records with
backup, integrity verification and rollback.
"""

from .shared import (
    BackupError,
    ContentEngineError,
    ContentFormat,
    ConversionResult,
    FormatDetection,
    Severity,
    ValidationResult,
)
from .classifier import FormatClassifier
from .converter import ConversionDiagnostic, ConversionOutcome, FormatConverter
from .validator import ContentValidator
from .markup import RichMarkupConverter
from .migration import (
    ContentRecord,
    IntegrityReport,
    MigrationBatchOutcome,
    MigrationConfig,
    MigrationPipeline,
    MigrationResult,
    MigrationStatus,
    RecordState,
)
from .engine import ContentFormatEngine

__version__ = "1.0.0"

__all__ = [
    'ContentFormatEngine',
    'FormatClassifier',
    'FormatConverter',
    'ConversionOutcome',
    'ConversionDiagnostic',
    'ContentValidator',
    'RichMarkupConverter',
    'MigrationPipeline',
    'ContentRecord',
    'IntegrityReport',
    'MigrationBatchOutcome',
    'MigrationConfig',
    'MigrationResult',
    'MigrationStatus',
    'RecordState',
    'ContentFormat',
    'ConversionResult',
    'FormatDetection',
    'Severity',
    'ValidationResult',
    'BackupError',
    'ContentEngineError',
]
