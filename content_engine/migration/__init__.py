"""
Migration Module

Exports:
- MigrationPipeline (per-record and batched migration)
- BackupManager (snapshot creation and rollback)
- verify (integrity check), generate_report (Markdown summary)
- Data models: ContentRecord, MigrationResult, MigrationStatus,
  MigrationConfig, MigrationBatchOutcome, IntegrityReport, RecordState
"""

from .models import (
    ContentRecord,
    IntegrityReport,
    MigrationBatchOutcome,
    MigrationConfig,
    MigrationProgressCallback,
    MigrationResult,
    MigrationStatus,
    RecordState,
)
from .backup import BackupManager, BackupMetadata, BackupRecord, BackupSnapshot
from .integrity import extract_words, preservation_ratio, verify
from .report import generate_report
from .pipeline import MigrationPipeline

__all__ = [
    'ContentRecord',
    'IntegrityReport',
    'MigrationBatchOutcome',
    'MigrationConfig',
    'MigrationProgressCallback',
    'MigrationResult',
    'MigrationStatus',
    'RecordState',
    'BackupManager',
    'BackupMetadata',
    'BackupRecord',
    'BackupSnapshot',
    'extract_words',
    'preservation_ratio',
    'verify',
    'generate_report',
    'MigrationPipeline',
]
