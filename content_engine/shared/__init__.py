"""
Shared types and errors used across the engine.
"""

from .content_types import (
    ContentFormat,
    Severity,
    higher_severity,
    ValidationResult,
    FormatDetection,
    ConversionResult,
    SanitizationOptions,
    ContentFormatMetadata,
    CompatibilityReport,
)
from .errors import ContentEngineError, BackupError

__all__ = [
    'ContentFormat',
    'Severity',
    'higher_severity',
    'ValidationResult',
    'FormatDetection',
    'ConversionResult',
    'SanitizationOptions',
    'ContentFormatMetadata',
    'CompatibilityReport',
    'ContentEngineError',
    'BackupError',
]
