#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Content Types

Shared result types for classification, validation and conversion.
Kept in one module so the classifier, converter and validator can
import them without circular dependencies.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ContentFormat(str, Enum):
    """Textual format of a piece of user content"""
    HTML = "html"
    PLAIN_TEXT = "plain-text"
    MARKDOWN = "markdown"
    MIXED = "mixed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> 'ContentFormat':
        """Lenient lookup; anything unrecognised maps to UNKNOWN."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class Severity(str, Enum):
    """Severity ladder: low < medium < high < critical"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


def higher_severity(current: Severity, new: Severity) -> Severity:
    """Return the more severe of two levels (severity never decreases)."""
    return new if new.rank > current.rank else current


@dataclass
class ValidationResult:
    """
    Outcome of a validation pass.

    Attributes:
        is_valid: False when any error was recorded.
        errors: Blocking problems (must prevent persistence).
        warnings: Advisory problems.
        sanitized_content: Cleaned variant, when one was produced.
        detected_format: Format reported by the classifier, if consulted.
        severity: Highest severity raised during the pass.
    """
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    sanitized_content: Optional[str] = None
    detected_format: Optional[ContentFormat] = None
    severity: Severity = Severity.LOW

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "sanitized_content": self.sanitized_content,
            "detected_format": self.detected_format.value if self.detected_format else None,
            "severity": self.severity.value,
        }


@dataclass
class FormatDetection:
    """Classifier output for one content string"""
    format: ContentFormat
    confidence: float
    issues: List[str] = field(default_factory=list)
    is_sanitized: bool = False
    validation_result: Optional[ValidationResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.format.value,
            "confidence": self.confidence,
            "issues": list(self.issues),
            "is_sanitized": self.is_sanitized,
            "validation_result": self.validation_result.to_dict() if self.validation_result else None,
        }


@dataclass
class ConversionResult:
    """Canonical markup plus the format the input was detected as."""
    html: str
    format: ContentFormat
    validation_result: Optional[ValidationResult] = None


@dataclass
class SanitizationOptions:
    """Extra clean-up applied when the validator builds sanitized_content"""
    remove_comments: bool = True
    remove_empty_elements: bool = True
    normalize_whitespace: bool = True


@dataclass
class ContentFormatMetadata:
    """Storage analysis of a content string"""
    original_format: ContentFormat
    storage_format: ContentFormat = ContentFormat.HTML
    conversion_notes: List[str] = field(default_factory=list)
    requires_migration: bool = False
    validation_result: Optional[ValidationResult] = None


@dataclass
class CompatibilityReport:
    """Whether content matches the format a caller expects"""
    is_compatible: bool
    issues: List[str] = field(default_factory=list)
    recommendation: str = ""
    validation_result: Optional[ValidationResult] = None
