#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
ContentValidator - layered content validation with security checks.

This module provides:
- validate_markup: security / structure / placeholder checks shared by
  both entry points
- validate_for_edit: cheap checks for interactive editor feedback
- validate_for_storage: strict checks before content is persisted
- recover_problematic_content / get_validation_messages: helpers for
  callers that render validation feedback

Usage:
    from content_engine.validator import ContentValidator

    validator = ContentValidator(classifier)
    result = validator.validate_for_storage('<p>Hello {{name}}</p>')
    if not result.is_valid:
        print(validator.get_validation_messages(result))

Every entry point is exception-safe: an internal failure yields
is_valid=False with a single error and critical severity.
"""

import re
from typing import List, Optional, Union

from config.constants import (
    EDIT_MAX_CONSECUTIVE_BLANK_LINES,
    EDIT_MIN_LENGTH,
    EDIT_MISMATCH_CONFIDENCE,
    EDIT_SOFT_MAX_LENGTH,
    MARKUP_MIN_TEXT_LENGTH,
    PLACEHOLDER_SOFT_LIMIT,
    SELF_CLOSING_TAGS,
    STORAGE_DIVERSITY_MIN_WORDS,
    STORAGE_MAX_LENGTH,
    STORAGE_MIN_CONFIDENCE,
    STORAGE_MIN_LENGTH,
    STORAGE_MIN_WORD_DIVERSITY,
)
from config.logging_config import get_logger
from .classifier import CONTROL_CHAR_PATTERN, FormatClassifier
from .markup import RichMarkupConverter, find_placeholders, is_valid_placeholder
from .shared import (
    ContentFormat,
    SanitizationOptions,
    Severity,
    ValidationResult,
    higher_severity,
)

logger = get_logger(__name__)

# Deny-list of executable constructs: (name, pattern)
DANGEROUS_PATTERNS = [
    ('javascript: protocol', re.compile(r'javascript\s*:', re.IGNORECASE)),
    ('vbscript: protocol', re.compile(r'vbscript\s*:', re.IGNORECASE)),
    # Only inside a tag, so prose like "condition=" is not flagged
    ('inline event handler', re.compile(r'<[^>]*\son[a-z]+\s*=', re.IGNORECASE)),
    ('script element', re.compile(r'<\s*script\b', re.IGNORECASE)),
    ('iframe element', re.compile(r'<\s*iframe\b', re.IGNORECASE)),
    ('object element', re.compile(r'<\s*object\b', re.IGNORECASE)),
    ('embed element', re.compile(r'<\s*embed\b', re.IGNORECASE)),
    ('executable data URI', re.compile(
        r'data:\s*(?:text/html|text/javascript|application/(?:x-)?javascript|image/svg\+xml)',
        re.IGNORECASE,
    )),
]

ANY_TAG_PATTERN = re.compile(r'<[^>]+>')
STRIP_TAG_PATTERN = re.compile(r'<[^>]*>')
OPEN_TAG_PATTERN = re.compile(r'<([a-zA-Z][a-zA-Z0-9]*)[^>]*?(/?)>')
CLOSE_TAG_PATTERN = re.compile(r'</([a-zA-Z][a-zA-Z0-9]*)\s*>')
COMMENT_PATTERN = re.compile(r'<!--[\s\S]*?-->')
EMPTY_ELEMENT_PATTERN = re.compile(r'<[^>]*>\s*</[^>]*>')


class ContentValidator:
    """
    Editor-time and storage-time content validation.

    Attributes:
        classifier: Used for format/confidence checks.
        markup: Used to build sanitized variants of flagged content.
    """

    def __init__(
        self,
        classifier: Optional[FormatClassifier] = None,
        markup: Optional[RichMarkupConverter] = None,
    ):
        self.markup = markup or RichMarkupConverter()
        self.classifier = classifier or FormatClassifier(markup=self.markup)

    # ------------------------------------------------------------------
    # Markup security / structure
    # ------------------------------------------------------------------

    def validate_markup(self, content, options: Optional[SanitizationOptions] = None) -> ValidationResult:
        """
        Security, structure and placeholder validation.

        - Any deny-list match is a critical error
        - Unbalanced tags are a medium warning (inert markup must not block saving)
        - Invalid placeholder syntax is a high error; too many placeholders
          is a low advisory warning
        """
        if not isinstance(content, str):
            return ValidationResult(
                is_valid=False,
                errors=["Content must be a non-empty string"],
                severity=Severity.CRITICAL,
            )

        try:
            errors: List[str] = []
            warnings: List[str] = []
            severity = Severity.LOW

            if not content.strip():
                errors.append("Content cannot be empty")
                severity = higher_severity(severity, Severity.HIGH)

            for name in self.find_dangerous_constructs(content):
                errors.append(f"Content contains potentially dangerous elements: {name}")
                severity = Severity.CRITICAL

            tag_count = len(ANY_TAG_PATTERN.findall(content))
            if tag_count and not self._tags_balanced(content):
                warnings.append("HTML tags may not be properly balanced")
                severity = higher_severity(severity, Severity.MEDIUM)

            text_only = STRIP_TAG_PATTERN.sub('', content)
            if tag_count and len(text_only.strip()) < MARKUP_MIN_TEXT_LENGTH:
                warnings.append("Content has extensive markup but little actual text")

            placeholders = find_placeholders(content)
            if len(placeholders) > PLACEHOLDER_SOFT_LIMIT:
                warnings.append(
                    f"High number of variables ({len(placeholders)}). Consider reducing complexity."
                )
            for token in placeholders:
                if not is_valid_placeholder(token):
                    errors.append(f"Invalid variable syntax: {token}")
                    severity = higher_severity(severity, Severity.HIGH)

            sanitized = None
            if errors or warnings:
                sanitized = self._sanitize_for_validation(content, options)

            return ValidationResult(
                is_valid=not errors,
                errors=errors,
                warnings=warnings,
                sanitized_content=sanitized,
                severity=severity,
            )

        except Exception:
            logger.exception("Error validating markup content")
            return self._failure("Validation process encountered an error")

    @staticmethod
    def find_dangerous_constructs(content: str) -> List[str]:
        """Names of every deny-list construct present in content."""
        return [name for name, pattern in DANGEROUS_PATTERNS if pattern.search(content)]

    @staticmethod
    def _tags_balanced(content: str) -> bool:
        content = COMMENT_PATTERN.sub('', content)
        opened = [
            m.group(1).lower()
            for m in OPEN_TAG_PATTERN.finditer(content)
            if m.group(1).lower() not in SELF_CLOSING_TAGS and not m.group(2)
        ]
        closed = [
            m.group(1).lower()
            for m in CLOSE_TAG_PATTERN.finditer(content)
            if m.group(1).lower() not in SELF_CLOSING_TAGS
        ]
        return len(opened) == len(closed)

    def _sanitize_for_validation(self, content: str, options: Optional[SanitizationOptions]) -> str:
        options = options or SanitizationOptions()
        try:
            sanitized = self.markup.sanitize(content)
            if options.remove_comments:
                sanitized = COMMENT_PATTERN.sub('', sanitized)
            if options.remove_empty_elements:
                sanitized = EMPTY_ELEMENT_PATTERN.sub('', sanitized)
            if options.normalize_whitespace:
                sanitized = re.sub(r'\s+', ' ', sanitized).strip()
            return sanitized
        except Exception as e:
            logger.error(f"Error sanitizing content for validation: {e}")
            return content

    # ------------------------------------------------------------------
    # Editor-time validation
    # ------------------------------------------------------------------

    def validate_for_edit(self, content, declared_format: Union[ContentFormat, str]) -> ValidationResult:
        """
        Cheap checks suited to interactive feedback.

        Args:
            content: Content being edited.
            declared_format: Format the editor believes the content is in.
        """
        if not isinstance(content, str) or not content:
            return ValidationResult(
                is_valid=False,
                errors=["Content must be a non-empty string"],
                severity=Severity.CRITICAL,
            )

        try:
            declared = ContentFormat.parse(declared_format)
            errors: List[str] = []
            warnings: List[str] = []
            severity = Severity.LOW

            detection = self.classifier.classify(content)
            if detection.format != declared and detection.confidence > EDIT_MISMATCH_CONFIDENCE:
                warnings.append(
                    f"Content appears to be {detection.format.value} but expected {declared.value}"
                )

            if len(content) > EDIT_SOFT_MAX_LENGTH:
                warnings.append("Content is very long and may impact performance")
                severity = higher_severity(severity, Severity.MEDIUM)

            if len(content) < EDIT_MIN_LENGTH:
                errors.append("Content is too short")
                severity = higher_severity(severity, Severity.HIGH)

            if CONTROL_CHAR_PATTERN.search(content):
                errors.append("Content contains invalid control characters")
                severity = higher_severity(severity, Severity.HIGH)

            if declared == ContentFormat.MARKDOWN:
                if self._max_blank_run(content) > EDIT_MAX_CONSECUTIVE_BLANK_LINES:
                    warnings.append("Excessive empty lines detected")

            if declared == ContentFormat.HTML:
                markup_result = self.validate_markup(content)
                errors.extend(markup_result.errors)
                warnings.extend(markup_result.warnings)
                severity = higher_severity(severity, markup_result.severity)

            return ValidationResult(
                is_valid=not errors,
                errors=errors,
                warnings=warnings,
                detected_format=detection.format,
                severity=severity,
            )

        except Exception:
            logger.exception("Error validating content for editor")
            return self._failure("Editor validation encountered an error")

    @staticmethod
    def _max_blank_run(content: str) -> int:
        longest = run = 0
        for line in content.split('\n'):
            if line.strip():
                run = 0
            else:
                run += 1
                longest = max(longest, run)
        return longest

    # ------------------------------------------------------------------
    # Storage-time validation
    # ------------------------------------------------------------------

    def validate_for_storage(self, content) -> ValidationResult:
        """
        Strict validation run before content is persisted.

        Includes the full markup security check; only errors block a
        storage write.
        """
        if not isinstance(content, str) or not content:
            return ValidationResult(
                is_valid=False,
                errors=["Invalid content type"],
                severity=Severity.CRITICAL,
            )

        try:
            errors: List[str] = []
            warnings: List[str] = []
            severity = Severity.LOW

            if len(content) > STORAGE_MAX_LENGTH:
                errors.append("Content exceeds maximum allowed size")
                severity = higher_severity(severity, Severity.CRITICAL)

            if len(content) < STORAGE_MIN_LENGTH:
                errors.append("Content is too short to be useful")
                severity = higher_severity(severity, Severity.HIGH)

            markup_result = self.validate_markup(content, SanitizationOptions())
            errors.extend(markup_result.errors)
            warnings.extend(markup_result.warnings)
            severity = higher_severity(severity, markup_result.severity)

            detection = self.classifier.classify(content)
            if detection.confidence < STORAGE_MIN_CONFIDENCE:
                warnings.append("Content format could not be reliably detected")
                severity = higher_severity(severity, Severity.MEDIUM)

            text_content = STRIP_TAG_PATTERN.sub('', content)
            if not text_content.strip():
                errors.append("Content must contain some text")
                severity = higher_severity(severity, Severity.HIGH)

            # Excessive repetition (possible spam/abuse)
            words = text_content.split()
            if len(words) > STORAGE_DIVERSITY_MIN_WORDS:
                unique = {w.lower() for w in words}
                if len(unique) / len(words) < STORAGE_MIN_WORD_DIVERSITY:
                    warnings.append("Content has low word diversity")

            return ValidationResult(
                is_valid=not errors,
                errors=errors,
                warnings=warnings,
                sanitized_content=markup_result.sanitized_content,
                detected_format=detection.format,
                severity=severity,
            )

        except Exception:
            logger.exception("Error validating content for storage")
            return self._failure("Storage validation encountered an error")

    # ------------------------------------------------------------------
    # Caller helpers
    # ------------------------------------------------------------------

    def recover_problematic_content(self, content: str, validation: ValidationResult) -> str:
        """
        Best-effort repair of content that failed validation.

        Uses the sanitized variant when present; critical content is
        reduced to its text inside a single paragraph. Control
        characters are always removed.
        """
        if validation.is_valid:
            return content

        try:
            recovered = validation.sanitized_content or content or ""

            if validation.severity == Severity.CRITICAL:
                recovered = STRIP_TAG_PATTERN.sub('', recovered)
                if not recovered.strip():
                    recovered = "<p>Content could not be processed</p>"
                else:
                    recovered = f"<p>{recovered}</p>"

            return CONTROL_CHAR_PATTERN.sub('', recovered)

        except Exception as e:
            logger.error(f"Error recovering problematic content: {e}")
            return "<p>Content recovery failed</p>"

    @staticmethod
    def get_validation_messages(validation: ValidationResult) -> List[str]:
        """User-facing lines: blocking errors first, then advisory warnings."""
        messages = []
        if validation.errors:
            messages.append("Errors that must be fixed:")
            messages.extend(f"• {error}" for error in validation.errors)
        if validation.warnings:
            messages.append("Warnings that should be reviewed:")
            messages.extend(f"• {warning}" for warning in validation.warnings)
        return messages

    @staticmethod
    def _failure(message: str) -> ValidationResult:
        return ValidationResult(is_valid=False, errors=[message], severity=Severity.CRITICAL)
