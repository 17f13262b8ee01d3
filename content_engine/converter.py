#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Format Converter - normalizes any supported format to canonical markup.

Each format-specific branch returns either a ConversionOutcome or a
ConversionDiagnostic. The escaped single-paragraph fallback runs only
for a diagnostic, so a non-empty input always yields non-empty markup
and every {{identifier}} placeholder survives unchanged.

Usage:
    from content_engine.converter import FormatConverter

    converter = FormatConverter(classifier, validator)
    result = converter.to_canonical("# Hi {{name}}\\n\\n- one\\n- two")
    print(result.html, result.format)
"""

from dataclasses import dataclass
from html import escape
from typing import Optional, Tuple, Union

from config.logging_config import get_logger
from .classifier import FormatClassifier
from .markup import RichMarkupConverter, placeholder_counts
from .shared import (
    CompatibilityReport,
    ContentFormat,
    ContentFormatMetadata,
    ConversionResult,
    SanitizationOptions,
)
from .validator import ContentValidator

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConversionOutcome:
    """Successful branch output"""
    html: str


@dataclass(frozen=True)
class ConversionDiagnostic:
    """Why a branch could not produce acceptable output"""
    reason: str


BranchResult = Union[ConversionOutcome, ConversionDiagnostic]


def escape_fallback(content: str) -> str:
    """Escape angle brackets and wrap the raw content in one paragraph."""
    return f"<p>{content.replace('<', '&lt;').replace('>', '&gt;')}</p>"


class FormatConverter:
    """
    Converts content to the canonical storage markup.

    Attributes:
        classifier: Detects the input format when none is declared.
        validator: Validates converted output.
        markup: Rich-markup converter used by the html and markdown branches.
    """

    def __init__(
        self,
        classifier: Optional[FormatClassifier] = None,
        validator: Optional[ContentValidator] = None,
        markup: Optional[RichMarkupConverter] = None,
    ):
        self.markup = markup or RichMarkupConverter()
        self.classifier = classifier or FormatClassifier(markup=self.markup)
        self.validator = validator or ContentValidator(self.classifier, self.markup)

    def to_canonical(
        self,
        content,
        known_format: Optional[Union[ContentFormat, str]] = None,
        options: Optional[SanitizationOptions] = None,
    ) -> ConversionResult:
        """
        Normalize content to canonical markup.

        Args:
            content: Raw content in any format.
            known_format: Declared input format; classified when omitted.
            options: Sanitization options for the attached validation.

        Returns:
            ConversionResult whose format is the detected INPUT format.
        """
        if not isinstance(content, str) or not content:
            return ConversionResult(html="", format=ContentFormat.UNKNOWN)

        try:
            if known_format is None:
                fmt = self.classifier.classify(content).format
            else:
                fmt = ContentFormat.parse(known_format)

            outcome = self._convert(content, fmt)
            if isinstance(outcome, ConversionDiagnostic):
                logger.warning(f"Conversion from {fmt.value} fell back to escaped text: {outcome.reason}")
                html = escape_fallback(content)
            else:
                html = outcome.html

            logger.debug(f"Converted {len(content)} chars from {fmt.value} to {len(html)} chars of markup")
            return ConversionResult(
                html=html,
                format=fmt,
                validation_result=self.validator.validate_markup(html, options),
            )

        except Exception:
            logger.exception("Fatal error converting content to canonical markup")
            return ConversionResult(html=escape_fallback(content), format=ContentFormat.UNKNOWN)

    def _convert(self, content: str, fmt: ContentFormat) -> BranchResult:
        if fmt == ContentFormat.HTML:
            result = self._from_html(content)
        elif fmt == ContentFormat.MARKDOWN:
            result = self._from_markdown(content)
        else:
            result = self._from_text(content)

        if isinstance(result, ConversionDiagnostic):
            return result
        if not result.html.strip():
            return ConversionDiagnostic("branch produced empty output")
        if placeholder_counts(result.html) != placeholder_counts(content):
            return ConversionDiagnostic("placeholders were not preserved")
        return result

    def _from_html(self, content: str) -> BranchResult:
        # Already canonical: sanitize only, never re-wrap
        return ConversionOutcome(self.markup.sanitize(content))

    def _from_markdown(self, content: str) -> BranchResult:
        # to_markup keeps raw inline tags verbatim, so its output goes
        # through the same allow-list as html input
        try:
            return ConversionOutcome(self.markup.sanitize(self.markup.to_markup(content)))
        except Exception as e:
            return ConversionDiagnostic(f"lightweight markup conversion failed: {e}")

    @staticmethod
    def _from_text(content: str) -> BranchResult:
        # One paragraph per non-blank line; the text is escaped so
        # tag-like fragments stay literal text
        lines = [escape(line.rstrip('\r'), quote=False) for line in content.split('\n') if line.strip()]
        return ConversionOutcome("".join(f"<p>{line}</p>" for line in lines))

    # ------------------------------------------------------------------
    # Storage helpers
    # ------------------------------------------------------------------

    def analyze_for_storage(self, content) -> ContentFormatMetadata:
        """Describe what storing this content would involve."""
        try:
            detection = self.classifier.classify(content)
            validation = self.validator.validate_for_storage(content)
            notes = []

            if detection.format != ContentFormat.HTML:
                notes.append(f"Converting from {detection.format.value} to HTML for storage")
            if not validation.is_valid:
                notes.append(f"Content has validation issues: {', '.join(validation.errors)}")
            if validation.warnings:
                notes.append(f"Content warnings: {', '.join(validation.warnings)}")

            return ContentFormatMetadata(
                original_format=detection.format,
                conversion_notes=notes,
                requires_migration=detection.format != ContentFormat.HTML or not validation.is_valid,
                validation_result=validation,
            )
        except Exception:
            logger.exception("Error analyzing content for storage")
            return ContentFormatMetadata(
                original_format=ContentFormat.UNKNOWN,
                conversion_notes=["Analysis failed, using fallback"],
                requires_migration=True,
            )

    def process_for_storage(self, content) -> Tuple[str, ContentFormatMetadata, bool]:
        """
        Analyze, convert and re-validate content for persistence.

        Returns:
            (processed_content, metadata, is_valid)
        """
        try:
            metadata = self.analyze_for_storage(content)
            conversion = self.to_canonical(
                content,
                metadata.original_format,
                SanitizationOptions(),
            )
            final_validation = self.validator.validate_for_storage(conversion.html)
            metadata.validation_result = final_validation
            return conversion.html, metadata, final_validation.is_valid
        except Exception:
            logger.exception("Error processing content for storage")
            metadata = ContentFormatMetadata(
                original_format=ContentFormat.UNKNOWN,
                conversion_notes=["Processing failed, used fallback"],
                requires_migration=True,
            )
            return escape_fallback(str(content)), metadata, False

    def check_compatibility(self, content, expected_format: Union[ContentFormat, str]) -> CompatibilityReport:
        """Check whether content is already in the format a caller expects."""
        try:
            expected = ContentFormat.parse(expected_format)
            detection = self.classifier.classify(content)
            issues = list(detection.issues)

            if detection.format == expected:
                return CompatibilityReport(
                    is_compatible=True,
                    issues=issues,
                    recommendation="Content format matches expected format",
                    validation_result=detection.validation_result,
                )

            if expected == ContentFormat.HTML:
                issues.append("Content is not in HTML format")
                return CompatibilityReport(
                    is_compatible=False,
                    issues=issues,
                    recommendation="Convert content to HTML format using to_canonical()",
                    validation_result=detection.validation_result,
                )

            return CompatibilityReport(
                is_compatible=detection.confidence > 0.5,
                issues=issues,
                recommendation=(
                    f"Content detected as {detection.format.value} "
                    f"(confidence: {detection.confidence})"
                ),
                validation_result=detection.validation_result,
            )
        except Exception:
            logger.exception("Error checking content compatibility")
            return CompatibilityReport(
                is_compatible=False,
                issues=["Validation process encountered an error"],
                recommendation="Content could not be validated",
            )
