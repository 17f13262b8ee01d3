#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Format Classifier - confidence-scored content format detection

Detects:
- html (genuine markup using common structural/inline tags)
- markdown (two or more lightweight-markup pattern categories)
- plain-text (everything else, with advisory issues)

Classification is pure, so results are memoized by exact input string
in the cache injected by the engine.
"""

import re
from typing import List, Optional, Tuple

from config.constants import (
    CLASSIFIER_ANGLE_CONFIDENCE,
    CLASSIFIER_HTML_CONFIDENCE,
    CLASSIFIER_HTML_HEAVY_CONFIDENCE,
    CLASSIFIER_MARKDOWN_CONFIDENCE,
    CLASSIFIER_MARKDOWN_MIN_MATCHES,
    CLASSIFIER_MARKUP_TEXT_RATIO,
    CLASSIFIER_MIN_LENGTH,
    CLASSIFIER_PLAIN_CONFIDENCE,
    MARKUP_DETECTION_TAGS,
)
from config.logging_config import get_logger
from .cache import CacheInterface, ClassificationCache
from .markup import RichMarkupConverter, has_placeholders
from .shared import (
    ContentFormat,
    FormatDetection,
    Severity,
    ValidationResult,
    higher_severity,
)

logger = get_logger(__name__)

# Opening, closing or self-closing tag with a real element name
TAG_PATTERN = re.compile(r'<\s*/?\s*([A-Za-z][A-Za-z0-9]*)\b[^<>]*?/?\s*>')

CONTROL_CHAR_PATTERN = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')

# Lightweight-markup pattern categories; each category counts once
MARKDOWN_PATTERNS = {
    'heading': [re.compile(r'^#{1,6}\s+\S', re.MULTILINE)],
    'list': [re.compile(r'^\s*(?:[-*+]|\d+\.)\s+\S', re.MULTILINE)],
    'emphasis': [
        re.compile(r'\*\*[^*\n]+\*\*'),
        re.compile(r'(?<![*\w])\*[^*\s][^*\n]*\*(?!\*)'),
        re.compile(r'__[^_\n]+__'),
    ],
    'code': [
        re.compile(r'^\s*```', re.MULTILINE),
        re.compile(r'`[^`\n]+`'),
    ],
    'link': [re.compile(r'\[[^\]\n]+\]\([^)\s]+\)')],
}

ISSUE_EMPTY = "Empty content"
ISSUE_TOO_SHORT = "Content is too short"
ISSUE_CONTROL_CHARS = "Content contains invalid control characters"
ISSUE_MARKUP_HEAVY = "HTML content may have too much markup"
ISSUE_ANGLE_BRACKETS = "Contains angle brackets but not valid HTML-like markup"
ISSUE_PLAIN_ADVISORY = "Consider using markdown for better formatting"
ISSUE_DETECTION_FAILED = "Content format detection failed"


class FormatClassifier:
    """
    Classifies free-form content into a ContentFormat with a confidence score.

    Attributes:
        cache: Memoization cache keyed by the exact content string.
        markup: Converter used to extract text when measuring markup density.
    """

    def __init__(
        self,
        cache: Optional[CacheInterface] = None,
        markup: Optional[RichMarkupConverter] = None,
    ):
        self.cache = cache if cache is not None else ClassificationCache()
        self.markup = markup or RichMarkupConverter()

    def classify(self, content) -> FormatDetection:
        """
        Classify content.

        Args:
            content: Any value; non-strings and blank strings are 'unknown'.

        Returns:
            FormatDetection. Never raises. Cached detections are shared
            objects and must be treated as read-only.
        """
        if not isinstance(content, str) or not content.strip():
            return FormatDetection(
                format=ContentFormat.UNKNOWN,
                confidence=0.0,
                issues=[ISSUE_EMPTY],
                validation_result=ValidationResult(
                    is_valid=False, errors=[ISSUE_EMPTY], severity=Severity.HIGH
                ),
            )

        try:
            return self.cache.get_or_detect(content, self._detect)
        except Exception:
            logger.exception("Content format detection failed")
            return FormatDetection(
                format=ContentFormat.UNKNOWN,
                confidence=0.0,
                issues=[ISSUE_DETECTION_FAILED],
                validation_result=ValidationResult(
                    is_valid=False, errors=[ISSUE_DETECTION_FAILED], severity=Severity.CRITICAL
                ),
            )

    def is_markup(self, content) -> bool:
        """
        True if content holds at least one genuine tag from the detection allow-list.

        Bare angle brackets ("2.3 < 3.0", "<user@example.com>") are not markup.
        """
        if not isinstance(content, str) or '<' not in content:
            return False
        names = {m.group(1).lower() for m in TAG_PATTERN.finditer(content)}
        return any(name in MARKUP_DETECTION_TAGS for name in names)

    def markdown_matches(self, content: str) -> List[str]:
        """Names of the lightweight-markup pattern categories found in content."""
        return [
            category
            for category, patterns in MARKDOWN_PATTERNS.items()
            if any(p.search(content) for p in patterns)
        ]

    def _detect(self, content: str) -> FormatDetection:
        trimmed = content.strip()
        issues: List[str] = []
        validation = ValidationResult(is_valid=True)

        for message, severity in self._structural_issues(trimmed):
            issues.append(message)
            validation.errors.append(message)
            validation.severity = higher_severity(validation.severity, severity)
        validation.is_valid = not validation.errors

        if self.is_markup(trimmed):
            fmt = ContentFormat.HTML
            text_length = len(self.markup.to_text(trimmed).strip())
            if text_length < len(trimmed) * CLASSIFIER_MARKUP_TEXT_RATIO:
                issues.append(ISSUE_MARKUP_HEAVY)
                validation.warnings.append(ISSUE_MARKUP_HEAVY)
                confidence = CLASSIFIER_HTML_HEAVY_CONFIDENCE
            else:
                confidence = CLASSIFIER_HTML_CONFIDENCE

        elif len(self.markdown_matches(trimmed)) >= CLASSIFIER_MARKDOWN_MIN_MATCHES:
            fmt = ContentFormat.MARKDOWN
            confidence = CLASSIFIER_MARKDOWN_CONFIDENCE

        elif '<' in trimmed or '>' in trimmed:
            fmt = ContentFormat.PLAIN_TEXT
            confidence = CLASSIFIER_ANGLE_CONFIDENCE
            issues.append(ISSUE_ANGLE_BRACKETS)

        else:
            fmt = ContentFormat.PLAIN_TEXT
            confidence = CLASSIFIER_PLAIN_CONFIDENCE
            # Templates are fine as plain text
            if not has_placeholders(trimmed):
                issues.append(ISSUE_PLAIN_ADVISORY)

        validation.detected_format = fmt
        logger.debug(f"Classified {len(content)} chars as {fmt.value} (confidence {confidence:.2f})")
        return FormatDetection(
            format=fmt,
            confidence=confidence,
            issues=issues,
            validation_result=validation,
        )

    @staticmethod
    def _structural_issues(content: str) -> List[Tuple[str, Severity]]:
        found = []
        if len(content) < CLASSIFIER_MIN_LENGTH:
            found.append((ISSUE_TOO_SHORT, Severity.MEDIUM))
        if CONTROL_CHAR_PATTERN.search(content):
            found.append((ISSUE_CONTROL_CHARS, Severity.HIGH))
        return found
