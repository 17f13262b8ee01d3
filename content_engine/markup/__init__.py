"""
Markup Module

Exports:
- RichMarkupConverter (markup <-> lightweight markup, sanitize, to_text)
- Placeholder helpers (find/count/validate/shield {{identifier}} tokens)
"""

from .placeholders import (
    PLACEHOLDER_PATTERN,
    VALID_PLACEHOLDER_PATTERN,
    MaskedText,
    PlaceholderShield,
    count_placeholders,
    find_placeholders,
    has_placeholders,
    is_valid_placeholder,
    placeholder_counts,
    unused_token_prefix,
)
from .rich_markup import (
    RichMarkupConverter,
    lightweight_to_markup,
    markup_to_lightweight,
)

__all__ = [
    'RichMarkupConverter',
    'lightweight_to_markup',
    'markup_to_lightweight',
    'PLACEHOLDER_PATTERN',
    'VALID_PLACEHOLDER_PATTERN',
    'MaskedText',
    'PlaceholderShield',
    'count_placeholders',
    'find_placeholders',
    'has_placeholders',
    'is_valid_placeholder',
    'placeholder_counts',
    'unused_token_prefix',
]
