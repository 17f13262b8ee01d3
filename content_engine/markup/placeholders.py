"""
Template Placeholder Module

Finds, counts and shields {{identifier}} template variables so that no
transformation can rewrite them.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List

# Anything that looks like a placeholder (valid or not)
PLACEHOLDER_PATTERN = re.compile(r'\{\{[^}]+\}\}')

# A placeholder whose identifier is well-formed
VALID_PLACEHOLDER_PATTERN = re.compile(r'^\{\{[A-Za-z_][A-Za-z0-9_]*\}\}$')

# Mask token delimiters
TOKEN_OPEN = "⟪"
TOKEN_CLOSE = "⟫"


def find_placeholders(text: str) -> List[str]:
    """All placeholder-like tokens in order of appearance."""
    if not text:
        return []
    return PLACEHOLDER_PATTERN.findall(text)


def count_placeholders(text: str) -> int:
    return len(find_placeholders(text))


def placeholder_counts(text: str) -> Counter:
    """Multiset of placeholder tokens."""
    return Counter(find_placeholders(text))


def is_valid_placeholder(token: str) -> bool:
    return bool(VALID_PLACEHOLDER_PATTERN.match(token))


def has_placeholders(text: str) -> bool:
    return bool(text) and PLACEHOLDER_PATTERN.search(text) is not None


def unused_token_prefix(text: str, base: str) -> str:
    """
    Opening of a mask token ("⟪VAR_") that does not occur anywhere in text.

    Every token built from it starts with the prefix, so masked tokens can
    never collide with text the caller supplied.
    """
    salt = 0
    prefix = f"{TOKEN_OPEN}{base}_"
    while prefix in text:
        salt += 1
        prefix = f"{TOKEN_OPEN}{base}{salt}_"
    return prefix


@dataclass
class MaskedText:
    """Text with placeholders swapped for opaque tokens"""
    text: str
    mapping: Dict[str, str] = field(default_factory=dict)

    def restore(self, text: str) -> str:
        """Put the original placeholders back into (transformed) text."""
        for token, original in self.mapping.items():
            text = text.replace(token, original)
        return text


class PlaceholderShield:
    """
    Masks placeholders before inline rewriting and restores them after.

    Token format: ⟪VAR_n⟫ (unicode brackets avoid clashes with markup
    and with the emphasis markers the inline rules look for). If the text
    already contains that prefix, a numbered variant (⟪VAR1_n⟫, ...) is
    used so a literal token in the input is never mistaken for a mask.
    """

    TOKEN_BASE = "VAR"

    def mask(self, text: str) -> MaskedText:
        mapping: Dict[str, str] = {}
        prefix = unused_token_prefix(text, self.TOKEN_BASE)

        def _swap(match: re.Match) -> str:
            token = f"{prefix}{len(mapping)}{TOKEN_CLOSE}"
            mapping[token] = match.group(0)
            return token

        masked = PLACEHOLDER_PATTERN.sub(_swap, text)
        return MaskedText(text=masked, mapping=mapping)
