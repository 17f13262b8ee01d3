#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
RichMarkupConverter - Bidirectional markup <-> lightweight-markup conversion.

This module provides:
- to_markup: lightweight markup (``#`` headings, ``-``/``1.`` lists,
  ``**``/``*``/``__`` emphasis, backtick code, ``>`` quotes) to the
  canonical HTML-like dialect
- to_lightweight: canonical markup back to lightweight markup
- sanitize: allow-list sanitization (disallowed elements removed with
  their subtree, event-handler attributes stripped)
- to_text: plain text extraction

Usage:
    from content_engine.markup import RichMarkupConverter

    converter = RichMarkupConverter()
    html = converter.to_markup("# Title\\n\\nHello **{{name}}**")
    text = converter.to_lightweight(html)

Placeholders ({{identifier}}) are masked before any inline rewriting,
so they always come out byte-identical.
"""

import re
from html import escape
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from config.constants import ALLOWED_TAGS
from config.logging_config import get_logger
from .placeholders import TOKEN_CLOSE, PlaceholderShield, unused_token_prefix

logger = get_logger(__name__)

HEADING_RE = re.compile(r'^(#{1,6})\s+(.*)$')
BULLET_RE = re.compile(r'^[-*+]\s+(.*)$')
NUMBERED_RE = re.compile(r'^\d+\.\s+(.*)$')
QUOTE_RE = re.compile(r'^>\s?(.*)$')

INLINE_CODE_RE = re.compile(r'`([^`\n]+)`')
BOLD_RE = re.compile(r'\*\*([^*\n]+)\*\*')
ITALIC_RE = re.compile(r'(?<!\*)\*([^*\n]+)\*(?!\*)')
UNDERLINE_RE = re.compile(r'__([^_\n]+)__')

HEADING_LEVELS = {f'h{i}': i for i in range(1, 7)}

# Attribute values that execute script when rendered
EXECUTABLE_VALUE_RE = re.compile(r'^\s*(?:javascript|vbscript):|^\s*data:text/html', re.IGNORECASE)


class RichMarkupConverter:
    """
    Converts between the canonical markup dialect and lightweight markup.

    Attributes:
        allowed_tags: Elements kept by sanitize(); everything else is
            removed together with its children.
    """

    def __init__(self, allowed_tags: Optional[Iterable[str]] = None):
        self.allowed_tags = frozenset(t.lower() for t in (allowed_tags or ALLOWED_TAGS))
        self._shield = PlaceholderShield()

    # ------------------------------------------------------------------
    # Sanitization
    # ------------------------------------------------------------------

    def sanitize(self, markup: str) -> str:
        """
        Remove disallowed elements (with their subtree), comments and
        event-handler attributes.

        Returns:
            Sanitized markup, or "" if the input could not be processed.
        """
        if not markup or not isinstance(markup, str):
            return ""

        try:
            soup = BeautifulSoup(markup, "html.parser")
            self._clean(soup)
            return str(soup)
        except Exception as e:
            logger.error(f"Error sanitizing markup: {e}")
            return ""

    def _clean(self, node: Tag) -> None:
        for child in list(node.children):
            if isinstance(child, Comment):
                child.extract()
            elif isinstance(child, Tag):
                if child.name.lower() not in self.allowed_tags:
                    child.decompose()
                    continue
                for attr in list(child.attrs):
                    if self._is_event_handler(attr, child.attrs[attr]):
                        del child.attrs[attr]
                self._clean(child)

    @staticmethod
    def _is_event_handler(name: str, value) -> bool:
        if name.lower().startswith('on'):
            return True
        if isinstance(value, list):
            value = " ".join(value)
        return bool(EXECUTABLE_VALUE_RE.search(str(value)))

    # ------------------------------------------------------------------
    # Lightweight markup -> markup
    # ------------------------------------------------------------------

    def to_markup(self, text: str) -> str:
        """
        Convert lightweight markup to canonical markup in one line-oriented pass.

        - ``#`` .. ``######`` headings become h1..h6
        - ``-``/``*``/``+`` and ``1.`` items become li inside ul/ol
        - fenced blocks become pre/code; consecutive ``>`` lines become one
          blockquote with a br between lines
        - blank lines become empty paragraphs (they are meaningful spacing)
        - any other line becomes a paragraph with its text kept verbatim
        """
        if not text or not isinstance(text, str) or not text.strip():
            return ""

        lines = text.replace('\r\n', '\n').split('\n')
        out: List[str] = []
        list_type: Optional[str] = None
        list_items: List[str] = []

        def close_block():
            nonlocal list_type, list_items
            if list_type == 'blockquote':
                # Consecutive quote lines form one quote
                quoted = "<br>".join(self._inline(item) for item in list_items)
                out.append(f"<blockquote>{quoted}</blockquote>")
            elif list_type and list_items:
                items = "".join(f"<li>{self._inline(item)}</li>" for item in list_items)
                out.append(f"<{list_type}>{items}</{list_type}>")
            list_type, list_items = None, []

        i = 0
        while i < len(lines):
            line = lines[i]
            stripped = line.strip()

            if stripped.startswith('```'):
                close_block()
                code_lines = []
                i += 1
                while i < len(lines) and not lines[i].strip().startswith('```'):
                    code_lines.append(lines[i])
                    i += 1
                code = escape("\n".join(code_lines).strip(), quote=False)
                out.append(f"<pre><code>{code}</code></pre>")
                i += 1  # closing fence
                continue

            heading = HEADING_RE.match(stripped)
            if heading:
                close_block()
                level = len(heading.group(1))
                out.append(f"<h{level}>{self._inline(heading.group(2))}</h{level}>")
            elif QUOTE_RE.match(stripped):
                if list_type != 'blockquote':
                    close_block()
                    list_type = 'blockquote'
                list_items.append(QUOTE_RE.match(stripped).group(1))
            elif BULLET_RE.match(stripped):
                if list_type != 'ul':
                    close_block()
                    list_type = 'ul'
                list_items.append(BULLET_RE.match(stripped).group(1))
            elif NUMBERED_RE.match(stripped):
                if list_type != 'ol':
                    close_block()
                    list_type = 'ol'
                list_items.append(NUMBERED_RE.match(stripped).group(1))
            elif not stripped:
                close_block()
                out.append("<p></p>")
            else:
                close_block()
                out.append(f"<p>{self._inline(line)}</p>")
            i += 1

        close_block()
        return "".join(out)

    def _inline(self, text: str) -> str:
        """Apply code, bold, italic and underline rules with placeholders masked."""
        masked = self._shield.mask(text)
        code_spans = {}
        prefix = unused_token_prefix(masked.text, "CODE")

        def _stash_code(match: re.Match) -> str:
            token = f"{prefix}{len(code_spans)}{TOKEN_CLOSE}"
            code_spans[token] = f"<code>{escape(match.group(1), quote=False)}</code>"
            return token

        result = INLINE_CODE_RE.sub(_stash_code, masked.text)
        result = BOLD_RE.sub(r'<strong>\1</strong>', result)
        result = ITALIC_RE.sub(r'<em>\1</em>', result)
        result = UNDERLINE_RE.sub(r'<u>\1</u>', result)
        for token, html in code_spans.items():
            result = result.replace(token, html)
        return masked.restore(result)

    # ------------------------------------------------------------------
    # Markup -> lightweight markup
    # ------------------------------------------------------------------

    def to_lightweight(self, markup: str) -> str:
        """
        Convert canonical markup to lightweight markup.

        The markup is sanitized first, then walked recursively: children
        are rendered before the element's own syntax is applied.

        Example:
            >>> RichMarkupConverter().to_lightweight('<h1>Title</h1><p>Some <strong>bold</strong></p>')
            '# Title\\n\\nSome **bold**'
        """
        if not markup or not isinstance(markup, str):
            return ""

        try:
            soup = BeautifulSoup(self.sanitize(markup), "html.parser")
            text = self._render_children(soup)
        except Exception as e:
            logger.error(f"Error converting markup to lightweight markup: {e}")
            return markup

        # Clean up extra whitespace and normalize newlines
        text = re.sub(r'\n(?:[ \t]*\n){2,}', '\n\n', text)
        text = re.sub(r'[ \t]+', ' ', text)
        text = text.strip()
        text = re.sub(r'\n[ \t]+', '\n', text)
        return text

    def _render_children(self, node: Tag) -> str:
        return "".join(self._render(child) for child in node.children)

    def _render(self, node) -> str:
        if isinstance(node, Comment):
            return ""
        if isinstance(node, NavigableString):
            return str(node)
        if not isinstance(node, Tag):
            return ""

        name = node.name.lower()

        if name == 'p':
            return self._render_children(node) + "\n\n"
        if name in ('strong', 'b'):
            return f"**{self._render_children(node)}**"
        if name in ('em', 'i'):
            return f"*{self._render_children(node)}*"
        if name == 'u':
            return f"__{self._render_children(node)}__"
        if name in HEADING_LEVELS:
            return f"{'#' * HEADING_LEVELS[name]} {self._render_children(node)}\n\n"
        if name in ('ul', 'ol'):
            items = node.find_all('li', recursive=False)
            if name == 'ul':
                lines = [f"- {self._render_children(li).strip()}" for li in items]
            else:
                lines = [f"{n}. {self._render_children(li).strip()}" for n, li in enumerate(items, start=1)]
            return "\n".join(lines) + "\n\n"
        if name == 'code':
            if node.parent is not None and node.parent.name == 'pre':
                return node.get_text()
            return f"`{self._render_children(node)}`"
        if name == 'pre':
            return f"```\n{node.get_text()}\n```\n\n"
        if name == 'blockquote':
            inner = self._render_children(node).strip('\n')
            return "> " + inner.replace('\n', '\n> ') + "\n\n"
        if name == 'br':
            return "\n"

        # div, span, li and anything else: pass through to children
        return self._render_children(node)

    # ------------------------------------------------------------------
    # Markup -> text
    # ------------------------------------------------------------------

    def to_text(self, markup: str) -> str:
        """Text content of markup with all tags removed."""
        if not markup or not isinstance(markup, str):
            return ""
        try:
            return BeautifulSoup(markup, "html.parser").get_text()
        except Exception as e:
            logger.error(f"Error extracting text from markup: {e}")
            return markup


def markup_to_lightweight(markup: str) -> str:
    """Convenience function for one-off conversions"""
    return RichMarkupConverter().to_lightweight(markup)


def lightweight_to_markup(text: str) -> str:
    """Convenience function for one-off conversions"""
    return RichMarkupConverter().to_markup(text)
