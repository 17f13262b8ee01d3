#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest fixtures for integration tests.

Provides:
- mixed_corpus: content in every supported format, most with placeholders
- hostile_inputs: values the engine must survive without raising
"""

import pytest


@pytest.fixture
def mixed_corpus():
    """Realistic content in every format."""
    return [
        "Dear {{customer_name}}, your order {{order_id}} has shipped.",
        "First line of a note\nSecond line with {{name}}\n\nThird line after a gap",
        "Version 2.3 < 3.0 for {{product}} in every benchmark we ran",
        "<p>This is <strong>HTML</strong> content with {{variable}}.</p>",
        '<p onclick="track()">Hello {{name}}, click below to continue</p><script>alert(1)</script>',
        "<div><p>Nested <em>markup</em> for {{team}}</p><ul><li>one item</li><li>two items</li></ul></div>",
        "# Release Notes for {{version}}\n\n- Faster indexing for large projects\n- Better **ranking** of results",
        "## Setup\n\n1. Install the tool\n2. Run `tool init {{path}}`\n\n> Remember to restart",
        "```\nconst x = '{{raw}}';\n```\n\n# Code sample\n\n- with a list item",
        '<p>Click <a href="/x">{{link_text}}</a> to open the page</p>',
    ]


@pytest.fixture
def hostile_inputs():
    """Inputs that are empty, the wrong type, malformed or oversized."""
    return [
        None,
        "",
        "   \n\t  ",
        42,
        ["<p>list</p>"],
        {"content": "dict"},
        b"<p>bytes</p>",
        "\x00\x01\x02",
        "<<<>>>",
        "<p",
        "</p></div></ul>",
        "<p>" * 200,
        "{{" * 50 + "}}" * 50,
        "**" * 200,
        "x" * 200000,
        "<p>" + "word " * 30000 + "</p>",
    ]
