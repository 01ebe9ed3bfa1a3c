"""Markdown ↔ Feishu docx conversion.

Public API:

- :class:`MarkdownCompiler` — Markdown-like text → pending blocks.
- :class:`LarkToMarkdownRenderer` — Feishu blocks → Markdown-like text.
- :func:`parse_spans` — one line of text → styled spans.
- :func:`parse_table` — pipe-table lines → :class:`TableDescriptor`.
"""

from larkify.converter.inline import elements_to_text, parse_spans, plain_spans
from larkify.converter.lark_to_md import LarkToMarkdownRenderer
from larkify.converter.md_to_lark import MarkdownCompiler, compile_markdown
from larkify.converter.tables import parse_table

__all__ = [
    "LarkToMarkdownRenderer",
    "MarkdownCompiler",
    "compile_markdown",
    "elements_to_text",
    "parse_spans",
    "parse_table",
    "plain_spans",
]
