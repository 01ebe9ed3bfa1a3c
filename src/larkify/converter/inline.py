"""Inline span parsing and element rendering.

Feishu text blocks carry an ``elements`` array; each element is a
``text_run`` (optionally styled), a mention, or an equation::

    {"text_run": {"content": "hello", "text_element_style": {"bold": true}}}

:func:`parse_spans` turns one line of Markdown-like text into
:class:`~larkify.models.Span` objects.  Only four constructs are recognised
and they never nest: at every position the leftmost match wins, and among
matches starting at the same position the alternation order decides
(bold, inline code, strikethrough, link).
"""

from __future__ import annotations

import re
from typing import Any

from larkify.models import Span, SpanStyle

_INLINE_RE = re.compile(
    r"(\*\*(.+?)\*\*)"              # bold
    r"|(`([^`]+)`)"                 # inline code
    r"|(~~(.+?)~~)"                 # strikethrough
    r"|(\[([^\]]+)\]\(([^)]+)\))"   # link
)

_URL_PREFIXES = ("http://", "https://")

# Feishu rejects text blocks whose elements are all empty.
_EMPTY_CONTENT = " "


def parse_spans(text: str) -> list[Span]:
    """Tokenize *text* into styled spans.

    Parameters
    ----------
    text:
        A single line (or merged quote text) of Markdown-like source.

    Returns
    -------
    list[Span]
        Never empty: blank input yields one plain span holding a space.
    """
    if not text:
        return [Span(_EMPTY_CONTENT)]

    spans: list[Span] = []
    pos = 0
    for m in _INLINE_RE.finditer(text):
        if m.start() > pos:
            spans.append(Span(text[pos:m.start()]))
        if m.group(2):
            spans.append(Span(m.group(2), SpanStyle.BOLD))
        elif m.group(4):
            spans.append(Span(m.group(4), SpanStyle.INLINE_CODE))
        elif m.group(6):
            spans.append(Span(m.group(6), SpanStyle.STRIKETHROUGH))
        elif m.group(8):
            label, url = m.group(8), m.group(9)
            if url.startswith(_URL_PREFIXES):
                spans.append(Span(label, SpanStyle.LINK, url=url))
            else:
                spans.append(Span(f"[{label}]({url})"))
        pos = m.end()

    if pos < len(text):
        spans.append(Span(text[pos:]))
    return spans or [Span(_EMPTY_CONTENT)]


def plain_spans(text: str) -> list[Span]:
    """Wrap *text* in a single unstyled span, without inline parsing."""
    return [Span(text or _EMPTY_CONTENT)]


def spans_to_elements(spans: list[Span]) -> list[dict[str, Any]]:
    """Render spans as a Feishu ``elements`` array."""
    return [span.to_element() for span in spans]


def elements_to_text(elements: list[Any] | None) -> str:
    """Concatenate the visible text of a Feishu ``elements`` array.

    ``text_run`` content and the display text of user / document mentions
    are kept; styles are dropped.
    """
    if not elements:
        return ""
    parts: list[str] = []
    for el in elements:
        if not isinstance(el, dict):
            continue
        run = el.get("text_run") or {}
        parts.append(run.get("content", ""))
        mention = el.get("mention_user") or el.get("mention_doc") or {}
        if mention:
            parts.append(mention.get("content", ""))
    return "".join(parts)
