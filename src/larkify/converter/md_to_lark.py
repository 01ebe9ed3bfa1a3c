"""Markdown-like text to pending Feishu blocks.

:class:`MarkdownCompiler` walks the source with a line cursor.  Each rule
below consumes one or more whole lines, so multi-line constructs (fences,
quotes, tables) are taken atomically.  Rules are tried in this order:

1. document title (first ``# heading`` before anything else claimed it)
2. fenced code
3. blank line (skipped)
4. divider (``---`` / ``***``)
5. heading ``#`` .. ``#########`` (bold text; Feishu has no writable heading)
6. todo ``- [ ]`` / ``- [x]``
7. bullet ``-`` / ``*`` / ``+``
8. ordered ``1.``
9. block quote (consecutive ``>`` lines, merged into one callout)
10. pipe table
11. plain text

List indentation is ignored; nested lists come out flat.
"""

from __future__ import annotations

import re

from larkify.converter.inline import parse_spans, plain_spans
from larkify.converter.languages import guess_language, language_code
from larkify.converter.tables import is_table_start, parse_table
from larkify.models import (
    BlockType,
    CalloutBlock,
    CompiledDocument,
    LeafBlock,
    PendingBlock,
    Span,
    SpanStyle,
    TableBlock,
    WriteMode,
)

_TITLE_RE = re.compile(r"^#\s+(.+)")
_HEADING_RE = re.compile(r"^(#{1,9})\s+(.*)")
_DIVIDER_RE = re.compile(r"^(?:-{3,}|\*{3,})$")
_TODO_RE = re.compile(r"^-\s*\[([ xX])\]\s*(.*)")
_BULLET_RE = re.compile(r"^[-*+]\s+")
_ORDERED_RE = re.compile(r"^\d+\.\s+(.*)")

_FENCE = "```"


class MarkdownCompiler:
    """Compile Markdown-like text into :class:`~larkify.models.PendingBlock` items.

    The compiler is stateless between calls; one instance can be reused.

    Examples
    --------
    >>> doc = MarkdownCompiler().compile("# Title\\n\\nHello **world**\\n")
    >>> doc.title
    'Title'
    >>> [s.style.value for s in doc.blocks[0].spans]
    ['plain', 'bold']
    """

    def compile(
        self,
        source: str,
        mode: WriteMode = WriteMode.WRITE,
    ) -> CompiledDocument:
        """Compile *source* into a title and an ordered block list.

        Parameters
        ----------
        source:
            Markdown-like text.
        mode:
            In :attr:`WriteMode.WRITE` the first top-level heading becomes
            the document title.  In :attr:`WriteMode.APPEND` it is kept as
            a bold text block so that appending never renames a document.

        Returns
        -------
        CompiledDocument
        """
        lines = source.split("\n")
        doc = CompiledDocument()
        blocks: list[PendingBlock] = doc.blocks
        title_claimed = False
        i = 0

        while i < len(lines):
            line = lines[i]

            if not title_claimed:
                tm = _TITLE_RE.match(line)
                if tm and not line.startswith("##"):
                    title = tm.group(1)
                    if mode is WriteMode.WRITE:
                        doc.title = title
                    else:
                        blocks.append(_heading_block(1, title))
                    title_claimed = True
                    i += 1
                    continue

            if line.strip().startswith(_FENCE):
                block, i = self._consume_fence(lines, i)
                blocks.append(block)
                continue

            if not line.strip():
                i += 1
                continue

            if _DIVIDER_RE.match(line.strip()):
                blocks.append(LeafBlock(BlockType.DIVIDER))
                i += 1
                continue

            hm = _HEADING_RE.match(line)
            if hm:
                blocks.append(_heading_block(len(hm.group(1)), hm.group(2)))
                i += 1
                continue

            stripped = line.lstrip()

            todo = _TODO_RE.match(stripped)
            if todo:
                blocks.append(LeafBlock(
                    BlockType.TODO,
                    parse_spans(todo.group(2)),
                    done=todo.group(1).lower() == "x",
                ))
                i += 1
                continue

            if _BULLET_RE.match(stripped):
                text = _BULLET_RE.sub("", stripped, count=1)
                blocks.append(LeafBlock(BlockType.BULLET, parse_spans(text)))
                i += 1
                continue

            om = _ORDERED_RE.match(stripped)
            if om:
                blocks.append(LeafBlock(BlockType.ORDERED, parse_spans(om.group(1))))
                i += 1
                continue

            if stripped.startswith(">"):
                block, i = self._consume_quote(lines, i)
                blocks.append(block)
                continue

            next_line = lines[i + 1] if i + 1 < len(lines) else None
            if is_table_start(stripped, next_line):
                block, i = self._consume_table(lines, i)
                blocks.append(block)
                continue

            blocks.append(LeafBlock(BlockType.TEXT, parse_spans(line)))
            i += 1

        return doc

    # ------------------------------------------------------------------
    # Multi-line constructs
    # ------------------------------------------------------------------

    def _consume_fence(self, lines: list[str], start: int) -> tuple[LeafBlock, int]:
        lang = lines[start].strip()[len(_FENCE):].strip()
        body: list[str] = []
        i = start + 1
        while i < len(lines) and not lines[i].strip().startswith(_FENCE):
            body.append(lines[i])
            i += 1
        # Skip the closing fence (no-op past the end of input).
        i += 1
        code = "\n".join(body)
        if not lang:
            lang = guess_language(code)
        block = LeafBlock(BlockType.CODE, plain_spans(code), language=language_code(lang))
        return block, i

    def _consume_quote(self, lines: list[str], start: int) -> tuple[CalloutBlock, int]:
        quoted: list[str] = []
        i = start
        while i < len(lines):
            ql = lines[i].lstrip()
            if ql.startswith("> "):
                ql = ql[2:]
            elif ql.startswith(">"):
                ql = ql[1:]
            else:
                break
            quoted.append(ql)
            i += 1
        return CalloutBlock("\n".join(quoted)), i

    def _consume_table(self, lines: list[str], start: int) -> tuple[TableBlock, int]:
        table_lines: list[str] = []
        i = start
        while i < len(lines) and lines[i].strip().startswith("|"):
            table_lines.append(lines[i])
            i += 1
        return TableBlock(parse_table(table_lines)), i


def _heading_block(level: int, text: str) -> LeafBlock:
    """Headings become a single bold span; inline markup is kept literally."""
    return LeafBlock(
        BlockType.TEXT,
        [Span(text or " ", SpanStyle.BOLD)],
        heading_level=level,
    )


def compile_markdown(source: str, mode: WriteMode = WriteMode.WRITE) -> CompiledDocument:
    """Module-level shortcut for :meth:`MarkdownCompiler.compile`."""
    return MarkdownCompiler().compile(source, mode)
