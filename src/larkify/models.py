"""Public data models for the larkify SDK.

This module contains the block and span types shared by the converter and
the sync engine, the pending-block descriptors produced by the Markdown
compiler, and the result records returned by :class:`LarkifyClient`.

Pending blocks form a small tagged union::

    PendingBlock = LeafBlock | CalloutBlock | TableBlock

A :class:`LeafBlock` is created with one create-children call and can share
a batch with other leaves.  A :class:`CalloutBlock` needs a container create
followed by a child append.  A :class:`TableBlock` needs a table create
followed by one append per cell (or degrades to a code block).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Union


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BlockType(IntEnum):
    """Numeric ``block_type`` tags of the Feishu docx block model."""

    PAGE = 1
    TEXT = 2
    HEADING1 = 3
    HEADING2 = 4
    HEADING3 = 5
    HEADING4 = 6
    HEADING5 = 7
    HEADING6 = 8
    HEADING7 = 9
    HEADING8 = 10
    HEADING9 = 11
    BULLET = 12
    ORDERED = 13
    CODE = 14
    QUOTE = 15
    EQUATION = 16
    TODO = 17
    BITABLE = 18
    CALLOUT = 19
    DIVIDER = 22
    FILE = 23
    GRID = 24
    GRID_COLUMN = 25
    IMAGE = 27
    SHEET = 30
    TABLE = 31
    TABLE_CELL = 32
    QUOTE_CONTAINER = 34

    @property
    def payload_key(self) -> str:
        """JSON field holding this block type's body, e.g. ``"heading2"``."""
        return self.name.lower()

    @property
    def heading_level(self) -> int | None:
        """Depth 1-9 for heading types, ``None`` otherwise."""
        if BlockType.HEADING1 <= self <= BlockType.HEADING9:
            return self - BlockType.HEADING1 + 1
        return None

    @classmethod
    def from_value(cls, value: Any) -> BlockType | None:
        """Return the member for *value*, or ``None`` for unknown tags."""
        try:
            return cls(value)
        except ValueError:
            return None


class SpanStyle(str, Enum):
    """Inline style of a :class:`Span`.  Styles never combine."""

    PLAIN = "plain"
    BOLD = "bold"
    INLINE_CODE = "inline_code"
    STRIKETHROUGH = "strikethrough"
    LINK = "link"


class WriteMode(str, Enum):
    """How a write treats the target document."""

    WRITE = "write"
    """Full write: the first top-level heading becomes the document title."""

    APPEND = "append"
    """Incremental append: the title is never touched."""


# ---------------------------------------------------------------------------
# Spans
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Span:
    """An inline text run with at most one style.

    Attributes
    ----------
    text:
        The run's content.
    style:
        The single style applied to the run.
    url:
        Link target, set only when ``style`` is :attr:`SpanStyle.LINK`.
    """

    text: str
    style: SpanStyle = SpanStyle.PLAIN
    url: str | None = None

    def to_element(self) -> dict[str, Any]:
        """Render as a Feishu ``text_run`` element."""
        run: dict[str, Any] = {"content": self.text}
        if self.style is SpanStyle.LINK:
            run["text_element_style"] = {"link": {"url": self.url}}
        elif self.style is not SpanStyle.PLAIN:
            run["text_element_style"] = {self.style.value: True}
        return {"text_run": run}


# ---------------------------------------------------------------------------
# Conversion warnings
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue encountered during conversion or sync.

    Attributes
    ----------
    code:
        A machine-readable warning code (e.g. ``"TABLE_FALLBACK"``).
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Pending block descriptors
# ---------------------------------------------------------------------------

@dataclass
class LeafBlock:
    """A text-bearing block that is created in a single call.

    Attributes
    ----------
    block_type:
        The Feishu block type.
    spans:
        Inline content.  Empty for dividers.
    language:
        Numeric code language, for ``CODE`` blocks.
    done:
        Checked state, for ``TODO`` blocks.
    heading_level:
        Source heading depth when the block stands in for a Markdown
        heading.  Informational; the payload is a bold text block.
    """

    block_type: BlockType
    spans: list[Span] = field(default_factory=list)
    language: int | None = None
    done: bool | None = None
    heading_level: int | None = None

    def to_payload(self) -> dict[str, Any]:
        """Render the create-children JSON for this block."""
        key = self.block_type.payload_key
        if self.block_type is BlockType.DIVIDER:
            return {"block_type": int(self.block_type), key: {}}
        body: dict[str, Any] = {"elements": [s.to_element() for s in self.spans]}
        if self.language is not None:
            body["style"] = {"language": self.language}
        elif self.done is not None:
            body["style"] = {"done": self.done}
        return {"block_type": int(self.block_type), key: body}


@dataclass
class CalloutBlock:
    """A block quote, written as a callout container holding one text child.

    Attributes
    ----------
    text:
        The merged quote text; lines are joined with ``"\\n"``.
    """

    text: str


@dataclass
class TableDescriptor:
    """A parsed pipe table.

    Attributes
    ----------
    header:
        Header cell texts.  Their count is the column count.
    rows:
        Data rows; cells beyond the column count are ignored and missing
        cells are empty.
    raw_lines:
        The source lines (stripped), kept for the code-block fallback.
    """

    header: list[str]
    rows: list[list[str]] = field(default_factory=list)
    raw_lines: list[str] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.header)

    @property
    def row_count(self) -> int:
        return 1 + len(self.rows)

    def cell(self, row: int, column: int) -> str:
        """Text of a cell in the full grid (row 0 is the header)."""
        cells = self.header if row == 0 else self.rows[row - 1]
        if column >= self.column_count or column >= len(cells):
            return ""
        return cells[column]

    def column_widths(self, total_width: int = 700, min_width: int = 100) -> list[int]:
        """Pixel widths proportional to each column's longest cell."""
        col_max = [0] * self.column_count
        for cells in [self.header, *self.rows]:
            for ci in range(min(len(cells), self.column_count)):
                col_max[ci] = max(col_max[ci], len(cells[ci]))
        total = max(sum(col_max), 1)
        return [max(min_width, int(total_width * length / total)) for length in col_max]


@dataclass
class TableBlock:
    """A table to be written as a native grid (or its code-block fallback)."""

    table: TableDescriptor


PendingBlock = Union[LeafBlock, CalloutBlock, TableBlock]


@dataclass
class CompiledDocument:
    """Output of the Markdown compiler.

    Attributes
    ----------
    title:
        Document title claimed by the first top-level heading (write mode
        only), or ``None``.
    blocks:
        Ordered pending blocks.
    """

    title: str | None = None
    blocks: list[PendingBlock] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.title is None and not self.blocks


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

class _JSONResult:
    """Mixin that serialises a result record the way the CLI prints it."""

    def to_dict(self) -> dict[str, Any]:  # pragma: no cover - overridden
        raise NotImplementedError

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)


@dataclass
class ReadResult(_JSONResult):
    """Result of :meth:`LarkifyClient.read`.

    Attributes
    ----------
    doc_url:
        The document identifier or URL the caller supplied.
    block_count:
        Number of blocks listed (the page block included).
    markdown:
        The rendered Markdown-like text.
    raw_content:
        Feishu's own flattened plain-text extraction.
    warnings:
        Blocks that degraded during rendering.
    """

    doc_url: str
    block_count: int
    markdown: str
    raw_content: str
    warnings: list[ConversionWarning] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "docUrl": self.doc_url,
            "action": "read",
            "blockCount": self.block_count,
            "markdown": self.markdown,
            "rawContent": self.raw_content,
            "status": "success",
        }


@dataclass
class WriteResult(_JSONResult):
    """Result of :meth:`LarkifyClient.write` and :meth:`LarkifyClient.append`.

    Attributes
    ----------
    doc_url:
        The document identifier or URL the caller supplied.
    action:
        ``"write"`` or ``"append"``.
    blocks_added:
        Blocks persisted, containers and tables counted once each.
    total_batches:
        Number of create-children batch calls issued.
    title:
        Title applied to the document, if any.
    warnings:
        Non-fatal degradations (table fallbacks, failed cell fills).
    """

    doc_url: str
    action: str
    blocks_added: int
    total_batches: int
    title: str | None = None
    warnings: list[ConversionWarning] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "docUrl": self.doc_url,
            "action": self.action,
            "blocksAdded": self.blocks_added,
            "totalBatches": self.total_batches,
            "status": "success",
        }


@dataclass
class ClearResult(_JSONResult):
    """Result of :meth:`LarkifyClient.clear`."""

    doc_url: str
    blocks_deleted: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "docUrl": self.doc_url,
            "action": "clear",
            "blocksDeleted": self.blocks_deleted,
            "status": "success",
        }
