"""Table conversion: pipe-table lines to a Feishu table block.

A Markdown pipe table::

    | Name | Role |
    |------|:-----|
    | Ann  | dev  |

is parsed into a :class:`~larkify.models.TableDescriptor`.  Feishu cannot
create a table together with its content, so writing one takes two steps:

1. create an empty table block with fixed geometry
   (:func:`build_table_payload`);
2. append one text block into each non-empty cell, using the cell ids the
   create call returned (:func:`cell_fill_plan`).

The create payload looks like::

    {
        "block_type": 31,
        "table": {
            "property": {
                "row_size": 2,
                "column_size": 2,
                "column_width": [350, 350],
                "header_row": true
            }
        }
    }

When a table has too many rows, or the create call fails, the raw pipe text
is kept in a ``markdown`` code block instead (:func:`table_to_code_block`).
"""

from __future__ import annotations

import re
from typing import Any

from larkify.converter.inline import parse_spans, plain_spans
from larkify.converter.languages import language_code
from larkify.models import BlockType, LeafBlock, TableDescriptor

_SEPARATOR_RE = re.compile(r"^\s*\|[-:|]+")


def is_table_start(line: str, next_line: str | None) -> bool:
    """Whether *line* opens a pipe table whose separator is *next_line*."""
    return (
        line.lstrip().startswith("|")
        and next_line is not None
        and bool(_SEPARATOR_RE.match(next_line))
    )


def split_cells(line: str) -> list[str]:
    """Split a pipe row into stripped, non-empty cell texts."""
    return [c.strip() for c in line.split("|") if c.strip()]


def parse_table(lines: list[str]) -> TableDescriptor:
    """Build a descriptor from consecutive pipe lines.

    The first line is the header, the second the separator; every further
    line is a data row.
    """
    raw = [line.strip() for line in lines]
    header = split_cells(raw[0]) if raw else []
    rows = [split_cells(line) for line in raw[2:]]
    return TableDescriptor(header=header, rows=rows, raw_lines=raw)


def build_table_payload(
    table: TableDescriptor,
    total_width: int = 700,
    min_width: int = 100,
) -> dict[str, Any]:
    """Create-children payload for an empty table with *table*'s geometry."""
    return {
        "block_type": int(BlockType.TABLE),
        "table": {
            "property": {
                "row_size": table.row_count,
                "column_size": table.column_count,
                "column_width": table.column_widths(total_width, min_width),
                "header_row": True,
            },
        },
    }


def table_to_code_block(table: TableDescriptor) -> LeafBlock:
    """The lossless fallback: raw pipe lines in a ``markdown`` code block."""
    return LeafBlock(
        BlockType.CODE,
        plain_spans("\n".join(table.raw_lines)),
        language=language_code("markdown"),
    )


def cell_fill_plan(
    table: TableDescriptor,
    cell_ids: list[str],
) -> list[tuple[str, dict[str, Any]]]:
    """Pair each non-empty cell with the text block to append into it.

    *cell_ids* is the row-major id list Feishu returns for the new table.
    Header cells are written verbatim; data cells get inline parsing.
    Planning stops at the first grid position without an id.
    """
    plan: list[tuple[str, dict[str, Any]]] = []
    for ri in range(table.row_count):
        for ci in range(table.column_count):
            idx = ri * table.column_count + ci
            if idx >= len(cell_ids):
                return plan
            text = table.cell(ri, ci)
            if not text:
                continue
            spans = plain_spans(text) if ri == 0 else parse_spans(text)
            plan.append((cell_ids[idx], LeafBlock(BlockType.TEXT, spans).to_payload()))
    return plan
