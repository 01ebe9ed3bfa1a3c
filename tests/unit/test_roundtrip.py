"""Round-trip tests: text -> pending blocks -> stored blocks -> text.

The "stored" blocks are the create-children payloads as Feishu would list
them back.  Headings are written as bold text, so they come back without
their ``#`` markers; everything else keeps its marker.
"""

from __future__ import annotations

import pytest

from larkify.converter.lark_to_md import LarkToMarkdownRenderer
from larkify.converter.languages import language_code
from larkify.converter.md_to_lark import compile_markdown
from larkify.models import LeafBlock, WriteMode


def _round_trip(markdown: str, mode: WriteMode = WriteMode.APPEND) -> str:
    doc = compile_markdown(markdown, mode)
    stored = []
    for i, block in enumerate(doc.blocks):
        assert isinstance(block, LeafBlock)
        stored.append({"block_id": f"b{i}", **block.to_payload()})
    return LarkToMarkdownRenderer().render_blocks(stored)


@pytest.mark.parametrize(
    "line",
    [
        "- bullet item",
        "1. ordered item",
        "- [ ] open task",
        "- [x] finished task",
        "plain paragraph",
        "---",
    ],
)
def test_markers_survive(line):
    assert _round_trip(line) == line


def test_ordered_items_renumbered_to_one():
    assert _round_trip("1. a\n2. b\n3. c") == "1. a\n1. b\n1. c"


def test_heading_loses_marker_but_keeps_text():
    assert _round_trip("## Section") == "Section"


def test_inline_styles_are_dropped_on_read():
    assert _round_trip("Hello **world** and `code`") == "Hello world and code"


def test_code_fence_round_trip():
    text = _round_trip("```python\ndef f():\n    return 1\n```")
    lines = text.split("\n")
    assert lines[0].startswith("```")
    assert language_code(lines[0][3:]) == language_code("python")
    assert lines[1:] == ["def f():", "    return 1", "```"]


def test_untagged_code_fence_round_trip():
    assert _round_trip("```\necho hi\n```") == "```\necho hi\n```"


def test_mixed_document():
    source = "\n".join([
        "## Intro",
        "text",
        "- a",
        "- [x] b",
        "1. c",
        "```sql",
        "SELECT 1",
        "```",
        "---",
    ])
    assert _round_trip(source).split("\n") == [
        "Intro",
        "text",
        "- a",
        "- [x] b",
        "1. c",
        "```SQL",
        "SELECT 1",
        "```",
        "---",
    ]
