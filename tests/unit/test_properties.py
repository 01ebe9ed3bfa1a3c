"""Property-based tests for larkify using Hypothesis.

These tests verify invariant properties of the inline parser, the table
model and the batching helpers across a wide range of generated inputs.
"""

from __future__ import annotations

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from larkify.converter.inline import parse_spans
from larkify.converter.md_to_lark import compile_markdown
from larkify.converter.tables import parse_table
from larkify.lark_api.retries import compute_backoff
from larkify.models import BlockType, LeafBlock, SpanStyle, TableBlock
from larkify.utils.chunk import chunk_children

# ---------------------------------------------------------------------------
# Reusable strategies
# ---------------------------------------------------------------------------

_line_st = st.text(
    alphabet=st.characters(blacklist_categories=("Cs", "Cc")),
    max_size=120,
)

# Cell text that survives pipe splitting unchanged.
_cell_st = st.text(
    alphabet=st.characters(
        blacklist_categories=("Cs", "Cc", "Zs", "Zl", "Zp"),
        blacklist_characters="|\\",
    ),
    min_size=1,
    max_size=12,
)

_label_st = st.text(
    alphabet=st.characters(
        whitelist_categories=("L", "N"),
    ),
    min_size=1,
    max_size=15,
)


# ---------------------------------------------------------------------------
# Inline parsing
# ---------------------------------------------------------------------------

@given(_line_st)
def test_parse_spans_is_idempotent(text):
    assert parse_spans(text) == parse_spans(text)


@given(_line_st)
def test_parse_spans_never_empty(text):
    assert parse_spans(text)


@given(_line_st)
def test_plain_text_round_trips_when_no_markup(text):
    assume(not any(m in text for m in ("**", "`", "~~", "](")))
    assume(text)
    assert "".join(s.text for s in parse_spans(text)) == text


@given(_label_st, _label_st)
def test_non_url_link_stays_literal(label, target):
    assume(not target.startswith(("http://", "https://")))
    spans = parse_spans(f"[{label}]({target})")
    assert len(spans) == 1
    assert spans[0].style is SpanStyle.PLAIN
    assert spans[0].text == f"[{label}]({target})"


@given(_label_st, _label_st)
def test_url_link_becomes_link_span(label, host):
    url = f"https://{host}"
    (span,) = parse_spans(f"[{label}]({url})")
    assert span.style is SpanStyle.LINK
    assert span.url == url


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

_table_st = st.integers(min_value=1, max_value=5).flatmap(
    lambda cols: st.tuples(
        st.lists(_cell_st, min_size=cols, max_size=cols),
        st.lists(st.lists(_cell_st, min_size=cols, max_size=cols), max_size=14),
    )
)


def _pipe(cells):
    return "| " + " | ".join(cells) + " |"


@given(_table_st)
def test_table_shape_invariants(table):
    header, rows = table
    lines = [_pipe(header), "|" + "---|" * len(header), *(_pipe(r) for r in rows)]
    parsed = parse_table(lines)
    assert parsed.column_count == len(header)
    assert parsed.row_count == 1 + len(rows)
    widths = parsed.column_widths()
    assert len(widths) == len(header)
    assert all(w >= 100 for w in widths)


@settings(max_examples=50)
@given(_table_st)
def test_pipe_tables_compile_to_one_table_block(table):
    header, rows = table
    lines = [_pipe(header), "|" + "---|" * len(header), *(_pipe(r) for r in rows)]
    doc = compile_markdown("\n".join(lines))
    (block,) = doc.blocks
    assert isinstance(block, TableBlock)
    assert block.table.raw_lines == lines


# ---------------------------------------------------------------------------
# Batching and backoff
# ---------------------------------------------------------------------------

@given(st.integers(min_value=0, max_value=400), st.integers(min_value=1, max_value=60))
def test_chunk_sizes(n, size):
    batches = chunk_children([{"block_type": 2}] * n, size)
    assert sum(len(b) for b in batches) == n
    assert all(1 <= len(b) <= size for b in batches)
    assert all(len(b) == size for b in batches[:-1])


@given(st.integers(min_value=0, max_value=20))
def test_backoff_is_monotonic_and_capped(attempt):
    assert compute_backoff(attempt) <= compute_backoff(attempt + 1) <= 30.0


@given(st.lists(_cell_st, min_size=1, max_size=20))
def test_every_text_line_becomes_one_block(words):
    lines = [f"line {w}" for w in words]
    doc = compile_markdown("\n".join(lines))
    assert len(doc.blocks) == len(lines)
    assert all(isinstance(b, LeafBlock) and b.block_type is BlockType.TEXT for b in doc.blocks)
