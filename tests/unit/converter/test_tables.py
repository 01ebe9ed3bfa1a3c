"""Tests for pipe-table parsing and table payload construction."""

from __future__ import annotations

from larkify.converter.tables import (
    build_table_payload,
    cell_fill_plan,
    is_table_start,
    parse_table,
    split_cells,
    table_to_code_block,
)
from larkify.models import BlockType, SpanStyle, TableDescriptor


def _table(*lines):
    return parse_table(list(lines))


class TestDetection:
    def test_separator_required(self):
        assert is_table_start("| a |", "|---|")
        assert is_table_start("| a |", "|:---|---:|")
        assert not is_table_start("| a |", "| b |")
        assert not is_table_start("| a |", None)

    def test_line_must_start_with_pipe(self):
        assert not is_table_start("a | b", "|---|---|")


class TestParse:
    def test_split_cells_drops_empties(self):
        assert split_cells("|  a | | b  |") == ["a", "b"]

    def test_header_and_rows(self):
        table = _table("| A | B |", "|---|---|", "| 1 | 2 |")
        assert table.header == ["A", "B"]
        assert table.rows == [["1", "2"]]
        assert table.column_count == 2
        assert table.row_count == 2

    def test_raw_lines_stripped(self):
        table = _table("  | A |  ", "|---|")
        assert table.raw_lines == ["| A |", "|---|"]

    def test_extra_cells_ignored_and_missing_empty(self):
        table = _table("| A | B |", "|---|---|", "| 1 | 2 | 3 |", "| 4 |")
        assert table.cell(1, 2) == ""
        assert table.cell(2, 0) == "4"
        assert table.cell(2, 1) == ""


class TestGeometry:
    def test_widths_proportional_with_floor(self):
        table = TableDescriptor(header=["aaaaaaaaa", "b"], rows=[])
        # 9 of 10 characters in the first column.
        assert table.column_widths() == [630, 100]

    def test_all_empty_cells_do_not_divide_by_zero(self):
        table = TableDescriptor(header=["", ""], rows=[["", ""]])
        assert table.column_widths() == [100, 100]

    def test_longest_cell_in_column_counts(self):
        table = _table("| A | B |", "|---|---|", "| long value | x |")
        widths = table.column_widths()
        assert widths[0] > widths[1]

    def test_payload(self):
        table = _table("| A | B |", "|---|---|", "| 1 | 2 |")
        payload = build_table_payload(table)
        assert payload["block_type"] == 31
        prop = payload["table"]["property"]
        assert prop["row_size"] == 2
        assert prop["column_size"] == 2
        assert prop["header_row"] is True
        assert prop["column_width"] == [350, 350]


class TestFallback:
    def test_code_block_keeps_raw_text(self):
        lines = ["| A |", "|---|", "| **1** |"]
        block = table_to_code_block(_table(*lines))
        assert block.block_type is BlockType.CODE
        assert block.language == 39
        assert block.spans[0].text == "\n".join(lines)
        assert block.spans[0].style is SpanStyle.PLAIN


class TestCellFillPlan:
    def test_row_major_and_skips_empty(self):
        table = _table("| A | B |", "|---|---|", "| x |")
        plan = cell_fill_plan(table, ["c0", "c1", "c2", "c3"])
        assert [cell_id for cell_id, _ in plan] == ["c0", "c1", "c2"]

    def test_empty_cells_shift_left(self):
        # Empty cells are dropped while splitting, so later cells move left.
        table = _table("| A | B |", "|---|---|", "| | y |")
        assert table.rows == [["y"]]

    def test_header_plain_data_parsed(self):
        table = _table("| **H** |", "|---|", "| **d** |")
        plan = dict(cell_fill_plan(table, ["h", "d"]))
        assert plan["h"]["text"]["elements"] == [{"text_run": {"content": "**H**"}}]
        assert plan["d"]["text"]["elements"] == [
            {"text_run": {"content": "d", "text_element_style": {"bold": True}}},
        ]

    def test_stops_when_ids_run_out(self):
        table = _table("| A | B |", "|---|---|", "| 1 | 2 |")
        plan = cell_fill_plan(table, ["c0", "c1", "c2"])
        assert [cell_id for cell_id, _ in plan] == ["c0", "c1", "c2"]
        assert cell_fill_plan(table, []) == []

    def test_payload_is_text_block(self):
        table = _table("| A |", "|---|")
        ((_, payload),) = cell_fill_plan(table, ["c0"])
        assert payload["block_type"] == 2
