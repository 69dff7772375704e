"""Tests for table normalization, merging, unmerging and resizing."""

import pytest

from typst_inline.table.model import TableCell, TablePayload, TableStyle
from typst_inline.table.record import parse_table_json
from typst_inline.table.spans import (
    flatten_merges,
    merge_rect,
    normalize_table,
    resize_table,
    set_cell_content,
    unmerge_cell,
)


def make_table(rows):
    """Build a payload from a grid of strings (``None`` marks a hidden cell)."""
    cells = [
        [TableCell(hidden=True) if value is None else TableCell(content=value) for value in row]
        for row in rows
    ]
    return TablePayload(rows=len(rows), cols=len(rows[0]), cells=cells)


@pytest.fixture
def abcd():
    return make_table([["A", "B"], ["C", "D"]])


class TestNormalize:
    """Grid resizing and span inference."""

    def test_pads_missing_cells(self):
        payload = TablePayload(rows=2, cols=3, cells=[[TableCell(content="x")]])
        n = normalize_table(payload)
        assert [len(row) for row in n.cells] == [3, 3]
        assert n.cells[0][0].content == "x"
        assert n.cells[1][2] == TableCell()

    def test_truncates_extra_cells(self):
        n = normalize_table(TablePayload(rows=1, cols=1, cells=[[TableCell(), TableCell()], []]))
        assert len(n.cells) == 1
        assert len(n.cells[0]) == 1

    def test_dimensions_are_at_least_one(self):
        n = normalize_table(TablePayload(rows=0, cols=-3))
        assert (n.rows, n.cols) == (1, 1)
        assert len(n.cells) == 1

    def test_infers_colspan_from_hidden_neighbour(self):
        n = normalize_table(make_table([["A", None], ["C", "D"]]))
        assert n.cells[0][0].colspan == 2
        assert n.cells[0][0].rowspan is None

    def test_infers_rowspan_when_nothing_to_the_left(self):
        n = normalize_table(make_table([["A", "B"], [None, "D"]]))
        assert n.cells[0][0].rowspan == 2
        assert n.cells[0][0].colspan is None

    def test_left_neighbour_takes_priority(self):
        n = normalize_table(make_table([["A", "B"], ["C", None]]))
        assert n.cells[1][0].colspan == 2
        assert n.cells[0][1].rowspan is None

    def test_covered_hidden_cell_is_left_alone(self):
        payload = make_table([["A", None], ["C", "D"]])
        payload.cells[0][0].colspan = 2
        assert normalize_table(payload) == payload

    def test_cell_owned_by_interior_master_is_left_alone(self):
        payload = make_table([["A", "B", "C"], ["D", "E", None], ["G", None, None]])
        payload.cells[1][1].rowspan = 2
        payload.cells[1][1].colspan = 2
        n = normalize_table(payload)
        assert n == payload
        assert n.cells[2][0].colspan is None

    def test_spans_are_clamped_to_grid(self):
        payload = make_table([["A", "B"], ["C", "D"]])
        payload.cells[0][1].colspan = 5
        payload.cells[0][1].rowspan = 4
        n = normalize_table(payload)
        assert n.cells[0][1].colspan is None
        assert n.cells[0][1].rowspan == 2

    def test_does_not_mutate_input(self):
        payload = make_table([["A", None]])
        normalize_table(payload)
        assert payload.cells[0][0].colspan is None

    def test_keeps_caption_and_style(self):
        payload = make_table([["A"]])
        payload.caption = "Table 1"
        payload.style = TableStyle.THREE_LINE
        n = normalize_table(payload)
        assert n.caption == "Table 1"
        assert n.style == TableStyle.THREE_LINE


class TestMergeRect:
    """Merging rectangles into their top-left cell."""

    def test_two_by_two(self, abcd):
        merged = merge_rect(abcd, 0, 0, 1, 1)
        master = merged.cells[0][0]
        assert master.content == "A\nB\nC\nD"
        assert (master.rowspan, master.colspan) == (2, 2)
        for r, c in [(0, 1), (1, 0), (1, 1)]:
            assert merged.cells[r][c] == TableCell(hidden=True)

    def test_corner_order_does_not_matter(self, abcd):
        assert merge_rect(abcd, 1, 1, 0, 0) == merge_rect(abcd, 0, 0, 1, 1)
        assert merge_rect(abcd, 1, 0, 0, 1) == merge_rect(abcd, 0, 0, 1, 1)

    def test_blank_contents_are_skipped(self):
        merged = merge_rect(make_table([["  A ", " "], ["", "D"]]), 0, 0, 1, 1)
        assert merged.cells[0][0].content == "A\nD"

    def test_row_merge(self, abcd):
        merged = merge_rect(abcd, 1, 0, 1, 1)
        assert merged.cells[1][0].colspan == 2
        assert merged.cells[1][0].rowspan == 1
        assert merged.cells[1][1].hidden
        assert merged.cells[0][0].content == "A"

    def test_out_of_range_corners_are_clamped(self, abcd):
        assert merge_rect(abcd, -1, -1, 9, 9) == merge_rect(abcd, 0, 0, 1, 1)

    def test_single_cell_is_a_no_op(self, abcd):
        assert merge_rect(abcd, 1, 1, 1, 1) == normalize_table(abcd)

    def test_second_merge_is_a_no_op(self, abcd):
        once = merge_rect(abcd, 0, 0, 1, 1)
        twice = merge_rect(once, 0, 0, 1, 1)
        assert twice == once

    def test_interior_merge_twice_is_stable(self):
        grid = make_table([["A", "B", "C"], ["D", "E", "F"], ["G", "H", "I"]])
        once = merge_rect(grid, 1, 1, 2, 2)
        assert once.cells[1][1].content == "E\nF\nH\nI"
        assert once.cells[2][0].colspan is None
        twice = merge_rect(once, 1, 1, 2, 2)
        assert twice == once

    def test_interior_merge_survives_reload(self):
        grid = make_table([["A", "B", "C"], ["D", "E", "F"], ["G", "H", "I"]])
        once = merge_rect(grid, 1, 1, 2, 2)
        assert parse_table_json(once.to_json()) == once

    def test_overlapping_merge_is_rejected(self):
        payload = make_table([["A", "B", "C"], ["D", "E", "F"]])
        first = merge_rect(payload, 0, 0, 0, 1)
        assert merge_rect(first, 0, 1, 1, 2) == first
        assert merge_rect(first, 0, 0, 1, 0) == first

    def test_does_not_mutate_input(self, abcd):
        merge_rect(abcd, 0, 0, 1, 1)
        assert abcd.cells[0][1].content == "B"
        assert not abcd.cells[0][1].hidden


class TestUnmerge:
    """Splitting merged regions."""

    def test_unmerge_is_not_content_restoring(self, abcd):
        result = unmerge_cell(merge_rect(abcd, 0, 0, 1, 1), 0, 0)
        assert result.cells[0][0] == TableCell(content="A\nB\nC\nD")
        for r, c in [(0, 1), (1, 0), (1, 1)]:
            assert result.cells[r][c] == TableCell()
        assert result != normalize_table(abcd)

    def test_unmerge_plain_cell_is_a_no_op(self, abcd):
        assert unmerge_cell(abcd, 0, 0) == normalize_table(abcd)

    def test_unmerge_out_of_range_is_a_no_op(self, abcd):
        assert unmerge_cell(abcd, 5, -1) == normalize_table(abcd)

    def test_unmerge_hidden_cell_is_a_no_op(self, abcd):
        merged = merge_rect(abcd, 0, 0, 1, 1)
        assert unmerge_cell(merged, 1, 1) == merged


class TestFlattenAndResize:
    """Whole-table operations."""

    def test_flatten_clears_all_merges(self, abcd):
        flat = flatten_merges(merge_rect(abcd, 0, 0, 0, 1))
        assert all(not cell.hidden and not cell.is_merged for row in flat.cells for cell in row)
        assert flat.cells[0][0].content == "A\nB"

    def test_resize_grows(self, abcd):
        resized = resize_table(abcd, 3, 3)
        assert (resized.rows, resized.cols) == (3, 3)
        assert [cell.content for cell in resized.cells[0]] == ["A", "B", ""]
        assert [cell.content for cell in resized.cells[2]] == ["", "", ""]

    def test_resize_shrinks_and_flattens(self, abcd):
        merged = merge_rect(abcd, 0, 0, 1, 1)
        merged.caption = "cap"
        resized = resize_table(merged, 1, 1)
        assert resized.cells == [[TableCell(content="A\nB\nC\nD")]]
        assert resized.caption == "cap"

    def test_resize_minimum_size(self, abcd):
        resized = resize_table(abcd, 0, 0)
        assert (resized.rows, resized.cols) == (1, 1)


class TestSetCellContent:
    """Editing a single cell."""

    def test_sets_visible_cell(self, abcd):
        assert set_cell_content(abcd, 1, 0, "Z").cells[1][0].content == "Z"

    def test_hidden_cell_is_left_alone(self, abcd):
        merged = merge_rect(abcd, 0, 0, 0, 1)
        assert set_cell_content(merged, 0, 1, "Z") == merged
