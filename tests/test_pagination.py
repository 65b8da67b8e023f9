"""
Tests for layouts and the page cursor.
"""

import pytest

from narrow.matchlist import MatchList
from narrow.pagination import (
    Layout,
    Pager,
    TextMeasure,
    input_width,
    prompt_width,
    row_height,
    strip_budget,
)


def grid_pager(count: int, rows: int, columns: int = 1) -> Pager:
    pager = Pager(Layout.grid(rows, columns))
    pager.reset(MatchList.from_ids(range(count)), str)
    return pager


STRIP_TEXTS = ["aaaa", "bbbb", "cccc", "dd", "eeeeeeeeeeeeee"]


def strip_pager(budget: int = 10) -> Pager:
    pager = Pager(Layout.strip(budget, len))
    pager.reset(MatchList.from_ids(range(len(STRIP_TEXTS))), lambda i: STRIP_TEXTS[i])
    return pager


def assert_window_valid(pager: Pager):
    ml = pager.matches
    if ml.head is None:
        assert pager.curr is None and pager.sel is None
        return
    assert pager.curr is not None
    assert pager.sel in pager.visible()
    for pos in (pager.prev, pager.next):
        assert pos is None or pos in ml


class TestGridPaging:
    def test_first_page(self):
        pager = grid_pager(10, rows=3)
        assert pager.curr == 0 and pager.sel == 0
        assert pager.next == 3
        assert pager.prev is None
        assert pager.visible() == [0, 1, 2]

    def test_page_down_and_up(self):
        pager = grid_pager(10, rows=3)
        assert pager.page_down()
        assert (pager.prev, pager.curr, pager.next, pager.sel) == (0, 3, 6, 3)
        assert pager.page_down()
        assert pager.page_down()
        assert pager.visible() == [9]
        assert pager.next is None
        assert not pager.page_down()
        assert pager.prev == 6
        assert pager.page_up()
        assert pager.curr == 6

    def test_page_up_on_first_page_is_noop(self):
        pager = grid_pager(10, rows=3)
        assert not pager.page_up()
        assert pager.curr == 0

    def test_down_crosses_page(self):
        pager = grid_pager(10, rows=3)
        pager.down()
        pager.down()
        assert pager.curr == 0 and pager.sel == 2
        assert pager.down()
        assert pager.sel == 3 and pager.curr == 3 and pager.next == 6

    def test_up_crosses_page(self):
        pager = grid_pager(10, rows=3)
        pager.page_down()
        assert pager.up()
        assert pager.sel == 2 and pager.curr == 0

    def test_up_at_head_is_noop(self):
        pager = grid_pager(4, rows=3)
        assert not pager.up()
        assert pager.sel == 0

    def test_down_at_tail_is_noop(self):
        pager = grid_pager(2, rows=3)
        pager.down()
        assert not pager.down()
        assert pager.sel == 1

    def test_end_shows_full_last_page(self):
        pager = grid_pager(10, rows=3)
        assert pager.end()
        assert pager.sel == 9
        assert pager.visible() == [7, 8, 9]
        assert pager.next is None

    def test_end_on_single_page(self):
        pager = grid_pager(3, rows=5)
        assert pager.end()
        assert pager.sel == 2 and pager.curr == 0

    def test_home(self):
        pager = grid_pager(10, rows=3)
        pager.end()
        assert pager.home()
        assert pager.curr == 0 and pager.sel == 0 and pager.next == 3

    def test_position(self):
        pager = grid_pager(10, rows=3)
        assert pager.position() == 3
        pager.end()
        assert pager.position() == 10


class TestGridColumns:
    def test_column_right_within_page(self):
        pager = grid_pager(10, rows=2, columns=3)
        assert pager.visible() == [0, 1, 2, 3, 4, 5]
        assert pager.column_right()
        assert pager.sel == 2 and pager.curr == 0

    def test_column_right_pages_forward(self):
        pager = grid_pager(10, rows=2, columns=3)
        pager.sel = 4
        assert pager.column_right()
        assert pager.sel == 6 and pager.curr == 6
        assert pager.visible() == [6, 7, 8, 9]

    def test_ragged_last_column_blocks(self):
        pager = grid_pager(10, rows=2, columns=3)
        pager.page_down()
        pager.sel = 8
        assert not pager.column_right()
        assert pager.sel == 8
        pager.sel = 7
        assert pager.column_right()
        assert pager.sel == 9

    def test_column_left_pages_back(self):
        pager = grid_pager(10, rows=2, columns=3)
        pager.page_down()
        assert pager.sel == 6
        assert pager.column_left()
        assert pager.sel == 4 and pager.curr == 0

    def test_column_left_at_first_column_is_noop(self):
        pager = grid_pager(10, rows=2, columns=3)
        pager.sel = 1
        assert not pager.column_left()
        assert pager.sel == 1

    def test_cell(self):
        pager = grid_pager(10, rows=2, columns=3)
        assert pager.cell(0) == (0, 0)
        assert pager.cell(3) == (1, 1)
        assert pager.cell(4) == (2, 0)


class TestStripPaging:
    def test_widths_fill_budget(self):
        pager = strip_pager()
        assert pager.visible() == [0, 1]
        assert pager.next == 2

    def test_wide_item_is_capped_at_budget(self):
        pager = strip_pager()
        pager.page_down()
        assert pager.visible() == [2, 3]
        pager.page_down()
        assert pager.visible() == [4]
        assert pager.next is None
        assert pager.prev == 1

    def test_edges(self):
        pager = strip_pager()
        assert not pager.has_left and pager.has_right
        pager.end()
        assert pager.has_left and not pager.has_right


class TestEmptyList:
    def test_all_moves_are_noops(self):
        pager = Pager(Layout.grid(3))
        pager.reset(MatchList(), str)
        assert (pager.prev, pager.curr, pager.next, pager.sel) == (None, None, None, None)
        for move in (pager.up, pager.down, pager.page_up, pager.page_down,
                     pager.home, pager.end, pager.column_left, pager.column_right):
            assert not move()
        assert pager.visible() == []
        assert pager.position() == 0


class TestWindowInvariant:
    @pytest.mark.parametrize("count,rows,columns", [(1, 1, 1), (7, 3, 1), (10, 2, 3), (25, 4, 2)])
    def test_navigation_keeps_window_valid(self, count, rows, columns):
        pager = grid_pager(count, rows, columns)
        moves = [pager.down, pager.column_right, pager.page_down, pager.end, pager.up,
                 pager.column_left, pager.page_up, pager.home, pager.down, pager.down]
        for _ in range(3):
            for move in moves:
                move()
                assert_window_valid(pager)

    @pytest.mark.parametrize("budget", [1, 4, 5, 10, 30])
    def test_strip_budgets(self, budget):
        pager = strip_pager(budget)
        for move in (pager.down, pager.down, pager.page_down, pager.end, pager.up, pager.page_up):
            move()
            assert_window_valid(pager)


class TestSizing:
    def test_row_height(self):
        assert row_height(10) == 12
        assert row_height(10, 20) == 20

    def test_input_width(self):
        assert input_width(50, 90) == 30
        assert input_width(10, 90) == 10

    def test_prompt_width(self):
        assert prompt_width(None, TextMeasure(len)) == 0
        assert prompt_width("run", TextMeasure(len, padding=4)) == 6

    def test_strip_budget(self):
        measure = TextMeasure(len, padding=2)
        assert strip_budget(100, measure, prompt_w=6, input_w=20, counter_text="10/10") == 61

    def test_strip_budget_floor(self):
        assert Layout.strip(-5).budget == 1

    def test_grid_needs_rows(self):
        with pytest.raises(ValueError):
            Layout.grid(0)

    def test_default_measure_counts_cells(self):
        assert TextMeasure()("abc") == 3
        assert TextMeasure()("日本") == 4
        assert TextMeasure(padding=2)("abc") == 5
