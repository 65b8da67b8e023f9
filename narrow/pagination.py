"""
Pagination over the match list.

Two layouts share one cursor:
- grid: ``rows`` x ``columns`` cells of a fixed row height, column-major
- strip: a single row of variable-width items within a width budget

The cursor keeps four positions into the current match list: ``prev``
(first item of the previous page), ``curr`` (first item of this page),
``next`` (first item of the next page) and ``sel`` (highlighted item).
"""

from typing import Callable, List, Optional

from rich.cells import cell_len

from .matchlist import MatchList

NAV_LEFT = "<"
NAV_RIGHT = ">"


class TextMeasure:
    """Display-width oracle: measured width plus fixed horizontal padding."""

    def __init__(self, measure: Callable[[str], int] = cell_len, padding: int = 0):
        self.measure = measure
        self.padding = padding

    def __call__(self, text: str) -> int:
        return self.measure(text) + self.padding


class Layout:
    """A display budget and the per-item cost charged against it."""

    GRID = "grid"
    STRIP = "strip"

    def __init__(
        self,
        kind: str,
        budget: int,
        rows: int = 0,
        columns: int = 0,
        row_height: int = 1,
        text_width: Optional[Callable[[str], int]] = None,
    ):
        self.kind = kind
        self.budget = budget
        self.rows = rows
        self.columns = columns
        self.row_height = row_height
        self.text_width = text_width or TextMeasure()

    @classmethod
    def grid(cls, rows: int, columns: int = 1, row_height: int = 1) -> "Layout":
        if rows < 1 or columns < 1:
            raise ValueError(f"Grid layout needs at least one row and column, got {rows}x{columns}")
        return cls(cls.GRID, rows * columns * row_height, rows=rows, columns=columns, row_height=row_height)

    @classmethod
    def strip(cls, budget: int, text_width: Optional[Callable[[str], int]] = None) -> "Layout":
        return cls(cls.STRIP, max(1, budget), rows=1, text_width=text_width)

    @property
    def is_grid(self) -> bool:
        return self.kind == self.GRID

    def cost(self, text: str) -> int:
        if self.is_grid:
            return self.row_height
        return min(self.text_width(text), self.budget)

    def __repr__(self) -> str:
        if self.is_grid:
            return f"Layout.grid(rows={self.rows}, columns={self.columns}, row_height={self.row_height})"
        return f"Layout.strip(budget={self.budget})"


# Sizing helpers


def row_height(font_height: int, lineheight: int = 0) -> int:
    """A row is at least the font height plus 2 and at least ``lineheight``."""
    return max(font_height + 2, lineheight)


def input_width(widest_item: int, window_width: int) -> int:
    """The input field is as wide as the widest item, up to a third of the window."""
    return min(widest_item, window_width // 3)


def prompt_width(prompt: Optional[str], text_width: TextMeasure) -> int:
    if not prompt:
        return 0
    return text_width(prompt) - text_width.padding // 4


def strip_budget(
    window_width: int,
    text_width: Callable[[str], int],
    prompt_w: int = 0,
    input_w: int = 0,
    counter_text: str = "",
) -> int:
    """Width left for items after the prompt, input field, arrows and counter."""
    reserved = prompt_w + input_w + text_width(NAV_LEFT) + text_width(NAV_RIGHT)
    if counter_text:
        reserved += text_width(counter_text)
    return window_width - reserved


class Pager:
    """
    Page window over a match list.

    Navigation methods return True when they changed the window and False
    when the move was past a boundary (a no-op).
    """

    def __init__(self, layout: Layout):
        self.layout = layout
        self.matches = MatchList()
        self._text_of: Callable[[int], str] = str
        self.prev: Optional[int] = None
        self.curr: Optional[int] = None
        self.next: Optional[int] = None
        self.sel: Optional[int] = None

    def reset(self, matches: MatchList, text_of: Callable[[int], str]) -> None:
        """Adopt a freshly built match list: first page, head highlighted."""
        self.matches = matches
        self._text_of = text_of
        self.curr = self.sel = matches.head
        self.recompute()

    def _cost(self, node: int) -> int:
        return self.layout.cost(self._text_of(node))

    def recompute(self) -> None:
        """Derive ``next`` and ``prev`` from ``curr`` and the budget."""
        ml = self.matches
        budget = self.layout.budget

        used = 0
        node = self.curr
        while node is not None:
            used += self._cost(node)
            if used > budget:
                break
            node = ml.right(node)
        self.next = node

        used = 0
        node = self.curr
        while node is not None and ml.left(node) is not None:
            used += self._cost(ml.left(node))
            if used > budget:
                break
            node = ml.left(node)
        self.prev = node if node != self.curr else None

    # Page navigation

    def page_down(self) -> bool:
        if self.next is None:
            return False
        self.sel = self.curr = self.next
        self.recompute()
        return True

    def page_up(self) -> bool:
        if self.prev is None:
            return False
        self.sel = self.curr = self.prev
        self.recompute()
        return True

    def home(self) -> bool:
        if self.matches.head is None:
            return False
        self.sel = self.curr = self.matches.head
        self.recompute()
        return True

    def end(self) -> bool:
        """Show the last page and highlight the tail."""
        ml = self.matches
        if ml.tail is None:
            return False
        if self.next is not None:
            self.curr = ml.tail
            self.recompute()
            if self.prev is not None:
                self.curr = self.prev
                self.recompute()
            while self.next is not None:
                following = ml.right(self.curr)
                if following is None:
                    break
                self.curr = following
                self.recompute()
        self.sel = ml.tail
        return True

    # Item navigation

    def up(self) -> bool:
        ml = self.matches
        if self.sel is None or ml.left(self.sel) is None:
            return False
        self.sel = ml.left(self.sel)
        if ml.right(self.sel) == self.curr:
            self.curr = self.prev
            self.recompute()
        return True

    def down(self) -> bool:
        ml = self.matches
        if self.sel is None or ml.right(self.sel) is None:
            return False
        self.sel = ml.right(self.sel)
        if self.sel == self.next:
            self.curr = self.next
            self.recompute()
        return True

    def column_left(self) -> bool:
        """Move one grid column left (``rows`` links), paging back if needed."""
        ml = self.matches
        if self.sel is None:
            return False
        node = self.sel
        offscreen = False
        for _ in range(self.layout.rows):
            left = ml.left(node)
            if left is None or ml.right(left) != node:
                return False
            if node == self.curr:
                offscreen = True
            node = left
        self.sel = node
        if offscreen:
            self.curr = self.prev
            self.recompute()
        return True

    def column_right(self) -> bool:
        """Move one grid column right; a ragged last column blocks the move."""
        ml = self.matches
        if self.sel is None:
            return False
        node = self.sel
        offscreen = False
        for _ in range(self.layout.rows):
            right = ml.right(node)
            if right is None or ml.left(right) != node:
                return False
            node = right
            if node == self.next:
                offscreen = True
        self.sel = node
        if offscreen:
            self.curr = self.next
            self.recompute()
        return True

    # Read-only views

    def visible(self) -> List[int]:
        """Ids on the current page, in display order."""
        return list(self.matches.walk(self.curr, self.next))

    def cell(self, index: int) -> tuple:
        """Grid (column, row) of the ``index``-th visible item."""
        rows = self.layout.rows if self.layout.is_grid else 1
        return index // rows, index % rows

    def last_visible(self) -> Optional[int]:
        if self.curr is None:
            return None
        if self.next is None:
            return self.matches.tail
        return self.matches.left(self.next)

    def position(self) -> int:
        """1-based rank of the last visible item (0 when nothing matches)."""
        last = self.last_visible()
        return 0 if last is None else self.matches.rank(last)

    @property
    def has_left(self) -> bool:
        return self.matches.left(self.curr) is not None

    @property
    def has_right(self) -> bool:
        return self.next is not None
