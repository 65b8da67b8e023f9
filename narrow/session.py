"""
A single filtering session.

Owns the item store, query buffer, match list, page window, selection
set and history, and runs one full cycle (edit, rematch, repaginate)
per input event. Rendering and key decoding live outside; they call the
command methods here and read back ``visible_items()``, ``counter()``
and friends.
"""

from typing import Callable, Dict, List, Optional

from .caserule import IGNORE_CASE, case_rule
from .config import Settings
from .history import NEWER, OLDER, HistoryLog
from .items import Candidate, ItemStore, load_keyed
from .logger import get_logger
from .matching import fuzzy_match, token_match
from .pagination import (
    Layout,
    Pager,
    TextMeasure,
    input_width,
    prompt_width,
    row_height,
    strip_budget,
)
from .query import QueryBuffer
from .selection import SelectionSet

logger = get_logger()

CANDIDATES = "candidates"
HISTORY = "history"


class CommitResult:
    """What a finished session hands back to the caller."""

    def __init__(self, lines: List[str], final_text: Optional[str], exit_code: int = 0):
        self.lines = lines
        self.final_text = final_text
        self.exit_code = exit_code

    @property
    def cancelled(self) -> bool:
        return self.exit_code != 0

    def __repr__(self) -> str:
        return f"CommitResult(lines={self.lines!r}, exit_code={self.exit_code})"


def build_layout(
    settings: Settings,
    store: ItemStore,
    window_width: int = 80,
    text_width: Optional[TextMeasure] = None,
    font_height: int = 1,
) -> Layout:
    """Size the grid or the strip for ``store`` in a window ``window_width`` wide."""
    text_width = text_width or TextMeasure()
    if settings.is_grid and not settings.password:
        rows = max(1, settings.effective_rows(len(store)))
        columns = max(1, settings.columns)
        return Layout.grid(rows, columns, row_height(font_height, settings.lineheight))

    iw = input_width(store.max_width(text_width), window_width)
    pw = prompt_width(settings.prompt, text_width)
    counter = f"{len(store)}/{len(store)}"
    budget = strip_budget(window_width, text_width, pw, iw, counter)
    return Layout.strip(budget, text_width)


class Session:
    def __init__(
        self,
        store: ItemStore,
        settings: Optional[Settings] = None,
        history: Optional[HistoryLog] = None,
        layout: Optional[Layout] = None,
        query: str = "",
    ):
        self.settings = settings or Settings()
        self.store = store
        self.history = history or HistoryLog(
            maxhist=self.settings.maxhist, dedup=self.settings.histnodup
        )
        self.selection = SelectionSet()
        self.query = QueryBuffer(query, word_delimiters=self.settings.word_delimiters)
        self.rule = case_rule(self.settings.case_insensitive)
        self.view = CANDIDATES
        self._history_view: Optional[ItemStore] = None
        self.pager = Pager(layout or build_layout(self.settings, store))
        self.result: Optional[CommitResult] = None
        self._commands: Dict[str, Callable[..., bool]] = {
            "type": self.type_text,
            "paste": self.paste,
            "backspace": self.backspace,
            "delete": self.delete,
            "kill-line": self.kill_line,
            "kill-start": self.kill_to_start,
            "delete-word": self.delete_word,
            "word-left": self.word_left,
            "word-right": self.word_right,
            "left": self.left,
            "right": self.right,
            "up": self.up,
            "down": self.down,
            "page-up": self.page_up,
            "page-down": self.page_down,
            "home": self.home,
            "end": self.end,
            "tab": self.complete,
            "toggle": self.toggle_selection,
            "history-older": self.history_older,
            "history-newer": self.history_newer,
            "history-view": self.toggle_history_view,
            "commit": self.commit,
            "commit-query": self.commit_query,
            "cancel": self.cancel,
        }
        self.rematch()

    # Active source

    @property
    def source(self) -> ItemStore:
        """Candidates being matched: the item store, or history records."""
        if self.view == HISTORY and self._history_view is not None:
            return self._history_view
        return self.store

    @property
    def matches(self):
        return self.pager.matches

    @property
    def done(self) -> bool:
        return self.result is not None

    def rematch(self) -> None:
        """Rebuild the match list for the current query and repaginate."""
        source = self.source
        text = self.query.text
        if self.settings.fuzzy:
            matches = fuzzy_match(source, text, self.rule)
        else:
            substring_rule = IGNORE_CASE if source.keyed else None
            matches = token_match(source, text, self.rule, substring_rule)
        self.pager.reset(matches, lambda i: source[i].text)
        logger.record_rematch(len(matches))

    def dispatch(self, command: str, payload: Optional[str] = None) -> bool:
        """Run a named command. ``payload`` is the text for type/paste."""
        try:
            handler = self._commands[command]
        except KeyError:
            raise ValueError(f"Unknown command: {command}")
        if self.done:
            return False
        if command in ("type", "paste"):
            return handler(payload or "")
        return handler()

    @property
    def command_names(self) -> List[str]:
        return sorted(self._commands)

    # Query editing

    def _edited(self, changed: bool) -> bool:
        if changed:
            self.rematch()
        return changed

    def type_text(self, text: str) -> bool:
        return self._edited(self.query.insert(text))

    def paste(self, payload: str) -> bool:
        return self._edited(self.query.paste(payload))

    def backspace(self) -> bool:
        return self._edited(self.query.backspace())

    def delete(self) -> bool:
        return self._edited(self.query.delete())

    def kill_line(self) -> bool:
        changed = self.query.kill_to_end()
        self.rematch()
        return changed

    def kill_to_start(self) -> bool:
        return self._edited(self.query.kill_to_start())

    def delete_word(self) -> bool:
        return self._edited(self.query.delete_word())

    def word_left(self) -> bool:
        return self.query.word_left()

    def word_right(self) -> bool:
        return self.query.word_right()

    def set_query(self, text: str) -> None:
        self.query.set(text)
        self.rematch()

    # Navigation

    def up(self) -> bool:
        return self.pager.up()

    def down(self) -> bool:
        return self.pager.down()

    def left(self) -> bool:
        layout = self.pager.layout
        if layout.is_grid and layout.columns > 1:
            return self.pager.column_left()
        sel = self.pager.sel
        if self.query.cursor > 0 and (
            sel is None or self.matches.left(sel) is None or layout.is_grid
        ):
            return self.query.left()
        if layout.is_grid:
            return False
        return self.pager.up()

    def right(self) -> bool:
        layout = self.pager.layout
        if layout.is_grid and layout.columns > 1:
            return self.pager.column_right()
        if not self.query.at_end:
            return self.query.right()
        if layout.is_grid:
            return False
        return self.pager.down()

    def page_up(self) -> bool:
        return self.pager.page_up()

    def page_down(self) -> bool:
        return self.pager.page_down()

    def home(self) -> bool:
        """Jump to the first match, or to the start of the text if already there."""
        if self.pager.sel == self.matches.head:
            self.query.home()
            return True
        return self.pager.home()

    def end(self) -> bool:
        """Jump to the end of the text, or to the last match if already there."""
        if not self.query.at_end:
            self.query.end()
            return True
        return self.pager.end()

    # Selection and completion

    def highlighted(self) -> Optional[Candidate]:
        sel = self.pager.sel
        return None if sel is None else self.source[sel]

    def complete(self) -> bool:
        item = self.highlighted()
        if item is None:
            return False
        self.set_query(item.text)
        return True

    def toggle_selection(self) -> bool:
        """Toggle the highlighted candidate in the selection set."""
        if self.pager.sel is None or self.view != CANDIDATES:
            return False
        self.selection.toggle(self.pager.sel)
        logger.record_selection_toggle()
        return True

    def is_selected(self, candidate: Candidate) -> bool:
        return self.view == CANDIDATES and self.selection.is_selected(candidate.id)

    # History

    def _recall(self, direction: int) -> bool:
        text = self.history.navigate(direction, self.query.text)
        if text is None:
            return False
        self.set_query(text)
        return True

    def history_older(self) -> bool:
        return self._recall(OLDER)

    def history_newer(self) -> bool:
        return self._recall(NEWER)

    def toggle_history_view(self) -> bool:
        """Switch between matching candidates and matching history records."""
        if not self.history.enabled:
            self.rematch()
            return False
        if self.view == CANDIDATES:
            self._history_view = ItemStore(
                [Candidate(text=r, id=i) for i, r in enumerate(self.history.records)]
            )
            self.view = HISTORY
        else:
            self._history_view = None
            self.view = CANDIDATES
        self.rematch()
        return True

    # Finishing

    def _descend(self, obj: dict) -> None:
        self.store = load_keyed(obj)
        layout = self.pager.layout
        if layout.is_grid:
            # Rows only shrink to fit the smaller object
            rows = max(1, min(layout.rows, len(self.store)))
            self.pager.layout = Layout.grid(rows, layout.columns, layout.row_height)
        self.selection.clear()
        self.view = CANDIDATES
        self._history_view = None
        self.query.set("")
        self.rematch()
        logger.debug("Descended into keyed object", keys=len(self.store))

    def commit(self, use_query: bool = False) -> bool:
        """
        Finish with the highlighted item (or the raw query with
        ``use_query``). Committing on a nested keyed entry descends into
        it instead and the session goes on.
        """
        item = self.highlighted()
        lines: List[str] = []
        if item is not None and item.json_ref is not None:
            if isinstance(item.json_ref, dict):
                self._descend(item.json_ref)
                return False
            lines.append(item.json_ref)

        for id in self.selection.selected():
            if self.view == CANDIDATES and item is not None and item.id == id:
                continue
            lines.append(self.store[id].text)

        if item is not None and not use_query:
            final_text = item.text
        else:
            final_text = self.query.text
        lines.append(final_text)

        self.history.commit(final_text)
        self.result = CommitResult(lines, final_text, exit_code=0)
        logger.debug("Session committed", lines=len(lines), selected=len(self.selection))
        return True

    def commit_query(self) -> bool:
        return self.commit(use_query=True)

    def cancel(self) -> bool:
        self.result = CommitResult([], None, exit_code=1)
        return True

    # Read-only views for rendering

    def visible_items(self) -> List[Candidate]:
        source = self.source
        return [source[i] for i in self.pager.visible()]

    def counter(self) -> tuple:
        """(position, total): rank of the last visible match, and candidate count."""
        return self.pager.position(), len(self.source)

    def counter_text(self) -> str:
        position, total = self.counter()
        return f"{position}/{total}"

    @property
    def match_count(self) -> int:
        return len(self.matches)

    def display_query(self) -> str:
        return self.query.masked() if self.settings.password else self.query.text
