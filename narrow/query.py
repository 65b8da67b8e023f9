from typing import Optional

MAX_QUERY_LENGTH = 8191


class QueryBuffer:
    """Editable query text with a cursor.

    Every method that edits returns True if the text changed, so the
    caller knows when to rematch.
    """

    def __init__(self, text: str = "", word_delimiters: str = " ", max_length: int = MAX_QUERY_LENGTH):
        self.text = text[:max_length]
        self.cursor = len(self.text)
        self.word_delimiters = word_delimiters
        self.max_length = max_length

    def _is_delim(self, c: str) -> bool:
        return c in self.word_delimiters

    def set(self, text: str) -> bool:
        text = text[:self.max_length]
        changed = text != self.text
        self.text = text
        self.cursor = len(text)
        return changed

    def insert(self, s: str) -> bool:
        if not s or len(self.text) + len(s) > self.max_length:
            return False
        self.text = self.text[:self.cursor] + s + self.text[self.cursor:]
        self.cursor += len(s)
        return True

    def paste(self, payload: Optional[str]) -> bool:
        """Insert ``payload`` up to its first newline."""
        if not payload:
            return False
        return self.insert(payload.split("\n", 1)[0])

    def _delete_left(self, n: int) -> bool:
        if n <= 0:
            return False
        self.text = self.text[:self.cursor - n] + self.text[self.cursor:]
        self.cursor -= n
        return True

    def backspace(self) -> bool:
        if self.cursor == 0:
            return False
        return self._delete_left(1)

    def delete(self) -> bool:
        if self.cursor >= len(self.text):
            return False
        self.cursor += 1
        return self._delete_left(1)

    def kill_to_end(self) -> bool:
        changed = self.cursor < len(self.text)
        self.text = self.text[:self.cursor]
        return changed

    def kill_to_start(self) -> bool:
        return self._delete_left(self.cursor)

    def delete_word(self) -> bool:
        """Delete trailing delimiters, then the word, left of the cursor."""
        start = self._word_start()
        return self._delete_left(self.cursor - start)

    def _word_start(self) -> int:
        i = self.cursor
        while i > 0 and self._is_delim(self.text[i - 1]):
            i -= 1
        while i > 0 and not self._is_delim(self.text[i - 1]):
            i -= 1
        return i

    def _word_end(self) -> int:
        i = self.cursor
        n = len(self.text)
        while i < n and self._is_delim(self.text[i]):
            i += 1
        while i < n and not self._is_delim(self.text[i]):
            i += 1
        return i

    # Cursor movement; these never change the text.

    def left(self) -> bool:
        if self.cursor == 0:
            return False
        self.cursor -= 1
        return True

    def right(self) -> bool:
        if self.cursor >= len(self.text):
            return False
        self.cursor += 1
        return True

    def word_left(self) -> bool:
        start = self._word_start()
        moved = start != self.cursor
        self.cursor = start
        return moved

    def word_right(self) -> bool:
        end = self._word_end()
        moved = end != self.cursor
        self.cursor = end
        return moved

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.text)

    @property
    def at_end(self) -> bool:
        return self.cursor >= len(self.text)

    def masked(self) -> str:
        return "." * len(self.text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"QueryBuffer({self.text!r}, cursor={self.cursor})"
