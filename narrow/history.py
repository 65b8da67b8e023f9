"""
History log of committed queries.

A flat file, one record per line. Loaded once at startup, navigated
read-only during the session, and rewritten once at shutdown with the
newest ``maxhist`` records plus the committed text.
"""

from pathlib import Path
from typing import List, Optional

from .logger import get_logger

logger = get_logger()

OLDER = -1
NEWER = 1


class HistoryError(OSError):
    """Raised when a configured history file cannot be read or written."""
    pass


def load_history(path: Optional[Path]) -> List[str]:
    """Read records from ``path``. A missing file is an empty history."""
    if path is None or not path.exists():
        return []
    try:
        with path.open("r", encoding="utf-8", newline="\n") as f:
            records = [line.rstrip("\n") for line in f]
    except (OSError, UnicodeDecodeError) as e:
        raise HistoryError(f"failed to read history {path}: {e}")
    logger.record_history_load(len(records))
    return records


def _record_line(record: str) -> str:
    # Records are line-delimited; anything after an embedded newline is lost.
    return record.split("\n", 1)[0] + "\n"


def save_history(
    path: Path,
    records: List[str],
    final_text: str = "",
    maxhist: int = 64,
    dedup: bool = True,
) -> List[str]:
    """
    Persist the last ``maxhist`` records, then ``final_text`` unless it is
    empty or (with ``dedup``) equal to the newest record.

    Returns the records written.
    """
    kept = records[-maxhist:] if maxhist > 0 else []
    written = list(kept)
    if final_text and not (dedup and records and records[-1] == final_text):
        written.append(final_text)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="\n") as f:
            for record in written:
                f.write(_record_line(record))
    except OSError as e:
        raise HistoryError(f"failed to write to {path}: {e}")
    logger.record_history_write()
    return written


class HistoryLog:
    """In-memory history with a recall cursor.

    ``pos`` ranges over ``[0, len(records)]``; ``len(records)`` means no
    record is recalled and the scratch text being edited is authoritative.
    """

    def __init__(
        self,
        records: Optional[List[str]] = None,
        path: Optional[Path] = None,
        maxhist: int = 64,
        dedup: bool = True,
    ):
        self.records: List[str] = list(records or [])
        self.path = path
        self.maxhist = maxhist
        self.dedup = dedup
        self.pos = len(self.records)
        self.scratch = ""

    @classmethod
    def open(cls, path: Optional[Path], maxhist: int = 64, dedup: bool = True) -> "HistoryLog":
        return cls(load_history(path), path=path, maxhist=maxhist, dedup=dedup)

    @property
    def enabled(self) -> bool:
        return self.path is not None

    @property
    def navigating(self) -> bool:
        return self.pos < len(self.records)

    def navigate(self, direction: int, current: str) -> Optional[str]:
        """
        Step the recall cursor. Returns the text to put in the query, or
        None when the step would leave the history (nothing changes).
        Leaving the fresh position saves ``current`` as scratch; stepping
        back onto it returns that scratch.
        """
        if not self.records:
            return None
        if self.pos == len(self.records):
            self.scratch = current

        if direction == OLDER:
            if self.pos > 0:
                self.pos -= 1
                return self.records[self.pos]
            return None
        if direction == NEWER:
            if self.pos < len(self.records) - 1:
                self.pos += 1
                return self.records[self.pos]
            if self.pos == len(self.records) - 1:
                self.pos += 1
                return self.scratch
            return None
        raise ValueError(f"Unknown history direction: {direction}")

    def commit(self, final_text: str) -> Optional[List[str]]:
        """Write back at shutdown. No-op without a file or with ``maxhist`` 0."""
        if self.path is None or self.maxhist == 0:
            return None
        written = save_history(
            self.path,
            self.records,
            final_text,
            maxhist=self.maxhist,
            dedup=self.dedup,
        )
        logger.debug("History written", path=str(self.path), records=len(written))
        return written

    def __len__(self) -> int:
        return len(self.records)
