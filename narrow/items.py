"""
Item store: the full, unfiltered candidate set.

Candidates are read once, either from a line-oriented source or from a
keyed (JSON object) source, and receive dense zero-based ids that stay
stable for the whole session.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from .caserule import CaseRule, STRICT
from .logger import get_logger
from .schema import validate_keyed_source

logger = get_logger()


class SourceError(ValueError):
    """Raised when the candidate source cannot be read or is malformed."""
    pass


class Candidate:
    """One selectable entry. Immutable after load."""

    __slots__ = ("text", "id", "is_priority", "json_ref")

    def __init__(
        self,
        text: str,
        id: int,
        is_priority: bool = False,
        json_ref: Any = None,
    ):
        self.text = text
        self.id = id
        self.is_priority = is_priority
        self.json_ref = json_ref

    @property
    def is_keyed(self) -> bool:
        return self.json_ref is not None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return (self.text, self.id, self.is_priority) == (other.text, other.id, other.is_priority)

    def __repr__(self) -> str:
        flag = ", priority" if self.is_priority else ""
        return f"Candidate({self.text!r}, id={self.id}{flag})"


class ItemStore:
    """Owns the candidate sequence; ``store[id]`` is the candidate with that id."""

    def __init__(self, candidates: Sequence[Candidate] = (), keyed: bool = False):
        self._candidates: List[Candidate] = list(candidates)
        self.keyed = keyed
        for i, c in enumerate(self._candidates):
            if c.id != i:
                raise ValueError(f"Candidate ids must be dense and zero-based: {c!r} at {i}")

    def __len__(self) -> int:
        return len(self._candidates)

    def __getitem__(self, id: int) -> Candidate:
        return self._candidates[id]

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    @property
    def texts(self) -> List[str]:
        return [c.text for c in self._candidates]

    def max_width(self, measure: Callable[[str], int]) -> int:
        """Width of the widest candidate under ``measure`` (0 when empty)."""
        return max((measure(c.text) for c in self._candidates), default=0)


def parse_priority_items(raw: Optional[str]) -> List[str]:
    """Split a comma-separated priority list, dropping empty fields."""
    if not raw:
        return []
    return [p for p in raw.split(",") if p]


def is_priority_text(text: str, priority_items: Iterable[str], rule: CaseRule = STRICT) -> bool:
    """
    True if ``text`` and any priority string agree over the shorter of
    their two lengths, so "fire" marks both "firefox" and "fi".
    """
    for p in priority_items:
        if rule.compare(p, text, min(len(p), len(text))):
            return True
    return False


def load_lines(
    lines: Iterable[str],
    priority_items: Iterable[str] = (),
    rule: CaseRule = STRICT,
) -> ItemStore:
    """Build a store with one candidate per line, in input order."""
    priority_items = list(priority_items)
    candidates: List[Candidate] = []
    for i, line in enumerate(lines):
        text = line[:-1] if line.endswith("\n") else line
        candidates.append(
            Candidate(
                text=text,
                id=i,
                is_priority=is_priority_text(text, priority_items, rule),
            )
        )
    logger.debug("Loaded line candidates", count=len(candidates))
    return ItemStore(candidates)


def load_keyed(obj: Dict[str, Any]) -> ItemStore:
    """Build a store from an object's keys; values are kept as ``json_ref``."""
    errors = validate_keyed_source(obj)
    if errors:
        raise SourceError("Invalid keyed source: " + "; ".join(errors))
    candidates = [
        Candidate(text=key, id=i, json_ref=value)
        for i, (key, value) in enumerate(obj.items())
    ]
    logger.debug("Loaded keyed candidates", count=len(candidates))
    return ItemStore(candidates, keyed=True)


def read_keyed_source(path: Path) -> Dict[str, Any]:
    """Read and parse a JSON object from ``path``."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise SourceError(f"Keyed source not found: {path}")
    except json.JSONDecodeError as e:
        raise SourceError(f"{e.msg} @ line: {e.lineno} - {path}")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"Cannot read keyed source {path}: {e}")
    return data
