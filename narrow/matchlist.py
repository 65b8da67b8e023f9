"""
Ordered, doubly-linked list of matching candidate ids.

Nodes are candidate ids (indices into the active source), so the list
never owns candidates: it is rebuilt from scratch on every query change
and simply dropped afterwards.
"""

from typing import Dict, Iterator, List, Optional


class MatchList:
    """Doubly-linked list over candidate ids with O(1) append and concat."""

    def __init__(self):
        self.head: Optional[int] = None
        self.tail: Optional[int] = None
        self._left: Dict[int, Optional[int]] = {}
        self._right: Dict[int, Optional[int]] = {}
        self.distance: Dict[int, float] = {}

    @classmethod
    def from_ids(cls, ids) -> "MatchList":
        ml = cls()
        for i in ids:
            ml.append(i)
        return ml

    def append(self, node: int, distance: float = 0.0) -> None:
        if node in self._right:
            raise ValueError(f"Candidate {node} is already in the match list")
        self._left[node] = self.tail
        self._right[node] = None
        if self.tail is None:
            self.head = node
        else:
            self._right[self.tail] = node
        self.tail = node
        self.distance[node] = distance

    def extend(self, other: "MatchList") -> None:
        """Link ``other`` onto the end of this list. ``other`` is consumed."""
        if other.head is None:
            return
        overlap = self._right.keys() & other._right.keys()
        if overlap:
            raise ValueError(f"Candidates {sorted(overlap)} are already in the match list")
        self._left.update(other._left)
        self._right.update(other._right)
        self.distance.update(other.distance)
        if self.tail is None:
            self.head = other.head
        else:
            self._right[self.tail] = other.head
            self._left[other.head] = self.tail
        self.tail = other.tail
        other.head = other.tail = None
        other._left, other._right, other.distance = {}, {}, {}

    def left(self, node: Optional[int]) -> Optional[int]:
        if node is None:
            return None
        return self._left[node]

    def right(self, node: Optional[int]) -> Optional[int]:
        if node is None:
            return None
        return self._right[node]

    def walk(self, start: Optional[int], stop: Optional[int] = None) -> Iterator[int]:
        """Yield nodes from ``start`` following right links, up to ``stop``."""
        node = start
        while node is not None and node != stop:
            yield node
            node = self._right[node]

    def rank(self, node: int) -> int:
        """1-based position of ``node`` counted from the head."""
        if node not in self._right:
            raise KeyError(node)
        n = 1
        while self._left[node] is not None:
            node = self._left[node]
            n += 1
        return n

    def ids(self) -> List[int]:
        return list(self.walk(self.head))

    def is_consistent(self) -> bool:
        """Check that links are linear, acyclic and mirror each other."""
        seen = set()
        prev = None
        node = self.head
        while node is not None:
            if node in seen or self._left.get(node, -1) != prev:
                return False
            seen.add(node)
            prev, node = node, self._right[node]
        return prev == self.tail and len(seen) == len(self._right)

    def __contains__(self, node) -> bool:
        return node in self._right

    def __len__(self) -> int:
        return len(self._right)

    def __iter__(self) -> Iterator[int]:
        return self.walk(self.head)

    def __bool__(self) -> bool:
        return self.head is not None

    def __repr__(self) -> str:
        return f"MatchList({self.ids()!r})"
