"""
Case-sensitive and case-insensitive comparison primitives.

Matching never compares strings directly; it goes through one of these
rules so the whole engine follows a single case policy chosen at startup.
"""


class CaseRule:
    """Bounded-length compare and substring search under one case policy."""

    def __init__(self, insensitive: bool = False):
        self.insensitive = insensitive

    def _fold(self, s: str) -> str:
        return s.lower() if self.insensitive else s

    def compare(self, a: str, b: str, n: int) -> bool:
        """True if the first ``n`` characters of ``a`` and ``b`` agree.

        A string shorter than ``n`` only agrees with one of the same
        length, so ``compare(a, b, len(a) + 1)`` is a full equality test.
        """
        return self._fold(a[:n]) == self._fold(b[:n])

    def char_equal(self, a: str, b: str) -> bool:
        return self._fold(a) == self._fold(b)

    def find(self, haystack: str, needle: str) -> int:
        """Index of the first occurrence of ``needle``, or -1."""
        return self._fold(haystack).find(self._fold(needle))

    def contains(self, haystack: str, needle: str) -> bool:
        return self.find(haystack, needle) != -1

    def equals(self, a: str, b: str) -> bool:
        return self._fold(a) == self._fold(b)

    def startswith(self, text: str, prefix: str) -> bool:
        return self.compare(prefix, text, len(prefix))

    def __repr__(self) -> str:
        return f"CaseRule(insensitive={self.insensitive})"


STRICT = CaseRule(insensitive=False)
IGNORE_CASE = CaseRule(insensitive=True)


def case_rule(insensitive: bool) -> CaseRule:
    return IGNORE_CASE if insensitive else STRICT
