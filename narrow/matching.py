"""
Matching engines: rebuild the match list from scratch for a query.

Two interchangeable strategies:
- fuzzy: query as a subsequence, ranked by a distance score
- token: every whitespace-separated token as a substring, bucketed
"""

import math
from typing import Callable, Iterable, Optional

from .caserule import CaseRule, STRICT
from .items import Candidate
from .matchlist import MatchList

Matcher = Callable[[Iterable[Candidate], str, CaseRule], MatchList]


def subsequence_span(text: str, query: str, rule: CaseRule = STRICT) -> Optional[tuple]:
    """
    Greedy left-to-right scan for ``query`` as a subsequence of ``text``.

    Returns (start, end): the index of the first matched character and of
    the character that completed the query. None when the query is not
    consumed before the text runs out.
    """
    qlen = len(query)
    pidx = 0
    start = -1
    for i, c in enumerate(text):
        if rule.char_equal(query[pidx], c):
            if start == -1:
                start = i
            pidx += 1
            if pidx == qlen:
                return start, i
    return None


def fuzzy_distance(start: int, end: int, query_length: int, is_priority: bool) -> float:
    """Lower is better. Late starts and spread-out matches are penalized."""
    multiplier = 0 if is_priority else 1
    return multiplier * (1 + math.log(start + 2) + (end - start - query_length))


def fuzzy_match(candidates: Iterable[Candidate], query: str, rule: CaseRule = STRICT) -> MatchList:
    """Match ``query`` as a subsequence; stable-sort hits by distance."""
    matches = MatchList()
    if not query:
        for c in candidates:
            matches.append(c.id, 0.0)
        return matches

    hits = []
    for c in candidates:
        span = subsequence_span(c.text, query, rule)
        if span is None:
            continue
        start, end = span
        hits.append((fuzzy_distance(start, end, len(query), c.is_priority), c.id))

    # sorted() is stable: equal distances keep input order
    for distance, cid in sorted(hits, key=lambda h: h[0]):
        matches.append(cid, distance)
    return matches


def token_match(
    candidates: Iterable[Candidate],
    query: str,
    rule: CaseRule = STRICT,
    substring_rule: Optional[CaseRule] = None,
) -> MatchList:
    """
    Match when every query token is a substring of the candidate.

    Hits are concatenated from four buckets, each in input order:
    exact matches of the raw query, priority prefix matches of the first
    token, other prefix matches, then the remaining substring matches.
    """
    substring_rule = substring_rule or rule
    tokens = query.split()
    first = tokens[0] if tokens else ""

    exact, priority_prefix, prefix, substring = MatchList(), MatchList(), MatchList(), MatchList()
    for c in candidates:
        if not all(substring_rule.contains(c.text, t) for t in tokens):
            continue
        if not tokens or rule.equals(query, c.text):
            exact.append(c.id)
        elif c.is_priority and rule.startswith(c.text, first):
            priority_prefix.append(c.id)
        elif rule.startswith(c.text, first):
            prefix.append(c.id)
        else:
            substring.append(c.id)

    exact.extend(priority_prefix)
    exact.extend(prefix)
    exact.extend(substring)
    return exact


def get_matcher(fuzzy: bool) -> Matcher:
    return fuzzy_match if fuzzy else token_match
