"""Scoring a job title against role queries.

Algorithm for one (title, query) pair:
1. Expand and normalize the title. Any seniority term anywhere in it vetoes
   the match (score 0) regardless of the query.
2. Tokenize the expanded query and drop stop words.
3. A query token matches when any of its alias phrases has all of its words
   among the title tokens.
4. Score is the fraction of query tokens that matched, plus a 0.1 bonus
   (capped at 1.0) when the whole expanded query appears literally in the
   expanded title.
"""

import logging
from typing import Dict, Iterable, Optional, Sequence, Set, Tuple

from rolewatch.logging import get_logger

from .models import MatchResult
from .text import expand, normalize, tokenize

logger = get_logger(__name__, component="matching")

SENIORITY_BLOCKLIST: Tuple[str, ...] = (
    "senior",
    "staff",
    "principal",
    "lead",
    "manager",
    "director",
    "head",
)

STOP_WORDS = frozenset({"and", "of", "the", "a", "an", "to", "for"})

TOKEN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "engineer": ("engineer", "engineering"),
    "engineering": ("engineering", "engineer"),
    "intern": ("intern", "internship"),
    "internship": ("internship", "intern"),
    "grad": ("grad", "graduate"),
    "graduate": ("graduate", "grad"),
}

LITERAL_BONUS = 0.1


def has_seniority(title_expanded: str) -> bool:
    """Substring check of the seniority blocklist against an expanded title."""
    return any(term in title_expanded for term in SENIORITY_BLOCKLIST)


def token_matches_title(token: str, title_tokens: Set[str]) -> bool:
    """Whether a query token, or any of its aliases, is present in the title.

    Multi-word aliases need every word present as a whole token.
    """
    for alias in TOKEN_ALIASES.get(token, (token,)):
        words = normalize(alias).split()
        if words and all(word in title_tokens for word in words):
            return True
    return False


def score_title_against_query(title: Optional[str], query: Optional[str]) -> float:
    """Score how well a job title covers one role query.

    Args:
        title: Job title (None or empty scores 0)
        query: Role query as typed by the user

    Returns:
        Score in [0, 1]

    Examples:
        >>> score_title_against_query("Software Engineering Internship 2024", "SWE Intern")
        1.0
        >>> score_title_against_query("Senior Software Engineer", "software engineer")
        0.0
    """
    title_expanded = expand(title)
    if has_seniority(title_expanded):
        return 0.0

    title_tokens = set(title_expanded.split())
    query_tokens = [token for token in tokenize(query) if token not in STOP_WORDS]
    if not query_tokens:
        return 0.0

    matched = sum(1 for token in query_tokens if token_matches_title(token, title_tokens))
    score = matched / len(query_tokens)

    query_expanded = expand(query)
    if query_expanded and query_expanded in title_expanded:
        score = min(1.0, score + LITERAL_BONUS)

    return score


def best_match_for_job_title(title: Optional[str], queries: Optional[Sequence[str]]) -> MatchResult:
    """Return the highest-scoring query for a title.

    Ties keep the earliest query. A title no query scores above zero on
    yields ``MatchResult(0.0, None)``, as does an empty query list.
    """
    best = MatchResult()
    for query in queries or ():
        score = score_title_against_query(title, query)
        if score > best.score:
            best = MatchResult(score=score, query=query)
    return best


class TitleMatcher:
    """Matcher bound to a fixed query set.

    Caches per-title results for the lifetime of the instance, which is one
    refresh or one render pass.
    """

    def __init__(self, queries: Iterable[str], logger_instance: Optional[logging.Logger] = None):
        self.queries = list(queries)
        self.logger = logger_instance or logger
        self._cache: Dict[str, MatchResult] = {}

    def match(self, title: Optional[str]) -> MatchResult:
        key = title or ""
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        result = best_match_for_job_title(key, self.queries)
        self._cache[key] = result

        self.logger.debug(
            "Scored title",
            extra={
                "event": "matching.title.scored",
                "title": key,
                "score": round(result.score, 3),
                "query": result.query,
            },
        )
        return result
