"""Title matching against the user's role queries.

This package provides:
- text: normalization, abbreviation expansion, tokenization
- TitleMatcher / score_title_against_query / best_match_for_job_title
- get_relevant_matches: filter and order a job list to relevant matches
- MatchResult / RelevantMatch: ephemeral match outcomes
"""

from .engine import (
    TitleMatcher,
    best_match_for_job_title,
    has_seniority,
    score_title_against_query,
    token_matches_title,
)
from .models import MatchResult, RelevantMatch
from .selector import MATCH_THRESHOLD, get_relevant_matches
from .text import expand, expand_abbreviations, normalize, tokenize

__all__ = [
    "normalize",
    "expand_abbreviations",
    "expand",
    "tokenize",
    "TitleMatcher",
    "score_title_against_query",
    "best_match_for_job_title",
    "token_matches_title",
    "has_seniority",
    "get_relevant_matches",
    "MATCH_THRESHOLD",
    "MatchResult",
    "RelevantMatch",
]
