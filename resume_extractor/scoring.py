"""Keyword-frequency comparison of resume text against a job description."""

import math
import re
from collections import Counter
from dataclasses import dataclass, field

DEFAULT_SCORE = 75
MIN_SCORE = 50
MAX_SCORE = 95
DEFAULT_KEYWORD_LIMIT = 15

# Contractions never survive punctuation removal, so they are not listed
STOP_WORDS = frozenset(
    """
    a about above after again against all am an and any are as at be because
    been before being below between both but by cannot could did do does doing
    down during each few for from further had has have having he her here hers
    herself him himself his how i if in into is it its itself me more most my
    myself no nor not of off on once only or other ought our ours ourselves out
    over own same she should so some such than that the their theirs them
    themselves then there these they this those through to too under until up
    very was we were what when where which while who whom why with would you
    your yours yourself yourselves
    """.split()
)

_PUNCTUATION = re.compile(r"[^\w\s]")


@dataclass
class KeywordReport:
    matched: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    score: int = DEFAULT_SCORE


def score(matched_count: int, total_count: int) -> int:
    """Linear match proportion clamped to [50, 95]; 75 without keywords."""
    if total_count <= 0:
        return DEFAULT_SCORE
    # Halves round up
    base = math.floor(matched_count / total_count * 100 + 0.5)
    return min(max(base, MIN_SCORE), MAX_SCORE)


def extract_keywords(text: str, limit: int = DEFAULT_KEYWORD_LIMIT) -> list[str]:
    """Most frequent non-trivial words of a job description.

    Words of three characters or fewer and stop words are ignored; ties keep
    first-occurrence order.
    """
    if not text:
        return []

    words = [
        word
        for word in _PUNCTUATION.sub(" ", text.lower()).split()
        if len(word) > 3 and word not in STOP_WORDS
    ]
    # Counter preserves insertion order, and most_common is a stable sort
    return [word for word, _ in Counter(words).most_common(limit)]


def match_keywords(resume_text: str, keywords: list[str]) -> KeywordReport:
    """Split keywords into those the resume mentions and those it lacks."""
    lowered = (resume_text or "").lower()
    report = KeywordReport()
    for keyword in keywords:
        if keyword.lower() in lowered:
            report.matched.append(keyword)
        else:
            report.missing.append(keyword)
    report.score = score(len(report.matched), len(keywords))
    return report


def analyze(resume_text: str, job_description: str = "", keywords=None) -> KeywordReport:
    """Compare a resume with explicit keywords or, failing that, a job description."""
    keywords = list(keywords or []) or extract_keywords(job_description)
    return match_keywords(resume_text, keywords)
