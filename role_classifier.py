"""Seniority and domain classification for job titles.

Both classifiers are ordered cascades of ``ClassifierRule`` objects with
first-match-wins semantics, so the precedence order is the list order.
They never raise: unknown or empty input degrades to ``mid`` / ``general``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from taxonomy_data import (
    BUSINESS_CONTEXT_TERMS,
    CONSULTING_DIRECTOR_TERMS,
    CONSULTING_MANAGER_TERMS,
    DEFAULT_SENIORITY,
    DEFAULT_TABLES,
    GENERAL_DOMAIN,
    JD_KEYWORD_WEIGHT,
    MARKET_INSIGHT_TERMS,
    MIN_DOMAIN_SCORE,
    TITLE_KEYWORD_WEIGHT,
)
from title_normalizer import whole_word

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifierRule:
    """One step of a cascade: if ``predicate(title, jd)`` holds, answer ``outcome``."""

    name: str
    outcome: str
    predicate: Callable[[str, str], bool]


def first_match(rules: List[ClassifierRule], title: str, jd: str, default: str) -> str:
    for rule in rules:
        if rule.predicate(title, jd):
            logger.debug('Rule %s matched %r -> %s', rule.name, title, rule.outcome)
            return rule.outcome
    return default


def _any_term(text: str, terms) -> bool:
    return any(term in text for term in terms)


# ---------------------------------------------------------------------------
# Seniority
# ---------------------------------------------------------------------------

def _phrase_rule(name, outcome, fragments, on_jd=False) -> ClassifierRule:
    pattern = re.compile(whole_word('|'.join(fragments)))
    if on_jd:
        return ClassifierRule(name, outcome, lambda title, jd: bool(pattern.search(jd)))
    return ClassifierRule(name, outcome, lambda title, jd: bool(pattern.search(title)))


def seniority_rules(tables=DEFAULT_TABLES) -> List[ClassifierRule]:
    """Title rules first (executive → entry), then JD experience rules."""
    rules = [
        _phrase_rule(f'title:{level}', level, fragments)
        for level, fragments in tables.seniority_title_rules
    ]
    rules.extend(
        _phrase_rule(f'jd:{level}', level, fragments, on_jd=True)
        for level, fragments in tables.seniority_jd_rules
    )
    return rules


def detect_seniority(title: str, jd_text: Optional[str] = None, tables=DEFAULT_TABLES) -> str:
    """Map a title (+ optional JD text) to one of the six seniority levels."""
    return first_match(
        seniority_rules(tables),
        (title or '').lower(),
        (jd_text or '').lower(),
        DEFAULT_SENIORITY,
    )


# ---------------------------------------------------------------------------
# Domain
# ---------------------------------------------------------------------------

def domain_scores(title: str, jd_text: Optional[str] = None, tables=DEFAULT_TABLES) -> dict:
    """Weighted keyword score per domain key, in taxonomy order."""
    title_lower = (title or '').lower()
    jd_lower = (jd_text or '').lower()
    scores = {}
    for entry in tables.domains:
        title_hits = sum(1 for keyword in entry.keywords if keyword in title_lower)
        jd_hits = sum(1 for keyword in entry.keywords if keyword in jd_lower)
        scores[entry.key] = TITLE_KEYWORD_WEIGHT * title_hits + JD_KEYWORD_WEIGHT * jd_hits
    return scores


def _non_data_analyst(title: str) -> bool:
    return 'analyst' in title and 'data' not in title


DOMAIN_FALLBACK_RULES = [
    ClassifierRule(
        'analyst:business-context', 'consulting',
        lambda title, jd: _non_data_analyst(title) and (
            _any_term(title, BUSINESS_CONTEXT_TERMS) or _any_term(jd, BUSINESS_CONTEXT_TERMS)),
    ),
    ClassifierRule(
        'analyst:market-insights', 'research',
        lambda title, jd: _non_data_analyst(title) and (
            _any_term(title, MARKET_INSIGHT_TERMS) or _any_term(jd, MARKET_INSIGHT_TERMS)),
    ),
    ClassifierRule(
        'manager:consulting-jd', 'consulting',
        lambda title, jd: 'manager' in title and _any_term(jd, CONSULTING_MANAGER_TERMS),
    ),
    ClassifierRule(
        'director:consulting-jd', 'consulting',
        lambda title, jd: 'director' in title and _any_term(jd, CONSULTING_DIRECTOR_TERMS),
    ),
]


def detect_domain(title: str, jd_text: Optional[str] = None, tables=DEFAULT_TABLES) -> str:
    """Map a title (+ optional JD text) to a domain key, or ``general``.

    Title keyword hits weigh 3, JD hits weigh 1.  The strictly highest
    score wins (ties keep taxonomy order).  Below MIN_DOMAIN_SCORE the
    fallback heuristics get a chance before settling on ``general``.
    """
    best_domain, best_score = GENERAL_DOMAIN, 0
    for key, score in domain_scores(title, jd_text, tables).items():
        if score > best_score:
            best_domain, best_score = key, score

    if best_score >= MIN_DOMAIN_SCORE:
        return best_domain

    return first_match(
        DOMAIN_FALLBACK_RULES,
        (title or '').lower(),
        (jd_text or '').lower(),
        GENERAL_DOMAIN,
    )
