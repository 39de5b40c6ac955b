"""Role-kit resolution: match a free-text job title to a canonical role kit.

Resolver cascade (first stage that produces a match wins):
  1. exact/substring base-title match      -> high,  exact
  2. domain classifier + title similarity   -> graded, domain
  3. role-family hint                       -> low,   domain
  4. default fallback                       -> low,   none

``ensure_role_kit_for_job`` builds on the resolver: anything short of a
high-confidence match is either folded into a similar existing kit (reuse
score >= 60) or turned into a new generic kit.
"""

import asyncio
import logging
import re
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from role_classifier import detect_domain, detect_seniority
from similarity import skill_overlap, title_similarity
from taxonomy_data import DEFAULT_TABLES, GENERAL_DOMAIN, GENERIC_KIT_TAG, coarsen_seniority
from title_normalizer import normalize_title, whole_word

logger = logging.getLogger(__name__)

MAX_ALTERNATIVES = 3
MAX_FALLBACK_ALTERNATIVES = 5
MEDIUM_SIMILARITY = 0.3
HIGH_SIMILARITY = 0.5
MAX_FOCUS_SKILLS = 10

# Reuse score, out of 100
REUSE_THRESHOLD = 60
REUSE_TITLE_WEIGHT = 40
REUSE_DOMAIN_POINTS = 30
REUSE_SENIORITY_POINTS = 15
REUSE_SKILL_WEIGHT = 15

_TRAILING_PAREN_RE = re.compile(r'\s*\([^)]*\)\s*$')


@dataclass
class AlternativeMatch:
    role_kit_id: int
    role_kit_name: str
    confidence: str


@dataclass
class MatchResult:
    role_kit_id: int
    role_kit_name: str
    confidence: str                      # high / medium / low
    match_type: str                      # exact / keyword / domain / none / generated
    role_kit_category: Optional[str] = None
    alternative_matches: List[AlternativeMatch] = field(default_factory=list)

    def to_dict(self):
        return asdict(self)


def base_title(kit_name: str) -> str:
    """Kit name without a trailing " - Domain (Level)" or " (Level)" suffix."""
    base = (kit_name or '').split(' - ')[0]
    return _TRAILING_PAREN_RE.sub('', base).strip()


def _match(kit, confidence, match_type, alternatives=None) -> MatchResult:
    return MatchResult(
        role_kit_id=kit.id,
        role_kit_name=kit.name,
        confidence=confidence,
        match_type=match_type,
        role_kit_category=kit.role_category,
        alternative_matches=alternatives or [],
    )


def _alternatives(kits, exclude_id, confidence, limit) -> List[AlternativeMatch]:
    return [
        AlternativeMatch(kit.id, kit.name, confidence)
        for kit in kits if kit.id != exclude_id
    ][:limit]


def _first_at_level(kits, level):
    return next((kit for kit in kits if kit.level == level), None)


def _name_has(kit, *words):
    name = kit.name.lower()
    return any(word in name for word in words)


# ---------------------------------------------------------------------------
# Resolver stages.  Each takes the full kit list and returns a match or None.
# ---------------------------------------------------------------------------

def _exact_stage(kits, role_title, role_family, jd_text, tables):
    forms = {normalize_title(role_title, tables).lower(), (role_title or '').lower().strip()}
    forms.discard('')
    for kit in kits:
        kit_base = base_title(kit.name).lower()
        if not kit_base:
            continue
        if any(kit_base == form or kit_base in form or form in kit_base for form in forms):
            same_domain = [k for k in kits if k.domain == kit.domain]
            return _match(kit, 'high', 'exact',
                          _alternatives(same_domain, kit.id, 'medium', MAX_ALTERNATIVES))
    return None


def _pick_by_seniority(kits, seniority):
    """Entry kit for entry titles, senior kit for senior/director, else mid, else entry."""
    preferred = {'entry': 'entry', 'senior': 'senior', 'director': 'senior'}.get(seniority)
    for level in (preferred, 'mid', 'entry'):
        kit = _first_at_level(kits, level) if level else None
        if kit:
            return kit
    return None


def _domain_stage(kits, role_title, role_family, jd_text, tables):
    domain = detect_domain(role_title, jd_text, tables)
    if domain == GENERAL_DOMAIN:
        return None
    domain_kits = [kit for kit in kits if kit.domain == domain]
    if not domain_kits:
        return None

    selected, best_similarity = domain_kits[0], 0.0
    for kit in domain_kits:
        similarity = title_similarity(role_title, kit.name)
        if similarity > best_similarity:
            selected, best_similarity = kit, similarity

    if best_similarity < MEDIUM_SIMILARITY:
        seniority = detect_seniority(role_title, jd_text, tables)
        selected = _pick_by_seniority(domain_kits, seniority) or selected

    if best_similarity >= HIGH_SIMILARITY:
        confidence = 'high'
    elif best_similarity >= MEDIUM_SIMILARITY:
        confidence = 'medium'
    else:
        confidence = 'low'

    return _match(selected, confidence, 'domain',
                  _alternatives(domain_kits, selected.id, 'medium', MAX_ALTERNATIVES))


def _role_family_stage(kits, role_title, role_family, jd_text, tables):
    if not role_family:
        return None
    domain = tables.role_family_domains.get(role_family.lower().strip())
    domain_kits = [kit for kit in kits if kit.domain == domain] if domain else []
    if not domain_kits:
        return None
    selected = next((kit for kit in domain_kits if _name_has(kit, 'entry', 'associate')),
                    domain_kits[0])
    return _match(selected, 'low', 'domain',
                  _alternatives(domain_kits, selected.id, 'medium', MAX_ALTERNATIVES))


def _default_stage(kits, role_title, role_family, jd_text, tables):
    selected = next((kit for kit in kits if kit.domain == 'software' and _name_has(kit, 'entry')),
                    kits[0])
    return _match(selected, 'low', 'none',
                  _alternatives(kits, selected.id, 'low', MAX_FALLBACK_ALTERNATIVES))


RESOLVER_STAGES = [_exact_stage, _domain_stage, _role_family_stage, _default_stage]


def resolve_role_kit(kits, role_title, role_family=None, jd_text=None,
                     tables=DEFAULT_TABLES) -> Optional[MatchResult]:
    """Run the resolver cascade against an already-loaded list of kits."""
    if not kits:
        return None
    for stage in RESOLVER_STAGES:
        result = stage(kits, role_title, role_family, jd_text, tables)
        if result:
            logger.debug('%s resolved %r -> %s (%s/%s)', stage.__name__, role_title,
                         result.role_kit_name, result.confidence, result.match_type)
            return result
    return None


async def map_role_title_to_role_kit(store, role_title: str, role_family: str = None,
                                     jd_text: str = None, tables=DEFAULT_TABLES) -> Optional[MatchResult]:
    """Resolve a title to the best existing role kit.  Read-only.

    Returns None only when there are no role kits at all.
    """
    kits = await store.list_role_kits()
    return resolve_role_kit(kits, role_title, role_family, jd_text, tables)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class KeyedLock:
    """asyncio locks keyed by string, discarded when nobody holds or awaits them."""

    def __init__(self):
        self._locks = {}
        self._users = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key):
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                self._locks.pop(key, None)


_generation_locks = KeyedLock()


def collect_focus_skills(jd_parsed) -> list:
    """First 10 of required + preferred skills from a parsed JD."""
    if not jd_parsed:
        return []
    required = jd_parsed.get('required_skills') or []
    preferred = jd_parsed.get('preferred_skills') or []
    return [*required, *preferred][:MAX_FOCUS_SKILLS]


def reuse_score(kit, normalized_title, domain, level, skills) -> float:
    score = title_similarity(normalized_title, base_title(kit.name)) * REUSE_TITLE_WEIGHT
    if kit.domain == domain:
        score += REUSE_DOMAIN_POINTS
    # Kits only carry entry/mid/senior; director and above count as senior
    if kit.level == level:
        score += REUSE_SENIORITY_POINTS
    score += skill_overlap(skills, kit.skills) * REUSE_SKILL_WEIGHT
    return score


def find_reusable_kit(kits, normalized_title, domain, level, skills):
    """Best-scoring kit if it reaches REUSE_THRESHOLD, else None."""
    best_kit, best_score = None, 0.0
    for kit in kits:
        score = reuse_score(kit, normalized_title, domain, level, skills)
        if score > best_score:
            best_kit, best_score = kit, score
    if best_kit is not None and best_score >= REUSE_THRESHOLD:
        return best_kit, best_score
    return None


def _domain_is_evident(normalized_title, domain, tables) -> bool:
    entry = tables.domain(domain)
    if entry is None:
        return False
    title_lower = normalized_title.lower()
    return any(re.search(whole_word(re.escape(phrase)), title_lower) for phrase in entry.self_evident)


def derive_kit_name(normalized_title, domain, seniority, tables=DEFAULT_TABLES) -> str:
    label = tables.seniority_label(seniority)
    if domain == GENERAL_DOMAIN or _domain_is_evident(normalized_title, domain, tables):
        return f'{normalized_title} ({label})'
    return f'{normalized_title} - {tables.domain_label(domain)} ({label})'


def _describe(normalized_title, domain, seniority, company_name, tables) -> str:
    text = (f'Generic practice kit for {normalized_title} roles '
            f'({tables.domain_label(domain)}, {tables.seniority_label(seniority)}).')
    if company_name:
        text += f' First derived from a {company_name} posting.'
    return text


async def ensure_role_kit_for_job(store, role_title: str, jd_text: str = None,
                                  jd_parsed: dict = None, company_name: str = None,
                                  tables=DEFAULT_TABLES) -> MatchResult:
    """Find the role kit for a job, creating a generic one if nothing fits.

    Calls for titles that normalize the same way are serialized, so the
    second caller sees the kit the first one created instead of inserting
    a near-duplicate.
    """
    normalized = normalize_title(role_title, tables)
    async with _generation_locks.hold(normalized.lower()):
        return await _find_or_create(store, role_title, normalized, jd_text, jd_parsed,
                                     company_name, tables)


async def _find_or_create(store, role_title, normalized, jd_text, jd_parsed, company_name, tables):
    kits = await store.list_role_kits()

    existing = resolve_role_kit(kits, role_title, None, jd_text, tables)
    if existing and existing.confidence == 'high':
        return existing

    domain = detect_domain(role_title, jd_text, tables)
    seniority = detect_seniority(role_title, jd_text, tables)
    level = coarsen_seniority(seniority, tables)
    skills = collect_focus_skills(jd_parsed)

    reusable = find_reusable_kit(kits, normalized, domain, level, skills)
    if reusable:
        kit, score = reusable
        logger.info('Reusing role kit %s (%s) for %r, score %.1f', kit.id, kit.name, role_title, score)
        return _match(kit, 'high', 'exact')

    kit = await store.insert_role_kit(
        name=derive_kit_name(normalized, domain, seniority, tables),
        level=level,
        domain=domain,
        description=_describe(normalized, domain, seniority, company_name, tables),
        skills_focus=skills or None,
        default_interview_types=tables.default_interview_types,
        track_tags=[GENERIC_KIT_TAG, domain, seniority],
    )
    logger.info('Created role kit %s (%s) for %r', kit.id, kit.name, role_title)
    return _match(kit, 'high', 'generated')


def preview_role_kit_derivation(role_title: str, jd_text: str = None, tables=DEFAULT_TABLES) -> dict:
    """Show how a title would be classified and named, without touching the store."""
    normalized = normalize_title(role_title, tables)
    domain = detect_domain(role_title, jd_text, tables)
    seniority = detect_seniority(role_title, jd_text, tables)
    return {
        'original': role_title,
        'normalized': normalized,
        'domain': domain,
        'seniority': seniority,
        'level': coarsen_seniority(seniority, tables),
        'suggested_kit_name': derive_kit_name(normalized, domain, seniority, tables),
    }
