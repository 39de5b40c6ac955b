"""Static rule tables for role taxonomy resolution.

Everything here is built once at import and exposed read-only through
``DEFAULT_TABLES``.  Classifiers take a ``tables=`` keyword so callers (and
tests) can pass a substituted ``RuleTables`` instead.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple


# ---------------------------------------------------------------------------
# Domain taxonomy: key → (label, scoring keywords, self-evident phrases)
# Table order matters: score ties keep the first-seen domain.
# ---------------------------------------------------------------------------
GENERAL_DOMAIN = 'general'
GENERAL_LABEL = 'General'

DOMAIN_TAXONOMY = {
    'software': {
        'label': 'Software',
        'keywords': [
            'software engineer', 'software developer', 'sde', 'backend engineer',
            'frontend engineer', 'fullstack engineer', 'full stack developer',
            'full-stack developer', 'mobile developer', 'ios developer',
            'android developer', 'web developer', 'devops engineer',
            'site reliability', 'platform engineer', 'systems engineer',
        ],
        'self_evident': [
            'software', 'developer', 'backend', 'frontend', 'full stack',
            'fullstack', 'devops', 'site reliability', 'sde',
        ],
    },
    'data': {
        'label': 'Data',
        'keywords': [
            'data analyst', 'data scientist', 'data engineer', 'ml engineer',
            'machine learning engineer', 'analytics engineer', 'bi analyst',
            'business intelligence analyst', 'data science', 'applied scientist',
            'research scientist',
        ],
        'self_evident': [
            'data', 'machine learning', 'analytics', 'business intelligence',
            'ml engineer', 'scientist',
        ],
    },
    'product': {
        'label': 'Product',
        'keywords': [
            'product manager', 'product owner', 'associate product manager',
            'group product manager', 'product lead', 'technical product manager',
            'senior product manager', 'product management',
        ],
        'self_evident': ['product manager', 'product owner', 'product management', 'product lead'],
    },
    'design': {
        'label': 'Design',
        'keywords': [
            'product designer', 'ux designer', 'ui designer', 'ux/ui designer',
            'interaction designer', 'visual designer', 'graphic designer', 'design lead',
        ],
        'self_evident': ['designer', 'design', 'ux', 'ui'],
    },
    'marketing': {
        'label': 'Marketing',
        'keywords': [
            'marketing manager', 'growth manager', 'digital marketing',
            'performance marketing', 'brand manager', 'content marketing manager',
            'marketing lead', 'marketing director',
        ],
        'self_evident': ['marketing', 'brand', 'growth'],
    },
    'sales': {
        'label': 'Sales',
        'keywords': [
            'sales manager', 'account executive', 'sales executive',
            'business development manager', 'enterprise sales',
            'sales development representative', 'sales director',
        ],
        'self_evident': ['sales', 'account executive', 'business development'],
    },
    'customer_success': {
        'label': 'Customer Success',
        'keywords': [
            'customer success manager', 'csm', 'customer support manager',
            'client success manager',
        ],
        'self_evident': ['customer success', 'customer support', 'client success'],
    },
    'operations': {
        'label': 'Operations',
        'keywords': [
            'operations manager', 'supply chain manager', 'logistics manager',
            'operations director',
        ],
        'self_evident': ['operations', 'supply chain', 'logistics'],
    },
    'consulting': {
        'label': 'Consulting',
        'keywords': [
            'consultant', 'management consultant', 'strategy consultant',
            'business consultant',
        ],
        'self_evident': ['consultant', 'consulting'],
    },
    'research': {
        'label': 'Research',
        'keywords': [
            'market research', 'research analyst', 'insights analyst',
            'competitive intelligence', 'user researcher', 'ux researcher',
        ],
        'self_evident': ['research', 'insights', 'competitive intelligence'],
    },
    'finance': {
        'label': 'Finance',
        'keywords': [
            'finance manager', 'fp&a analyst', 'financial analyst',
            'accounting manager', 'finance director', 'controller',
        ],
        'self_evident': ['finance', 'financial', 'fp&a', 'accounting', 'controller'],
    },
    'hr': {
        'label': 'HR',
        'keywords': [
            'hr manager', 'human resources manager', 'hr director',
            'hr business partner', 'hrbp', 'compensation manager', 'benefits manager',
        ],
        'self_evident': ['hr', 'human resources', 'hrbp', 'people'],
    },
    'recruiting': {
        'label': 'Recruiting',
        'keywords': ['recruiter', 'talent acquisition', 'recruiting manager', 'sourcer'],
        'self_evident': ['recruiter', 'recruiting', 'talent acquisition', 'sourcer'],
    },
    'engineering_management': {
        'label': 'Engineering Management',
        'keywords': [
            'engineering manager', 'tech lead', 'engineering director',
            'vp engineering', 'director of engineering',
        ],
        'self_evident': ['engineering manager', 'engineering director', 'of engineering', 'tech lead'],
    },
}


# ---------------------------------------------------------------------------
# Six-level seniority scale, coarsened to the three buckets stored on a kit
# ---------------------------------------------------------------------------
SENIORITY_LEVELS = [
    {'id': 'entry',     'label': 'Entry Level', 'bucket': 'entry'},
    {'id': 'mid',       'label': 'Mid Level',   'bucket': 'mid'},
    {'id': 'senior',    'label': 'Senior',      'bucket': 'senior'},
    {'id': 'director',  'label': 'Director',    'bucket': 'senior'},
    {'id': 'vp',        'label': 'VP',          'bucket': 'senior'},
    {'id': 'executive', 'label': 'Executive',   'bucket': 'senior'},
]

DEFAULT_SENIORITY = 'mid'

# Title rules, evaluated in this order; first hit wins.
# Entries are regex fragments matched as whole words against the lower-cased
# title.  Acronyms match exactly; full words also accept their common
# inflections ("leader", "interns") but not unrelated words ("internal").
SENIORITY_TITLE_RULES = [
    ('executive', ['chief', 'ceo', 'cto', 'cfo', 'coo', 'c-level', r'(?<!vice )president']),
    ('vp',        ['vp', 'vice president', 'svp', 'evp', 'avp']),
    ('director',  [r'directors?', 'head of', 'practice leader', 'practice director']),
    ('senior',    [r'seniors?', r'sr\.', 'sr', r'principals?', 'staff', r'lead(?:ers?|s)?']),
    ('entry',     ['junior', r'jr\.', 'jr', r'associates?', 'entry', r'intern(?:s|ship)?',
                   r'trainees?', r'graduates?']),
]

# JD rules only fire when no title rule did.
SENIORITY_JD_RULES = [
    ('entry',  ['0-2 years', '0-3 years', r'freshers?', r'new grad(?:uate)?s?', r'entry[- ]level']),
    ('senior', [r'(?:[89]|1[0-5])\+ years']),
]


# ---------------------------------------------------------------------------
# Domain fallback heuristics (only consulted when the keyword score is weak)
# ---------------------------------------------------------------------------
MIN_DOMAIN_SCORE = 2
TITLE_KEYWORD_WEIGHT = 3
JD_KEYWORD_WEIGHT = 1

BUSINESS_CONTEXT_TERMS = ['business', 'stakeholder', 'strategy', 'client', 'operations', 'process']
MARKET_INSIGHT_TERMS = ['market', 'competitive', 'insights']
CONSULTING_MANAGER_TERMS = ['consulting', 'client', 'engagement']
CONSULTING_DIRECTOR_TERMS = ['consulting', 'practice', 'partner']


# ---------------------------------------------------------------------------
# Title normalizer vocabularies
# ---------------------------------------------------------------------------
COMPANY_NAMES = [
    'Bain & Company', 'Bain', 'McKinsey & Company', 'McKinsey', 'Boston Consulting Group',
    'BCG', 'Deloitte', 'Accenture', 'PwC', 'EY', 'KPMG', 'Google', 'Amazon',
    'Microsoft', 'Meta', 'Apple', 'Netflix', 'Uber', 'Airbnb', 'Stripe',
    'Salesforce', 'Infosys', 'TCS', 'Wipro', 'Flipkart', 'Swiggy', 'Zomato',
]

TEAM_CONTEXT_PHRASES = [
    'revenue operations', 'platform team', 'growth team', 'core team',
    'infrastructure team', 'payments team', 'search team', 'ads team',
    'internal tools', 'special projects',
]

FUNCTIONAL_AREAS = [
    'product', 'product management', 'engineering', 'software engineering',
    'data', 'data science', 'data engineering', 'analytics', 'design',
    'product design', 'marketing', 'growth marketing', 'sales', 'finance',
    'operations', 'strategy', 'human resources', 'people', 'talent acquisition',
    'customer success', 'business development', 'technology', 'research',
    'machine learning', 'security', 'infrastructure', 'cloud',
]

BARE_LEVEL_WORDS = [
    'director', 'senior director', 'associate director', 'managing director',
    'manager', 'senior manager', 'head', 'vp', 'svp', 'evp', 'avp',
    'vice president', 'senior vice president', 'lead', 'chief',
]

SPECIALIST_ROLE_WORDS = [
    'architect', 'engineer', 'scientist', 'developer', 'analyst', 'designer', 'consultant',
]

LEVEL_TOKEN_PATTERN = r'level\s+[1-5]|iii|ii|i|l[1-7]|e[3-7]|[1-5]'

LOWERCASE_CONNECTIVES = ['of', 'and', 'the', 'for', 'in']


# ---------------------------------------------------------------------------
# Role-family hint → domain (used by the resolver's third pass)
# ---------------------------------------------------------------------------
ROLE_FAMILY_DOMAINS = {
    'tech': 'software',
    'engineering': 'software',
    'data': 'data',
    'product': 'product',
    'design': 'design',
    'business': 'consulting',
    'sales': 'sales',
    'marketing': 'marketing',
    'operations': 'operations',
    'finance': 'finance',
    'hr': 'hr',
}


# ---------------------------------------------------------------------------
# Generated kit defaults
# ---------------------------------------------------------------------------
DEFAULT_INTERVIEW_TYPES = ('hr', 'technical', 'behavioral')
GENERIC_KIT_TAG = 'generic'


@dataclass(frozen=True)
class DomainEntry:
    key: str
    label: str
    keywords: Tuple[str, ...]
    self_evident: Tuple[str, ...]


@dataclass(frozen=True)
class RuleTables:
    """Read-only bundle of every table the classifiers consult."""

    domains: Tuple[DomainEntry, ...]
    seniority_labels: Mapping[str, str]
    seniority_buckets: Mapping[str, str]
    seniority_title_rules: Tuple[Tuple[str, Tuple[str, ...]], ...]
    seniority_jd_rules: Tuple[Tuple[str, Tuple[str, ...]], ...]
    company_names: Tuple[str, ...]
    team_context_phrases: Tuple[str, ...]
    functional_areas: frozenset
    bare_level_words: frozenset
    specialist_role_words: Tuple[str, ...]
    level_token_pattern: str
    lowercase_connectives: frozenset
    role_family_domains: Mapping[str, str]
    default_interview_types: Tuple[str, ...] = field(default=DEFAULT_INTERVIEW_TYPES)

    def domain(self, key):
        """Look up a DomainEntry by key.  Returns None for unknown keys."""
        for entry in self.domains:
            if entry.key == key:
                return entry
        return None

    def domain_label(self, key):
        entry = self.domain(key)
        return entry.label if entry else GENERAL_LABEL

    def seniority_label(self, level):
        return self.seniority_labels.get(level, self.seniority_labels[DEFAULT_SENIORITY])


def build_tables(domain_taxonomy=None, **overrides) -> RuleTables:
    """Freeze the module-level tables (or a substitute taxonomy) into RuleTables."""
    taxonomy = domain_taxonomy if domain_taxonomy is not None else DOMAIN_TAXONOMY
    values = {
        'domains': tuple(
            DomainEntry(
                key=key,
                label=data['label'],
                keywords=tuple(k.lower() for k in data['keywords']),
                self_evident=tuple(p.lower() for p in data.get('self_evident', [])),
            )
            for key, data in taxonomy.items()
        ),
        'seniority_labels': MappingProxyType({lv['id']: lv['label'] for lv in SENIORITY_LEVELS}),
        'seniority_buckets': MappingProxyType({lv['id']: lv['bucket'] for lv in SENIORITY_LEVELS}),
        'seniority_title_rules': tuple((lv, tuple(words)) for lv, words in SENIORITY_TITLE_RULES),
        'seniority_jd_rules': tuple((lv, tuple(words)) for lv, words in SENIORITY_JD_RULES),
        # Longest first so "Bain & Company" is removed before "Bain"
        'company_names': tuple(sorted(COMPANY_NAMES, key=len, reverse=True)),
        'team_context_phrases': tuple(sorted(TEAM_CONTEXT_PHRASES, key=len, reverse=True)),
        'functional_areas': frozenset(FUNCTIONAL_AREAS),
        'bare_level_words': frozenset(BARE_LEVEL_WORDS),
        'specialist_role_words': tuple(SPECIALIST_ROLE_WORDS),
        'level_token_pattern': LEVEL_TOKEN_PATTERN,
        'lowercase_connectives': frozenset(LOWERCASE_CONNECTIVES),
        'role_family_domains': MappingProxyType(dict(ROLE_FAMILY_DOMAINS)),
    }
    values.update(overrides)
    return RuleTables(**values)


DEFAULT_TABLES = build_tables()


def coarsen_seniority(level, tables=DEFAULT_TABLES):
    """Collapse a six-level seniority id to the entry/mid/senior kit bucket."""
    return tables.seniority_buckets.get(level, DEFAULT_SENIORITY)
