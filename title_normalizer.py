"""Title normalization: raw posting titles → canonical display form.

Pipeline (order matters):
  1. drop (parenthetical) and [bracketed] asides
  2. drop an "at <Company>" suffix
  3. drop known company names
  4. drop team / context phrases
  5. resolve "Part A, Part B" titles
  6. keep the part before " - "
  7. drop level tokens (II, L5, Level 3, ...)
  8. collapse whitespace and title-case

Steps 1-7 run to a fixed point so the result is stable under re-normalization.
"""

import logging
import re

from taxonomy_data import DEFAULT_TABLES

logger = logging.getLogger(__name__)

_ASIDE_RE = re.compile(r'\([^)]*\)|\[[^\]]*\]')
_AT_COMPANY_RE = re.compile(r'\s+at\s+.*$', re.IGNORECASE)
_DASH_SPLIT_RE = re.compile(r'\s+-\s+')
_WHITESPACE_RE = re.compile(r'\s+')
_DANGLING_CHARS = ' ,-|/'
MAX_CLEAN_PASSES = 10
ACRONYM_MAX_LEN = 4


def whole_word(fragment: str) -> str:
    """Wrap a regex fragment so it only matches as a whole word."""
    return r'(?<!\w)(?:' + fragment + r')(?!\w)'


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(' ', text).strip()


def _strip_companies(title: str, tables) -> str:
    for name in tables.company_names:
        title = re.sub(whole_word(re.escape(name)), ' ', title, flags=re.IGNORECASE)
    return title


def _strip_team_context(title: str, tables) -> str:
    for phrase in tables.team_context_phrases:
        title = re.sub(r',?\s*' + whole_word(re.escape(phrase)), ' ', title, flags=re.IGNORECASE)
    return title


def _resolve_commas(title: str, tables) -> str:
    """Apply the two-part decision table to "First, Second" titles."""
    parts = title.split(',')
    if len(parts) == 1:
        return title
    if len(parts) > 2:
        return parts[0]

    first, second = parts[0].strip(), parts[1].strip()
    if second.lower() not in tables.functional_areas:
        # Not a function: "Engineer, Checkout" is team context
        return first

    first_lower = first.lower()
    if first_lower in tables.bare_level_words:
        return f'{first} Of {second}'
    for word in tables.specialist_role_words:
        if re.search(whole_word(re.escape(word)), first_lower):
            return f'{second} {first}'
    return first


def _strip_level_tokens(title: str, tables) -> str:
    return re.sub(whole_word(tables.level_token_pattern), ' ', title, flags=re.IGNORECASE)


def _case_word(word: str) -> str:
    if word.isupper() and len(word) <= ACRONYM_MAX_LEN:
        return word                                    # VP, UX, SDE, FP&A
    rest = word[1:]
    if rest != rest.lower() and not word.isupper():
        return word                                    # iOS, DevOps
    return word[:1].upper() + rest.lower()


def _title_case(title: str, tables) -> str:
    cased = []
    for index, word in enumerate(title.split(' ')):
        if index > 0 and word.lower() in tables.lowercase_connectives:
            cased.append(word)
        else:
            cased.append(_case_word(word))
    return ' '.join(cased)


def _clean_once(title: str, tables) -> str:
    title = _ASIDE_RE.sub(' ', title)
    title = _AT_COMPANY_RE.sub('', title)
    title = _strip_companies(title, tables)
    title = _strip_team_context(title, tables)
    title = _resolve_commas(_collapse(title), tables)

    title = _DASH_SPLIT_RE.split(title, maxsplit=1)[0]

    title = _strip_level_tokens(title, tables)
    title = _collapse(title).strip(_DANGLING_CHARS)
    return _collapse(title)


def normalize_title(raw_title: str, tables=DEFAULT_TABLES) -> str:
    """Normalize a raw job title into its canonical display form.

    Steps 1-7 are repeated until the text stops changing: dropping a level
    token or reordering a comma title can expose a new " - " or " at ".
    Each pass either shrinks the text or consumes a comma, so it settles
    quickly.

    Never raises.  If the pipeline erases everything, the trimmed input is
    returned instead of an empty string.
    """
    original = (raw_title or '').strip()
    title = _collapse(original)

    for _ in range(MAX_CLEAN_PASSES):
        cleaned = _clean_once(title, tables)
        if cleaned == title or not cleaned:
            break
        title = cleaned
    title = cleaned

    if not title:
        logger.debug('Normalization erased %r; keeping original', original)
        return original

    return _title_case(title, tables)
