"""Title and skill similarity scores, both normalised to [0, 1]."""

from typing import Iterable, Optional


def _jaccard(left: set, right: set) -> float:
    if not left or not right:
        return 0.0
    return len(left & right) / len(left | right)


def title_similarity(title_a: Optional[str], title_b: Optional[str]) -> float:
    """1.0 for equal titles, 0.8 when one contains the other, else word Jaccard.

    Only words longer than 2 characters take part in the Jaccard step.
    """
    a = (title_a or '').lower().strip()
    b = (title_b or '').lower().strip()
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    if a in b or b in a:
        return 0.8
    words_a = {w for w in a.split() if len(w) > 2}
    words_b = {w for w in b.split() if len(w) > 2}
    return _jaccard(words_a, words_b)


def skill_overlap(skills_a: Optional[Iterable[str]], skills_b: Optional[Iterable[str]]) -> float:
    """Jaccard similarity of two skill lists, compared case-insensitively."""
    set_a = {s.lower().strip() for s in (skills_a or []) if s and s.strip()}
    set_b = {s.lower().strip() for s in (skills_b or []) if s and s.strip()}
    return _jaccard(set_a, set_b)
