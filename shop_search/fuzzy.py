"""
Typo-tolerant string matching.

Similarity is the Levenshtein ratio ``1 - distance / max(len)``; a pair is
only accepted when the ratio clears FUZZY_SIMILARITY_THRESHOLD *and* the raw
distance stays within a cap that grows with token length.  Short tokens are
never fuzzy-matched.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from . import config

_ALPHABET = "abcdefghijklmnopqrstuvwxyz"


def edit_distance(a: str, b: str) -> int:
    """Single-character insert / delete / substitute distance."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    a, b = (a or "").lower(), (b or "").lower()
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - edit_distance(a, b) / longest


def max_edits_for_length(length: int) -> int:
    if length < config.FUZZY_MIN_TOKEN_LEN:
        return 0
    if length < config.FUZZY_LONG_TOKEN_LEN:
        return config.FUZZY_MAX_EDITS_SHORT
    return config.FUZZY_MAX_EDITS_LONG


def is_fuzzy_match(a: str, b: str) -> bool:
    a, b = (a or "").lower(), (b or "").lower()
    if len(a) < config.FUZZY_MIN_TOKEN_LEN or len(b) < config.FUZZY_MIN_TOKEN_LEN:
        return False
    distance = edit_distance(a, b)
    if distance > max_edits_for_length(max(len(a), len(b))):
        return False
    return 1.0 - distance / max(len(a), len(b)) >= config.FUZZY_SIMILARITY_THRESHOLD


def best_fuzzy_partner(token: str, candidates: Iterable[str]) -> Tuple[str, float]:
    """
    Return (candidate, similarity) for the closest accepted candidate,
    or ("", 0.0) when nothing is close enough.  Earlier candidates win ties.
    """
    best, best_sim = "", 0.0
    for cand in candidates:
        if not is_fuzzy_match(token, cand):
            continue
        sim = similarity(token, cand)
        if sim > best_sim:
            best, best_sim = cand, sim
    return best, best_sim


def field_fuzzy_similarity(field_text: str, query_tokens: Sequence[str]) -> Tuple[bool, float]:
    """
    Fuzzy-compare a normalised field against query tokens.

    Only tokens of at least FUZZY_MIN_TOKEN_LEN take part.  The field
    matches when enough query tokens find a fuzzy partner among the field's
    tokens; the ratio is the mean best similarity over the eligible query
    tokens (tokens without a partner count as 0).
    """
    eligible = [t for t in query_tokens if len(t) >= config.FUZZY_MIN_TOKEN_LEN]
    if not eligible or not field_text:
        return False, 0.0

    field_tokens = [t for t in field_text.split() if len(t) >= config.FUZZY_MIN_TOKEN_LEN]
    if not field_tokens:
        return False, 0.0

    matched = 0
    total = 0.0
    for tok in eligible:
        _, sim = best_fuzzy_partner(tok, field_tokens)
        if sim > 0.0:
            matched += 1
            total += sim

    needed = math.ceil(len(eligible) * config.FUZZY_MIN_TOKEN_COVERAGE)
    if matched == 0 or matched < needed:
        return False, 0.0
    return True, total / len(eligible)


def typo_variations(word: str, max_variations: int = 10) -> List[str]:
    """
    Generate likely single-typo spellings of ``word`` for retrieval-side
    recall broadening: substitutions in the first five positions, deletions
    in the first three (words longer than three), insertions of a-e in the
    first three, then adjacent transpositions.
    """
    word = (word or "").lower()
    if len(word) < config.FUZZY_MIN_TOKEN_LEN or max_variations <= 0:
        return []

    variations: List[str] = []
    seen = {word}

    def _add(v: str) -> bool:
        if v not in seen:
            seen.add(v)
            variations.append(v)
        return len(variations) >= max_variations

    for i in range(min(len(word), 5)):
        for ch in _ALPHABET:
            if ch != word[i] and _add(word[:i] + ch + word[i + 1:]):
                return variations

    if len(word) > 3:
        for i in range(min(len(word), 3)):
            if _add(word[:i] + word[i + 1:]):
                return variations

    for i in range(min(len(word), 3)):
        for ch in _ALPHABET[:5]:
            if _add(word[:i] + ch + word[i:]):
                return variations

    for i in range(len(word) - 1):
        if _add(word[:i] + word[i + 1] + word[i] + word[i + 2:]):
            return variations

    return variations


def query_typo_variations(tokens: Sequence[str], max_per_token: int = 10) -> List[str]:
    """Typo spellings for every query token, in token order, without repeats."""
    out: List[str] = []
    seen = set(tokens)
    for tok in tokens:
        for v in typo_variations(tok, max_per_token):
            if v not in seen:
                seen.add(v)
                out.append(v)
    return out
