from __future__ import annotations

"""
Text normalisation helpers shared by candidate retrieval and ranking.

Retrieval and ranking must see the same view of a query, otherwise recall
silently degrades, so every text transformation lives here and nowhere else.

Public helpers:

* basic_clean(text) -> str
    Light-weight clean used when loading catalog exports (HTML, unicode).

* correct_terms(text) -> str
    Whole-word replacement of known local misspellings.

* normalize_text(text) -> str
    Canonical form used for every comparison.  Idempotent.

* tokenize(text) -> List[str]
    Ordered, de-duplicated, stop-word-free tokens of normalize_text(text).

* build_query(text) -> NormalizedQuery
    Both of the above bundled for one search call.

* expand_variants(query) -> Set[str]
    Alternate phrasings for the retrieval side to broaden recall.
"""

import re
import unicodedata
from functools import lru_cache
from typing import List, Optional, Set

from bs4 import BeautifulSoup

from . import config
from .constants import (
    CORRECTIONS_LONGEST_FIRST,
    MULTIPLIER_MARKER,
    PACK_TOKENS,
    STOP_WORDS,
    TERM_CORRECTIONS,
    TERM_SYNONYMS,
    UNIT_TOKENS,
)
from .pipeline_types import NormalizedQuery

_WS_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_UNIT_SUFFIX_CHARS = "abcdefghijklmnopqrstuvwxyz"
# get_text's separator must not detach punctuation or possessives from words
_PUNCT_SPACING_RE = re.compile(r"\s+(?=[.,!?;:%)\]]|['’]s\b)|(?<=[(\[])\s+")

# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def strip_html(text: str) -> str:
    if not text:
        return ""
    soup = BeautifulSoup(text, "html.parser")
    return _PUNCT_SPACING_RE.sub("", soup.get_text(" ", strip=True))


def _normalise_unicode(text: str) -> str:
    # Normalise quotes, accents etc. into a consistent representation.
    text = unicodedata.normalize("NFKC", text)
    text = text.replace("â", "'").replace("â", "'")
    text = text.replace("â", '"').replace("â", '"')
    text = text.replace("â", "-").replace("â", "-")
    return text


def clamp_text_length(text: str, max_chars: int = config.MAX_INPUT_CHARS) -> str:
    if len(text) > max_chars:
        return text[:max_chars]
    return text


@lru_cache(maxsize=None)
def _word_pattern(term: str) -> re.Pattern:
    """Case-insensitive whole-word pattern; inner spaces match any whitespace run."""
    parts = [re.escape(p) for p in term.split()]
    return re.compile(r"\b" + r"\s+".join(parts) + r"\b", flags=re.IGNORECASE)


def _replace_word(text: str, term: str, replacement: str) -> str:
    return _word_pattern(term).sub(lambda _m: replacement, text)


def _contains_word(text: str, term: str) -> bool:
    return _word_pattern(term).search(text) is not None


def _is_quantity(token: str) -> bool:
    """'340g', '2.5kg', '1l' -> True.  The unit must sit directly on the number."""
    number = token.rstrip(_UNIT_SUFFIX_CHARS)
    unit = token[len(number):]
    return bool(number) and unit in UNIT_TOKENS and _NUMBER_RE.fullmatch(number) is not None


def _is_multiplier(token: str) -> bool:
    if len(token) < 2:
        return False
    if token[0] == MULTIPLIER_MARKER and token[1:].isdigit():
        return True
    return token[-1] == MULTIPLIER_MARKER and token[:-1].isdigit()


def is_size_token(token: str) -> bool:
    """True for unit/size, pack/count and multiplier tokens."""
    return token in PACK_TOKENS or _is_quantity(token) or _is_multiplier(token)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def basic_clean(text: Optional[str]) -> str:
    """Light-weight clean for catalog fields.

    * strips HTML
    * normalises unicode and whitespace
    * truncates excessively long inputs
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)

    text = clamp_text_length(text)
    text = strip_html(text)
    text = _normalise_unicode(text)
    return _WS_RE.sub(" ", text).strip()


def correct_terms(text: str) -> str:
    """Rewrite known local misspellings to their canonical form, longest first."""
    if not text:
        return ""
    out = text
    for misspelling, canonical in CORRECTIONS_LONGEST_FIRST:
        out = _replace_word(out, misspelling, canonical)
    return out


def normalize_text(text: Optional[str]) -> str:
    """Canonical comparison form.

    "Grace Corned Beef 340g" -> "grace corned beef"
    "Milk 2L"                -> "milk"
    "Tuna x2"                -> "tuna"
    """
    if not text:
        return ""
    if not isinstance(text, str):
        text = str(text)

    norm = correct_terms(text)
    norm = norm.lower().strip()
    norm = _WS_RE.sub(" ", norm)
    norm = "".join(ch for ch in norm if ch.isalnum() or ch.isspace())

    tokens = [tok for tok in norm.split() if not is_size_token(tok)]
    norm = " ".join(tokens)

    # Stripping punctuation or size tokens can expose a misspelling
    # ("corn-beef" -> "cornbeef"); one more pass reaches the fixed point.
    return correct_terms(norm)


def tokenize(text: Optional[str]) -> List[str]:
    norm = normalize_text(text)
    if not norm:
        return []

    seen: Set[str] = set()
    tokens: List[str] = []
    for tok in norm.split(" "):
        if len(tok) < config.MIN_TOKEN_LEN or tok in STOP_WORDS:
            continue
        if tok not in seen:
            seen.add(tok)
            tokens.append(tok)
    return tokens


def build_query(text: Optional[str]) -> NormalizedQuery:
    raw = clamp_text_length(text or "")
    return NormalizedQuery(raw=raw, normalized=normalize_text(raw), tokens=tuple(tokenize(raw)))


def expand_variants(query: str) -> Set[str]:
    """Return the query plus its synonym / correction phrasings.

    The original query is always part of the result.  Substitutions are
    whole-word and case-insensitive so 'oil' never rewrites 'boil'.
    """
    variants: Set[str] = {query}
    if not query or not query.strip():
        return variants

    for canonical, synonyms in TERM_SYNONYMS.items():
        if _contains_word(query, canonical):
            for synonym in synonyms:
                variants.add(_replace_word(query, canonical, synonym))

        for synonym in synonyms:
            if not _contains_word(query, synonym):
                continue
            variants.add(_replace_word(query, synonym, canonical))
            for other in synonyms:
                if other != synonym:
                    variants.add(_replace_word(query, synonym, other))

    for misspelling, correction in TERM_CORRECTIONS.items():
        if _contains_word(query, misspelling):
            variants.add(_replace_word(query, misspelling, correction))

    return variants
