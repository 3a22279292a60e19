# cardb/nlp/normalize.py
from __future__ import annotations
import re
from typing import List, Optional

from rapidfuzz import fuzz, process
from unidecode import unidecode

from cardb.nlp.aliases import BRAND_ALIAS, STOPWORDS
from cardb.settings import KNOWN_BRANDS


# -----------------------------------------------------------------------------
# Basic normalization
# -----------------------------------------------------------------------------
def norm_txt(s: str | None) -> str:
    """
    Normalizes text: strips accents, lower-cases, collapses whitespace.
    """
    s = unidecode(s or "")
    s = s.strip().lower()
    s = re.sub(r"\s+", " ", s)
    return s


_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*\n?")


def strip_code_fences(text: str) -> str:
    """Removes ```json ... ``` wrappers a model may put around its JSON."""
    return _FENCE_RE.sub("", text or "").strip()


def contains_phrase(text_norm: str, phrase: str, *, plural: bool = False) -> bool:
    """
    Whole-word match against already normalized text ("ford" is not in "afford").
    `plural=True` also accepts a trailing "s" ("kias", "bmws").
    """
    p = norm_txt(phrase)
    if not p:
        return False
    suffix = "s?" if plural else ""
    return re.search(rf"(?<![a-z0-9]){re.escape(p)}{suffix}(?![a-z0-9])", text_norm) is not None


# -----------------------------------------------------------------------------
# Brand detection (fallback when the model left `make` empty)
# -----------------------------------------------------------------------------
def fuzzy_pick(query: Optional[str], candidates: List[str], score_cutoff: int = 90) -> Optional[str]:
    """
    Returns the original candidate that best matches `query`, or None under the cutoff.
    """
    if not query or not candidates:
        return None
    norm_candidates = [norm_txt(c) for c in candidates]
    result = process.extractOne(norm_txt(query), norm_candidates, scorer=fuzz.ratio, score_cutoff=score_cutoff)
    if not result:
        return None
    # result = (matched_string, score, index)
    return candidates[result[2]]


def detect_brand(text: str | None, brand_list: List[str] = KNOWN_BRANDS) -> Optional[str]:
    """
    Canonical brand named in free text:
      1) Brand names from `brand_list`, in list order (first hit wins).
      2) Aliases (vw -> Volkswagen, chevy -> Chevrolet, ...).
      3) Typos per token (nisan -> Nissan), tokens of 4+ chars only.
    Always returns the casing used in `brand_list`.
    """
    t = norm_txt(text)
    if not t or not brand_list:
        return None

    for brand in brand_list:
        if contains_phrase(t, brand, plural=True) or contains_phrase(t, brand.replace("-", " "), plural=True):
            return brand

    for alias, canonical in BRAND_ALIAS.items():
        if canonical in brand_list and contains_phrase(t, alias, plural=True):
            return canonical

    tokens = [tok for tok in re.split(r"[^a-z0-9]+", t) if len(tok) >= 4 and tok not in STOPWORDS]
    for tok in tokens:
        m = fuzzy_pick(tok, brand_list)
        if m:
            return m
    return None
