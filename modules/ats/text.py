"""Keyword extraction and set-based text similarity."""
import re
from typing import List, Optional, Set


_STRIP_RE = re.compile(r"[^a-z0-9\s+#.]")
_SPACE_RE = re.compile(r"\s+")
_ACRONYM_RE = re.compile(r"\b[A-Z]{2,}\b")
_DOTTED_RE = re.compile(r"\b\w+\.\w+\b")
# no trailing \b: "c++" and "c#" end on a non-word character
_PLUSPLUS_RE = re.compile(r"\b\w+\+\+")
_SHARP_RE = re.compile(r"\b\w+#")
_YEARS_RE = re.compile(r"(\d+\.?\d*)\s*\+?\s*(?:years?|yrs?)", re.IGNORECASE)

STOP_WORDS: Set[str] = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
    "be", "have", "has", "had", "do", "does", "did", "will", "would",
    "should", "could", "may", "might", "must", "can", "this", "that",
    "these", "those", "i", "you", "he", "she", "it", "we", "they",
    "what", "which", "who", "when", "where", "why", "how", "all", "each",
    "every", "both", "few", "more", "most", "other", "some", "such", "no",
    "not", "only", "own", "same", "so", "than", "too", "very", "just",
    "also", "now", "here", "there", "then", "once", "any", "about", "into",
    "through", "during", "before", "after", "above", "below", "between",
    "under", "again", "further", "while", "our", "your", "their", "its",
    "my", "his", "her", "am", "being", "having", "doing", "work", "working",
    "experience", "using", "used", "including", "include", "includes",
}


def normalize(text: Optional[str]) -> str:
    """Lowercase, drop everything outside ``[a-z0-9 +#.]`` and collapse whitespace."""
    if not text:
        return ""
    cleaned = _STRIP_RE.sub(" ", text.lower())
    return _SPACE_RE.sub(" ", cleaned).strip()


def extract_keywords(text: Optional[str], min_length: int = 2) -> Set[str]:
    cleaned = normalize(text)
    if not cleaned:
        return set()
    return {w for w in cleaned.split(" ") if len(w) >= min_length and w not in STOP_WORDS}


def keyword_overlap(text: Optional[str], reference: Optional[str]) -> float:
    """Percentage of ``reference``'s vocabulary that also appears in ``text``.

    Not symmetric: ``keyword_overlap(resume, jd)`` measures how much of the job
    description a resume covers.
    """
    ref = extract_keywords(reference)
    if not ref:
        return 0.0
    return 100.0 * len(extract_keywords(text) & ref) / len(ref)


def similarity(a: Optional[str], b: Optional[str]) -> float:
    """Jaccard similarity of the two keyword sets, 0-100."""
    ka = extract_keywords(a)
    kb = extract_keywords(b)
    if not ka or not kb:
        return 0.0
    return 100.0 * len(ka & kb) / len(ka | kb)


def extract_technical_terms(text: Optional[str]) -> Set[str]:
    if not text:
        return set()
    terms: Set[str] = set()
    for pattern in (_ACRONYM_RE, _DOTTED_RE, _PLUSPLUS_RE, _SHARP_RE):
        terms.update(m.group(0).lower() for m in pattern.finditer(text))
    return terms


def extract_years(text: Optional[str]) -> List[float]:
    if not text:
        return []
    return [float(m.group(1)) for m in _YEARS_RE.finditer(text)]
