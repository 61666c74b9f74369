"""Scoring weights, hard-filter thresholds and degree ranking."""
from typing import Dict, List, Optional, Tuple

from .schemas import ScoringWeights


SOFTWARE_ENGINEER = ScoringWeights(
    skills=0.35, experience=0.30, projects=0.15, keywords=0.10, summary=0.05, education=0.05,
)
FRESHER_INTERN = ScoringWeights(
    skills=0.30, experience=0.05, projects=0.25, keywords=0.10, summary=0.10, education=0.20,
)
MANAGER_LEAD = ScoringWeights(
    skills=0.20, experience=0.40, projects=0.00, keywords=0.20, summary=0.10, education=0.10,
)
DEFAULT = SOFTWARE_ENGINEER

ROLE_WEIGHTS: Dict[str, ScoringWeights] = {
    "software_engineer": SOFTWARE_ENGINEER,
    "developer": SOFTWARE_ENGINEER,
    "engineer": SOFTWARE_ENGINEER,
    "senior": SOFTWARE_ENGINEER,
    "fresher": FRESHER_INTERN,
    "intern": FRESHER_INTERN,
    "entry_level": FRESHER_INTERN,
    "manager": MANAGER_LEAD,
    "lead": MANAGER_LEAD,
    "default": DEFAULT,
}

# Candidate needs at least this fraction of the posting's minimum years
MIN_EXPERIENCE_MATCH_RATIO = 0.8
# Postings asking for this many years or fewer skip the experience gate
ENTRY_LEVEL_MAX_YEARS = 1

LOCATION_FLEXIBLE_KEYWORDS: List[str] = [
    "remote", "anywhere", "flexible", "hybrid", "work from home", "wfh",
]
WORK_AUTH_KEYWORDS: List[str] = [
    "citizen", "authorized", "visa", "green card",
    "work permit", "eligible to work", "authorized to work",
]

# Ordered: lookups scan top to bottom and the first substring hit wins for the
# job requirement. Keep entries in this order when adding new ones.
DEGREE_LEVELS: Tuple[Tuple[str, int], ...] = (
    ("high school", 1),
    ("diploma", 2),
    ("associate", 2),
    ("bachelor", 3),
    ("bachelors", 3),
    ("b.tech", 3),
    ("b.e", 3),
    ("bsc", 3),
    ("bca", 3),
    ("master", 4),
    ("masters", 4),
    ("m.tech", 4),
    ("msc", 4),
    ("mca", 4),
    ("mba", 4),
    ("phd", 5),
    ("doctorate", 5),
)


def get_weights(role_type: Optional[str]) -> ScoringWeights:
    return ROLE_WEIGHTS.get((role_type or "").strip().lower(), DEFAULT)


def first_degree_level(text: Optional[str]) -> int:
    """Level of the first table entry contained in ``text``; 0 when none is."""
    low = (text or "").lower()
    for name, level in DEGREE_LEVELS:
        if name in low:
            return level
    return 0


def max_degree_level(text: Optional[str]) -> int:
    """Highest level among all table entries contained in ``text``."""
    low = (text or "").lower()
    return max((level for name, level in DEGREE_LEVELS if name in low), default=0)
