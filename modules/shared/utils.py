import hashlib
import math
import re
from typing import Optional


def dedup_hash(title: str, company: str, location: str, url: str) -> str:
    key = f"{(title or '').strip().lower()}|{(company or '').strip().lower()}|{(location or '').strip().lower()}|{(url or '').strip().lower()}"
    return hashlib.sha1(key.encode("utf-8")).hexdigest()


def round2(value: float) -> float:
    """Two decimals, halves rounded up (``round`` would round them to even)."""
    return math.floor(float(value) * 100 + 0.5) / 100


def parse_float(value, default: float = 0.0) -> float:
    """Leading number of a stored value such as ``"3.5 years"``; ``default`` when there is none."""
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return float(value)
    m = re.match(r"\s*([+-]?\d+(?:\.\d+)?)", str(value))
    return float(m.group(1)) if m else default
