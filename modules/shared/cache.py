from time import monotonic
from typing import Any, Dict, Optional, Tuple

_DEFAULT_TTL = object()


class TTLCache:
    """Key/value store with per-entry expiry.

    Entries stored with ``ttl=None`` never expire until ``expire`` is called
    for them. Expired entries are dropped lazily on read and by ``sweep``.
    """

    def __init__(self, ttl_seconds: Optional[float] = 900):
        self.ttl = ttl_seconds
        self.store: Dict[str, Tuple[Optional[float], Any]] = {}

    def _deadline(self, ttl: Optional[float]) -> Optional[float]:
        return None if ttl is None else monotonic() + ttl

    def get(self, key: str):
        item = self.store.get(key)
        if not item:
            return None
        deadline, val = item
        if deadline is not None and monotonic() >= deadline:
            self.store.pop(key, None)
            return None
        return val

    def set(self, key: str, val: Any, ttl: Any = _DEFAULT_TTL):
        if ttl is _DEFAULT_TTL:
            ttl = self.ttl
        self.store[key] = (self._deadline(ttl), val)

    def expire(self, key: str, ttl: float) -> bool:
        item = self.store.get(key)
        if not item:
            return False
        self.store[key] = (self._deadline(ttl), item[1])
        return True

    def delete(self, key: str) -> None:
        self.store.pop(key, None)

    def sweep(self) -> int:
        now = monotonic()
        dead = [k for k, (deadline, _) in self.store.items() if deadline is not None and now >= deadline]
        for k in dead:
            self.store.pop(k, None)
        return len(dead)

    def __len__(self) -> int:
        return len(self.store)
