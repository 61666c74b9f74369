from abc import ABC, abstractmethod
from typing import Optional

from modules.shared.cache import TTLCache
from .schemas import SearchTask


class TaskStore(ABC):
    """Where search tasks live between the background run and the pollers."""

    @abstractmethod
    def get(self, task_id: str) -> Optional[SearchTask]:
        pass

    @abstractmethod
    def put(self, task: SearchTask) -> None:
        pass

    @abstractmethod
    def delete(self, task_id: str) -> None:
        pass

    @abstractmethod
    def expire(self, task_id: str, seconds: float) -> None:
        """Schedule removal of a task ``seconds`` from now."""

    def sweep(self) -> int:
        """Drop expired tasks now; returns how many were removed."""
        return 0


class InMemoryTaskStore(TaskStore):
    # Live tasks never expire; terminal ones are dropped lazily on read or by sweep().
    def __init__(self):
        self._cache = TTLCache(ttl_seconds=None)

    def get(self, task_id: str) -> Optional[SearchTask]:
        return self._cache.get(task_id)

    def put(self, task: SearchTask) -> None:
        self._cache.set(task.task_id, task, ttl=None)

    def delete(self, task_id: str) -> None:
        self._cache.delete(task_id)

    def expire(self, task_id: str, seconds: float) -> None:
        self._cache.expire(task_id, seconds)

    def sweep(self) -> int:
        return self._cache.sweep()

    def __len__(self) -> int:
        return len(self._cache)
