import time
import unittest

from modules.jobs.schemas import SearchTask
from modules.jobs.store import InMemoryTaskStore
from modules.shared.cache import TTLCache


class TestTTLCache(unittest.TestCase):

    def test_default_ttl_applies(self):
        cache = TTLCache(ttl_seconds=0)
        cache.set("a", 1)
        self.assertIsNone(cache.get("a"))

    def test_none_ttl_never_expires(self):
        cache = TTLCache(ttl_seconds=0)
        cache.set("a", 1, ttl=None)
        self.assertEqual(cache.get("a"), 1)

    def test_expire_and_sweep(self):
        cache = TTLCache(ttl_seconds=None)
        cache.set("a", 1)
        cache.set("b", 2)
        self.assertTrue(cache.expire("a", 0))
        self.assertFalse(cache.expire("missing", 0))
        self.assertEqual(cache.sweep(), 1)
        self.assertEqual(len(cache), 1)
        self.assertEqual(cache.get("b"), 2)

    def test_delete(self):
        cache = TTLCache()
        cache.set("a", 1)
        cache.delete("a")
        cache.delete("a")
        self.assertIsNone(cache.get("a"))


class TestInMemoryTaskStore(unittest.TestCase):

    def test_put_get(self):
        store = InMemoryTaskStore()
        store.put(SearchTask(task_id="t1"))
        self.assertEqual(store.get("t1").task_id, "t1")
        self.assertIsNone(store.get("t2"))

    def test_put_after_expire_keeps_task_alive(self):
        store = InMemoryTaskStore()
        task = SearchTask(task_id="t1")
        store.put(task)
        store.expire("t1", 0)
        store.put(task)
        self.assertIsNotNone(store.get("t1"))

    def test_expired_task_dropped(self):
        store = InMemoryTaskStore()
        store.put(SearchTask(task_id="t1"))
        store.put(SearchTask(task_id="t2"))
        store.expire("t1", 0.01)
        time.sleep(0.02)
        self.assertEqual(store.sweep(), 1)
        self.assertIsNone(store.get("t1"))
        self.assertEqual(len(store), 1)


if __name__ == "__main__":
    unittest.main()
