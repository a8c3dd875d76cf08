import threading

from app.shared.kv_store import InMemoryStore, KeyedLocks


def test_get_set_delete_keys():
    store = InMemoryStore()
    store.set("a", 1)
    store.set("b", 2)
    assert store.get("a") == 1
    assert store.get("missing") is None
    assert store.keys() == ["a", "b"]

    store.delete("a")
    store.delete("a")
    assert store.keys() == ["b"]


def test_overwrite_and_len():
    store = InMemoryStore()
    store.set("a", 1)
    store.set("b", 2)
    store.set("a", 3)
    assert store.get("a") == 3
    assert len(store) == 2
    store.delete("b")
    assert len(store) == 1


def test_keyed_locks_serialize_same_key():
    locks = KeyedLocks()
    counter = {"value": 0}

    def bump():
        for _ in range(200):
            with locks.lock("9876543210"):
                current = counter["value"]
                counter["value"] = current + 1

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert counter["value"] == 800
    assert len(locks) == 0


def test_keyed_locks_independent_keys():
    locks = KeyedLocks()
    with locks.lock("a"):
        acquired = threading.Event()

        def other():
            with locks.lock("b"):
                acquired.set()

        t = threading.Thread(target=other)
        t.start()
        assert acquired.wait(timeout=2)
        t.join()
        assert len(locks) == 1
