import threading

from hypothesis import given, strategies as st

from photoserver.services.result_cache import ResultCache


def _fill(cache: ResultCache, counts: dict):
    """Insert keys and raise each to the requested use count via hits."""
    for key, count in counts.items():
        cache.put(key, key.encode())
        for _ in range(count - 1):
            cache.get(key)


def test_miss_has_no_side_effect():
    cache = ResultCache(4)
    assert cache.get("nope") is None
    assert len(cache) == 0
    assert "nope" not in cache


def test_hit_returns_bytes_and_bumps_counter():
    cache = ResultCache(4)
    cache.put("k", b"jpeg")
    assert cache.use_count("k") == 1
    assert cache.get("k") == b"jpeg"
    assert cache.get("k") == b"jpeg"
    assert cache.use_count("k") == 3
    assert cache.stats()["hits"] == 2


def test_overwrite_replaces_bytes_and_keeps_counting():
    cache = ResultCache(4)
    cache.put("k", b"old")
    cache.get("k")
    cache.put("k", b"new")
    assert cache.get("k") == b"new"
    assert cache.use_count("k") == 4
    assert len(cache) == 1


def test_evicts_least_used_entry():
    cache = ResultCache(3)
    _fill(cache, {"a": 5, "b": 1, "c": 3})
    cache.put("d", b"d")
    assert len(cache) == 3
    assert "b" not in cache
    assert all(k in cache for k in ("a", "c", "d"))
    assert cache.stats()["evictions"] == 1


def test_new_entry_is_never_its_own_victim():
    cache = ResultCache(2)
    _fill(cache, {"a": 4, "b": 2})
    cache.put("c", b"c")
    assert "c" in cache
    assert "b" not in cache


def test_ties_evict_first_inserted():
    cache = ResultCache(3)
    _fill(cache, {"a": 2, "b": 2, "c": 2})
    cache.put("d", b"d")
    assert "a" not in cache
    assert all(k in cache for k in ("b", "c", "d"))


def test_most_used_entry_survives():
    cache = ResultCache(3)
    _fill(cache, {"a": 1, "b": 9, "c": 4})
    for i in range(10):
        cache.put(f"new-{i}", b"x")
        assert "b" in cache


def test_zero_capacity_disables_cache():
    cache = ResultCache(0)
    assert not cache.enabled
    cache.put("k", b"jpeg")
    assert cache.get("k") is None
    assert len(cache) == 0


def test_empty_bytes_are_never_served():
    cache = ResultCache(2)
    cache.put("k", b"")
    assert cache.get("k") is None
    assert len(cache) == 0


def test_clear_empties_cache():
    cache = ResultCache(2)
    cache.put("k", b"v")
    cache.clear()
    assert len(cache) == 0
    assert cache.get("k") is None


@given(
    st.integers(min_value=0, max_value=6),
    st.lists(st.tuples(st.sampled_from("abcdefghij"), st.booleans()), max_size=60),
)
def test_size_never_exceeds_capacity(capacity, ops):
    cache = ResultCache(capacity)
    for key, is_put in ops:
        if is_put:
            before = len(cache)
            existed = key in cache
            cache.put(key, b"x")
            assert len(cache) <= capacity
            if capacity and not existed and before == capacity:
                assert len(cache) == capacity
        else:
            cache.get(key)
    assert len(cache) <= capacity


def test_concurrent_puts_and_gets_stay_bounded():
    cache = ResultCache(16)
    errors = []

    def worker(n: int):
        try:
            for i in range(300):
                key = f"{n}-{i % 40}"
                cache.put(key, b"data")
                cache.get(key)
                assert len(cache) <= 16
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert len(cache) <= 16
