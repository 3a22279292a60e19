from cardb.cache import TTLCache, cache_key
from conftest import extraction, run


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_disabled_cache_never_stores():
    c = TTLCache(0)
    c.set("k", [1])
    assert not c.enabled
    assert c.get("k") is None
    assert len(c) == 0


def test_entries_expire_after_ttl():
    clock = FakeClock()
    c = TTLCache(60, clock=clock)
    c.set("k", ["car"])
    clock.now += 59
    assert c.get("k") == ["car"]
    clock.now += 1
    assert c.get("k") is None
    assert len(c) == 0


def test_key_ignores_dict_order():
    assert cache_key("car_search", {"a": 1, "b": 2}) == cache_key("car_search", {"b": 2, "a": 1})
    assert cache_key("car_search", {"a": 1}) != cache_key("policy", {"a": 1})


def test_cache_changes_latency_not_output(make_assistant, store):
    replies = ["Toyota Fortuner and VinFast VF 8."] * 2
    turns = [extraction("car_search", body_type="SUV"), replies[0], extraction("car_search", body_type="SUV"), replies[1]]

    plain, _ = make_assistant(*turns)
    uncached = [run(plain.handle("an SUV")) for _ in range(2)]
    assert len(store.queries) == 2

    cached, _ = make_assistant(*turns, cache=TTLCache(300))
    with_cache = [run(cached.handle("an SUV")) for _ in range(2)]
    assert len(store.queries) == 3

    assert [r.model_dump() for r in uncached] == [r.model_dump() for r in with_cache]
