"""Tests for the reactive containers."""

import pytest

from starform.store import Derived, Writable, get


class TestWritable:

    def test_subscribe_calls_immediately_and_on_change(self):
        store = Writable(1)
        seen = []
        store.subscribe(seen.append)
        store.set(2)
        store.update(lambda v: v + 1)
        assert seen == [1, 2, 3]

    def test_equal_scalar_does_not_notify(self):
        store = Writable("a")
        seen = []
        store.subscribe(seen.append)
        store.set("a")
        assert seen == ["a"]

    def test_dicts_always_notify(self):
        store = Writable({})
        seen = []
        store.subscribe(seen.append)
        store.set({})
        assert len(seen) == 2

    def test_unsubscribe(self):
        store = Writable(0)
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        store.set(5)
        assert seen == [0]
        assert store.subscriber_count == 0

    def test_get_leaves_no_subscription(self):
        store = Writable({"a": 1})
        assert get(store) == {"a": 1}
        assert store.subscriber_count == 0

    def test_subscriber_errors_propagate(self):
        store = Writable(0)

        def boom(value):
            if value:
                raise RuntimeError("subscriber failed")

        store.subscribe(boom)
        with pytest.raises(RuntimeError):
            store.set(1)


class TestDerived:

    def test_follows_source(self):
        source = Writable(2)
        doubled = Derived(source, lambda v: v * 2)
        assert get(doubled) == 4
        source.set(5)
        assert get(doubled) == 10

    def test_read_only(self):
        derived = Derived(Writable(1), lambda v: v)
        with pytest.raises(TypeError):
            derived.set(3)
        with pytest.raises(TypeError):
            derived.update(lambda v: v)
        with pytest.raises(TypeError):
            derived.replace(3)

    def test_dispose_stops_following(self):
        source = Writable(1)
        derived = Derived(source, lambda v: v + 1)
        derived.dispose()
        source.set(10)
        assert get(derived) == 2
        assert source.subscriber_count == 0
