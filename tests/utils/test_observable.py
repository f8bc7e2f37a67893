"""Tests for the Observable value holder."""

from taskpad.utils.observable import Observable


def test_subscribe_receives_current_value_then_changes():
    obs = Observable(1)
    seen = []
    obs.subscribe(seen.append)

    obs.next(2)
    obs.next(3)

    assert seen == [1, 2, 3]
    assert obs.value == 3


def test_unsubscribe_stops_notifications():
    obs = Observable("a")
    seen = []
    unsubscribe = obs.subscribe(seen.append)

    unsubscribe()
    unsubscribe()
    obs.next("b")

    assert seen == ["a"]


def test_listener_may_unsubscribe_during_notification():
    obs = Observable(0)
    seen = []
    holder = {}

    def once(value):
        seen.append(value)
        if value:
            holder["unsubscribe"]()

    holder["unsubscribe"] = obs.subscribe(once)
    other = []
    obs.subscribe(other.append)

    obs.next(1)
    obs.next(2)

    assert seen == [0, 1]
    assert other == [0, 1, 2]


def test_map_derives_and_follows():
    numbers = Observable([1, 2, 3])
    total = numbers.map(sum)
    assert total.value == 6

    numbers.next([10])
    assert total.value == 10


def test_closed_map_detaches_from_source():
    numbers = Observable([1, 2, 3])
    total = numbers.map(sum)
    seen = []
    total.subscribe(seen.append)
    assert len(numbers._listeners) == 1

    total.close()
    numbers.next([10])

    assert total.value == 6
    assert seen == [6]
    assert numbers._listeners == []


def test_map_does_not_call_fn_twice_on_creation():
    calls = []

    def double(value):
        calls.append(value)
        return value * 2

    derived = Observable(2).map(double)

    assert derived.value == 4
    assert calls == [2]


def test_empty_observable_is_truthy():
    assert Observable(None)
