"""Tests for the in-memory event store and its selection rules."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from countdown.domain.bus import EventBus
from countdown.domain.events import EventAdded, EventRemoved, EventSelected
from countdown.repos.memory import EventStore

_NOW = datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def store() -> EventStore:
    return EventStore()


def _add(store: EventStore, name: str, days: int = 1):
    return store.add(name, _NOW + timedelta(days=days))


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


def test_add_appends_and_selects_new_event(store):
    a = _add(store, "A")
    b = _add(store, "B")

    assert store.list_all() == [a, b]
    assert store.selected_index == 1
    assert store.selected_event() == b


def test_add_empty_name_is_noop(store):
    a = _add(store, "A")
    _add(store, "B")
    store.select(0)

    result = store.add("", _NOW)

    assert result is None
    assert len(store) == 2
    assert store.selected_index == 0
    assert store.selected_event() == a


def test_add_assigns_unique_ids_for_duplicates(store):
    first = _add(store, "Launch")
    second = _add(store, "Launch")

    assert first.id != second.id
    assert first.name == second.name
    assert len(store) == 2


def test_add_accepts_past_target(store):
    """Past dates are only blocked by the picker, not by the store."""
    event = store.add("Yesterday", _NOW - timedelta(days=1))
    assert event is not None


# ---------------------------------------------------------------------------
# remove
# ---------------------------------------------------------------------------


def test_remove_before_selection_shifts_selection_back(store):
    """Add A, add B, remove A -> [B] with selection repaired from 1 to 0."""
    _add(store, "A")
    b = _add(store, "B")

    store.remove(0)

    assert store.list_all() == [b]
    assert store.selected_index == 0


def test_remove_after_selection_keeps_selection(store):
    """Add A, B, C, select A, remove C -> selection stays on A."""
    a = _add(store, "A")
    b = _add(store, "B")
    _add(store, "C")
    assert store.selected_index == 2

    store.select(0)
    store.remove(2)

    assert store.list_all() == [a, b]
    assert store.selected_index == 0
    assert store.selected_event() == a


def test_remove_selected_falls_back_to_previous(store):
    a = _add(store, "A")
    _add(store, "B")
    _add(store, "C")
    store.select(1)

    store.remove(1)

    assert store.selected_index == 0
    assert store.selected_event() == a


def test_remove_selected_first_keeps_index_zero(store):
    _add(store, "A")
    b = _add(store, "B")
    store.select(0)

    store.remove(0)

    assert store.selected_index == 0
    assert store.selected_event() == b


def test_remove_last_event_resets_to_empty_state(store):
    _add(store, "A")

    removed = store.remove(0)

    assert removed is not None
    assert len(store) == 0
    assert store.selected_index == 0
    assert store.selected_event() is None


@pytest.mark.parametrize("index", [-1, 2, 99])
def test_remove_out_of_range_is_noop(store, index):
    a = _add(store, "A")
    b = _add(store, "B")

    assert store.remove(index) is None
    assert store.list_all() == [a, b]
    assert store.selected_index == 1


def test_remove_on_empty_store_is_noop(store):
    assert store.remove(0) is None
    assert store.selected_index == 0


# ---------------------------------------------------------------------------
# select / selected_event
# ---------------------------------------------------------------------------


def test_select_changes_selected_event(store):
    a = _add(store, "A")
    _add(store, "B")

    assert store.select(0) == a
    assert store.selected_index == 0


@pytest.mark.parametrize("index", [-1, 1, 5])
def test_select_out_of_range_is_noop(store, index):
    a = _add(store, "A")

    assert store.select(index) is None
    assert store.selected_index == 0
    assert store.selected_event() == a


def test_selected_event_none_when_empty(store):
    assert store.selected_event() is None


def test_get_by_id(store):
    a = _add(store, "A")
    assert store.get(a.id) == a
    assert store.get("missing") is None


def test_snapshot_reflects_state(store):
    _add(store, "A")
    b = _add(store, "B")

    state = store.snapshot()

    assert [e.name for e in state.events] == ["A", "B"]
    assert state.selected_index == 1
    assert state.selected_event == b


def test_selection_stays_in_bounds_under_random_operations(store):
    rng = random.Random(1234)
    for step in range(500):
        op = rng.choice(["add", "add", "remove", "select"])
        if op == "add":
            _add(store, f"event-{step}")
        elif op == "remove":
            store.remove(rng.randint(-1, len(store)))
        else:
            store.select(rng.randint(-1, len(store)))

        if len(store):
            assert 0 <= store.selected_index < len(store)
        else:
            assert store.selected_index == 0


# ---------------------------------------------------------------------------
# Change notifications
# ---------------------------------------------------------------------------


def test_mutations_publish_domain_events():
    bus = EventBus()
    store = EventStore(bus=bus)
    seen = []
    for event_type in (EventAdded, EventRemoved, EventSelected):
        bus.subscribe(event_type, seen.append)

    a = _add(store, "A")
    b = _add(store, "B")
    store.select(0)
    store.remove(1)

    assert [type(e) for e in seen] == [EventAdded, EventAdded, EventSelected, EventRemoved]
    assert seen[0].event_id == a.id
    assert seen[1].index == 1
    assert seen[3].event_id == b.id
    assert seen[3].selected_index == 0


def test_noops_publish_nothing():
    bus = EventBus()
    store = EventStore(bus=bus)
    seen = []
    for event_type in (EventAdded, EventRemoved, EventSelected):
        bus.subscribe(event_type, seen.append)

    store.add("", _NOW)
    store.remove(0)
    store.select(3)

    assert seen == []
