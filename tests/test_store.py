"""Tests for history / favorites snapshot stores."""

from palette import PaletteState, make_palette
from store import (
    MemoryStore, PaletteStore, Snapshot, clear, favorites_store, find, history_store, push, remove,
)


def snapshot(*colors, name=None):
    state = PaletteState(count=len(colors), palette=tuple(make_palette(list(colors))))
    return Snapshot.from_state(state, name)


def test_push_is_most_recent_first_and_capped():
    store = MemoryStore(capacity=5)
    for i in range(7):
        push(store, snapshot(f"#0000{i:02X}", "#FFFFFF", "#000000"))
    items = store.load()
    assert len(items) == 5
    assert items[0].colors[0] == "#000006"
    assert items[-1].colors[0] == "#000002"


def test_push_dedupes_by_colors():
    store = MemoryStore(capacity=5)
    push(store, snapshot("#111111", "#222222", "#333333", name="first"))
    push(store, snapshot("#444444", "#555555", "#666666"))
    push(store, snapshot("#111111", "#222222", "#333333", name="again"))
    items = store.load()
    assert [s.name for s in items][0] == "again"
    assert len(items) == 2


def test_default_name_mentions_algorithm():
    snap = snapshot("#111111", "#222222", "#333333")
    assert snap.name == "Analogous • #111111"


def test_file_store_round_trip(tmp_path):
    store = history_store(tmp_path)
    snap = snapshot("#111111", "#222222", "#333333")
    push(store, snap)

    reloaded = history_store(tmp_path).load()
    assert reloaded == [snap]
    assert find(store, snap.id) == snap
    assert reloaded[0].to_state().colors == ["#111111", "#222222", "#333333"]

    remove(store, snap.id)
    assert store.load() == []


def test_capacities():
    assert history_store("/tmp/x").capacity == 5
    assert favorites_store("/tmp/x").capacity == 50


def test_corrupt_file_loads_empty(tmp_path):
    path = tmp_path / "favorites.json"
    path.write_text("{not json")
    assert PaletteStore(path, 50).load() == []
    path.write_text('[{"id": "x"}]')
    assert PaletteStore(path, 50).load() == []


def test_clear(tmp_path):
    store = favorites_store(tmp_path)
    push(store, snapshot("#111111", "#222222", "#333333"))
    clear(store)
    assert store.load() == []
