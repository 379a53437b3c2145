"""Tests for the in-memory and JSONL filter preset stores."""

import json

import pytest

from journal_analytics.core.config import Settings
from journal_analytics.core.errors import PresetStoreCorrupted
from journal_analytics.core.interfaces import IPresetStore
from journal_analytics.core.models import DateRange, FilterPreset, TradeFilters
from journal_analytics.journal.filters import (
    delete_filter_preset,
    get_filter_presets,
    save_filter_preset,
)
from journal_analytics.storage.preset_store import (
    InMemoryPresetStore,
    JsonFilePresetStore,
    create_preset_store,
)


def _preset(preset_id="preset-1", name="AAPL", **filters):
    return FilterPreset(
        id=preset_id,
        name=name,
        filters=TradeFilters(**(filters or {"symbols": ["AAPL"]})),
        created_at=1_700_000_000_000,
    )


class TestInMemoryPresetStore:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryPresetStore(), IPresetStore)

    def test_create_list_delete(self):
        store = InMemoryPresetStore()
        store.create(_preset("p1"))
        store.create(_preset("p2", name="other"))
        assert [p.id for p in store.list_all()] == ["p1", "p2"]
        store.delete("p1")
        assert [p.id for p in store.list_all()] == ["p2"]
        assert len(store) == 1

    def test_delete_unknown(self):
        store = InMemoryPresetStore()
        store.delete("missing")
        assert store.list_all() == []


class TestJsonFilePresetStore:
    def test_satisfies_protocol(self, presets_path):
        assert isinstance(JsonFilePresetStore(presets_path), IPresetStore)

    def test_missing_file_is_empty(self, presets_path):
        assert JsonFilePresetStore(presets_path).list_all() == []
        assert not presets_path.exists()

    def test_persists_across_instances(self, presets_path):
        filters = TradeFilters(
            date_range=DateRange(start="2024-01-01", end="2024-01-31"),
            emotions=["calm"],
            min_risk_reward=1.5,
        )
        preset_id = save_filter_preset(JsonFilePresetStore(presets_path), "Calm January", filters)

        reloaded = get_filter_presets(JsonFilePresetStore(presets_path))
        assert len(reloaded) == 1
        assert reloaded[0].id == preset_id
        assert reloaded[0].filters == filters

    def test_delete_is_replayed(self, presets_path):
        store = JsonFilePresetStore(presets_path)
        store.create(_preset("p1"))
        store.create(_preset("p2"))
        delete_filter_preset(store, "p1")

        assert [p.id for p in JsonFilePresetStore(presets_path).list_all()] == ["p2"]
        ops = [json.loads(line)["op"] for line in presets_path.read_text().splitlines()]
        assert ops == ["put", "put", "delete"]

    def test_delete_unknown_writes_nothing(self, presets_path):
        store = JsonFilePresetStore(presets_path)
        store.create(_preset("p1"))
        store.delete("missing")
        assert len(presets_path.read_text().splitlines()) == 1

    def test_torn_trailing_line_skipped(self, presets_path):
        store = JsonFilePresetStore(presets_path)
        store.create(_preset("p1"))
        with open(presets_path, "a") as f:
            f.write('{"op": "put", "pres')
        assert [p.id for p in JsonFilePresetStore(presets_path).list_all()] == ["p1"]

    def test_corrupt_middle_line_raises(self, presets_path):
        presets_path.parent.mkdir(parents=True)
        good = json.dumps({"op": "put", "preset": _preset("p1").model_dump(mode="json")})
        presets_path.write_text(f"{{broken\n{good}\n")
        with pytest.raises(PresetStoreCorrupted) as exc_info:
            JsonFilePresetStore(presets_path)
        assert exc_info.value.line_no == 1

    def test_invalid_record_raises(self, presets_path):
        presets_path.parent.mkdir(parents=True)
        presets_path.write_text('{"op": "put", "preset": {"name": "no id"}}\n')
        with pytest.raises(PresetStoreCorrupted, match=":1:"):
            JsonFilePresetStore(presets_path)

    def test_unknown_op_raises(self, presets_path):
        presets_path.parent.mkdir(parents=True)
        presets_path.write_text('{"op": "rename"}\n{"op": "delete", "id": "x"}\n')
        with pytest.raises(PresetStoreCorrupted, match="unknown op"):
            JsonFilePresetStore(presets_path)


class TestCreatePresetStore:
    def test_default_is_memory(self):
        assert isinstance(create_preset_store(), InMemoryPresetStore)

    def test_jsonl_backend(self, presets_path):
        settings = Settings(storage={"backend": "jsonl", "presets_path": str(presets_path)})
        store = create_preset_store(settings)
        assert isinstance(store, JsonFilePresetStore)
        assert store.path == presets_path
