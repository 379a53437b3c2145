"""Filter preset stores.

Two implementations of :class:`IPresetStore`:

- ``InMemoryPresetStore``: for tests and short-lived sessions.
- ``JsonFilePresetStore``: append-only JSONL persistence.

The JSONL file is a log of ``put`` and ``delete`` records, replayed in
order on load; the last record for an id wins.  A record that cannot be
decoded raises :class:`PresetStoreCorrupted`, except for a torn final line
(a write interrupted mid-record), which is skipped with a warning.

Usage::

    store = create_preset_store(settings)
    preset_id = save_filter_preset(store, "AAPL winners", filters)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from journal_analytics.core.config import Settings
from journal_analytics.core.enums import StoreBackend
from journal_analytics.core.errors import PresetStoreCorrupted, PresetStoreError
from journal_analytics.core.file_io import append_json, read_lines
from journal_analytics.core.interfaces import IPresetStore
from journal_analytics.core.models import FilterPreset

logger = logging.getLogger(__name__)

OP_PUT = "put"
OP_DELETE = "delete"


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


class InMemoryPresetStore:
    """Dict-backed preset store.  ``list_all`` returns insertion order."""

    def __init__(self) -> None:
        self._presets: dict[str, FilterPreset] = {}

    def create(self, preset: FilterPreset) -> None:
        self._presets[preset.id] = preset

    def list_all(self) -> list[FilterPreset]:
        return list(self._presets.values())

    def delete(self, preset_id: str) -> None:
        self._presets.pop(preset_id, None)

    def get(self, preset_id: str) -> FilterPreset | None:
        return self._presets.get(preset_id)

    def __len__(self) -> int:
        return len(self._presets)


# ---------------------------------------------------------------------------
# JSONL
# ---------------------------------------------------------------------------


class JsonFilePresetStore:
    """JSONL-backed preset store.

    Every mutation appends one record; the full file is replayed into an
    in-memory index on construction.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._inner = InMemoryPresetStore()
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        lines = read_lines(self._path)
        last_line_no = lines[-1][0] if lines else 0
        replayed = 0

        for line_no, raw in lines:
            try:
                record = json.loads(raw)
            except json.JSONDecodeError as exc:
                if line_no == last_line_no:
                    logger.warning(
                        "Skipping torn trailing record at %s:%d", self._path, line_no
                    )
                    continue
                raise PresetStoreCorrupted(str(self._path), line_no, str(exc)) from exc
            self._replay(record, line_no)
            replayed += 1

        if replayed:
            logger.info(
                "Loaded %d filter presets from %s (%d records)",
                len(self._inner), self._path, replayed,
            )

    def _replay(self, record: object, line_no: int) -> None:
        if not isinstance(record, dict):
            raise PresetStoreCorrupted(str(self._path), line_no, "record is not an object")

        op = record.get("op")
        if op == OP_PUT:
            try:
                preset = FilterPreset.model_validate(record.get("preset"))
            except ValidationError as exc:
                raise PresetStoreCorrupted(str(self._path), line_no, str(exc)) from exc
            self._inner.create(preset)
        elif op == OP_DELETE:
            preset_id = record.get("id")
            if not isinstance(preset_id, str):
                raise PresetStoreCorrupted(str(self._path), line_no, "delete without id")
            self._inner.delete(preset_id)
        else:
            raise PresetStoreCorrupted(str(self._path), line_no, f"unknown op {op!r}")

    def _append(self, record: dict) -> None:
        try:
            append_json(self._path, record)
        except OSError as exc:
            raise PresetStoreError(f"Failed to write {self._path}: {exc}") from exc

    def create(self, preset: FilterPreset) -> None:
        self._append({"op": OP_PUT, "preset": preset.model_dump(mode="json")})
        self._inner.create(preset)
        logger.info("Persisted filter preset %s to %s", preset.id, self._path)

    def list_all(self) -> list[FilterPreset]:
        return self._inner.list_all()

    def delete(self, preset_id: str) -> None:
        if self._inner.get(preset_id) is None:
            return
        self._append({"op": OP_DELETE, "id": preset_id})
        self._inner.delete(preset_id)
        logger.info("Deleted filter preset %s from %s", preset_id, self._path)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_preset_store(settings: Settings | None = None) -> IPresetStore:
    """Build the preset store selected by ``settings.storage.backend``."""
    settings = settings or Settings()
    storage = settings.storage
    if storage.backend == StoreBackend.JSONL:
        return JsonFilePresetStore(storage.presets_path)
    return InMemoryPresetStore()
