"""Storage adapter: persists the note collection under a single key."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from notes_engine.backends import KeyValueStore
from notes_engine.metrics import STORAGE_LOAD_FAILURES, STORAGE_WRITES
from notes_engine.models import Note

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "notes-app.notes"

_NOTE_LIST = TypeAdapter(list[Note])


class StorageAdapter:
    """Loads and saves the full note collection.

    With no backend attached (e.g. a prerender pass without persistent
    storage) ``load`` returns an empty list and ``save`` does nothing.
    """

    def __init__(
        self, kv: Optional[KeyValueStore] = None, key: str = DEFAULT_STORAGE_KEY
    ) -> None:
        self._kv = kv
        self._key = key

    @property
    def available(self) -> bool:
        """Whether a persistent key-value store is attached."""
        return self._kv is not None

    def load(self) -> list[Note]:
        """Read the stored collection. Never raises; bad data reads as empty."""
        if self._kv is None:
            return []

        try:
            raw = self._kv.get(self._key)
        except Exception as exc:
            logger.warning("Failed to read notes from storage: %s — starting fresh", exc)
            STORAGE_LOAD_FAILURES.labels(reason="read_error").inc()
            return []

        if raw is None:
            logger.info("No stored notes under %r — starting fresh", self._key)
            return []

        try:
            data = json.loads(raw)
        except (ValueError, TypeError, RecursionError) as exc:
            logger.warning("Stored notes are not valid JSON: %s — starting fresh", exc)
            STORAGE_LOAD_FAILURES.labels(reason="invalid_json").inc()
            return []

        if not isinstance(data, list):
            logger.warning("Stored notes are not a JSON array — starting fresh")
            STORAGE_LOAD_FAILURES.labels(reason="not_array").inc()
            return []

        try:
            notes = _NOTE_LIST.validate_python(data)
        except ValidationError as exc:
            logger.warning(
                "Stored notes failed validation (%d errors) — starting fresh",
                exc.error_count(),
            )
            STORAGE_LOAD_FAILURES.labels(reason="invalid_note").inc()
            return []

        notes = _drop_duplicate_ids(notes)
        logger.info("Loaded %d notes from %r", len(notes), self._key)
        return notes

    def save(self, notes: Sequence[Note]) -> None:
        """Write the whole collection in one call. Backend errors propagate."""
        if self._kv is None:
            return

        payload = _NOTE_LIST.dump_json(list(notes), by_alias=True).decode("utf-8")
        try:
            self._kv.set(self._key, payload)
        except Exception:
            logger.error("Failed to write %d notes to %r", len(notes), self._key)
            raise
        STORAGE_WRITES.inc()


def _drop_duplicate_ids(notes: list[Note]) -> list[Note]:
    """Keep the first note for each id."""
    seen: set[str] = set()
    unique: list[Note] = []
    for note in notes:
        if note.id in seen:
            logger.warning("Dropping stored note with duplicate id %s", note.id)
            continue
        seen.add(note.id)
        unique.append(note)
    return unique
