"""Canonical in-memory note collection with persist-on-mutation semantics.

Every applied mutation writes the full collection through the storage
adapter exactly once before returning. Operations on unknown ids are
no-ops and perform no write.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any, Optional, Union
from uuid import uuid4

from notes_engine.metrics import NOTE_MUTATIONS, NOTES_TOTAL
from notes_engine.models import Note, NoteUpdate
from notes_engine.selection import SelectionController
from notes_engine.storage import StorageAdapter

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def new_note_id() -> str:
    return str(uuid4())


class NoteStore:
    """Owns the note collection, its selection, and its persistence."""

    def __init__(
        self,
        storage: StorageAdapter,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_note_id,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._id_factory = id_factory
        if not storage.available:
            logger.warning("No persistent storage attached — notes last for this process only")
        self._notes: list[Note] = storage.load()
        self.selection = SelectionController(self._notes)
        NOTES_TOTAL.set(len(self._notes))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def notes(self) -> tuple[Note, ...]:
        """Snapshot of the collection in insertion order (newest first)."""
        return tuple(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return self.index_of(note_id) is not None

    def index_of(self, note_id: object) -> Optional[int]:
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                return i
        return None

    def get(self, note_id: str) -> Optional[Note]:
        idx = self.index_of(note_id)
        return None if idx is None else self._notes[idx]

    @property
    def selected_id(self) -> Optional[str]:
        return self.selection.selected_id

    @property
    def selected_note(self) -> Optional[Note]:
        return self.selection.selected_note(self._notes)

    def select(self, note_id: Optional[str]) -> bool:
        return self.selection.select(note_id, self._notes)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self) -> Note:
        """Prepend a blank note, select it, and persist."""
        note_id = self._id_factory()
        while note_id in self:
            note_id = self._id_factory()
        ts = self._clock()
        note = Note(id=note_id, created_at=ts, updated_at=ts)
        self._notes.insert(0, note)
        self.selection.on_created(note)
        self._commit("create")
        logger.info("Created note %s", note.id)
        return note

    def update(
        self, note_id: str, changes: Union[NoteUpdate, Mapping[str, Any]]
    ) -> Optional[Note]:
        """Apply the supplied fields and bump ``updated_at``.

        All fields in one call produce a single write. Returns the updated
        note, or ``None`` if the id is unknown or nothing was supplied.
        """
        if not isinstance(changes, NoteUpdate):
            changes = NoteUpdate.model_validate(dict(changes))
        fields = changes.changes()
        idx = self.index_of(note_id)
        if idx is None:
            logger.debug("update: unknown note %s", note_id)
            return None
        if not fields:
            return None
        note = self._replace(idx, fields)
        self._commit("update")
        logger.debug("Updated note %s fields=%s", note_id, sorted(fields))
        return note

    def delete(self, note_id: str) -> bool:
        """Remove a note and re-select a neighbour if it was selected."""
        idx = self.index_of(note_id)
        if idx is None:
            logger.debug("delete: unknown note %s", note_id)
            return False
        del self._notes[idx]
        self.selection.on_deleted(note_id, idx, self._notes)
        self._commit("delete")
        logger.info("Deleted note %s", note_id)
        return True

    def toggle_pin(self, note_id: str) -> Optional[Note]:
        idx = self.index_of(note_id)
        if idx is None:
            return None
        note = self._replace(idx, {"pinned": not self._notes[idx].pinned})
        self._commit("toggle_pin")
        logger.debug("Note %s pinned=%s", note_id, note.pinned)
        return note

    def set_color(self, note_id: str, color: Optional[str]) -> Optional[Note]:
        idx = self.index_of(note_id)
        if idx is None:
            return None
        note = self._replace(idx, {"color": color})
        self._commit("set_color")
        logger.debug("Note %s color=%s", note_id, color)
        return note

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _replace(self, idx: int, fields: Mapping[str, Any]) -> Note:
        current = self._notes[idx]
        updated_at = max(self._clock(), current.updated_at)
        note = current.model_copy(update={**fields, "updated_at": updated_at})
        self._notes[idx] = note
        return note

    def _commit(self, operation: str) -> None:
        NOTES_TOTAL.set(len(self._notes))
        self._storage.save(self._notes)
        NOTE_MUTATIONS.labels(operation=operation).inc()
