"""UI-facing session over the note store.

Operations:
  create()                      — new blank note, selected
  update(id, **fields)          — edit title/content/pinned/color
  delete(id)                    — remove, re-select neighbour
  toggle_pin(id=None)           — flip pin on id or the selected note
  set_color(color, id=None)     — set/clear color on id or the selected note
  select(id)                    — change the active note
  set_query(text)               — search filter
  set_sort_mode(mode)           — updated | created | alpha
  set_pinned_only(flag)         — pinned-only filter

Each returns a fresh ``NotesView`` for re-rendering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from notes_engine.backends import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
)
from notes_engine.config import Settings, configure_collation, configure_logging
from notes_engine.config import settings as default_settings
from notes_engine.models import Note, SortMode
from notes_engine.query import derive_view
from notes_engine.storage import StorageAdapter
from notes_engine.store import NoteStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotesView:
    """Derived state the rendering layer draws from."""

    notes: tuple[Note, ...]
    selected: Optional[Note]
    query: str
    sort_mode: SortMode
    pinned_only: bool


class NotesApp:
    """Note store plus the view state (query, sort mode, pinned filter)."""

    def __init__(self, store: NoteStore, sort_mode: Union[SortMode, str] = SortMode.UPDATED) -> None:
        self.store = store
        self.query = ""
        self.sort_mode = SortMode(sort_mode)
        self.pinned_only = False

    def view(self) -> NotesView:
        notes = derive_view(self.store.notes, self.query, self.sort_mode, self.pinned_only)
        return NotesView(
            notes=tuple(notes),
            selected=self.store.selected_note,
            query=self.query,
            sort_mode=self.sort_mode,
            pinned_only=self.pinned_only,
        )

    # ------------------------------------------------------------------
    # Note operations
    # ------------------------------------------------------------------

    def create(self) -> NotesView:
        self.store.create()
        return self.view()

    def update(self, note_id: str, **fields: Any) -> NotesView:
        self.store.update(note_id, fields)
        return self.view()

    def delete(self, note_id: str) -> NotesView:
        self.store.delete(note_id)
        return self.view()

    def toggle_pin(self, note_id: Optional[str] = None) -> NotesView:
        target = note_id if note_id is not None else self.store.selected_id
        if target is not None:
            self.store.toggle_pin(target)
        return self.view()

    def set_color(self, color: Optional[str], note_id: Optional[str] = None) -> NotesView:
        target = note_id if note_id is not None else self.store.selected_id
        if target is not None:
            self.store.set_color(target, color)
        return self.view()

    def select(self, note_id: Optional[str]) -> NotesView:
        self.store.select(note_id)
        return self.view()

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    def set_query(self, query: str) -> NotesView:
        self.query = query
        return self.view()

    def set_sort_mode(self, mode: Union[SortMode, str]) -> NotesView:
        self.sort_mode = SortMode(mode)
        return self.view()

    def set_pinned_only(self, pinned_only: bool) -> NotesView:
        self.pinned_only = bool(pinned_only)
        return self.view()


def build_backend(settings: Settings) -> Optional[KeyValueStore]:
    """Construct the key-value store named by ``settings.storage_backend``."""
    backend = settings.storage_backend
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "file":
        return JsonFileKeyValueStore(settings.storage_path)
    if backend == "redis":
        return RedisKeyValueStore(settings.redis_url, prefix=settings.redis_prefix)
    if backend == "none":
        return None
    raise ValueError(f"Unknown storage backend: {backend!r}")


def build_app(settings: Optional[Settings] = None) -> NotesApp:
    """Wire storage, store and view state from settings."""
    settings = settings or default_settings
    configure_logging(settings.log_level)
    configure_collation(settings.collation_locale)
    storage = StorageAdapter(build_backend(settings), key=settings.storage_key)
    store = NoteStore(storage)
    logger.info(
        "Notes engine ready — backend=%s, notes=%d",
        settings.storage_backend,
        len(store),
    )
    return NotesApp(store, sort_mode=settings.default_sort_mode)
