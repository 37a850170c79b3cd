"""Tracks the active note and re-selects deterministically after deletions."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from notes_engine.models import Note

logger = logging.getLogger(__name__)


class SelectionController:
    """Holds ``selected_id``, which is either ``None`` or a present note id."""

    def __init__(self, notes: Sequence[Note] = ()) -> None:
        self._selected_id: Optional[str] = notes[0].id if notes else None

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    def select(self, note_id: Optional[str], notes: Sequence[Note]) -> bool:
        """Select any note present in ``notes``; ``None`` clears.

        The current filter and sort play no part. Unknown ids are ignored.
        Returns whether the selection now equals ``note_id``.
        """
        if note_id is None:
            self._selected_id = None
            return True
        if not any(n.id == note_id for n in notes):
            logger.debug("Ignoring selection of unknown note %s", note_id)
            return False
        self._selected_id = note_id
        return True

    def on_created(self, note: Note) -> None:
        self._selected_id = note.id

    def on_deleted(self, note_id: str, index: int, remaining: Sequence[Note]) -> None:
        """Re-select after ``note_id`` was removed from position ``index``.

        Prefers the note that moved into the slot, then the previous one,
        then nothing. Deleting a non-selected note changes nothing.
        """
        if note_id != self._selected_id:
            return
        if index < len(remaining):
            self._selected_id = remaining[index].id
        elif index > 0:
            self._selected_id = remaining[index - 1].id
        else:
            self._selected_id = None

    def selected_note(self, notes: Sequence[Note]) -> Optional[Note]:
        if self._selected_id is None:
            return None
        return next((n for n in notes if n.id == self._selected_id), None)
