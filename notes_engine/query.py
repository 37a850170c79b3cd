"""Pure filtering and sorting of the note collection.

Nothing here mutates its input; every function returns a new list.
"""

from __future__ import annotations

import locale
import unicodedata
from collections.abc import Callable, Iterable
from typing import Any, Union

from notes_engine.models import Note, SortMode


def matches_query(note: Note, query: str) -> bool:
    """Case-insensitive substring match on title or content.

    The query is trimmed first; an empty query matches every note.
    """
    needle = query.strip().casefold()
    if not needle:
        return True
    return needle in note.title.casefold() or needle in note.content.casefold()


def filter_notes(notes: Iterable[Note], query: str = "", pinned_only: bool = False) -> list[Note]:
    """Return notes matching the query (and pinned, when ``pinned_only``)."""
    return [
        n
        for n in notes
        if (not pinned_only or n.pinned) and matches_query(n, query)
    ]


def fold_title(title: str) -> str:
    """Case- and accent-insensitive form of a title: "Émile" -> "emile"."""
    decomposed = unicodedata.normalize("NFKD", title)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def _title_key(note: Note) -> str:
    return locale.strxfrm(fold_title(note.title))


_SORT_KEYS: dict[SortMode, Callable[[Note], tuple[Any, ...]]] = {
    SortMode.UPDATED: lambda n: (not n.pinned, -n.updated_at),
    SortMode.CREATED: lambda n: (not n.pinned, -n.created_at),
    SortMode.ALPHA: lambda n: (not n.pinned, _title_key(n)),
}


def sort_notes(notes: Iterable[Note], mode: Union[SortMode, str] = SortMode.UPDATED) -> list[Note]:
    """Sort pinned notes first, then by the mode's key.

    ``sorted`` is stable, so notes with equal keys keep their input order.
    """
    return sorted(notes, key=_SORT_KEYS[SortMode(mode)])


def derive_view(
    notes: Iterable[Note],
    query: str = "",
    sort_mode: Union[SortMode, str] = SortMode.UPDATED,
    pinned_only: bool = False,
) -> list[Note]:
    """Filter then sort: the list the UI shows."""
    return sort_notes(filter_notes(notes, query, pinned_only), sort_mode)
