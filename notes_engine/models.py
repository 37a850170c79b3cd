"""Pydantic models for the note state engine."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class SortMode(str, Enum):
    """Display orderings offered by the query engine."""

    UPDATED = "updated"
    CREATED = "created"
    ALPHA = "alpha"


class Note(BaseModel):
    """A single note with metadata.

    Serialized with camelCase aliases so the persisted array matches the
    layout written by the browser client.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    title: str = Field(default="", description="Note title, may be empty")
    content: str = Field(default="", description="Note body, may be empty")
    created_at: int = Field(..., alias="createdAt", description="Creation time, ms epoch")
    updated_at: int = Field(..., alias="updatedAt", description="Last change, ms epoch")
    pinned: bool = Field(default=False)
    color: Optional[str] = Field(default=None, description="Color token or None")

    @model_validator(mode="after")
    def _check_timestamps(self) -> Note:
        if self.updated_at < self.created_at:
            raise ValueError("updatedAt must not precede createdAt")
        return self


class NoteUpdate(BaseModel):
    """Partial change set for a note.

    Only fields that were explicitly supplied are applied, so passing
    ``color=None`` clears the color while omitting ``color`` keeps it.
    """

    model_config = {"extra": "forbid"}

    title: Optional[str] = None
    content: Optional[str] = None
    pinned: Optional[bool] = None
    color: Optional[str] = None

    @model_validator(mode="after")
    def _reject_null_non_color(self) -> NoteUpdate:
        for name in ("title", "content", "pinned"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, object]:
        """Return only the explicitly supplied fields."""
        return {name: getattr(self, name) for name in self.model_fields_set}
