"""Note editor domain models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class MarkerTap(BaseModel):
    """Payload for tapping a marker."""
    instant: datetime


class NoteSave(BaseModel):
    """Payload for confirming the note editor."""
    text: str


class NoteEditor(BaseModel):
    """State of the modal note editor opened by a marker tap."""
    instant: datetime
    key: str
    initial_text: Optional[str] = None
    title: str
    date_label: str


class NoteSaveResult(BaseModel):
    """Outcome of closing the editor with a save."""
    saved: bool
    persisted: bool = False
    key: Optional[str] = None
