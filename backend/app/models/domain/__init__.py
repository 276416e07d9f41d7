"""Domain models — the data structures of the life timeline."""

from app.models.domain.marker import TimelineMarker, TimelineMarkerView, TimelineView
from app.models.domain.note import MarkerTap, NoteSave, NoteEditor, NoteSaveResult
from app.models.domain.profile import BirthdateUpdate, Profile
from app.models.domain.scroll import ScrollCommand, GranularityChange, GestureEvent

__all__ = [
    "TimelineMarker", "TimelineMarkerView", "TimelineView",
    "MarkerTap", "NoteSave", "NoteEditor", "NoteSaveResult",
    "BirthdateUpdate", "Profile",
    "ScrollCommand", "GranularityChange", "GestureEvent",
]
