"""
Lifeline models.

Usage:
    from app.models import TimelineMarker, TimelineView, NoteEditor, ScrollCommand
    from app.models import Granularity, ZOOM_ORDER, normalize_granularity
"""

# --- Enums & utilities ---
from app.models.enums import (
    Granularity,
    GestureKind,
    GesturePhase,
    ZOOM_ORDER,
    normalize_granularity,
)

# --- Domain models ---
from app.models.domain import (
    TimelineMarker, TimelineMarkerView, TimelineView,
    MarkerTap, NoteSave, NoteEditor, NoteSaveResult,
    BirthdateUpdate, Profile,
    ScrollCommand, GranularityChange, GestureEvent,
)

__all__ = [
    # Enums
    "Granularity", "GestureKind", "GesturePhase", "ZOOM_ORDER", "normalize_granularity",
    # Domain
    "TimelineMarker", "TimelineMarkerView", "TimelineView",
    "MarkerTap", "NoteSave", "NoteEditor", "NoteSaveResult",
    "BirthdateUpdate", "Profile",
    "ScrollCommand", "GranularityChange", "GestureEvent",
]
