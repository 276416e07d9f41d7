"""Timeline marker domain models."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import Granularity


class TimelineMarker(BaseModel):
    """One tick on the timeline axis. Discarded and regenerated, never mutated."""

    model_config = ConfigDict(frozen=True)

    sequence_id: int
    instant: datetime
    label: str
    is_current: bool = False
    granularity: Granularity


class TimelineMarkerView(TimelineMarker):
    """A marker decorated with the render hints for the current session state."""

    is_focused: bool = False
    note: Optional[str] = None


class TimelineView(BaseModel):
    """Everything a renderer needs to draw the axis."""

    birthdate: date
    granularity: Granularity
    focused_instant: Optional[datetime] = None
    scroll_offset: Optional[int] = Field(
        default=None,
        description="Offset of the last issued scroll command, if any.",
    )
    target_index: Optional[int] = Field(
        default=None,
        description="Marker the controller would scroll to for the current inputs.",
    )
    editor_open: bool = False
    markers: list[TimelineMarkerView] = Field(default_factory=list)
