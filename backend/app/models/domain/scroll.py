"""Scroll and gesture domain models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import GestureKind, GesturePhase, Granularity


class ScrollCommand(BaseModel):
    """Instruction for the renderer to move the axis."""

    model_config = ConfigDict(frozen=True)

    index: int
    offset: int
    instant: datetime
    granularity: Granularity


class GranularityChange(BaseModel):
    """Payload for the granularity selector."""
    granularity: Granularity


class GestureEvent(BaseModel):
    """A discrete event from a drag or pinch gesture stream."""
    kind: GestureKind
    phase: GesturePhase
    scale: Optional[float] = Field(
        default=None,
        description="Pinch scale relative to gesture start; required for pinch updates.",
    )
