"""
Enum definitions for the Lifeline API.
"""
from enum import Enum


class Granularity(str, Enum):
    """Time unit a timeline marker represents."""
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Coarsest to finest; a pinch-out walks left, a pinch-in walks right.
ZOOM_ORDER: tuple[Granularity, ...] = (
    Granularity.YEARS,
    Granularity.MONTHS,
    Granularity.WEEKS,
    Granularity.DAYS,
    Granularity.HOURS,
)


class GestureKind(str, Enum):
    """Continuous gestures the timeline reacts to."""
    DRAG = "drag"
    PINCH = "pinch"


class GesturePhase(str, Enum):
    """Lifecycle phase of a gesture event."""
    START = "start"
    UPDATE = "update"
    END = "end"


def normalize_granularity(value: str) -> Granularity:
    """
    Parse a granularity name leniently.

    - Lowercase
    - Strip whitespace
    - Accept the singular form

    Examples:
        "Years" -> Granularity.YEARS
        " day " -> Granularity.DAYS
    """
    normalized = value.lower().strip()
    if not normalized.endswith("s"):
        normalized += "s"
    try:
        return Granularity(normalized)
    except ValueError:
        raise ValueError(
            "granularity must be one of: " + ", ".join(g.value for g in Granularity)
        ) from None
