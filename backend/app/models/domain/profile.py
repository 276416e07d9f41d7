"""Profile domain models."""

from datetime import date
from typing import Optional

from pydantic import BaseModel


class BirthdateUpdate(BaseModel):
    """Payload for setting the birthdate."""
    birthdate: date


class Profile(BaseModel):
    """Birthdate state, including the first-run prompt signal."""
    birthdate: Optional[date] = None
    needs_birthdate: bool = True
    suggested_birthdate: date
