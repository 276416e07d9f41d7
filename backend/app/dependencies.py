"""
Dependency injection for FastAPI routes.

Provides typed service dependencies that enable IDE navigation (Ctrl+Click).
"""

from typing import Annotated
from fastapi import Request, Depends

from app.services.profile import ProfileService
from app.services.timeline import TimelineSession


def get_profile_service(request: Request) -> ProfileService:
    return request.app.state.profile_service


def get_timeline_session(request: Request) -> TimelineSession:
    return request.app.state.timeline_session


ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
TimelineSessionDep = Annotated[TimelineSession, Depends(get_timeline_session)]
