"""Profile (birthdate) endpoints."""

from fastapi import APIRouter, HTTPException

from app.dependencies import ProfileServiceDep, TimelineSessionDep
from app.models import BirthdateUpdate, Profile

router = APIRouter()


@router.get("", response_model=Profile)
async def get_profile(service: ProfileServiceDep):
    return await service.get_profile()


@router.put("/birthdate", response_model=Profile)
async def set_birthdate(
    body: BirthdateUpdate,
    service: ProfileServiceDep,
    session: TimelineSessionDep,
):
    try:
        await session.set_birthdate(body.birthdate)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    return await service.get_profile()
