"""Timeline API routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException

from app.dependencies import TimelineSessionDep
from app.models import (
    GestureEvent,
    GranularityChange,
    MarkerTap,
    NoteEditor,
    NoteSave,
    NoteSaveResult,
    ScrollCommand,
    TimelineView,
)

router = APIRouter()


@router.get("/view", response_model=TimelineView)
async def get_view(session: TimelineSessionDep):
    try:
        return session.view()
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc


@router.put("/granularity", response_model=TimelineView)
async def change_granularity(body: GranularityChange, session: TimelineSessionDep):
    session.change_granularity(body.granularity)
    try:
        return session.view()
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc


@router.post("/gestures", response_model=Optional[ScrollCommand])
async def handle_gesture(body: GestureEvent, session: TimelineSessionDep):
    try:
        return session.handle_gesture(body)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc


@router.delete("/focus", response_model=TimelineView)
async def clear_focus(session: TimelineSessionDep):
    session.clear_focus()
    try:
        return session.view()
    except LookupError as exc:
        raise HTTPException(404, str(exc)) from exc


@router.post("/markers/tap", response_model=NoteEditor)
async def tap_marker(body: MarkerTap, session: TimelineSessionDep):
    try:
        return session.tap_marker(body.instant)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc


@router.post("/editor/save", response_model=NoteSaveResult)
async def save_note(body: NoteSave, session: TimelineSessionDep):
    try:
        return await session.save_note(body.text)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc


@router.post("/editor/cancel")
async def cancel_note(session: TimelineSessionDep):
    try:
        session.cancel_note()
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc
    return {"status": "cancelled"}


@router.get("/notes", response_model=dict[str, str])
async def list_notes(session: TimelineSessionDep):
    return session.notes.notes
