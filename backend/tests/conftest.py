"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

from datetime import date

import pendulum
import pytest

from app.database.db import init_db
from app.services.kv_store import KeyValueStore
from app.services.notes import NoteStore
from app.services.profile import ProfileService
from app.services.scroll import ScrollController
from app.services.timeline import TimelineSession

# ============================================================
# Fixed Clock
# ============================================================

NOW = pendulum.datetime(2026, 10, 18, 10, 30, tz="UTC")
BIRTHDATE = date(1990, 6, 15)


@pytest.fixture
def now():
    """A fixed "current instant" so marker sets are deterministic."""
    return NOW


@pytest.fixture
def birthdate():
    return BIRTHDATE


# ============================================================
# Storage Fixtures
# ============================================================


@pytest.fixture
async def store(tmp_path):
    """Key-value store over a fresh SQLite file."""
    db_path = str(tmp_path / "lifeline.db")
    await init_db(db_path)
    return KeyValueStore(db_path)


# ============================================================
# Controller & Session Fixtures
# ============================================================


class ScrollRecorder:
    """Async scroll sink that remembers every delivered command."""

    def __init__(self):
        self.commands = []

    async def __call__(self, command):
        self.commands.append(command)


@pytest.fixture
def scroll_sink():
    return ScrollRecorder()


@pytest.fixture
def controller(scroll_sink):
    scroll = ScrollController(
        sink=scroll_sink,
        pitch=80,
        settle_seconds=0,
        cooldown_seconds=0.05,
    )
    yield scroll
    scroll.close()


@pytest.fixture
async def session(store, controller):
    """Mounted session with a stored birthdate and a fixed clock."""
    await store.set("birthdate", BIRTHDATE.isoformat())
    timeline = TimelineSession(
        profile=ProfileService(store),
        notes=NoteStore(store),
        controller=controller,
        clock=lambda: NOW,
    )
    await timeline.mount()
    await controller.flush()
    yield timeline
    timeline.close()
