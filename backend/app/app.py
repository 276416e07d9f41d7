"""
Lifeline - FastAPI Backend
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import socketio

from app.config import settings
from app.database.db import init_db
from app.logging import setup_logging, get_logger
from app.models import ScrollCommand
from app.routers import profile, timeline
from app.services.kv_store import KeyValueStore
from app.services.notes import NoteStore
from app.services.profile import ProfileService
from app.services.scroll import ScrollController
from app.services.timeline import TimelineSession

logger = get_logger('main')

# Socket.IO server for pushing scroll commands to the renderer
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*'
)


async def emit_scroll(command: ScrollCommand) -> None:
    await sio.emit('timeline:scroll', command.model_dump(mode='json'))


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting Lifeline API")

    await init_db(settings.DATABASE_PATH)
    logger.info("Database initialized")

    store = KeyValueStore(db_path=settings.DATABASE_PATH)
    app.state.profile_service = ProfileService(store)
    app.state.timeline_session = TimelineSession(
        profile=app.state.profile_service,
        notes=NoteStore(store),
        controller=ScrollController(sink=emit_scroll),
    )
    await app.state.timeline_session.mount()
    logger.info("Timeline session mounted")

    yield

    app.state.timeline_session.close()
    logger.info("Shutting down application")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Lifeline API",
        description="Personal life timeline with notes pinned to moments",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:8081",
            "http://localhost:19006",
            "http://127.0.0.1:8081",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(profile.router, prefix="/api/profile", tags=["Profile"])
    app.include_router(timeline.router, prefix="/api/timeline", tags=["Timeline"])

    @sio.event
    async def connect(sid, environ):
        logger.debug(f"Client {sid[:8]}... connected")

    @sio.event
    async def disconnect(sid):
        logger.debug(f"Client {sid[:8]}... disconnected")

    @app.get("/health")
    async def health_check():
        session = getattr(app.state, 'timeline_session', None)
        return {
            "status": "healthy",
            "service": "lifeline",
            "birthdate_set": bool(session and session.birthdate),
        }

    @app.get("/")
    async def root():
        return {
            "name": "Lifeline API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


def create_asgi_app() -> socketio.ASGIApp:
    """FastAPI app with the Socket.IO server mounted in front of it."""
    return socketio.ASGIApp(sio, other_asgi_app=create_app())
