"""Timeline session: the mounted timeline's state and its user-facing operations."""

import math
from datetime import date, datetime
from typing import Callable, Optional

import pendulum

from app.config import settings
from app.logging import get_logger
from app.models import (
    GestureEvent,
    GestureKind,
    GesturePhase,
    Granularity,
    NoteEditor,
    NoteSaveResult,
    ScrollCommand,
    TimelineMarker,
    TimelineMarkerView,
    TimelineView,
    ZOOM_ORDER,
    normalize_granularity,
)
from app.services.markers import generate_markers, same_bucket, to_local
from app.services.notes import NoteStore, instant_key
from app.services.profile import ProfileService
from app.services.scroll import ScrollController, find_scroll_target

logger = get_logger("services.timeline")


def granularity_for_scale(
    origin: Granularity,
    scale: float,
    step_ratio: Optional[float] = None,
) -> Granularity:
    """
    Map a pinch scale to the nearest granularity.

    Each ``step_ratio`` of scale moves one step finer (pinch in, scale > 1)
    or coarser (pinch out, scale < 1), clamped to the ends of the zoom order.

    Examples:
        (YEARS, 2.0) -> MONTHS
        (YEARS, 4.0) -> WEEKS
        (DAYS, 0.5)  -> WEEKS
        (HOURS, 8.0) -> HOURS
    """
    if scale <= 0:
        raise ValueError("Pinch scale must be positive")
    ratio = settings.PINCH_STEP_RATIO if step_ratio is None else step_ratio
    steps = round(math.log(scale) / math.log(ratio))
    index = ZOOM_ORDER.index(origin) + steps
    return ZOOM_ORDER[max(0, min(len(ZOOM_ORDER) - 1, index))]


def _long_date(instant: datetime) -> str:
    return to_local(instant).format("MMMM D, YYYY")


class TimelineSession:
    """
    The single mounted timeline of this process.

    Holds the user-visible state (birthdate, granularity, focused instant,
    note editor) and turns every change into a regenerated marker set plus
    one scroll settle pass.
    """

    def __init__(
        self,
        profile: ProfileService,
        notes: NoteStore,
        controller: ScrollController,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.profile = profile
        self.notes = notes
        self.controller = controller
        self.clock = clock or (lambda: pendulum.now("local"))
        self.granularity = normalize_granularity(settings.DEFAULT_GRANULARITY)
        self.birthdate: date | None = None
        self.focused_instant: datetime | None = None
        self.editor: NoteEditor | None = None
        self._pinch_origin: Granularity | None = None

    async def mount(self) -> None:
        self.birthdate = await self.profile.get_birthdate()
        await self.notes.load()
        if self.birthdate is None:
            logger.info("No birthdate stored; waiting for first-run prompt")
            return
        self._render()

    def close(self) -> None:
        self.controller.close()
        self.editor = None
        self._pinch_origin = None
        logger.info("Timeline session closed")

    # --- markers & view ---

    def markers(self, now: Optional[datetime] = None) -> list[TimelineMarker]:
        if self.birthdate is None:
            raise LookupError("Birthdate not set")
        return generate_markers(
            self.birthdate,
            self.granularity,
            self.focused_instant,
            now or self.clock(),
        )

    def _render(self) -> Optional[ScrollCommand]:
        markers = self.markers()
        return self.controller.reconcile(self.granularity, markers, self.focused_instant)

    def view(self, now: Optional[datetime] = None) -> TimelineView:
        markers = self.markers(now)
        focus = self.focused_instant
        return TimelineView(
            birthdate=self.birthdate,
            granularity=self.granularity,
            focused_instant=focus,
            scroll_offset=self.controller.scroll_offset,
            target_index=find_scroll_target(markers, self.granularity, focus),
            editor_open=self.editor is not None,
            markers=[
                TimelineMarkerView(
                    **marker.model_dump(),
                    is_focused=focus is not None and same_bucket(marker.instant, focus, self.granularity),
                    note=self.notes.get(marker.instant),
                )
                for marker in markers
            ],
        )

    # --- birthdate ---

    async def set_birthdate(self, birthdate: date) -> Optional[ScrollCommand]:
        self.birthdate = await self.profile.set_birthdate(birthdate)
        return self._render()

    # --- granularity & gestures ---

    def change_granularity(self, granularity: Granularity) -> Optional[ScrollCommand]:
        """Single entry point for granularity changes from the selector and pinch."""
        self.controller.interaction_pulse()
        if granularity == self.granularity:
            return None
        logger.info(f"Granularity {self.granularity.value} -> {granularity.value}")
        self.granularity = granularity
        if self.birthdate is None:
            return None
        return self._render()

    def handle_gesture(self, event: GestureEvent) -> Optional[ScrollCommand]:
        if event.kind is GestureKind.DRAG:
            if event.phase is GesturePhase.START:
                self.controller.interaction_started()
            elif event.phase is GesturePhase.END:
                self.controller.interaction_ended()
            return None

        if event.phase is GesturePhase.START:
            self.controller.interaction_started()
            self._pinch_origin = self.granularity
            return None

        if event.phase is GesturePhase.END:
            self.controller.interaction_ended()
            self._pinch_origin = None
            return None

        if event.scale is None:
            raise ValueError("Pinch updates require a scale")
        if self._pinch_origin is None:
            self.controller.interaction_started()
            self._pinch_origin = self.granularity
        target = granularity_for_scale(self._pinch_origin, event.scale)
        if target == self.granularity:
            return None
        # Keep the guard raised for the rest of the gesture.
        command = self.change_granularity(target)
        self.controller.interaction_started()
        return command

    def clear_focus(self) -> Optional[ScrollCommand]:
        if self.focused_instant is None:
            return None
        self.focused_instant = None
        if self.birthdate is None:
            return None
        return self._render()

    # --- note editor ---

    def tap_marker(self, instant: datetime) -> NoteEditor:
        if self.editor is not None:
            raise ValueError("Note editor is already open")
        self.controller.interaction_pulse()
        self.controller.dialog_opened()

        existing = self.notes.get(instant)
        self.editor = NoteEditor(
            instant=instant,
            key=instant_key(instant),
            initial_text=existing,
            title="Edit Event" if existing else "Add Event",
            date_label=_long_date(instant),
        )
        self.focused_instant = instant
        if self.birthdate is not None:
            self._render()
        return self.editor

    def _close_editor(self) -> NoteEditor:
        editor = self.editor
        if editor is None:
            raise ValueError("No note editor is open")
        self.editor = None
        self.controller.dialog_closed()
        # The closing pass is the one the dialog guard swallows.
        if self.birthdate is not None:
            self._render()
        else:
            self.controller.dialog_settled()
        return editor

    async def save_note(self, text: str) -> NoteSaveResult:
        editor = self._close_editor()
        if not text.strip():
            return NoteSaveResult(saved=False, key=editor.key)
        persisted = await self.notes.put(editor.instant, text)
        if not persisted:
            logger.warning(f"Note at {editor.key} kept locally but not persisted")
        return NoteSaveResult(saved=True, persisted=persisted, key=editor.key)

    def cancel_note(self) -> None:
        # Focus survives a cancel so the axis keeps its context.
        self._close_editor()
