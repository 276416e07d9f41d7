"""Focus tracking and auto-scroll decisions for the timeline axis."""

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Optional, Sequence

from app.config import settings
from app.logging import get_logger
from app.models import Granularity, ScrollCommand, TimelineMarker
from app.services.markers import same_bucket

logger = get_logger("services.scroll")

ScrollSink = Callable[[ScrollCommand], Awaitable[None]]


def find_scroll_target(
    markers: Sequence[TimelineMarker],
    granularity: Granularity,
    focused_instant: Optional[datetime],
) -> Optional[int]:
    """
    Pick the marker to bring into view.

    The first marker whose bucket holds the focused instant wins; otherwise
    the current marker; otherwise nothing.
    """
    if focused_instant is not None:
        for index, marker in enumerate(markers):
            if same_bucket(marker.instant, focused_instant, granularity):
                return index
    for index, marker in enumerate(markers):
        if marker.is_current:
            return index
    return None


class InteractionGuard:
    """Idle/active flag that suppresses auto-scroll, with an owned cooldown timer."""

    def __init__(self, name: str, cooldown: float):
        self.name = name
        self.cooldown = cooldown
        self._active = False
        self._timer: asyncio.TimerHandle | None = None

    @property
    def active(self) -> bool:
        return self._active

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _expire(self) -> None:
        self._timer = None
        self._active = False
        logger.debug(f"Guard '{self.name}' back to idle")

    def activate(self) -> None:
        self._cancel_timer()
        self._active = True

    def release(self) -> None:
        """Return to idle once the cooldown elapses. Ignored while already idle."""
        if not self._active:
            return
        self._cancel_timer()
        if self.cooldown <= 0:
            self._active = False
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.cooldown, self._expire)

    def pulse(self) -> None:
        self.activate()
        self.release()

    def reset(self) -> None:
        self._cancel_timer()
        self._active = False


class ScrollController:
    """Decides whether, and where, to auto-scroll after timeline state changes."""

    def __init__(
        self,
        sink: Optional[ScrollSink] = None,
        pitch: Optional[int] = None,
        settle_seconds: Optional[float] = None,
        cooldown_seconds: Optional[float] = None,
    ):
        self.sink = sink
        self.pitch = settings.MARKER_PITCH if pitch is None else pitch
        self.settle_seconds = (
            settings.SCROLL_SETTLE_SECONDS if settle_seconds is None else settle_seconds
        )
        self.interaction = InteractionGuard(
            "interaction",
            settings.INTERACTION_COOLDOWN_SECONDS if cooldown_seconds is None else cooldown_seconds,
        )
        self.dialog = InteractionGuard("dialog", 0)
        self._dialog_open = False
        self.scroll_offset: Optional[int] = None
        self.last_command: Optional[ScrollCommand] = None
        self._pending: asyncio.Task | None = None

    @property
    def suppressed(self) -> bool:
        return self.interaction.active or self.dialog.active

    # --- guard events ---

    def interaction_started(self) -> None:
        self.interaction.activate()

    def interaction_ended(self) -> None:
        self.interaction.release()

    def interaction_pulse(self) -> None:
        self.interaction.pulse()

    def dialog_opened(self) -> None:
        self._dialog_open = True
        self.dialog.activate()

    def dialog_closed(self) -> None:
        # Stays active until the next settle pass consumes it.
        self._dialog_open = False
        self.dialog.activate()

    def dialog_settled(self) -> None:
        """Drop the just-closed guard when no settle pass follows the close."""
        if not self._dialog_open:
            self.dialog.reset()

    # --- decisions ---

    def reconcile(
        self,
        granularity: Granularity,
        markers: Sequence[TimelineMarker],
        focused_instant: Optional[datetime],
    ) -> Optional[ScrollCommand]:
        """
        Run one settle pass over freshly generated markers.

        :return: The scroll command that was scheduled, or None
        :rtype: Optional[ScrollCommand]
        """
        if self.suppressed:
            logger.debug(
                f"Auto-scroll suppressed (interaction={self.interaction.active}, "
                f"dialog={self.dialog.active})"
            )
            self.dialog_settled()
            return None

        index = find_scroll_target(markers, granularity, focused_instant)
        if index is None:
            return None

        command = ScrollCommand(
            index=index,
            offset=index * self.pitch,
            instant=markers[index].instant,
            granularity=granularity,
        )
        self._schedule(command)
        return command

    def _schedule(self, command: ScrollCommand) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._deliver(command))

    async def _deliver(self, command: ScrollCommand) -> None:
        # Wait for layout to settle before moving the axis.
        await asyncio.sleep(self.settle_seconds)
        self.scroll_offset = command.offset
        self.last_command = command
        if self.sink is None:
            return
        try:
            await self.sink(command)
        except Exception:
            logger.exception("Scroll delivery failed index=%s offset=%s", command.index, command.offset)

    async def flush(self) -> None:
        """Wait for a scheduled scroll command, if any, to be delivered."""
        while self._pending is not None and not self._pending.done():
            try:
                await self._pending
            except asyncio.CancelledError:
                pass

    def close(self) -> None:
        """Cancel pending work and return both guards to idle."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self.interaction.reset()
        self.dialog.reset()
        self._dialog_open = False
