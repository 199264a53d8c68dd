"""Single-slot pending clarification state for one conversation.

The slot holds at most one item name awaiting a category answer. It expires a
fixed interval after the most recent ``set``. Expiry can be observed lazily
(any read after the deadline clears the slot) or driven by an asyncio timer
scheduled with ``schedule_expiry``. Each ``set``/``clear`` bumps a generation
counter; a timer only clears the slot if the generation it was armed with is
still current, so a turn that resolves between timer fire and apply wins.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class PendingQuestion:
    """An item waiting for a category answer."""

    item_name: str
    asked_at: float


class PendingQuestionSlot:
    """Zero-or-one pending question with a wall-clock timeout."""

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._pending: PendingQuestion | None = None
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self.last_expired: str | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def set(self, item_name: str) -> None:
        """Start waiting for ``item_name``; replaces any earlier question."""
        self._cancel_timer()
        self._generation += 1
        self._pending = PendingQuestion(item_name=item_name, asked_at=self._clock())
        self.last_expired = None
        logger.debug(f"Pending question set: '{item_name}' (generation {self._generation})")

    def clear(self) -> None:
        """Drop the pending question, if any."""
        self._cancel_timer()
        self._generation += 1
        self._pending = None

    def get(self) -> str | None:
        """Return the pending item name, or None if there is none or it expired."""
        self.expire_if_stale()
        return self._pending.item_name if self._pending else None

    def expire_if_stale(self) -> str | None:
        """Clear the slot if its deadline passed; return the expired item name."""
        if self._pending is None:
            return None
        if self._clock() - self._pending.asked_at < self.timeout_seconds:
            return None
        return self._expire()

    def expire(self, generation: int) -> str | None:
        """Timer callback: clear only if nothing touched the slot since arming."""
        if generation != self._generation or self._pending is None:
            return None
        return self._expire()

    def schedule_expiry(
        self,
        on_expired: Callable[[str], None] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Arm an asyncio timer that clears the slot when the timeout elapses."""
        if self._pending is None:
            return
        self._cancel_timer()
        loop = loop or asyncio.get_running_loop()
        generation = self._generation

        def _fire() -> None:
            self._timer = None
            expired = self.expire(generation)
            if expired and on_expired:
                on_expired(expired)

        self._timer = loop.call_later(self.timeout_seconds, _fire)

    def _expire(self) -> str:
        assert self._pending is not None
        self._cancel_timer()
        item_name = self._pending.item_name
        self._pending = None
        self._generation += 1
        self.last_expired = item_name
        logger.info(f"Pending question for '{item_name}' timed out")
        return item_name

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
