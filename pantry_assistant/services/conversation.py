"""Per-conversation context and the in-process registry that holds it."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from pantry_assistant.services.pending_question import DEFAULT_TIMEOUT_SECONDS, PendingQuestionSlot

logger = logging.getLogger(__name__)


@dataclass
class ConversationContext:
    """Turn-to-turn memory for one user's conversation.

    Not persisted: a process restart or reconnect starts a fresh conversation.
    """

    user_id: int
    pending: PendingQuestionSlot = field(default_factory=PendingQuestionSlot)
    last_active: float = 0.0


class ConversationStore:
    """Holds one ConversationContext per user.

    Conversations with no pending question are dropped once they have been
    idle for ``idle_seconds``, so the registry only grows with active users.
    The idle window must outlast one turn, including the model call, or a
    question asked at the end of a slow turn could land on a dropped context.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        idle_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.idle_seconds = idle_seconds if idle_seconds is not None else 2 * timeout_seconds
        self._clock = clock
        self._conversations: dict[int, ConversationContext] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._conversations)

    def get(self, user_id: int) -> ConversationContext:
        """Get the user's conversation, starting a new one if needed."""
        now = self._clock()
        with self._lock:
            conversation = self._conversations.get(user_id)
            if conversation is None:
                self._prune(now)
                conversation = ConversationContext(
                    user_id=user_id,
                    pending=PendingQuestionSlot(timeout_seconds=self.timeout_seconds),
                )
                self._conversations[user_id] = conversation
                logger.debug(f"Started conversation for user {user_id}")
            conversation.last_active = now
            return conversation

    def _prune(self, now: float) -> None:
        idle = [
            user_id
            for user_id, conversation in self._conversations.items()
            if now - conversation.last_active >= self.idle_seconds
            and conversation.pending.get() is None
        ]
        for user_id in idle:
            del self._conversations[user_id]
        if idle:
            logger.debug(f"Dropped {len(idle)} idle conversation(s)")
