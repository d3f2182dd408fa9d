"""In-memory, TTL-bounded conversation history.

State lives only in this process and is lost on restart, which is suitable
for single-instance deployments. Expired conversations are evicted lazily
when read and periodically by ``ConversationSweeper``.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable

from ragfolio.constants import (
    DEFAULT_CLEANUP_INTERVAL_SECONDS,
    DEFAULT_CONVERSATION_TTL_SECONDS,
    DEFAULT_MAX_HISTORY_LENGTH,
)
from ragfolio.errors import ValidationError
from ragfolio.models import CONVERSATION_ROLES, ConversationEntry

logger = logging.getLogger(__name__)


@dataclass
class Conversation:
    """Entries oldest-first, plus the time they were last written."""

    entries: list[ConversationEntry] = field(default_factory=list)
    last_access: float = 0.0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class ConversationStore:
    """Per-conversation message log with a length cap and idle TTL.

    Locking: ``_lock`` guards the id -> Conversation map. Each conversation
    has its own lock so append-then-truncate is atomic and appends to one id
    apply in arrival order, without serializing unrelated conversations.
    The map lock is always taken before a conversation lock.
    """

    def __init__(
        self,
        max_history_length: int = DEFAULT_MAX_HISTORY_LENGTH,
        ttl_seconds: float = DEFAULT_CONVERSATION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_history_length <= 0:
            raise ValueError("max_history_length must be > 0")
        self.max_history_length = max_history_length
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._conversations: dict[str, Conversation] = {}
        self._lock = threading.Lock()

    def _expired(self, conversation: Conversation, now: float) -> bool:
        return now - conversation.last_access > self.ttl_seconds

    def get_history(self, conversation_id: str | None) -> list[ConversationEntry]:
        """Return a copy of the conversation's entries, oldest first.

        An expired conversation is deleted and reported as empty.
        """
        if not conversation_id:
            return []

        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None:
                return []
            if self._expired(conversation, self._clock()):
                del self._conversations[conversation_id]
                logger.debug(f"Conversation {conversation_id} expired on read")
                return []

        with conversation.lock:
            return list(conversation.entries)

    def add_messages(
        self, conversation_id: str | None, messages: Iterable[tuple[str, str]]
    ) -> None:
        """Append several (role, content) messages as one atomic update.

        Creates the conversation if needed, refreshes its last-access time
        and keeps only the most recent ``max_history_length`` entries.
        """
        if not conversation_id:
            return

        entries = [ConversationEntry(role=role, content=content) for role, content in messages]
        invalid = [
            {"index": i, "role": entry.role}
            for i, entry in enumerate(entries)
            if entry.role not in CONVERSATION_ROLES
        ]
        if invalid:
            raise ValidationError(f"Role must be one of {CONVERSATION_ROLES}", details=invalid)

        with self._lock:
            now = self._clock()
            conversation = self._conversations.get(conversation_id)
            if conversation is None or self._expired(conversation, now):
                conversation = Conversation()
                self._conversations[conversation_id] = conversation
            conversation.last_access = now
            # Hand off to the conversation lock before releasing the map lock
            conversation.lock.acquire()

        try:
            conversation.entries.extend(entries)
            if len(conversation.entries) > self.max_history_length:
                del conversation.entries[: -self.max_history_length]
        finally:
            conversation.lock.release()

    def add_message(self, conversation_id: str | None, role: str, content: str) -> None:
        """Append one message to a conversation."""
        self.add_messages(conversation_id, [(role, content)])

    def clear(self, conversation_id: str | None) -> None:
        if not conversation_id:
            return
        with self._lock:
            self._conversations.pop(conversation_id, None)

    def active_count(self) -> int:
        with self._lock:
            return len(self._conversations)

    def cleanup(self) -> int:
        """Delete every conversation idle longer than the TTL.

        Returns:
            int: Number of conversations removed
        """
        with self._lock:
            now = self._clock()
            expired = [
                conversation_id
                for conversation_id, conversation in self._conversations.items()
                if self._expired(conversation, now)
            ]
            for conversation_id in expired:
                del self._conversations[conversation_id]

        if expired:
            logger.info(f"🧹 Removed {len(expired)} expired conversation(s)")
        return len(expired)


class ConversationSweeper:
    """Daemon thread that calls ``store.cleanup()`` on a fixed interval."""

    def __init__(
        self,
        store: ConversationStore,
        interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS,
    ) -> None:
        self.store = store
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="conversation-sweeper", daemon=True
        )
        self._thread.start()
        logger.info(f"🧹 Conversation sweeper started (every {self.interval_seconds}s)")

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            try:
                self.store.cleanup()
            except Exception as e:
                logger.error(f"❌ Conversation cleanup failed: {e}", exc_info=True)
