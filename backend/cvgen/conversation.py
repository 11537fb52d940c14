"""
In-memory conversation history.

Each thread id maps to an ordered list of turns. The list is capped: after every
append the oldest turns are dropped until the length fits `max_turns`.

Threads are never expired; the cap bounds turns per thread, not the number of
threads kept alive by the process.
"""
import logging
import threading
import time
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

USER = "User"
ASSISTANT = "Assistant"


@dataclass
class Turn:
    speaker: str
    text: str

    def render(self) -> str:
        return f"{self.speaker}: {self.text}"

    def to_dict(self) -> dict:
        return asdict(self)


class ConversationStore(Protocol):
    def new_id(self) -> str:
        ...

    def get_or_create(self, thread_id: Optional[str] = None) -> Tuple[str, List[Turn]]:
        ...

    def clear(self, thread_id: str) -> None:
        ...

    def append(self, thread_id: str, speaker: str, text: str) -> int:
        ...

    def read(self, thread_id: str) -> List[Turn]:
        ...

    def render_context(self, thread_id: str) -> str:
        ...


class InMemoryConversationStore:
    """Process-wide thread -> turns mapping guarded by a single lock."""

    def __init__(self, max_turns: int = 20, id_prefix: str = "thread_"):
        if max_turns < 1:
            raise ValueError("max_turns must be >= 1")
        self.max_turns = max_turns
        self.id_prefix = id_prefix
        self._threads: Dict[str, List[Turn]] = {}
        self._last_stamp = 0
        self._lock = threading.Lock()

    def _new_id(self) -> str:
        # caller holds the lock; stamps only move forward so an id is never reissued
        stamp = max(int(time.time() * 1000), self._last_stamp + 1)
        while f"{self.id_prefix}{stamp}" in self._threads:
            stamp += 1
        self._last_stamp = stamp
        return f"{self.id_prefix}{stamp}"

    def new_id(self) -> str:
        """Reserve a fresh thread id without creating the thread."""
        with self._lock:
            return self._new_id()

    def get_or_create(self, thread_id: Optional[str] = None) -> Tuple[str, List[Turn]]:
        """Resolve a thread id, creating an empty thread if needed.

        Returns the live turn list, not a copy.
        """
        with self._lock:
            if not thread_id:
                thread_id = self._new_id()
            turns = self._threads.get(thread_id)
            if turns is None:
                turns = self._threads[thread_id] = []
            return thread_id, turns

    def clear(self, thread_id: str) -> None:
        with self._lock:
            turns = self._threads.setdefault(thread_id, [])
            turns.clear()
        logger.info(f"Cleared history for thread {thread_id}")

    def append(self, thread_id: str, speaker: str, text: str) -> int:
        """Append one turn and evict oldest turns past the cap. Returns the new length."""
        with self._lock:
            turns = self._threads.setdefault(thread_id, [])
            turns.append(Turn(speaker=speaker, text=text))
            overflow = len(turns) - self.max_turns
            if overflow > 0:
                del turns[:overflow]
            return len(turns)

    def read(self, thread_id: str) -> List[Turn]:
        """Snapshot of a thread's turns. Raises KeyError for unknown threads."""
        with self._lock:
            if thread_id not in self._threads:
                raise KeyError(thread_id)
            return list(self._threads[thread_id])

    def render_context(self, thread_id: str) -> str:
        with self._lock:
            turns = self._threads.get(thread_id) or []
            return "\n".join(t.render() for t in turns)

    def __contains__(self, thread_id: str) -> bool:
        with self._lock:
            return thread_id in self._threads

    def __len__(self) -> int:
        with self._lock:
            return len(self._threads)
