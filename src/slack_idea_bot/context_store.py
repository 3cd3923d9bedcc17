"""
Per-user rolling conversation window, bounded by total content length.
"""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass

MAX_CONTEXT_LENGTH = 4096


class Role(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ConversationTurn:
    role: Role
    content: str

    def as_message(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class ContextStore:
    """In-memory mapping of user id -> ordered turns (oldest first).

    The sum of ``len(turn.content)`` stays within ``max_length`` except when a
    single remaining turn is itself longer; that turn is never evicted.
    """

    def __init__(self, max_length: int = MAX_CONTEXT_LENGTH) -> None:
        self.max_length = max_length
        self._windows: dict[str, list[ConversationTurn]] = {}
        self._lock = threading.Lock()

    def append(self, user_id: str, turn: ConversationTurn) -> list[ConversationTurn]:
        with self._lock:
            window = self._windows.setdefault(user_id, [])
            window.append(turn)
            total = sum(len(t.content) for t in window)
            while total > self.max_length and len(window) > 1:
                removed = window.pop(0)
                total -= len(removed.content)
            return list(window)

    def clear(self, user_id: str) -> None:
        with self._lock:
            self._windows.pop(user_id, None)

    def get(self, user_id: str) -> list[ConversationTurn]:
        with self._lock:
            return list(self._windows.get(user_id, []))

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._windows

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)


def total_length(turns: list[ConversationTurn]) -> int:
    return sum(len(t.content) for t in turns)
