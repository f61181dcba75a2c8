"""Conversation memory keyed by session id."""

from collections import OrderedDict
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Message(BaseModel):
    """Single message in conversation."""

    role: str  # "user", "assistant", "system"
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)


class ConversationMemory:
    """Short-term history for one session."""

    def __init__(self, max_history: int = 10):
        self.max_history = max_history
        self.messages: List[Message] = []

    def add_message(self, role: str, content: str):
        """Add a message to memory."""
        self.messages.append(Message(role=role, content=content))

        # Prune old messages if exceeding max
        if len(self.messages) > self.max_history:
            self.messages = self.messages[-self.max_history :]

    def get_recent(self, n: int = 3) -> List[Message]:
        """Get the last n messages."""
        return self.messages[-n:]

    def clear(self):
        """Clear all history."""
        self.messages = []

    def __len__(self) -> int:
        return len(self.messages)


class SessionMemoryStore:
    """
    Conversation memories indexed by session id.

    Owned by the capability that uses it; the executor never touches it.
    Runs without a session id get no memory. At most ``max_sessions``
    sessions are kept; the least recently used one is evicted first.
    """

    def __init__(self, max_history: int = 10, max_sessions: int = 1000):
        if max_sessions <= 0:
            raise ValueError(f"max_sessions must be positive, got {max_sessions}")
        self.max_history = max_history
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ConversationMemory]" = OrderedDict()

    def get(self, session_id: Optional[str]) -> Optional[ConversationMemory]:
        """Return the memory for a session, creating it on first use."""
        if not session_id:
            return None
        memory = self._sessions.get(session_id)
        if memory is not None:
            self._sessions.move_to_end(session_id)
            return memory

        memory = ConversationMemory(max_history=self.max_history)
        self._sessions[session_id] = memory
        while len(self._sessions) > self.max_sessions:
            self._sessions.popitem(last=False)
        return memory

    def drop(self, session_id: str) -> None:
        """Forget a session."""
        self._sessions.pop(session_id, None)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
