"""In-memory conversation log kept by interactive callers.

The dispatcher itself is stateless. The CLI and the web application keep a
bounded list of :class:`Message` records per session so they can render the
conversation, nothing is written to disk.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from core.dispatcher import DispatchResult


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Message:
    """Represents a single chat message."""

    sender: str
    content: str
    type: str = "text"
    skill_name: Optional[str] = None
    skill_data: Optional[Dict[str, Any]] = None
    id: str = field(default_factory=_new_id)
    timestamp: datetime = field(default_factory=_now)

    def to_dict(self) -> Dict[str, Any]:
        """Return a serialisable representation of the message."""
        payload: Dict[str, Any] = {
            "id": self.id,
            "sender": self.sender,
            "content": self.content,
            "type": self.type,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.skill_name is not None:
            payload["skill"] = self.skill_name
            payload["data"] = self.skill_data or {}
        return payload


class ConversationLog:
    """Keeps track of the latest messages in chronological order."""

    def __init__(self, max_length: int = 100) -> None:
        self.max_length = max_length
        self._messages: List[Message] = []

    def add(self, message: Message) -> Message:
        """Append ``message`` and trim the overflow."""
        self._messages.append(message)
        if len(self._messages) > self.max_length:
            overflow = len(self._messages) - self.max_length
            del self._messages[0:overflow]
        return message

    def add_user_message(self, content: str) -> Message:
        return self.add(Message(sender="user", content=content))

    def add_dispatch_result(self, result: DispatchResult) -> Message:
        if result.matched:
            message = Message(
                sender="assistant",
                content=result.response,
                type="skill",
                skill_name=result.skill_name,
                skill_data=result.data,
            )
        else:
            message = Message(sender="assistant", content=result.response)
        return self.add(message)

    def get_recent(self, limit: Optional[int] = None) -> List[Message]:
        """Return the most recent ``limit`` messages (all if ``None``)."""
        if limit is None or limit >= len(self._messages):
            return list(self._messages)
        if limit <= 0:
            return []
        return self._messages[-limit:]

    def to_list(self) -> List[Dict[str, Any]]:
        return [message.to_dict() for message in self._messages]

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)
