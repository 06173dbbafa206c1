"""Ephemeral chat session state.

Held by the caller (the frontend, or a test) for the life of one chat
window. Nothing here is persisted.
"""

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from hostelconnect.assistant.bridge import AssistantBridge
from hostelconnect.assistant.prompts import GREETING


@dataclass
class ChatMessage:
    role: str  # "user" | "assistant"
    content: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def greeting_message() -> ChatMessage:
    return ChatMessage(role="assistant", content=GREETING)


class ChatSession:
    """Ordered chat messages plus a loading flag."""

    def __init__(self, bridge: AssistantBridge) -> None:
        self.bridge = bridge
        self.messages: list[ChatMessage] = [greeting_message()]
        self.is_loading = False

    @classmethod
    def from_history(cls, bridge: AssistantBridge, history: Iterable[Mapping[str, Any]]) -> "ChatSession":
        """Rebuild a session from a client-supplied transcript.

        An empty history yields a fresh session with the greeting.
        """
        session = cls(bridge)
        restored = [
            ChatMessage(role=str(item["role"]), content=str(item["content"]))
            for item in history
            if item.get("role") in ("user", "assistant")
        ]
        if restored:
            session.messages = restored
        return session

    async def send(self, content: str) -> ChatMessage | None:
        """Append ``content`` as a user turn and the assistant's reply.

        Blank input is ignored and returns ``None``. If the assistant fails
        the user's message stays in the transcript and ``UpstreamError``
        propagates.
        """
        if not content or not content.strip():
            return None

        history = list(self.messages)
        self.messages.append(ChatMessage(role="user", content=content))
        self.is_loading = True
        try:
            reply = await self.bridge.send_message(history, content)
        finally:
            self.is_loading = False

        message = ChatMessage(role="assistant", content=reply)
        self.messages.append(message)
        return message

    def reset(self) -> None:
        self.messages = [greeting_message()]
        self.is_loading = False
