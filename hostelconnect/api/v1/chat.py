"""Assistant chat API router.

POST /api/v1/chat           Send the transcript plus a new message, get the reply
GET  /api/v1/chat/greeting  The opening assistant message of a fresh session

The transcript lives with the client; nothing is stored server-side.
Signing in is optional.
"""

import logging

from fastapi import APIRouter, Depends

from hostelconnect.api.deps import get_optional_user
from hostelconnect.assistant.bridge import AssistantBridge
from hostelconnect.assistant.session import ChatSession, greeting_message
from hostelconnect.errors import ValidationError
from hostelconnect.models.user import User
from hostelconnect.schemas.chat import ChatRequest, ChatResponse, ChatTurn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])

_bridge: AssistantBridge | None = None


def get_assistant_bridge() -> AssistantBridge:
    """Shared bridge; the chat model is built on first use."""
    global _bridge
    if _bridge is None:
        _bridge = AssistantBridge()
    return _bridge


@router.get("/greeting", response_model=ChatTurn)
async def greeting() -> ChatTurn:
    message = greeting_message()
    return ChatTurn(role=message.role, content=message.content, created_at=message.created_at)


@router.post("", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    bridge: AssistantBridge = Depends(get_assistant_bridge),
    current_user: User | None = Depends(get_optional_user),
) -> ChatResponse:
    """Relay one user message to the assistant.

    Upstream failures surface as 502 with a generic message.
    """
    if not body.message.strip():
        raise ValidationError({"message": "Message cannot be empty"})

    session = ChatSession.from_history(bridge, [turn.model_dump() for turn in body.history])
    logger.info(
        "Chat message from %s (%d prior turn(s))",
        current_user.id if current_user else "anonymous",
        len(body.history),
    )
    reply = await session.send(body.message)
    return ChatResponse(
        response=reply.content,
        messages=[ChatTurn.model_validate(m) for m in session.messages],
    )
