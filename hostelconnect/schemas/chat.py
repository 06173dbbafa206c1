"""Pydantic v2 request/response schemas for the assistant chat endpoint."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatTurn(BaseModel):
    """One message of the transcript the client holds."""

    role: Literal["user", "assistant"]
    content: str = Field(..., max_length=10000)
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ChatRequest(BaseModel):
    """Transcript so far plus the new user message."""

    message: str = Field(..., min_length=1, max_length=10000)
    history: list[ChatTurn] = Field(default_factory=list, max_length=200)


class ChatResponse(BaseModel):
    """The assistant's reply and the updated transcript."""

    response: str
    messages: list[ChatTurn]
