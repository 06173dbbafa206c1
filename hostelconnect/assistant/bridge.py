"""Bridge between HostelConnect chat and the hosted LLM.

Turns a caller-held transcript into a LangChain message list, prepends the
system prompt, and makes one completion call through LiteLLM. Failures are
logged here and surfaced to callers as ``UpstreamError`` with a generic
message.
"""

import logging
import os
from collections.abc import Mapping, Sequence
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_litellm import ChatLiteLLM

from hostelconnect.assistant.prompts import SYSTEM_PROMPT
from hostelconnect.config import settings
from hostelconnect.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


def build_chat_model() -> ChatLiteLLM:
    """Create the LiteLLM chat model with the configured generation settings."""
    # LiteLLM reads provider keys from the environment
    if settings.gemini_api_key:
        os.environ["GEMINI_API_KEY"] = settings.gemini_api_key

    return ChatLiteLLM(
        model=settings.assistant_model,
        temperature=settings.assistant_temperature,
        top_p=settings.assistant_top_p,
        top_k=settings.assistant_top_k,
        max_tokens=settings.assistant_max_output_tokens,
        max_retries=1,  # single attempt
        model_kwargs={
            "safety_settings": [
                {"category": category, "threshold": settings.assistant_safety_threshold}
                for category in SAFETY_CATEGORIES
            ],
        },
    )


def _turn(entry: Any) -> tuple[str, str]:
    """Read (role, content) from a ChatMessage-like object or a mapping."""
    if isinstance(entry, Mapping):
        return str(entry.get("role") or ""), str(entry.get("content") or "")
    return str(getattr(entry, "role", "") or ""), str(getattr(entry, "content", "") or "")


def _reply_text(content: Any) -> str:
    if isinstance(content, str):
        return content.strip()
    # Some providers return a list of content parts
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, Mapping) and part.get("type") == "text":
            parts.append(str(part.get("text", "")))
    return "".join(parts).strip()


class AssistantBridge:
    """Send a transcript plus a new user message to the LLM and return its reply."""

    def __init__(self, llm: Any | None = None, max_history: int | None = None) -> None:
        self._llm = llm
        self.max_history = settings.assistant_max_history if max_history is None else max_history

    @property
    def llm(self) -> Any:
        if self._llm is None:
            self._llm = build_chat_model()
        return self._llm

    def build_messages(self, transcript: Sequence[Any], new_user_message: str) -> list[BaseMessage]:
        """Map a transcript onto the chat model's message types.

        Blank and ``system`` turns are dropped, as are assistant turns before
        the first user turn (the greeting). Only the last ``max_history``
        turns are kept.
        """
        turns: list[BaseMessage] = []
        for entry in transcript:
            role, content = _turn(entry)
            if not content.strip():
                continue
            if role == "user":
                turns.append(HumanMessage(content=content))
            elif role == "assistant":
                if not turns:
                    continue
                turns.append(AIMessage(content=content))

        if self.max_history <= 0:
            turns = []
        elif len(turns) > self.max_history:
            turns = turns[-self.max_history :]
            # The model expects the conversation to open with a user turn
            while turns and isinstance(turns[0], AIMessage):
                turns.pop(0)

        return [SystemMessage(content=SYSTEM_PROMPT), *turns, HumanMessage(content=new_user_message)]

    async def send_message(self, transcript: Sequence[Any], new_user_message: str) -> str:
        """Return the assistant's reply to ``new_user_message``.

        Raises:
            ValidationError: the new message is blank.
            UpstreamError: the completion call failed or returned no text.
        """
        new_user_message = (new_user_message or "").strip()
        if not new_user_message:
            raise ValidationError({"message": "Message cannot be empty"})

        messages = self.build_messages(transcript, new_user_message)
        logger.info("Assistant request with %d history turn(s)", len(messages) - 2)

        try:
            response = await self.llm.ainvoke(messages)
        except Exception as exc:
            logger.exception("Assistant completion failed")
            raise UpstreamError() from exc

        reply = _reply_text(getattr(response, "content", ""))
        if not reply:
            logger.error("Assistant returned an empty reply")
            raise UpstreamError()
        return reply
