"""Chat proxy to the hosted completion API.

Prepends the fixed study-coach persona to the caller's messages and returns
the single reply string. No state is kept between calls.
"""

import logging
from typing import Callable, Optional, Sequence

from openai import OpenAI, OpenAIError

from studyfeed.core.config import settings
from studyfeed.core.constants import CHAT_SYSTEM_PROMPT, FEEDBACK_RECORD_COUNT
from studyfeed.core.time_utils import format_duration
from studyfeed.schemas.chat import ChatMessage

logger = logging.getLogger(__name__)


class ChatNotConfigured(Exception):
    pass


class ChatUpstreamError(Exception):
    pass


def default_client_factory(api_key: str) -> OpenAI:
    return OpenAI(api_key=api_key, timeout=settings.llm_timeout)


class ChatService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client_factory: Callable[[str], OpenAI] = default_client_factory,
    ):
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.openai_model
        self.client_factory = client_factory

    def build_messages(self, messages: Sequence[ChatMessage]) -> list[dict]:
        recent = list(messages)[-settings.chat_history_limit:]
        return [{"role": "system", "content": CHAT_SYSTEM_PROMPT}] + [
            {"role": m.role, "content": m.content} for m in recent
        ]

    def reply(self, messages: Sequence[ChatMessage]) -> str:
        if not self.api_key:
            raise ChatNotConfigured("OpenAI API key not configured")
        client = self.client_factory(self.api_key)
        try:
            completion = client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(messages),
            )
        except OpenAIError as e:
            logger.error("OpenAI API Error: %s", e)
            raise ChatUpstreamError("Failed to fetch response") from e
        return completion.choices[0].message.content or ""


def feedback_prompt(records: Sequence) -> str:
    """Context prompt asking for feedback on the most recent records."""
    context = "現在の学習状況に基づいて、簡潔なフィードバックをください。"
    recent = list(records)[:FEEDBACK_RECORD_COUNT]
    if not recent:
        return context + "\n(まだ学習記録がありません)"
    lines = "\n".join(
        f"- {r.date}: {r.subject} ({format_duration(r.duration)}) メモ: {r.notes or ''}"
        for r in recent
    )
    return f"{context}\n\n直近の学習記録:\n{lines}"


def get_chat_service() -> ChatService:
    return ChatService()
