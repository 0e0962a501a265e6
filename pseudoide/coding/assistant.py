"""
PseudoIDE Workbench — Assistant collaborator

Two calls reach the model: transcription (pseudocode in, tagged code out)
and free-form chat. Both go through whichever provider the config selected.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from pseudoide.coding.prompts import CHAT_SYSTEM_PROMPT, TRANSCRIBE_SYSTEM_PROMPT
from pseudoide.config import ProviderConfig
from pseudoide.providers.base import BaseProvider, ChatMessage, ChatRequest

logger = logging.getLogger("pseudoide.assistant")

# Label used when the model answers without a fence tag.
FALLBACK_TRANSCRIPTION_LANGUAGE = "text"

FENCE = "```"


@dataclass(frozen=True)
class TranscriptionResult:
    """What transcription hands back; the language is not normalized yet."""

    language: str
    code: str


class BaseAssistant(ABC):
    @abstractmethod
    async def transcribe(self, pseudocode: str) -> TranscriptionResult:
        ...

    @abstractmethod
    async def chat(self, history: list[dict]) -> str:
        """Return the raw assistant reply for an ordered role/content history."""
        ...


def parse_transcription(content: str) -> TranscriptionResult:
    """
    Pull language and code out of a transcription reply.

    The block runs from the first ``` to the next one. Whatever precedes the
    block's first newline is the tag; a block without a newline is all code.
    A reply with no closed fence is taken as bare code.
    """
    language = FALLBACK_TRANSCRIPTION_LANGUAGE
    start = content.find(FENCE)
    end = content.find(FENCE, start + len(FENCE)) if start != -1 else -1
    if end == -1:
        return TranscriptionResult(language=language, code=content.strip())

    block = content[start + len(FENCE):end]
    tag, newline, body = block.partition("\n")
    if not newline:
        return TranscriptionResult(language=language, code=block.strip())
    return TranscriptionResult(language=tag.strip() or language, code=body.strip())


class LLMAssistant(BaseAssistant):
    def __init__(self, provider: BaseProvider, config: ProviderConfig):
        self.provider = provider
        self.config = config

    async def transcribe(self, pseudocode: str) -> TranscriptionResult:
        request = ChatRequest(
            messages=[
                ChatMessage(role="system", content=TRANSCRIBE_SYSTEM_PROMPT),
                ChatMessage(role="user", content=pseudocode),
            ],
            max_tokens=self.config.n_predict,
            temperature=self.config.transcribe_temperature,
        )
        response = await self.provider.chat_completion(request)
        result = parse_transcription(response.content)
        logger.info("Transcription: language=%s chars=%d", result.language, len(result.code))
        return result

    async def chat(self, history: list[dict]) -> str:
        messages = [ChatMessage(role="system", content=CHAT_SYSTEM_PROMPT)]
        messages.extend(ChatMessage(role=m["role"], content=m["content"]) for m in history)
        request = ChatRequest(
            messages=messages,
            max_tokens=self.config.n_predict,
            temperature=self.config.chat_temperature,
        )
        response = await self.provider.chat_completion(request)
        return response.content
