"""
PseudoIDE Workbench — Base Provider

Abstract base class for the LLM servers the workbench talks to. Every
provider must implement chat_completion().
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import aiohttp


class ProviderError(RuntimeError):
    """Transport or status failure talking to an LLM server."""


@dataclass
class ChatMessage:
    """A single chat message."""

    role: str  # "system", "user", "assistant"
    content: str


@dataclass
class ChatRequest:
    """Normalized completion request."""

    messages: list[ChatMessage]
    model: str = ""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    stop: Optional[list[str]] = None


@dataclass
class ProviderResponse:
    """Normalized response from a provider."""

    content: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    finish_reason: str = "stop"


class BaseProvider(ABC):
    """Abstract base class for LLM provider clients."""

    def __init__(
        self,
        name: str,
        base_url: str,
        api_key: str,
        default_model: str,
        session: aiohttp.ClientSession,
        timeout: float = 300,
    ):
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.default_model = default_model
        self.session = session
        self.timeout = timeout

    @abstractmethod
    async def chat_completion(self, request: ChatRequest) -> ProviderResponse:
        """Send a non-streaming completion request."""
        ...

    async def health_check(self) -> bool:
        """Check if the server is reachable. Override for custom logic."""
        try:
            async with self.session.get(
                f"{self.base_url}/health",
                timeout=aiohttp.ClientTimeout(total=10),
            ) as resp:
                return resp.status == 200
        except (aiohttp.ClientError, asyncio.TimeoutError):
            return False

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _get_model(self, request: ChatRequest) -> str:
        """Get model ID from request or fall back to default."""
        return request.model if request.model else self.default_model

    async def _post_json(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        try:
            async with self.session.post(
                url,
                headers=self._headers(),
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as resp:
                if resp.status != 200:
                    error_text = await resp.text()
                    raise ProviderError(
                        f"Provider {self.name} returned {resp.status}: {error_text[:200]}"
                    )
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderError(f"Failed to contact {self.name} at {url}: {e}") from e

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name} model={self.default_model}>"
