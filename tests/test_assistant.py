"""Tests for the assistant collaborator and the provider payloads it produces."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from pseudoide.coding.assistant import LLMAssistant, parse_transcription
from pseudoide.coding.prompts import CHAT_SYSTEM_PROMPT, TRANSCRIBE_SYSTEM_PROMPT
from pseudoide.config import ProviderConfig
from pseudoide.providers.base import (
    BaseProvider,
    ChatMessage,
    ChatRequest,
    ProviderResponse,
)
from pseudoide.providers.llama_server import LlamaServerProvider, build_chatml_prompt
from pseudoide.providers.openai_compat import OpenAICompatProvider


class TestParseTranscription:
    def test_tagged_reply(self):
        result = parse_transcription("```python\ndef f():\n    return 1\n```")
        assert result.language == "python"
        assert result.code == "def f():\n    return 1"

    def test_untagged_reply_defaults_to_text(self):
        result = parse_transcription("```\nfoo\n```")
        assert result.language == "text"
        assert result.code == "foo"

    def test_no_fence_is_bare_code(self):
        result = parse_transcription("  print(1)\n")
        assert result.language == "text"
        assert result.code == "print(1)"

    def test_single_line_block_is_all_code(self):
        result = parse_transcription("```print(1)```")
        assert result.language == "text"
        assert result.code == "print(1)"

    def test_tag_with_dots_and_digits(self):
        result = parse_transcription("```python3.11\nprint(1)\n```")
        assert result.language == "python3.11"
        assert result.code == "print(1)"
        assert "```" not in result.code

    def test_prose_around_block(self):
        result = parse_transcription("Here you go:\n``` go \npackage main\n```\nEnjoy.")
        assert result.language == "go"
        assert result.code == "package main"

    def test_unclosed_fence_is_bare_code(self):
        result = parse_transcription("```python\nprint(1)")
        assert result.language == "text"
        assert result.code == "```python\nprint(1)"


@pytest.fixture
def provider():
    p = MagicMock(spec=BaseProvider)
    p.chat_completion = AsyncMock(
        return_value=ProviderResponse(content="```rust\nfn main() {}\n```", model="m")
    )
    return p


class TestLLMAssistant:
    @pytest.mark.asyncio
    async def test_transcribe_request(self, provider):
        assistant = LLMAssistant(provider, ProviderConfig())
        result = await assistant.transcribe("PRINT hi")

        request = provider.chat_completion.await_args.args[0]
        assert [m.role for m in request.messages] == ["system", "user"]
        assert request.messages[0].content == TRANSCRIBE_SYSTEM_PROMPT
        assert request.messages[1].content == "PRINT hi"
        assert request.temperature == 0.2
        assert request.max_tokens == 512
        assert (result.language, result.code) == ("rust", "fn main() {}")

    @pytest.mark.asyncio
    async def test_chat_returns_raw_reply(self, provider):
        provider.chat_completion.return_value = ProviderResponse(content="Sure!", model="m")
        assistant = LLMAssistant(provider, ProviderConfig(chat_temperature=0.5))
        reply = await assistant.chat([
            {"role": "system", "content": "ctx"},
            {"role": "user", "content": "hi"},
        ])

        request = provider.chat_completion.await_args.args[0]
        assert reply == "Sure!"
        assert request.messages[0].content == CHAT_SYSTEM_PROMPT
        assert [m.content for m in request.messages[1:]] == ["ctx", "hi"]
        assert request.temperature == 0.5


class TestProviders:
    def _request(self):
        return ChatRequest(
            messages=[ChatMessage(role="system", content="sys"), ChatMessage(role="user", content="hi")],
            max_tokens=64,
            temperature=0.2,
        )

    def test_chatml_prompt(self):
        prompt = build_chatml_prompt(self._request())
        assert prompt == (
            "<|im_start|>system\nsys\n<|im_end|>\n"
            "<|im_start|>user\nhi\n<|im_end|>\n"
            "<|im_start|>assistant\n"
        )

    @pytest.mark.asyncio
    async def test_llama_server_payload(self):
        provider = LlamaServerProvider("local", "http://127.0.0.1:8080/", "", "qwen", session=MagicMock())
        provider._post_json = AsyncMock(return_value={
            "content": "hello",
            "tokens_evaluated": 12,
            "tokens_predicted": 3,
            "stopped_word": True,
        })
        response = await provider.chat_completion(self._request())

        path, payload = provider._post_json.await_args.args
        assert path == "/completion"
        assert payload["n_predict"] == 64
        assert payload["temperature"] == 0.2
        assert payload["stop"] == ["<|im_end|>"]
        assert payload["prompt"].endswith("<|im_start|>assistant\n")
        assert response.content == "hello"
        assert (response.prompt_tokens, response.completion_tokens) == (12, 3)
        assert response.finish_reason == "stop"
        assert provider.base_url == "http://127.0.0.1:8080"

    @pytest.mark.asyncio
    async def test_openai_payload(self):
        provider = OpenAICompatProvider("oai", "http://localhost:11434/v1", "key", "coder", session=MagicMock())
        provider._post_json = AsyncMock(return_value={
            "choices": [{"message": {"content": "hey"}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 5, "completion_tokens": 1},
        })
        response = await provider.chat_completion(self._request())

        path, payload = provider._post_json.await_args.args
        assert path == "/chat/completions"
        assert payload["model"] == "coder"
        assert payload["messages"][1] == {"role": "user", "content": "hi"}
        assert payload["max_tokens"] == 64
        assert response.content == "hey"
        assert provider._headers()["Authorization"] == "Bearer key"

    def test_no_auth_header_without_key(self):
        provider = LlamaServerProvider("local", "http://x", "", "m", session=MagicMock())
        assert "Authorization" not in provider._headers()
