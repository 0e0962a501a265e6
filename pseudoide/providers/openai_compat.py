"""
PseudoIDE Workbench — OpenAI-Compatible Provider

For model servers that expose /chat/completions (llama-server in OpenAI
mode, Ollama, vLLM, LM Studio, hosted APIs).
"""

import logging

from pseudoide.providers.base import BaseProvider, ChatRequest, ProviderResponse

logger = logging.getLogger("pseudoide.provider.openai")


class OpenAICompatProvider(BaseProvider):
    """Provider client for any OpenAI-compatible API."""

    async def chat_completion(self, request: ChatRequest) -> ProviderResponse:
        model = self._get_model(request)
        payload = self._build_payload(request, model)

        logger.info("[%s] POST %s/chat/completions model=%s msgs=%d",
                    self.name, self.base_url, model, len(request.messages))
        data = await self._post_json("/chat/completions", payload)

        choice = (data.get("choices") or [{}])[0]
        message = choice.get("message", {})
        usage = data.get("usage", {})

        p_tok = usage.get("prompt_tokens", 0)
        c_tok = usage.get("completion_tokens", 0)
        logger.info("[%s] Response: tokens=%d+%d finish=%s",
                    self.name, p_tok, c_tok, choice.get("finish_reason", "stop"))

        return ProviderResponse(
            content=message.get("content") or "",
            model=model,
            prompt_tokens=p_tok,
            completion_tokens=c_tok,
            finish_reason=choice.get("finish_reason") or "stop",
        )

    def _build_payload(self, request: ChatRequest, model: str) -> dict:
        """Build the OpenAI-format request payload."""
        payload: dict = {
            "model": model,
            "messages": [{"role": m.role, "content": m.content} for m in request.messages],
            "stream": False,
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens
        if request.stop:
            payload["stop"] = request.stop
        return payload
