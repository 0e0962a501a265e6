"""
PseudoIDE Workbench — llama.cpp server provider

Talks to a local `llama-server` through its raw /completion endpoint. The
chat history is flattened into a ChatML prompt, which is what the
instruction-tuned coder models served this way expect.
"""

import logging

from pseudoide.providers.base import BaseProvider, ChatRequest, ProviderResponse

logger = logging.getLogger("pseudoide.provider.llama")

IM_START = "<|im_start|>"
IM_END = "<|im_end|>"


def build_chatml_prompt(request: ChatRequest) -> str:
    """Render messages as ChatML and leave the assistant turn open."""
    parts = [f"{IM_START}{m.role}\n{m.content}\n{IM_END}\n" for m in request.messages]
    parts.append(f"{IM_START}assistant\n")
    return "".join(parts)


class LlamaServerProvider(BaseProvider):
    """Provider client for a llama.cpp HTTP server."""

    async def chat_completion(self, request: ChatRequest) -> ProviderResponse:
        payload: dict = {
            "prompt": build_chatml_prompt(request),
            "stop": request.stop or [IM_END],
        }
        if request.max_tokens is not None:
            payload["n_predict"] = request.max_tokens
        if request.temperature is not None:
            payload["temperature"] = request.temperature

        logger.info("[%s] POST %s/completion msgs=%d", self.name, self.base_url, len(request.messages))
        data = await self._post_json("/completion", payload)

        content = data.get("content") or ""
        p_tok = data.get("tokens_evaluated", 0)
        c_tok = data.get("tokens_predicted", 0)
        logger.info("[%s] Response: tokens=%d+%d chars=%d", self.name, p_tok, c_tok, len(content))

        return ProviderResponse(
            content=content,
            model=self._get_model(request),
            prompt_tokens=p_tok,
            completion_tokens=c_tok,
            finish_reason="stop" if data.get("stopped_eos") or data.get("stopped_word") else "length",
        )
