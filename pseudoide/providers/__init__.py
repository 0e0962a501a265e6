"""PseudoIDE Workbench — LLM provider clients."""

from pseudoide.providers.base import BaseProvider, ProviderError, ProviderResponse
from pseudoide.providers.llama_server import LlamaServerProvider
from pseudoide.providers.openai_compat import OpenAICompatProvider

__all__ = [
    "BaseProvider",
    "ProviderError",
    "ProviderResponse",
    "LlamaServerProvider",
    "OpenAICompatProvider",
]
