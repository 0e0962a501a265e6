"""
PseudoIDE Workbench — Configuration

All settings loaded from environment variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ProviderConfig:
    """Configuration for the LLM server."""

    name: str = "local-llama"
    base_url: str = "http://127.0.0.1:8080"
    api_key: str = ""
    model_id: str = "qwen2.5-coder-7b-instruct-q5_k_m"
    format: str = "llama"  # "llama" (raw /completion) or "openai"
    n_predict: int = 512
    transcribe_temperature: float = 0.2
    chat_temperature: float = 0.7
    timeout: float = 300


@dataclass
class WorkbenchConfig:
    """Top-level configuration for the workbench service."""

    # Server
    host: str = "127.0.0.1"
    port: int = 8200

    # Host process
    workspace: str = ""  # empty: use ~/PseudoIDE_Testing_Grounds
    projects_dir: str = str(Path.home() / "PseudoIDE_Projects")
    python_command: str = "python"
    node_command: str = "node"
    command_timeout: float = 60

    provider: ProviderConfig = field(default_factory=ProviderConfig)


def load_config() -> WorkbenchConfig:
    """Load configuration from environment variables."""

    provider = ProviderConfig(
        base_url=os.environ.get("PSEUDOIDE_LLM_URL", "http://127.0.0.1:8080"),
        api_key=os.environ.get("PSEUDOIDE_LLM_API_KEY", ""),
        model_id=os.environ.get("PSEUDOIDE_LLM_MODEL", "qwen2.5-coder-7b-instruct-q5_k_m"),
        format=os.environ.get("PSEUDOIDE_LLM_FORMAT", "llama").lower(),
        n_predict=int(os.environ.get("PSEUDOIDE_N_PREDICT", "512")),
    )

    return WorkbenchConfig(
        host=os.environ.get("PSEUDOIDE_HOST", "127.0.0.1"),
        port=int(os.environ.get("PSEUDOIDE_PORT", "8200")),
        workspace=os.environ.get("PSEUDOIDE_WORKSPACE", ""),
        projects_dir=os.environ.get(
            "PSEUDOIDE_PROJECTS_DIR", str(Path.home() / "PseudoIDE_Projects")
        ),
        python_command=os.environ.get("PSEUDOIDE_PYTHON", "python"),
        node_command=os.environ.get("PSEUDOIDE_NODE", "node"),
        provider=provider,
    )
