"""
PseudoIDE Workbench — Host interface

The narrow surface the workbench uses to touch the machine: projects, files,
directory listings, code execution and terminal commands.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional


class HostError(RuntimeError):
    """File system or working-directory failure."""


class ExecutionError(RuntimeError):
    """Code could not be dispatched (unsupported language, missing toolchain, timeout)."""


@dataclass(frozen=True)
class FileEntry:
    name: str
    path: str
    is_dir: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ProjectData:
    """What the new-project form collects; the README is built from it."""

    name: str
    description: str = ""
    intent: str = ""
    requirements: str = ""

    def readme(self) -> str:
        return (
            f"# {self.name}\n\n{self.description}\n\n"
            f"## Intent\n{self.intent}\n\n"
            f"## Requirements\n{self.requirements}"
        )


class BaseHost(ABC):
    @abstractmethod
    def change_directory(self, path: str) -> Path:
        """Switch the working directory; raises HostError if ``path`` is not a directory."""
        ...

    @abstractmethod
    async def init_project(self, data: ProjectData, base_path: Optional[str] = None) -> Path:
        """Create and git-init a new project directory; returns its path."""
        ...

    @abstractmethod
    async def read_file(self, path: str) -> str:
        ...

    @abstractmethod
    async def write_file(self, path: str, content: str) -> None:
        ...

    @abstractmethod
    async def list_directory(self, path: str = "") -> list[FileEntry]:
        ...

    @abstractmethod
    async def execute(self, language: str, code: str) -> str:
        """Run ``code`` and return captured stdout/stderr."""
        ...

    @abstractmethod
    async def run_command(self, text: str) -> str:
        ...
