"""
PseudoIDE Workbench — Local host

Runs everything inside one working directory on the local machine.
Interpreted languages run straight from `main.<ext>`; compiled ones are
built to `main` (or `main.exe`) first and a failed build returns the
compiler's stderr as the run output.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

from pseudoide.coding.languages import CodingLanguage, normalize_language, source_extension
from pseudoide.config import WorkbenchConfig
from pseudoide.host.base import BaseHost, ExecutionError, FileEntry, HostError, ProjectData

logger = logging.getLogger("pseudoide.host")

TESTING_GROUNDS_DIRNAME = "PseudoIDE_Testing_Grounds"

_COMPILERS: dict[str, str] = {
    CodingLanguage.CPP.value: "g++",
    CodingLanguage.C.value: "gcc",
    CodingLanguage.RUST.value: "rustc",
}

_EXE_NAME = "main.exe" if os.name == "nt" else "main"


def format_output(stdout: bytes, stderr: bytes) -> str:
    out = stdout.decode("utf-8", errors="replace")
    err = stderr.decode("utf-8", errors="replace")
    if err:
        return f"{out}\n{err}"
    return out


class LocalHost(BaseHost):
    def __init__(self, config: WorkbenchConfig, cwd: Optional[Path] = None):
        self.config = config
        if cwd is None:
            cwd = config.workspace or Path.home() / TESTING_GROUNDS_DIRNAME
        self.cwd = Path(cwd)

    # ── Working directory ────────────────────────────────────────────────

    def ensure_testing_grounds(self) -> Path:
        """Create the scratch project under the home directory and switch to it."""
        path = Path.home() / TESTING_GROUNDS_DIRNAME
        path.mkdir(parents=True, exist_ok=True)
        self.cwd = path
        logger.info("Working directory: %s", path)
        return path

    def open_workspace(self) -> Path:
        """Switch to the configured workspace, creating it first if needed."""
        if not self.config.workspace:
            return self.ensure_testing_grounds()
        path = Path(self.config.workspace).expanduser()
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise HostError(f"Failed to create workspace: {e}") from e
        return self.change_directory(str(path))

    def change_directory(self, path: str) -> Path:
        target = Path(path).expanduser()
        if not target.exists():
            raise HostError(f"Directory does not exist: {path}")
        if not target.is_dir():
            raise HostError(f"Path is not a directory: {path}")
        self.cwd = target
        logger.info("Working directory: %s", target)
        return target

    async def init_project(self, data: ProjectData, base_path: Optional[str] = None) -> Path:
        """
        Create `<base>/<name>`, run `git init` in it and write a README.
        An existing directory is refused. The working directory is not changed.
        """
        if not data.name.strip() or Path(data.name).name != data.name:
            raise HostError(f"Invalid project name: {data.name!r}")

        project = Path(base_path or self.config.projects_dir).expanduser() / data.name
        if project.exists():
            raise HostError(f"Project directory already exists: {project}")
        try:
            project.mkdir(parents=True)
        except OSError as e:
            raise HostError(f"Failed to create project directory: {e}") from e

        try:
            rc, _, err = await self._run(["git", "init"], cwd=project)
        except ExecutionError as e:
            raise HostError(f"Failed to execute git init: {e}") from e
        if rc != 0:
            raise HostError(f"Git init failed: {err.decode('utf-8', errors='replace')}")

        try:
            (project / "README.md").write_text(data.readme(), encoding="utf-8")
        except OSError as e:
            raise HostError(f"Failed to write README: {e}") from e

        logger.info("Project initialized at %s", project)
        return project

    def _resolve(self, path: str) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.cwd / p

    # ── Files ────────────────────────────────────────────────────────────

    async def read_file(self, path: str) -> str:
        try:
            return self._resolve(path).read_text(encoding="utf-8")
        except OSError as e:
            raise HostError(f"Failed to read file: {e}") from e

    async def write_file(self, path: str, content: str) -> None:
        try:
            self._resolve(path).write_text(content, encoding="utf-8")
        except OSError as e:
            raise HostError(f"Failed to write file: {e}") from e

    async def list_directory(self, path: str = "") -> list[FileEntry]:
        """Directories first, then files, each group sorted by name."""
        target = self._resolve(path) if path else self.cwd
        try:
            children = list(target.iterdir())
        except OSError as e:
            raise HostError(f"Failed to read dir: {e}") from e

        entries = [FileEntry(name=c.name, path=str(c), is_dir=c.is_dir()) for c in children]
        entries.sort(key=lambda e: (not e.is_dir, e.name))
        return entries

    # ── Execution ────────────────────────────────────────────────────────

    async def execute(self, language: str, code: str) -> str:
        canonical = normalize_language(language)
        ext = source_extension(canonical)
        if ext is None:
            raise ExecutionError(f"Unsupported language for execution: {language}")

        file_name = f"main.{ext}"
        await self.write_file(file_name, code)
        logger.info("Executing %s (%d chars) in %s", canonical, len(code), self.cwd)

        compiler = _COMPILERS.get(canonical)
        if compiler:
            exe_path = self.cwd / _EXE_NAME
            rc, out, err = await self._run([compiler, file_name, "-o", str(exe_path)])
            if rc != 0:
                return err.decode("utf-8", errors="replace")
            rc, out, err = await self._run([str(exe_path)])
            return format_output(out, err)

        if canonical == CodingLanguage.GO.value:
            argv = ["go", "run", file_name]
        elif canonical == CodingLanguage.PYTHON.value:
            argv = [self.config.python_command, file_name]
        else:
            argv = [self.config.node_command, file_name]

        rc, out, err = await self._run(argv)
        return format_output(out, err)

    async def run_command(self, text: str) -> str:
        trimmed = text.strip()
        if trimmed == "cd" or trimmed.startswith("cd "):
            return self._cd(trimmed[2:].strip())

        if os.name == "nt":
            argv = ["powershell", "-NoProfile", "-Command", text]
        else:
            argv = ["sh", "-c", text]
        rc, out, err = await self._run(argv)
        return format_output(out, err)

    def _cd(self, arg: str) -> str:
        if not arg or arg == "~":
            target = Path.home()
        else:
            target = self.cwd / Path(arg).expanduser()
        try:
            resolved = target.resolve(strict=True)
        except OSError as e:
            return f"cd: {arg}: {e}"
        if not resolved.is_dir():
            return f"cd: {arg}: Not a directory"
        self.cwd = resolved
        return ""

    async def _run(self, argv: list[str], cwd: Optional[Path] = None) -> tuple[int, bytes, bytes]:
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                cwd=str(cwd or self.cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExecutionError(f"Failed to execute command: {argv[0]}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.config.command_timeout
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise ExecutionError(
                f"Command timed out after {self.config.command_timeout:g}s: {argv[0]}"
            )
        return proc.returncode, stdout, stderr
