"""
PseudoIDE Workbench — Execution orchestrator

Owns the one SessionState of an open project together with the chat and
terminal transcripts, and turns each producer into an async operation:

- manual edits and language picks apply immediately
- transcription and chat await the assistant, then apply to whatever the
  state is *when the reply lands* (last writer wins)
- runs re-classify the code, write `main.pseudo`, then dispatch to the host

A collaborator failure never escapes: it becomes a terminal line or an
assistant chat turn and the session state is left as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pseudoide.coding.assistant import BaseAssistant
from pseudoide.coding.prompts import GREETING, editor_context_prompt
from pseudoide.coding.response_resolver import ParsedResponse, resolve_response
from pseudoide.host.base import BaseHost, FileEntry, ProjectData
from pseudoide.session.state import (
    ChatMessage,
    Pane,
    SessionState,
    apply_chat_resolution,
    apply_file_load,
    apply_language_selection,
    apply_manual_edit,
    apply_runtime_correction,
    apply_transcription,
)

logger = logging.getLogger("pseudoide.workbench")

PSEUDOCODE_SAVE_PATH = "main.pseudo"

# The terminal transcript keeps only its most recent characters.
TERMINAL_MAX_CHARS = 200_000


@dataclass(frozen=True)
class RunOutcome:
    language: str
    output: str = ""
    corrected_from: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "language": self.language,
            "output": self.output,
            "corrected_from": self.corrected_from,
            "error": self.error,
        }


class Workbench:
    def __init__(
        self,
        assistant: BaseAssistant,
        host: BaseHost,
        state: Optional[SessionState] = None,
    ):
        self.assistant = assistant
        self.host = host
        self.state = state if state is not None else SessionState()
        self.messages: list[ChatMessage] = [ChatMessage.new("assistant", GREETING)]
        self.terminal_output = ""

        # Each affordance only guards its own request.
        self.is_transcribing = False
        self.is_running = False
        self.is_thinking = False

    def log(self, text: str) -> None:
        self.terminal_output = (self.terminal_output + text)[-TERMINAL_MAX_CHARS:]

    # ── Manual producers ─────────────────────────────────────────────────

    def edit(self, pane: Pane, text: str) -> SessionState:
        self.state = apply_manual_edit(self.state, pane, text)
        return self.state

    def select_language(self, language: str) -> SessionState:
        self.state = apply_language_selection(self.state, language)
        return self.state

    # ── Transcription ────────────────────────────────────────────────────

    async def transcribe(self) -> SessionState:
        if self.is_transcribing:
            logger.debug("Transcription already in flight, ignoring")
            return self.state

        self.is_transcribing = True
        try:
            result = await self.assistant.transcribe(self.state.pseudocode)
            self.state = apply_transcription(self.state, result)
            self.log(f"> Transcribed to {self.state.generated_language}\n")
        except Exception as e:
            logger.warning("Transcription failed: %s", e)
            self.log(f"> Transcription failed: {e}\n")
        finally:
            self.is_transcribing = False
        return self.state

    # ── Chat ─────────────────────────────────────────────────────────────

    def _chat_history(self, question: str) -> list[dict]:
        context = editor_context_prompt(
            pseudocode=self.state.pseudocode,
            generated_code=self.state.generated_code,
            generated_language=self.state.generated_language,
            question=question,
        )
        history = [{"role": "system", "content": context}]
        history.extend({"role": m.role, "content": m.content} for m in self.messages)
        return history

    async def send_chat(self, text: str) -> Optional[ParsedResponse]:
        """
        Send one user turn. Returns the resolved reply, or None when the
        input was blank, a reply is still pending, or the call failed.
        """
        if not text.strip() or self.is_thinking:
            return None

        self.messages.append(ChatMessage.new("user", text))
        self.is_thinking = True
        try:
            reply = await self.assistant.chat(self._chat_history(text))
        except Exception as e:
            logger.warning("Chat inference failed: %s", e)
            self.messages.append(ChatMessage.new("assistant", f"Error communicating with AI: {e}"))
            return None
        finally:
            self.is_thinking = False

        parsed = resolve_response(reply)
        self.state = apply_chat_resolution(self.state, parsed)
        if parsed.has_code:
            logger.info("Chat updated editor: language=%s chars=%d",
                        parsed.extracted_language or self.state.generated_language,
                        len(parsed.extracted_code))
        self.messages.append(ChatMessage.new("assistant", parsed.display_text))
        return parsed

    # ── Files ────────────────────────────────────────────────────────────

    async def open_file(self, path: str, name: Optional[str] = None) -> SessionState:
        name = name or path.replace("\\", "/").rsplit("/", 1)[-1]
        try:
            content = await self.host.read_file(path)
        except Exception as e:
            logger.warning("Failed to read %s: %s", path, e)
            self.log(f"> Error reading file: {e}\n")
            return self.state

        self.state = apply_file_load(self.state, name, content)
        return self.state

    async def save_file(self, path: str, content: str) -> bool:
        try:
            await self.host.write_file(path, content)
        except Exception as e:
            logger.warning("Failed to write %s: %s", path, e)
            self.log(f"> Error writing file: {e}\n")
            return False
        return True

    async def create_project(self, data: ProjectData) -> Optional[Path]:
        """Initialize a new project through the host and switch into it."""
        try:
            path = await self.host.init_project(data)
            self.log(f"> Project created: {data.name}\n")
            cwd = self.host.change_directory(str(path))
        except Exception as e:
            logger.warning("Failed to create project %s: %s", data.name, e)
            self.log(f"> Failed to create project: {e}\n")
            return None
        self.log(f"> Switched to project: {data.name}\n")
        return cwd

    def open_project(self, path: str) -> Optional[Path]:
        try:
            cwd = self.host.change_directory(path)
        except Exception as e:
            logger.warning("Failed to open project %s: %s", path, e)
            self.log(f"> Error opening project: {e}\n")
            return None
        self.log(f"> Switched to project: {cwd}\n")
        return cwd

    async def list_directory(self, path: str = "") -> list[FileEntry]:
        try:
            return await self.host.list_directory(path)
        except Exception as e:
            logger.warning("Failed to list %s: %s", path or ".", e)
            self.log(f"> Error listing directory: {e}\n")
            return []

    # ── Execution ────────────────────────────────────────────────────────

    async def run(self) -> Optional[RunOutcome]:
        """Correct the language label, save the pseudocode, then execute. None while a run is pending."""
        if self.is_running:
            logger.debug("Run already in flight, ignoring")
            return None

        self.is_running = True
        try:
            self.state, previous = apply_runtime_correction(self.state)
            if previous is not None:
                logger.info("Run-time correction: %s -> %s", previous, self.state.generated_language)

            language = self.state.generated_language
            code = self.state.generated_code
            self.log(f"\n> Saving and Running {language}...\n")

            try:
                await self.host.write_file(PSEUDOCODE_SAVE_PATH, self.state.pseudocode)
                output = await self.host.execute(language, code)
            except Exception as e:
                logger.warning("Run failed (%s): %s", language, e)
                self.log(f"> Error: {e}\n")
                return RunOutcome(language=language, corrected_from=previous, error=str(e))

            self.log(output + "\n> Done.\n")
            return RunOutcome(language=language, output=output, corrected_from=previous)
        finally:
            self.is_running = False

    async def run_command(self, text: str) -> str:
        try:
            output = await self.host.run_command(text)
        except Exception as e:
            logger.warning("Terminal command failed: %s", e)
            output = f"Error: {e}"
        self.log(output + "\n")
        return output
