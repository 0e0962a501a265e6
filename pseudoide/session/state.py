"""
PseudoIDE Workbench — Session state and update rules

The session is one immutable record. Each producer is a pure function from
the current record to the next one; callers swap the whole record in one
assignment, so code and its language label always change together.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from pseudoide.coding.assistant import TranscriptionResult
from pseudoide.coding.language_classifier import SignatureSet, classify_code, is_known
from pseudoide.coding.languages import (
    CodingLanguage,
    is_pseudocode_file,
    language_for_filename,
    normalize_language,
)
from pseudoide.coding.response_resolver import ParsedResponse

DEFAULT_PSEUDOCODE = (
    "// Write your pseudocode here...\n\n"
    "FUNCTION calculate_fibonacci(n):\n"
    "  IF n <= 1 RETURN n\n"
    "  RETURN calculate_fibonacci(n-1) + calculate_fibonacci(n-2)"
)

DEFAULT_GENERATED_CODE = (
    "# Generated Python code will appear here\n\n"
    "def calculate_fibonacci(n):\n"
    "    if n <= 1:\n"
    "        return n\n"
    "    return calculate_fibonacci(n - 1) + calculate_fibonacci(n - 2)"
)


class Pane(str, Enum):
    PSEUDOCODE = "pseudocode"
    GENERATED = "generated"


@dataclass(frozen=True)
class CodeArtifact:
    text: str
    language: str


@dataclass(frozen=True)
class ChatMessage:
    """One turn of the assistant transcript. The transcript is append-only."""

    id: str
    role: str  # "user" or "assistant"
    content: str

    @classmethod
    def new(cls, role: str, content: str) -> "ChatMessage":
        return cls(id=uuid.uuid4().hex[:8], role=role, content=content)

    def to_dict(self) -> dict:
        return {"id": self.id, "role": self.role, "content": self.content}


@dataclass(frozen=True)
class SessionState:
    pseudocode: str = DEFAULT_PSEUDOCODE
    generated_code: str = DEFAULT_GENERATED_CODE
    generated_language: str = CodingLanguage.PYTHON.value

    @property
    def artifact(self) -> CodeArtifact:
        return CodeArtifact(text=self.generated_code, language=self.generated_language)

    def to_dict(self) -> dict:
        return {
            "pseudocode": self.pseudocode,
            "generated_code": self.generated_code,
            "generated_language": self.generated_language,
        }


# ── Update rules ─────────────────────────────────────────────────────────────

def apply_manual_edit(state: SessionState, pane: Pane, text: str) -> SessionState:
    """Manual edits are trusted verbatim; the language label is never touched."""
    if Pane(pane) is Pane.PSEUDOCODE:
        return replace(state, pseudocode=text)
    return replace(state, generated_code=text)


def apply_language_selection(state: SessionState, language: str) -> SessionState:
    return replace(
        state,
        generated_language=normalize_language(language, default=state.generated_language),
    )


def apply_transcription(state: SessionState, result: TranscriptionResult) -> SessionState:
    return replace(
        state,
        generated_code=result.code,
        generated_language=normalize_language(result.language, default=state.generated_language),
    )


def apply_chat_resolution(state: SessionState, parsed: ParsedResponse) -> SessionState:
    if not parsed.has_code:
        return state
    if parsed.extracted_language:
        return replace(
            state,
            generated_code=parsed.extracted_code,
            generated_language=parsed.extracted_language,
        )
    return replace(state, generated_code=parsed.extracted_code)


def apply_file_load(state: SessionState, name: str, content: str) -> SessionState:
    """Route a loaded file by suffix; unknown suffixes keep the current label."""
    if is_pseudocode_file(name):
        return replace(state, pseudocode=content)

    language = language_for_filename(name)
    if language is None:
        return replace(state, generated_code=content)
    return replace(state, generated_code=content, generated_language=language)


def apply_runtime_correction(state: SessionState) -> tuple[SessionState, Optional[str]]:
    """
    Re-classify the stored code just before execution.

    Returns the (possibly corrected) state and the label it replaced, or None
    when nothing changed. Only the runtime signature set is used and no fence
    extraction happens here.
    """
    detected = classify_code(state.generated_code, SignatureSet.RUNTIME)
    if not is_known(detected) or detected == state.generated_language:
        return state, None
    return replace(state, generated_language=detected), state.generated_language
