"""
PseudoIDE Workbench — Assistant response resolver

Turns one raw assistant reply into the text shown in the chat transcript
plus, when the reply carries a fenced block, the code and language to push
into the editor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pseudoide.coding.fence import extract_fenced_block
from pseudoide.coding.language_classifier import SignatureSet, classify_code, is_known
from pseudoide.coding.languages import normalize_language

EDITOR_UPDATED_TEXT = "I've updated the editor with the requested code."


@dataclass(frozen=True)
class ParsedResponse:
    display_text: str
    extracted_code: Optional[str] = None
    extracted_language: Optional[str] = None

    @property
    def has_code(self) -> bool:
        return self.extracted_code is not None


def resolve_response(text: str) -> ParsedResponse:
    """
    Split a reply into display text and an optional code artifact.

    An explicit fence tag wins; an untagged fence falls back to the chat
    signature set. When neither yields a language, ``extracted_language`` is
    left unset so the caller keeps its current label.
    """
    block = extract_fenced_block(text)
    if block is None:
        return ParsedResponse(display_text=text)

    tag = block.tag.strip().lower()
    if not tag:
        guessed = classify_code(block.code, SignatureSet.CHAT)
        tag = guessed if is_known(guessed) else ""

    language = normalize_language(tag) if tag else None

    return ParsedResponse(
        display_text=block.residual or EDITOR_UPDATED_TEXT,
        extracted_code=block.code,
        extracted_language=language,
    )
