"""
PseudoIDE Workbench — Coding language classifier

Heuristically detects the language of an isolated block of code from
signature substrings. This is a best-effort guess, not a parser: snippets
carrying several signatures resolve by predicate order.

Two predicate sets exist. The chat set (used when resolving assistant
replies) adds a JavaScript check after Python; the runtime set (used right
before execution) stops at Python.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from pseudoide.coding.languages import CodingLanguage

logger = logging.getLogger("pseudoide.classifier")


class SignatureSet(Enum):
    RUNTIME = "runtime"
    CHAT = "chat"


@dataclass(frozen=True)
class Signature:
    language: CodingLanguage
    matches: Callable[[str], bool]


def _all_of(*needles: str) -> Callable[[str], bool]:
    return lambda code: all(n in code for n in needles)


def _any_of(*needles: str) -> Callable[[str], bool]:
    return lambda code: any(n in code for n in needles)


# ── Ordered signatures — first match wins ───────────────────────────────────

_CORE_SIGNATURES: list[Signature] = [
    Signature(CodingLanguage.GO, _all_of("package main", "func main")),
    Signature(CodingLanguage.CPP, _all_of("#include", "int main")),
    Signature(CodingLanguage.RUST, _all_of("fn main", "println!")),
    Signature(CodingLanguage.PYTHON, _all_of("def ", ":")),
]

_JAVASCRIPT_SIGNATURE = Signature(
    CodingLanguage.JAVASCRIPT, _any_of("console.log", "const ", "let ")
)

SIGNATURES: dict[SignatureSet, list[Signature]] = {
    SignatureSet.RUNTIME: _CORE_SIGNATURES,
    SignatureSet.CHAT: _CORE_SIGNATURES + [_JAVASCRIPT_SIGNATURE],
}


def classify_code(code: str, signatures: SignatureSet = SignatureSet.CHAT) -> str:
    """
    Best-guess canonical language for ``code``.
    Returns "Unknown" if no signature matches; callers keep their prior label.
    """
    if not isinstance(code, str) or not code:
        return CodingLanguage.UNKNOWN.value

    for signature in SIGNATURES[signatures]:
        if signature.matches(code):
            logger.debug("Classified code as %s (%s set)", signature.language.value, signatures.value)
            return signature.language.value

    return CodingLanguage.UNKNOWN.value


def is_known(language: str) -> bool:
    return bool(language) and language != CodingLanguage.UNKNOWN.value
