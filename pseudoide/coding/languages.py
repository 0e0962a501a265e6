"""
PseudoIDE Workbench — Language alias table

Maps the many spellings a language tag shows up in (fence tags, model
replies, file suffixes) to one canonical display name.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class CodingLanguage(str, Enum):
    UNKNOWN = "Unknown"
    PYTHON = "Python"
    JAVASCRIPT = "JavaScript"
    TYPESCRIPT = "TypeScript"
    RUST = "Rust"
    CPP = "C++"
    C = "C"
    GO = "Go"
    JAVA = "Java"
    CSHARP = "C#"
    RUBY = "Ruby"
    KOTLIN = "Kotlin"
    SWIFT = "Swift"
    PHP = "PHP"
    BASH = "Bash"
    SQL = "SQL"


_ALIASES: dict[str, CodingLanguage] = {
    "go": CodingLanguage.GO,
    "golang": CodingLanguage.GO,
    "py": CodingLanguage.PYTHON,
    "python": CodingLanguage.PYTHON,
    "js": CodingLanguage.JAVASCRIPT,
    "jsx": CodingLanguage.JAVASCRIPT,
    "javascript": CodingLanguage.JAVASCRIPT,
    "ts": CodingLanguage.TYPESCRIPT,
    "tsx": CodingLanguage.TYPESCRIPT,
    "typescript": CodingLanguage.TYPESCRIPT,
    "rs": CodingLanguage.RUST,
    "rust": CodingLanguage.RUST,
    "cpp": CodingLanguage.CPP,
    "c++": CodingLanguage.CPP,
    "cc": CodingLanguage.CPP,
    "cxx": CodingLanguage.CPP,
    "c": CodingLanguage.C,
    "java": CodingLanguage.JAVA,
    "cs": CodingLanguage.CSHARP,
    "c#": CodingLanguage.CSHARP,
    "csharp": CodingLanguage.CSHARP,
    "rb": CodingLanguage.RUBY,
    "ruby": CodingLanguage.RUBY,
    "kt": CodingLanguage.KOTLIN,
    "kotlin": CodingLanguage.KOTLIN,
    "swift": CodingLanguage.SWIFT,
    "php": CodingLanguage.PHP,
    "sh": CodingLanguage.BASH,
    "bash": CodingLanguage.BASH,
    "sql": CodingLanguage.SQL,
}

# File loads use the suffix only, never the content classifier.
_EXTENSION_LANGUAGE: dict[str, CodingLanguage] = {
    ".py": CodingLanguage.PYTHON,
    ".js": CodingLanguage.JAVASCRIPT,
    ".ts": CodingLanguage.TYPESCRIPT,
    ".rs": CodingLanguage.RUST,
    ".cpp": CodingLanguage.CPP,
    ".c": CodingLanguage.C,
    ".go": CodingLanguage.GO,
}

PSEUDOCODE_EXTENSIONS = (".pseudo", ".txt")

# TypeScript is run through node as plain JS, like the desktop host did.
_SOURCE_EXTENSION: dict[CodingLanguage, str] = {
    CodingLanguage.PYTHON: "py",
    CodingLanguage.JAVASCRIPT: "js",
    CodingLanguage.TYPESCRIPT: "js",
    CodingLanguage.CPP: "cpp",
    CodingLanguage.C: "c",
    CodingLanguage.RUST: "rs",
    CodingLanguage.GO: "go",
}


def normalize_language(tag: str, default: Optional[str] = None) -> str:
    """
    Canonical display name for a language tag.

    Unrecognized tags get their first character capitalized. An empty tag
    yields ``default``, or "Unknown" when no default is given.
    """
    raw = tag.strip().lower() if isinstance(tag, str) else ""
    if not raw:
        return default if default is not None else CodingLanguage.UNKNOWN.value

    lang = _ALIASES.get(raw)
    if lang:
        return lang.value
    return raw[0].upper() + raw[1:]


def language_for_filename(name: str) -> Optional[str]:
    """Language implied by a file's suffix, or None when the suffix is unknown."""
    lowered = name.lower()
    for ext, lang in _EXTENSION_LANGUAGE.items():
        if lowered.endswith(ext):
            return lang.value
    return None


def is_pseudocode_file(name: str) -> bool:
    return name.lower().endswith(PSEUDOCODE_EXTENSIONS)


def source_extension(language: str) -> Optional[str]:
    """File extension used when saving code in ``language`` for execution."""
    try:
        lang = CodingLanguage(normalize_language(language))
    except ValueError:
        return None
    return _SOURCE_EXTENSION.get(lang)
