"""
PseudoIDE Workbench — Fenced code block extraction

Finds the first ```-delimited region in free text. Only the first region is
honoured; anything after it, later fences included, stays in the residual.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

# Tag admits c++, c#, objective-c style spellings.
FENCE_RE = re.compile(
    r"```[ \t]*(?P<tag>[A-Za-z0-9+#-]*)[ \t]*\r?\n(?P<code>.*?)```",
    re.DOTALL,
)


@dataclass(frozen=True)
class FencedBlock:
    tag: str
    code: str
    before: str
    after: str

    @property
    def residual(self) -> str:
        """Surrounding text with the block removed."""
        return (self.before + self.after).strip()


def extract_fenced_block(text: str) -> Optional[FencedBlock]:
    """Return the first fenced block in ``text``, or None when there is none."""
    if not text:
        return None

    m = FENCE_RE.search(text)
    if m is None:
        return None

    return FencedBlock(
        tag=m.group("tag"),
        code=m.group("code"),
        before=text[: m.start()],
        after=text[m.end():],
    )
