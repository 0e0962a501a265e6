"""PseudoIDE Workbench — Session state and orchestration."""

from pseudoide.coding.assistant import TranscriptionResult
from pseudoide.session.state import ChatMessage, Pane, SessionState
from pseudoide.session.workbench import RunOutcome, Workbench

__all__ = [
    "ChatMessage",
    "Pane",
    "RunOutcome",
    "SessionState",
    "TranscriptionResult",
    "Workbench",
]
