"""
PseudoIDE Workbench — Prompts

System prompts for transcription and the editor assistant, plus the
editor-context message prepended to every chat request.
"""

TRANSCRIBE_SYSTEM_PROMPT = """You are an expert coding assistant. Your task is to transcribe the given pseudocode into valid, runnable code in the most appropriate language.
Analyze the syntax and style to infer the target language (e.g., Python, JavaScript, Rust).
Output result in the format:
```language
code
```"""


CHAT_SYSTEM_PROMPT = (
    "You are an expert coding assistant for PseudoIDE. "
    "Help the user interactively. Be concise."
)


GREETING = "Hello! I am ready to help you convert your pseudocode to code."


def editor_context_prompt(
    *,
    pseudocode: str,
    generated_code: str,
    generated_language: str,
    question: str,
) -> str:
    return (
        "Current Editor Context:\n\n"
        f"PSEUDOCODE:\n{pseudocode}\n\n"
        f"GENERATED CODE ({generated_language}):\n{generated_code}\n\n"
        f"User Question: {question}"
    )
