"""Prompt composition for chat requests."""

from __future__ import annotations

DEFAULT_MAX_CONTEXT_CHARS = 8000

INSTRUCTION = "Please respond to the following user message in a helpful and friendly manner."
CONTEXT_INSTRUCTION = "Use the file content below as context when it is relevant."


def _truncate_to_chars(text: str, max_chars: int) -> str:
    """Truncate text to max_chars, breaking at word boundary."""
    if len(text) <= max_chars:
        return text
    truncated = text[: max(max_chars - 3, 0)]
    last_space = truncated.rfind(" ")
    if last_space > max_chars // 2:
        truncated = truncated[:last_space]
    return truncated + "..."


def build_prompt(
    message: str,
    context: str | None = None,
    source: str | None = None,
    max_context_chars: int = DEFAULT_MAX_CONTEXT_CHARS,
) -> str:
    """Build the completion prompt for a user message.

    Args:
        message: The user's chat message
        context: Optional file content to ground the answer
        source: Name of the file the context came from
        max_context_chars: Context beyond this length is truncated

    Returns:
        Prompt string ending with ``Assistant:``
    """
    parts = [INSTRUCTION]

    if context:
        parts.append(CONTEXT_INSTRUCTION)
        parts.append("")
        parts.append(f"File: {source}" if source else "File:")
        parts.append("---")
        parts.append(_truncate_to_chars(context, max_context_chars))
        parts.append("---")

    parts.append("")
    parts.append(f"User: {message}")
    parts.append("Assistant:")

    return "\n".join(parts)
