"""Tests for prompt composition."""

from chatbridge.prompts import INSTRUCTION, _truncate_to_chars, build_prompt


class TestBuildPrompt:
    """Test prompt layout."""

    def test_plain_message(self):
        prompt = build_prompt("What is MCP?")

        assert prompt == f"{INSTRUCTION}\n\nUser: What is MCP?\nAssistant:"

    def test_context_precedes_user_turn(self):
        prompt = build_prompt("Summarize", context="line one\nline two", source="notes.md")

        assert "File: notes.md" in prompt
        assert prompt.index("line two") < prompt.index("User: Summarize")
        assert prompt.endswith("Assistant:")

    def test_empty_context_is_ignored(self):
        assert build_prompt("Hi", context="", source="empty.md") == build_prompt("Hi")

    def test_long_context_is_truncated(self):
        context = "word " * 1000
        prompt = build_prompt("Hi", context=context, max_context_chars=100)

        assert "..." in prompt
        assert len(prompt) < len(context)


class TestTruncateToChars:
    """Test word-boundary truncation."""

    def test_short_text_unchanged(self):
        assert _truncate_to_chars("short text", 100) == "short text"

    def test_long_text_truncated(self):
        result = _truncate_to_chars("alpha beta gamma delta " * 20, 50)

        assert result.endswith("...")
        assert len(result) <= 50
