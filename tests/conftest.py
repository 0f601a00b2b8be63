"""Pytest configuration and fixtures for ChatBridge tests."""

import pytest
from pathlib import Path

from chatbridge.config import Settings
from chatbridge.schemas import ResourceContent, ResourceInfo


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a temporary MCP root."""
    return Settings(
        LLM_SERVER_URL="http://llm.test/v1/completions",
        MCP_COMMAND="mcp-server-test",
        MCP_ARGS=["--stdio"],
        MCP_ROOT=tmp_path,
        CONTEXT_MAX_CHARS=200,
    )


@pytest.fixture
def completion_payload() -> dict:
    """Completion service response body."""
    return {
        "response": "Hello! How can I help you today?",
        "usage": {"prompt_tokens": 21, "completion_tokens": 9, "total_tokens": 30},
    }


class FakeResourceBridge:
    """In-memory stand-in for ResourceBridge."""

    def __init__(self, files: dict[str, str] | None = None, resources: list[ResourceInfo] | None = None):
        self.files = files or {}
        self.resources = resources or []
        self.read_paths: list[str] = []

    async def read_file_text(self, path: str) -> str:
        self.read_paths.append(path)
        return self.files.get(path, "")

    async def list_resources(self) -> list[ResourceInfo]:
        return self.resources

    async def read_resource(self, uri: str) -> ResourceContent:
        return ResourceContent(uri=uri, text=self.files.get(uri, ""))


@pytest.fixture
def fake_bridge() -> FakeResourceBridge:
    return FakeResourceBridge(files={"notes.md": "The launch is scheduled for Friday."})
