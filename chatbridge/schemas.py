"""Pydantic schemas for ChatBridge request/response contracts."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


# --- Chat API ---


class ChatRequest(BaseModel):
    """Chat message sent to the orchestrator."""

    # Optional here so a missing message maps to 400 rather than 422
    message: str | None = Field(default=None, description="User message to answer")
    file_path: str | None = Field(
        default=None,
        description="Optional file to read through the MCP server and use as context",
    )
    max_tokens: int | None = Field(default=None, ge=1, le=4096)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)


class ChatResponse(BaseModel):
    """Completion relayed back to the caller."""

    response: Any = None
    usage: Any = None
    context_used: bool = False


# --- Completion service ---


class CompletionRequest(BaseModel):
    """Body posted to the completion service."""

    prompt: str
    max_tokens: int
    temperature: float


class CompletionResult(BaseModel):
    """Body returned by the completion service."""

    response: Any = None
    usage: Any = None


# --- Resources ---


class ResourceInfo(BaseModel):
    """Resource advertised by the MCP server."""

    uri: str
    name: str
    description: str | None = None
    mime_type: str | None = None


class ResourceContent(BaseModel):
    """Content of a single resource read."""

    uri: str
    mime_type: str | None = None
    text: str | None = None
    blob: str | None = Field(default=None, description="Base64-encoded binary content")

    @property
    def is_binary(self) -> bool:
        return self.text is None and self.blob is not None


# --- Health / errors ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok"] = "ok"
    message: str = "Orchestrator is running!"


class ErrorResponse(BaseModel):
    """Error response for failed requests."""

    error: str
    error_code: str | None = None
