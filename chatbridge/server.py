"""HTTP orchestrator: chat endpoint backed by an MCP resource server and a completion service."""

from __future__ import annotations

import json
import logging

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from chatbridge import __version__
from chatbridge.completion import (
    CompletionServiceError,
    CompletionServiceUnavailableError,
    request_completion,
)
from chatbridge.config import Settings, get_settings
from chatbridge.prompts import build_prompt
from chatbridge.resource_bridge import ResourceBridge, ResourceBridgeError
from chatbridge.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    ResourceInfo,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging; level names are case-insensitive."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


configure_logging(get_settings().LOG_LEVEL)

app = FastAPI(
    title="ChatBridge Orchestrator",
    description="Forwards chat messages, optionally enriched with MCP file content, to a completion service",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_resource_bridge(settings: Settings = Depends(get_settings)) -> ResourceBridge:
    """Build the resource bridge for a request."""
    return ResourceBridge.from_settings(settings)


def get_completion_transport() -> httpx.AsyncBaseTransport | None:
    """Transport for completion calls; None means the default network transport."""
    return None


def _error(status_code: int, message: str, error_code: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, error_code=error_code).model_dump(exclude_none=True),
    )


async def _read_chat_request(http_request: Request) -> ChatRequest:
    """Parse the chat body.

    A missing, non-JSON or non-object body is treated as an empty request so the
    route can answer "Message is required". Invalid fields raise ValidationError.
    """
    body = await http_request.body()
    if not body:
        return ChatRequest()

    try:
        data = json.loads(body)
    except ValueError:
        logger.warning("Ignoring non-JSON /api/chat body")
        return ChatRequest()

    if not isinstance(data, dict):
        return ChatRequest()

    return ChatRequest.model_validate(data)


# --- HTTP Endpoints ---


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Basic liveness check."""
    return HealthResponse()


@app.post(
    "/api/chat",
    response_model=ChatResponse,
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": ChatRequest.model_json_schema()}},
        },
    },
)
async def chat(
    http_request: Request,
    settings: Settings = Depends(get_settings),
    bridge: ResourceBridge = Depends(get_resource_bridge),
    transport: httpx.AsyncBaseTransport | None = Depends(get_completion_transport),
):
    """Answer a chat message via the completion service.

    When ``file_path`` is set, the file is read through the MCP server and its
    text is added to the prompt. A failed read leaves the prompt without context.
    """
    try:
        request = await _read_chat_request(http_request)
    except ValidationError as e:
        return _error(422, f"Invalid request: {e.errors(include_url=False)}", "INVALID_REQUEST")

    if not request.message or not request.message.strip():
        return _error(400, "Message is required", "MESSAGE_REQUIRED")

    try:
        context = ""
        if request.file_path:
            context = await bridge.read_file_text(request.file_path)
            logger.info(f"Fetched {len(context)} chars of context from {request.file_path}")

        prompt = build_prompt(
            request.message,
            context=context,
            source=request.file_path,
            max_context_chars=settings.CONTEXT_MAX_CHARS,
        )

        result = await request_completion(
            prompt,
            settings,
            max_tokens=request.max_tokens,
            temperature=request.temperature,
            transport=transport,
        )

        return ChatResponse(
            response=result.response,
            usage=result.usage,
            context_used=bool(context),
        )

    except CompletionServiceError as e:
        logger.error(f"Error in /api/chat endpoint: {e}")
        return _error(502, f"Error from LLM server: {e.detail}", "LLM_ERROR")

    except CompletionServiceUnavailableError as e:
        logger.error(f"Error in /api/chat endpoint: {e}")
        return _error(
            503,
            f"Could not connect to the LLM service. Is it running at {settings.LLM_SERVER_URL}?",
            "LLM_UNAVAILABLE",
        )

    except Exception as e:
        logger.error(f"Error in /api/chat endpoint: {e}", exc_info=True)
        return _error(500, "Internal server error", "INTERNAL_ERROR")


@app.get("/api/resources", response_model=list[ResourceInfo])
async def list_resources(bridge: ResourceBridge = Depends(get_resource_bridge)):
    """List resources exposed by the MCP server."""
    try:
        return await bridge.list_resources()
    except ResourceBridgeError as e:
        logger.error(f"Error in /api/resources endpoint: {e}")
        return _error(502, str(e), "RESOURCE_SERVER_ERROR")


@app.exception_handler(Exception)
async def generic_exception_handler(request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error(500, "Internal server error", "INTERNAL_ERROR")
