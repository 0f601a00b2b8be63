"""Client for the external completion service."""

from __future__ import annotations

import logging

import httpx

from chatbridge.config import Settings
from chatbridge.schemas import CompletionRequest, CompletionResult

logger = logging.getLogger(__name__)


class CompletionServiceError(Exception):
    """Raised when the completion service answers with an error."""

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class CompletionServiceUnavailableError(Exception):
    """Raised when the completion service cannot be reached."""

    pass


def _error_detail(response: httpx.Response) -> str:
    """Extract the error detail from an upstream error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("detail") is not None:
        return str(body["detail"])
    return response.text


async def request_completion(
    prompt: str,
    settings: Settings,
    max_tokens: int | None = None,
    temperature: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CompletionResult:
    """Send a prompt to the completion service and return its answer.

    Args:
        prompt: Fully composed prompt
        settings: Settings holding the service URL, timeout and defaults
        max_tokens: Overrides ``settings.LLM_MAX_TOKENS`` when given
        temperature: Overrides ``settings.LLM_TEMPERATURE`` when given
        transport: Optional httpx transport (used by tests)

    Returns:
        CompletionResult with the response text and usage

    Raises:
        CompletionServiceError: The service returned a non-2xx status or an unreadable body
        CompletionServiceUnavailableError: The service could not be reached
    """
    body = CompletionRequest(
        prompt=prompt,
        max_tokens=max_tokens if max_tokens is not None else settings.LLM_MAX_TOKENS,
        temperature=temperature if temperature is not None else settings.LLM_TEMPERATURE,
    )

    try:
        async with httpx.AsyncClient(
            timeout=settings.LLM_TIMEOUT_SECONDS,
            transport=transport,
        ) as client:
            response = await client.post(settings.LLM_SERVER_URL, json=body.model_dump())
            response.raise_for_status()

    except httpx.ConnectError as e:
        logger.error(f"Failed to connect to completion service at {settings.LLM_SERVER_URL}: {e}")
        raise CompletionServiceUnavailableError(
            f"Completion service unavailable at {settings.LLM_SERVER_URL}"
        ) from e

    except httpx.HTTPStatusError as e:
        detail = _error_detail(e.response)
        logger.error(f"Completion service HTTP error {e.response.status_code}: {detail}")
        raise CompletionServiceError(detail, status_code=e.response.status_code) from e

    try:
        data = response.json()
    except ValueError as e:
        raise CompletionServiceError("Completion service returned a non-JSON body") from e

    if not isinstance(data, dict):
        raise CompletionServiceError("Completion service returned an unexpected body")

    logger.debug(f"Completion received, usage={data.get('usage')}")
    return CompletionResult(
        response=data.get("response"),
        usage=data.get("usage"),
    )
