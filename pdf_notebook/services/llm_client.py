"""LLM Client for chat-completion generation over HTTP."""
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx

from pdf_notebook.config import GenerationConfig
from pdf_notebook.models.conversation import PromptRequest

logger = logging.getLogger(__name__)


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class ConfigError(LLMClientError):
    """The generation service credential is not configured."""

    def __init__(self, message: str = "Generation API key is not configured (set OPENROUTER_API_KEY)"):
        super().__init__(LLMError(code="CONFIG_ERROR", message=message))


class ServiceError(LLMClientError):
    """The generation service answered with a non-success status."""

    def __init__(self, status_code: int, body: str, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(LLMError(
            code="SERVICE_ERROR",
            message=f"Generation service error {status_code}: {body}",
            details={"status_code": status_code, "body": body, **(details or {})},
        ))


class TransportError(LLMClientError):
    """The request never produced a usable response (network, timeout, bad JSON)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(LLMError(code="TRANSPORT_ERROR", message=message, details=details or {}))


def _chat_completion_content(data: Any) -> Any:
    return data["choices"][0]["message"]["content"]


def _flat_result(data: Any) -> Any:
    return data["result"]


def _output_array_content(data: Any) -> Any:
    return data["output"][0]["content"]


# Tried in order; the upstream response schema is not fixed.
ANSWER_EXTRACTORS: List[Callable[[Any], Any]] = [
    _chat_completion_content,
    _flat_result,
    _output_array_content,
]


def extract_answer(data: Any) -> str:
    """
    Pull the answer text out of a generation response.

    Falls back to the JSON serialization of the whole response when none of
    the known shapes matches.
    """
    for extractor in ANSWER_EXTRACTORS:
        try:
            value = extractor(data)
        except (KeyError, IndexError, TypeError):
            continue
        if isinstance(value, str):
            return value
    logger.warning("Unrecognised generation response shape, returning raw JSON")
    return json.dumps(data)


class LLMClient:
    """Client for a hosted chat-completion service."""

    def __init__(
        self,
        config: GenerationConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize LLM client.

        Args:
            config: Generation settings, including the API key
            transport: Optional httpx transport (used to fake the service in tests)
        """
        self.config = config
        self._transport = transport
        logger.info(f"LLMClient initialized for {config.endpoint} (model={config.model})")

    @property
    def is_configured(self) -> bool:
        return self.config.has_credential

    async def generate(self, request: PromptRequest) -> str:
        """
        Send ``request`` to the generation service and return the answer text.

        A single attempt is made; there is no retry.

        Args:
            request: Assembled prompt request

        Returns:
            Answer text (untrimmed)

        Raises:
            ConfigError: API key missing; no request is sent
            ServiceError: Non-2xx response
            TransportError: Network failure, timeout or undecodable body
        """
        if not self.config.api_key:
            error = ConfigError()
            logger.error(error.error.message)
            raise error

        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json"
        }
        start_time = time.time()

        try:
            logger.debug(f"Generating response with model: {request.model}")
            async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.config.endpoint,
                    headers=headers,
                    json=request.to_payload()
                )
        except httpx.TimeoutException as e:
            latency_ms = int((time.time() - start_time) * 1000)
            error = TransportError(
                f"Request timed out after {self.config.timeout}s",
                details={"model": request.model, "latency_ms": latency_ms, "original_error": str(e)}
            )
            logger.error(
                f"Timeout error: model={request.model}, latency={latency_ms}ms, error={e}",
                exc_info=True,
                extra={"error_code": error.error.code, "error_details": error.error.details}
            )
            raise error from e
        except httpx.HTTPError as e:
            latency_ms = int((time.time() - start_time) * 1000)
            error = TransportError(
                f"Network error: {e}",
                details={"model": request.model, "latency_ms": latency_ms, "error_type": type(e).__name__}
            )
            logger.error(
                f"Network error: model={request.model}, latency={latency_ms}ms, error={e}",
                exc_info=True,
                extra={"error_code": error.error.code, "error_details": error.error.details}
            )
            raise error from e

        latency_ms = int((time.time() - start_time) * 1000)

        if not response.is_success:
            error = ServiceError(
                response.status_code,
                response.text,
                details={"model": request.model, "latency_ms": latency_ms}
            )
            logger.error(
                f"Service error: model={request.model}, status={response.status_code}, latency={latency_ms}ms",
                extra={"error_code": error.error.code, "error_details": error.error.details}
            )
            raise error

        try:
            data = response.json()
        except ValueError as e:
            error = TransportError(
                "Generation service returned a non-JSON body",
                details={"model": request.model, "latency_ms": latency_ms, "body": response.text[:500]}
            )
            logger.error(
                f"Invalid JSON from generation service: model={request.model}",
                exc_info=True,
                extra={"error_code": error.error.code, "error_details": error.error.details}
            )
            raise error from e

        answer = extract_answer(data)
        logger.info(
            f"Generated response: model={request.model}, "
            f"answer_chars={len(answer)}, latency={latency_ms}ms"
        )
        return answer
