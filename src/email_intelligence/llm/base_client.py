"""
Abstract base client for vendor LLM APIs.

Defines the interface every vendor adapter implements and the httpx plumbing
they share: a persistent AsyncClient, error mapping from httpx exceptions to
the ProviderCallError family, and latency/token metrics.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from email_intelligence.llm.exceptions import (
    ProviderAuthenticationError,
    ProviderCallError,
    ProviderRateLimitError,
    ProviderTimeoutError,
)
from email_intelligence.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from email_intelligence.monitoring.metrics import llm_latency_seconds, llm_tokens_total


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for vendor adapters.

    Responsibilities:
    - Translate LLMGenerationRequest into the vendor payload
    - Send it and map transport/vendor failures to ProviderCallError subclasses
    - Return the generated content with token usage when reported

    Does NOT handle:
    - Prompt construction (PromptBuilder)
    - Output validation (StructuredOutputValidator)
    - Retries (there are none; errors propagate)
    """

    vendor: str = ""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: int = 60,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_key: Vendor API key
            base_url: Vendor API root (e.g. https://api.openai.com/v1)
            timeout: Request timeout in seconds
            connection_limits: httpx pool limits (default: 10 connections)
            transport: Custom httpx transport, mainly for tests
        """
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._connection_limits = connection_limits or httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0,
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            vendor=self.vendor,
            base_url=self.base_url,
            timeout=timeout,
        )

    @abstractmethod
    def _auth_headers(self) -> Dict[str, str]:
        """Headers that authenticate a request with the vendor."""

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a structured completion.

        Args:
            request: Vendor-neutral generation request

        Returns:
            LLMGenerationResponse with the generated JSON text and metadata

        Raises:
            ProviderTimeoutError: Request exceeded the timeout
            ProviderRateLimitError: Vendor answered 429
            ProviderAuthenticationError: Vendor rejected the key
            ProviderCallError: Any other transport or vendor failure
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight reachability check. Returns False instead of raising.
        """

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                headers=self._auth_headers(),
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient", vendor=self.vendor)
        return self._client

    async def _post_json(
        self,
        path: str,
        payload: Dict[str, Any],
        model: str,
    ) -> Dict[str, Any]:
        """
        POST a JSON payload and return the decoded JSON body.

        Raises:
            ProviderCallError (or a subclass) on any failure
        """
        client = await self._get_client()
        try:
            response = await client.post(path, json=payload)
            response.raise_for_status()
            body = response.json()

        except httpx.TimeoutException as e:
            logger.warning("Vendor request timeout", vendor=self.vendor, model=model, error=str(e))
            raise ProviderTimeoutError(
                f"{self.vendor} request timed out after {self.timeout}s",
                details={"vendor": self.vendor, "model": model, "timeout": self.timeout},
            ) from e

        except httpx.HTTPStatusError as e:
            raise self._status_error(e, model) from e

        except httpx.RequestError as e:
            logger.warning(
                "Vendor network error",
                vendor=self.vendor,
                model=model,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ProviderCallError(
                f"Network error calling {self.vendor}: {e}",
                details={"vendor": self.vendor, "model": model, "error_type": type(e).__name__},
            ) from e

        except json.JSONDecodeError as e:
            logger.error("Vendor returned non-JSON body", vendor=self.vendor, model=model)
            raise ProviderCallError(
                f"Invalid JSON response from {self.vendor}",
                details={"vendor": self.vendor, "model": model, "parse_error": str(e)},
            ) from e

        if not isinstance(body, dict):
            logger.error(
                "Vendor returned unexpected body shape",
                vendor=self.vendor,
                model=model,
                body_type=type(body).__name__,
            )
            raise ProviderCallError(
                f"Unexpected response shape from {self.vendor}",
                details={"vendor": self.vendor, "model": model, "body_type": type(body).__name__},
            )
        return body

    def _status_error(self, error: httpx.HTTPStatusError, model: str) -> ProviderCallError:
        status_code = error.response.status_code
        # Vendor error bodies are short JSON documents; cap them anyway
        error_text = error.response.text[:1000]
        details = {
            "vendor": self.vendor,
            "model": model,
            "status": status_code,
            "error": error_text,
        }

        logger.error(
            "Vendor HTTP error",
            vendor=self.vendor,
            model=model,
            status_code=status_code,
            error_text=error_text,
        )

        if status_code == 429:
            return ProviderRateLimitError(f"{self.vendor} rate limit exceeded", details=details)
        if status_code in (401, 403):
            return ProviderAuthenticationError(
                f"{self.vendor} rejected the configured API key", details=details
            )
        return ProviderCallError(f"{self.vendor} error: HTTP {status_code}", details=details)

    def _observe(
        self,
        model: str,
        latency_ms: int,
        prompt_tokens: Optional[int],
        completion_tokens: Optional[int],
    ) -> None:
        """Record latency and token metrics for a successful call."""
        llm_latency_seconds.labels(vendor=self.vendor, model=model).observe(latency_ms / 1000.0)
        if prompt_tokens:
            llm_tokens_total.labels(
                vendor=self.vendor, model=model, token_type="input"
            ).inc(prompt_tokens)
        if completion_tokens:
            llm_tokens_total.labels(
                vendor=self.vendor, model=model, token_type="output"
            ).inc(completion_tokens)

    async def _get_ok(self, path: str) -> bool:
        try:
            client = await self._get_client()
            response = await client.get(path, timeout=5.0)
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning("Health check failed", vendor=self.vendor, error=str(e))
            return False

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed LLM client connection", vendor=self.vendor)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
