"""
HTTP mail gateway provider.

Reads messages and threads from a gateway exposing:
- GET /messages/{id}                    -> {"from", "subject", "snippet", "body"}
- GET /threads/{id}?maxMessages=N       -> {"messages": [{"from", "subject", "body"}, ...]}
"""

import json
from typing import Any, Optional

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from email_intelligence.models.input_models import EmailFacts, ThreadMessage
from email_intelligence.sources.base import EmailDataProvider, ThreadDataProvider
from email_intelligence.sources.exceptions import UpstreamFetchError


logger = structlog.get_logger(__name__)


class HttpEmailDataProvider(EmailDataProvider, ThreadDataProvider):
    """
    Email and thread provider backed by an HTTP mail gateway.

    Args:
        base_url: Gateway root URL
        timeout: Request timeout in seconds
        headers: Extra headers (e.g. an Authorization token for the gateway)
        transport: Custom httpx transport, mainly for tests
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = headers or {}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=self._headers,
                transport=self._transport,
            )
        return self._client

    async def _get_json(self, path: str, resource_id: str, params: Optional[dict] = None) -> Any:
        client = await self._get_client()
        try:
            response = await client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning("Mail gateway HTTP error", path=path, status_code=status_code)
            raise UpstreamFetchError(
                f"Mail gateway returned HTTP {status_code} for {resource_id}",
                resource_id=resource_id,
                not_found=status_code == 404,
                details={"status": status_code},
            ) from e
        except httpx.RequestError as e:
            logger.warning("Mail gateway unreachable", path=path, error=str(e))
            raise UpstreamFetchError(
                f"Mail gateway request failed for {resource_id}: {e}",
                resource_id=resource_id,
                details={"error_type": type(e).__name__},
            ) from e
        except json.JSONDecodeError as e:
            raise UpstreamFetchError(
                f"Mail gateway returned invalid JSON for {resource_id}",
                resource_id=resource_id,
            ) from e

    async def fetch_email(self, message_id: str) -> EmailFacts:
        data = await self._get_json(f"/messages/{message_id}", message_id)
        try:
            return EmailFacts.model_validate(data)
        except PydanticValidationError as e:
            raise UpstreamFetchError(
                f"Mail gateway returned a malformed message {message_id}",
                resource_id=message_id,
                details={"errors": e.error_count()},
            ) from e

    async def fetch_thread(self, thread_id: str, max_messages: int) -> list[ThreadMessage]:
        data = await self._get_json(
            f"/threads/{thread_id}", thread_id, params={"maxMessages": max_messages}
        )
        raw_messages = data.get("messages", []) if isinstance(data, dict) else []
        try:
            messages = [ThreadMessage.model_validate(m) for m in raw_messages]
        except PydanticValidationError as e:
            raise UpstreamFetchError(
                f"Mail gateway returned a malformed thread {thread_id}",
                resource_id=thread_id,
                details={"errors": e.error_count()},
            ) from e
        # Keep the most recent messages if the gateway ignored the limit
        return messages[-max_messages:] if max_messages > 0 else []

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
