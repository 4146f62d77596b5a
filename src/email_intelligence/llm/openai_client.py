"""
OpenAI Chat Completions adapter.

Uses response_format=json_schema so the model is steered to the output
schema. Strict mode stays off because the output schemas carry optional
fields, which strict mode does not allow.
"""

import time
from typing import Any, Dict

import structlog

from email_intelligence.llm.base_client import BaseLLMClient
from email_intelligence.llm.exceptions import ProviderCallError
from email_intelligence.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class OpenAIClient(BaseLLMClient):
    """
    OpenAI adapter.

    API Endpoints:
    - POST /chat/completions: Generate a completion
    - GET /models: Health check
    """

    vendor = "openai"

    def __init__(self, api_key: str, base_url: str = "https://api.openai.com/v1", **kwargs):
        super().__init__(api_key, base_url, **kwargs)

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(self, request: LLMGenerationRequest) -> Dict[str, Any]:
        messages = []
        if request.system_instruction:
            messages.append({"role": "system", "content": request.system_instruction})
        messages.append({"role": "user", "content": request.prompt})

        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": messages,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.format_schema:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": request.schema_name,
                    "schema": request.format_schema,
                    "strict": False,
                },
            }
        else:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        POST /chat/completions.

        Response (abridged):
        {
            "model": "gpt-4o-mini-2024-07-18",
            "choices": [{"message": {"content": "{...}"}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 410, "completion_tokens": 88}
        }
        """
        start_time = time.perf_counter()
        payload = self.build_payload(request)

        logger.info(
            "Sending generation request to OpenAI",
            model=request.model,
            prompt_length=len(request.prompt),
            has_schema=bool(request.format_schema),
        )

        data = await self._post_json("/chat/completions", payload, request.model)
        latency_ms = int((time.perf_counter() - start_time) * 1000)

        choices = data.get("choices") or []
        if not choices:
            raise ProviderCallError(
                "OpenAI response contained no choices",
                details={"vendor": self.vendor, "model": request.model},
            )
        message = choices[0].get("message") or {}
        if message.get("refusal"):
            raise ProviderCallError(
                "OpenAI model refused the request",
                details={"vendor": self.vendor, "model": request.model, "refusal": message["refusal"]},
            )
        content = message.get("content") or ""
        if not content.strip():
            raise ProviderCallError(
                "Empty response from OpenAI",
                details={"vendor": self.vendor, "model": request.model},
            )

        usage = data.get("usage") or {}
        prompt_tokens = usage.get("prompt_tokens")
        completion_tokens = usage.get("completion_tokens")
        model_version = data.get("model", request.model)
        finish_reason = choices[0].get("finish_reason") or "unknown"

        self._observe(model_version, latency_ms, prompt_tokens, completion_tokens)
        logger.info(
            "OpenAI generation successful",
            model=model_version,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            finish_reason=finish_reason,
        )

        return LLMGenerationResponse(
            content=content,
            model_version=model_version,
            finish_reason=finish_reason,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms,
            raw_metadata={"id": data.get("id")},
        )

    async def health_check(self) -> bool:
        return await self._get_ok("/models")
