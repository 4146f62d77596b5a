"""
Anthropic Messages API adapter.

Structured output is obtained by forcing a single tool whose input schema is
the output schema; the tool call's input is the generated document.
"""

import json
import time
from typing import Any, Dict

import structlog

from email_intelligence.llm.base_client import BaseLLMClient
from email_intelligence.llm.exceptions import ProviderCallError
from email_intelligence.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicClient(BaseLLMClient):
    """
    Anthropic adapter.

    API Endpoints:
    - POST /messages: Generate a message (tool_choice forces structured output)
    - GET /models: Health check
    """

    vendor = "anthropic"

    def __init__(self, api_key: str, base_url: str = "https://api.anthropic.com/v1", **kwargs):
        super().__init__(api_key, base_url, **kwargs)

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def build_payload(self, request: LLMGenerationRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.system_instruction:
            payload["system"] = request.system_instruction
        if request.format_schema:
            payload["tools"] = [
                {
                    "name": request.schema_name,
                    "description": f"Record the {request.schema_name} result.",
                    "input_schema": request.format_schema,
                }
            ]
            payload["tool_choice"] = {"type": "tool", "name": request.schema_name}
        return payload

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        POST /messages.

        Response (abridged):
        {
            "model": "claude-haiku-4-5-20250929",
            "stop_reason": "tool_use",
            "content": [{"type": "tool_use", "name": "...", "input": {...}}],
            "usage": {"input_tokens": 420, "output_tokens": 96}
        }
        """
        start_time = time.perf_counter()
        payload = self.build_payload(request)

        logger.info(
            "Sending generation request to Anthropic",
            model=request.model,
            prompt_length=len(request.prompt),
            has_schema=bool(request.format_schema),
        )

        data = await self._post_json("/messages", payload, request.model)
        latency_ms = int((time.perf_counter() - start_time) * 1000)

        content = self._extract_content(data, request)
        usage = data.get("usage") or {}
        prompt_tokens = usage.get("input_tokens")
        completion_tokens = usage.get("output_tokens")
        model_version = data.get("model", request.model)

        self._observe(model_version, latency_ms, prompt_tokens, completion_tokens)
        logger.info(
            "Anthropic generation successful",
            model=model_version,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            stop_reason=data.get("stop_reason"),
        )

        return LLMGenerationResponse(
            content=content,
            model_version=model_version,
            finish_reason=data.get("stop_reason") or "unknown",
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms,
            raw_metadata={"id": data.get("id")},
        )

    def _extract_content(self, data: Dict[str, Any], request: LLMGenerationRequest) -> str:
        blocks = data.get("content") or []
        for block in blocks:
            if block.get("type") == "tool_use" and block.get("name") == request.schema_name:
                return json.dumps(block.get("input", {}))

        text = "".join(b.get("text", "") for b in blocks if b.get("type") == "text")
        if not text.strip():
            raise ProviderCallError(
                "Empty response from Anthropic",
                details={"vendor": self.vendor, "model": request.model, "stop_reason": data.get("stop_reason")},
            )
        return text

    async def health_check(self) -> bool:
        return await self._get_ok("/models")
