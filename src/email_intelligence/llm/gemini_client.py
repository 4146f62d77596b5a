"""
Google Gemini generateContent adapter.

Gemini's native response schema only accepts an OpenAPI subset, so JSON mode
is enabled and the JSON Schema is appended to the system instruction.
Validation downstream is what actually enforces it.
"""

import json
import time
from typing import Any, Dict

import structlog

from email_intelligence.llm.base_client import BaseLLMClient
from email_intelligence.llm.exceptions import ProviderCallError
from email_intelligence.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class GeminiClient(BaseLLMClient):
    """
    Gemini adapter.

    API Endpoints:
    - POST /models/{model}:generateContent: Generate content
    - GET /models: Health check
    """

    vendor = "google"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        **kwargs,
    ):
        super().__init__(api_key, base_url, **kwargs)

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }

    def build_payload(self, request: LLMGenerationRequest) -> Dict[str, Any]:
        system_text = request.system_instruction or ""
        if request.format_schema:
            system_text = (
                f"{system_text}\n\n"
                "Respond with a single JSON object that conforms to this JSON Schema:\n"
                f"{json.dumps(request.format_schema)}"
            ).strip()

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
            "generationConfig": {
                "temperature": request.temperature,
                "maxOutputTokens": request.max_tokens,
                "responseMimeType": "application/json",
            },
        }
        if system_text:
            payload["systemInstruction"] = {"parts": [{"text": system_text}]}
        return payload

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        POST /models/{model}:generateContent.

        Response (abridged):
        {
            "candidates": [{"content": {"parts": [{"text": "{...}"}]}, "finishReason": "STOP"}],
            "usageMetadata": {"promptTokenCount": 380, "candidatesTokenCount": 75},
            "modelVersion": "gemini-2.0-flash-exp"
        }
        """
        start_time = time.perf_counter()
        payload = self.build_payload(request)

        logger.info(
            "Sending generation request to Gemini",
            model=request.model,
            prompt_length=len(request.prompt),
            has_schema=bool(request.format_schema),
        )

        data = await self._post_json(
            f"/models/{request.model}:generateContent", payload, request.model
        )
        latency_ms = int((time.perf_counter() - start_time) * 1000)

        candidates = data.get("candidates") or []
        if not candidates:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            raise ProviderCallError(
                "Gemini response contained no candidates",
                details={"vendor": self.vendor, "model": request.model, "block_reason": block_reason},
            )
        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        content = "".join(part.get("text", "") for part in parts)
        if not content.strip():
            raise ProviderCallError(
                "Empty response from Gemini",
                details={
                    "vendor": self.vendor,
                    "model": request.model,
                    "finish_reason": candidate.get("finishReason"),
                },
            )

        usage = data.get("usageMetadata") or {}
        prompt_tokens = usage.get("promptTokenCount")
        completion_tokens = usage.get("candidatesTokenCount")
        model_version = data.get("modelVersion", request.model)
        finish_reason = candidate.get("finishReason") or "unknown"

        self._observe(model_version, latency_ms, prompt_tokens, completion_tokens)
        logger.info(
            "Gemini generation successful",
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
        )

    async def health_check(self) -> bool:
        return await self._get_ok("/models")
