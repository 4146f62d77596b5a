"""
LLM layer: tier resolution, vendor adapters and structured invocation.

Components:
- TierConfigResolver: Maps default/economy tiers to vendor, model and key
- BaseLLMClient: Abstract vendor adapter
- AnthropicClient, OpenAIClient, GeminiClient: httpx-based adapters
- ClientRegistry: Vendor name to adapter mapping
- StructuredOutputInvoker: Generate, validate and account for one call
- PromptBuilder: Jinja2 prompts for each analysis
- exceptions: LLM layer error taxonomy
"""

from email_intelligence.llm.anthropic_client import AnthropicClient
from email_intelligence.llm.base_client import BaseLLMClient
from email_intelligence.llm.exceptions import (
    ConfigurationError,
    LLMClientError,
    ProviderAuthenticationError,
    ProviderCallError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    UnsupportedProviderError,
)
from email_intelligence.llm.gemini_client import GeminiClient
from email_intelligence.llm.openai_client import OpenAIClient
from email_intelligence.llm.prompt_builder import PromptBuilder, PromptPair
from email_intelligence.llm.registry import ClientRegistry
from email_intelligence.llm.structured_output import StructuredOutputInvoker
from email_intelligence.llm.tiers import TierConfigResolver

__all__ = [
    "AnthropicClient",
    "BaseLLMClient",
    "ClientRegistry",
    "GeminiClient",
    "OpenAIClient",
    "PromptBuilder",
    "PromptPair",
    "StructuredOutputInvoker",
    "TierConfigResolver",
    "ConfigurationError",
    "LLMClientError",
    "ProviderAuthenticationError",
    "ProviderCallError",
    "ProviderRateLimitError",
    "ProviderTimeoutError",
    "UnsupportedProviderError",
]
