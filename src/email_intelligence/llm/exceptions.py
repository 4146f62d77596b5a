"""
Custom exceptions for the LLM layer.

Separate classes let callers tell a misconfigured deployment apart from an
unreachable or misbehaving vendor. Nothing in this layer retries; every error
propagates to the caller of the structured output invoker.
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM layer errors.

    Carries a human-readable message plus structured details for logs and
    API error bodies.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(LLMClientError):
    """
    Raised when a tier cannot be resolved from configuration.

    Typically a missing API key for the vendor selected by a tier. Fatal to
    the call; fixing it requires a deployment change.
    """
    pass


class UnsupportedProviderError(LLMClientError):
    """
    Raised when a vendor name has no registered adapter.
    """
    pass


class ProviderCallError(LLMClientError):
    """
    Raised when the vendor call fails at the network or vendor level.

    Examples:
    - Connection refused, DNS failure
    - 5xx from the vendor
    - Response envelope without generated content
    """
    pass


class ProviderTimeoutError(ProviderCallError):
    """Raised when the vendor does not answer within the client timeout."""
    pass


class ProviderRateLimitError(ProviderCallError):
    """Raised on HTTP 429 from the vendor."""
    pass


class ProviderAuthenticationError(ProviderCallError):
    """
    Raised when the vendor rejects the configured credentials (401/403).

    Distinct from ConfigurationError: the key exists but the vendor
    refuses it.
    """
    pass
