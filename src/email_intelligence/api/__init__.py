"""
HTTP API for the Email Intelligence Service.

Modules:
- routes: Analysis, usage, cache and health endpoints
- dependencies: Access to the per-application ServiceContainer
- error_handlers: Error taxonomy to HTTP status mapping
- middleware: Request ID binding for structured logs
- models: Non-analysis response models
"""

from email_intelligence.api.error_handlers import EXCEPTION_HANDLERS
from email_intelligence.api.middleware import RequestTracingMiddleware
from email_intelligence.api.routes import router

__all__ = [
    "EXCEPTION_HANDLERS",
    "RequestTracingMiddleware",
    "router",
]
