"""
Email data sources consumed by the analysis layer.
"""

from email_intelligence.sources.base import EmailDataProvider, ThreadDataProvider
from email_intelligence.sources.exceptions import UpstreamFetchError
from email_intelligence.sources.http_provider import HttpEmailDataProvider

__all__ = [
    "EmailDataProvider",
    "ThreadDataProvider",
    "HttpEmailDataProvider",
    "UpstreamFetchError",
]
