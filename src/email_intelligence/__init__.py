"""
Email Intelligence Service.

LLM-backed analysis of individual emails: categorization, cold outreach
detection and context extraction, plus sequential batch analysis, with a TTL
result cache and token usage tracking.
"""

__version__ = "0.1.0"
