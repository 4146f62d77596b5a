"""Unit tests for logging configuration."""

import logging

import structlog

from email_intelligence.logging_config import (
    SERVICE_NAME,
    add_service_name,
    build_shared_processors,
    configure_logging,
)


def test_add_service_name():
    event = add_service_name(None, "info", {"event": "hello"})

    assert event["service"] == SERVICE_NAME


def test_add_service_name_keeps_existing():
    event = add_service_name(None, "info", {"event": "hello", "service": "other"})

    assert event["service"] == "other"


def test_production_processors_format_exceptions():
    assert structlog.processors.format_exc_info in build_shared_processors(is_production=True)
    assert structlog.processors.format_exc_info not in build_shared_processors(is_production=False)


def test_configure_logging_sets_levels():
    configure_logging("WARNING", "production")

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging("DEBUG", "development")
    assert logging.getLogger().level == logging.DEBUG
