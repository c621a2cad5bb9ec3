"""
Tests for log setup: forwarded server records and secret redaction.
"""
import logging

import pytest
from loguru import logger

from taskboard.core.logger import sanitize_value, setup_logger


@pytest.fixture
def captured():
    setup_logger(False, log_file="")
    messages = []
    sink_id = logger.add(lambda message: messages.append(str(message)), level="INFO")
    yield messages
    logger.remove(sink_id)


def test_forwarded_request_line_hides_query_token(captured):
    logging.getLogger("uvicorn.error").info(
        '%s - "WebSocket %s" [accepted]', "127.0.0.1:50000", "/ws?token=gAAAAABsecret&x=1"
    )

    assert len(captured) == 1
    assert "gAAAAABsecret" not in captured[0]
    assert "/ws?token=***REDACTED***&x=1" in captured[0]


def test_forwarded_records_without_secrets_pass_through(captured):
    logging.getLogger("uvicorn.access").info('"GET /boards HTTP/1.1" 200')

    assert '"GET /boards HTTP/1.1" 200' in captured[0]


def test_sanitize_value_redacts_nested_keys():
    assert sanitize_value("body", {"email": "a@b.c", "password": "x", "items": [{"token": "t"}]}) == {
        "email": "a@b.c",
        "password": "***REDACTED***",
        "items": [{"token": "***REDACTED***"}],
    }
