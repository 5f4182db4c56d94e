"""Unit tests for the logging utilities."""

from __future__ import annotations

import json
import logging

from app.api.gate import Identity
from app.core.logger import JSONFormatter, RequestIdFilter, configure_logging
from flask import g


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    configure_logging("DEBUG")
    try:
        assert logging.getLogger().level == logging.DEBUG
    finally:
        configure_logging("INFO")


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_token_context() -> None:
    record = _record(request_id="r-1", token_status="expired", user_id=3)

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["request_id"] == "r-1"
    assert payload["token_status"] == "expired"
    assert payload["user_id"] == 3


def test_filter_outside_request_has_no_request_id() -> None:
    record = _record()
    assert RequestIdFilter().filter(record) is True
    assert record.request_id is None


def test_filter_attaches_request_and_user_ids(app) -> None:
    with app.test_request_context(headers={"X-Request-ID": "abc"}):
        g.identity = Identity(user_id=12, authorities=("ROLE_USER",))
        record = _record()
        RequestIdFilter().filter(record)

    assert record.request_id == "abc"
    assert record.user_id == 12
