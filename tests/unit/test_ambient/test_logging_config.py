"""Unit tests for structured logging helpers."""

import json
import logging
from types import SimpleNamespace

from cancellation.logging_config import (
    JSONFormatter,
    PrettyJSONFormatter,
    generate_request_id,
    log_with_context,
    setup_logging,
    setup_logging_from_config,
)


def make_record(**extra):
    record = logging.LogRecord(
        name="cancellation.orchestration",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="request_cancellation -> not_supported",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context_fields():
    output = JSONFormatter().format(make_record(booking_id="b-1", strategy="request_cancellation"))

    data = json.loads(output)
    assert data["level"] == "INFO"
    assert data["logger"] == "cancellation.orchestration"
    assert data["booking_id"] == "b-1"
    assert data["strategy"] == "request_cancellation"
    assert data["timestamp"].endswith("Z")


def test_json_formatter_keeps_unknown_extra_fields():
    data = json.loads(JSONFormatter().format(make_record(attempt=2)))

    assert data["attempt"] == 2


def test_pretty_formatter_renders_context():
    output = PrettyJSONFormatter().format(make_record(booking_id="b-1"))

    assert "[INFO]" in output
    assert "booking_id=b-1" in output


def test_setup_logging_writes_json_file(tmp_path):
    log_file = tmp_path / "logs" / "cancellation.log"
    logger = setup_logging("cancellation.test", "DEBUG", "pretty", str(log_file))

    logger.info("stored", extra={"intent_id": "i-1"})
    for handler in logger.handlers:
        handler.flush()

    line = log_file.read_text().strip().splitlines()[-1]
    assert json.loads(line)["intent_id"] == "i-1"
    assert logger.propagate is False
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_log_with_context(caplog):
    logger = logging.getLogger("cancellation.context_test")

    with caplog.at_level(logging.INFO, logger="cancellation.context_test"):
        log_with_context(logger, logging.INFO, "done", request_id="abc12345", booking_id="b-1")

    record = caplog.records[-1]
    assert record.request_id == "abc12345"
    assert record.booking_id == "b-1"


def test_generate_request_id():
    first, second = generate_request_id(), generate_request_id()

    assert len(first) == 8
    assert first != second


def test_setup_logging_from_config(tmp_path):
    log_file = tmp_path / "cancellation.log"
    cfg = SimpleNamespace(LOG_LEVEL="WARNING", LOG_FORMAT="json", LOG_FILE=str(log_file))

    logger = setup_logging_from_config(cfg)
    try:
        assert logger.name == "cancellation"
        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert any(isinstance(handler, logging.FileHandler) for handler in logger.handlers)
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
