import json
import logging

from kolam_client.core.config import Settings
from kolam_client.core.logging import (
    MAX_LOGGED_VALUE_LENGTH,
    StructuredLogger,
    _StructuredJsonFormatter,
    get_correlation_id,
    set_correlation_id,
    setup_logging,
)


def test_structured_logger_truncates_long_values():
    logger = StructuredLogger("tests")

    image = "data:image/png;base64," + "A" * 5000
    sanitized = logger._sanitize_data({"image": image, "path_count": 7})

    assert sanitized["path_count"] == 7
    assert len(sanitized["image"]) < len(image)
    assert sanitized["image"].startswith("data:image/png;base64,")
    assert f"[{len(image)} chars]" in sanitized["image"]


def test_structured_logger_sanitizes_nested_values():
    logger = StructuredLogger("tests")
    long_value = "x" * (MAX_LOGGED_VALUE_LENGTH + 1)

    sanitized = logger._sanitize_data(
        {"outer": {"inner": long_value}, "items": [long_value, "short"]}
    )

    assert sanitized["outer"]["inner"].endswith("chars]")
    assert sanitized["items"][0].endswith("chars]")
    assert sanitized["items"][1] == "short"


def test_correlation_id_round_trip():
    set_correlation_id("session-123")
    assert get_correlation_id() == "session-123"

    set_correlation_id(None)
    generated = get_correlation_id()
    assert generated and generated != "session-123"
    # Stable once generated
    assert get_correlation_id() == generated
    set_correlation_id(None)


def test_log_record_carries_correlation_id(caplog):
    logger = StructuredLogger("tests.correlation")
    set_correlation_id("abc")
    with caplog.at_level(logging.INFO, logger="tests.correlation"):
        logger.info("Generation started", timeout_ms=45000)
    set_correlation_id(None)

    record = caplog.records[-1]
    assert "[abc] Generation started" in record.getMessage()
    assert record.structured_data["correlation_id"] == "abc"
    assert record.structured_data["timeout_ms"] == 45000


def test_json_formatter_flattens_structured_data():
    formatter = _StructuredJsonFormatter(
        "%(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level"},
    )
    record = logging.LogRecord(
        "tests.json", logging.INFO, __file__, 1, "hello", None, None
    )
    record.structured_data = {"correlation_id": "xyz", "path_count": 3}

    parsed = json.loads(formatter.format(record))

    assert parsed["level"] == "INFO"
    assert parsed["message"] == "hello"
    assert parsed["correlation_id"] == "xyz"
    assert parsed["path_count"] == 3
    assert "structured_data" not in parsed


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    saved = list(root.handlers)
    saved_level = root.level
    for handler in saved:
        root.removeHandler(handler)
    try:
        settings = Settings(ENVIRONMENT="production")
        setup_logging(settings)
        setup_logging(settings)
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, _StructuredJsonFormatter)
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in saved:
            root.addHandler(handler)
        root.setLevel(saved_level)
