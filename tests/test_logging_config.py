import pytest

from bottlematch.logging_config import get_logger


def test_service_logger_formats_structured_data():
    logger = get_logger("bottlematch.test")
    text = logger._format("info", "Comparison finished", {"matches": 3, "status": "ok"})
    assert text == "ℹ️ [bottlematch.test] Comparison finished (matches=3, status=ok)"


def test_service_logger_error_includes_exception(caplog):
    logger = get_logger("bottlematch.test")
    with caplog.at_level("ERROR", logger="bottlematch.test"):
        logger.error("Comparison rejected", error=ValueError("bad price"))

    assert "error_type=ValueError" in caplog.text
    assert "error_message=bad price" in caplog.text


def test_request_span_reraises_and_logs_failure(caplog):
    logger = get_logger("bottlematch.test")
    with caplog.at_level("ERROR", logger="bottlematch.test"):
        with pytest.raises(RuntimeError):
            with logger.request_span("compare"):
                raise RuntimeError("boom")

    assert "Request 'compare' failed" in caplog.text
