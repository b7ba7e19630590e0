"""Tests for structured logging helpers and error serialization."""

import logging
import pytest

from swapstay.utils import logging as swap_logging
from swapstay.utils.errors import (
    AuthenticationError,
    ConflictError,
    DuplicatePendingRequestError,
    NotFoundError,
    StateError,
    StoreError,
    ValidationError,
)
from swapstay.utils.logging import (
    correlation_context,
    get_correlation_id,
    get_structured_logger,
    log_timing,
    mask_sensitive_data,
    mask_user_id,
    sanitize_message_text,
    timed,
)
from swapstay.utils.logging_config import LoggingConfig


@pytest.mark.unit
def test_correlation_context_scopes_id():
    assert get_correlation_id() is None

    with correlation_context("req_fixed") as correlation_id:
        assert correlation_id == "req_fixed"
        assert get_correlation_id() == "req_fixed"

    assert get_correlation_id() is None


@pytest.mark.unit
def test_correlation_context_generates_id():
    with correlation_context() as correlation_id:
        assert correlation_id.startswith("req_")
        assert len(correlation_id) == len("req_") + 12


@pytest.mark.unit
def test_structured_logger_attaches_fields(caplog):
    logger = get_structured_logger("swapstay.tests")

    with caplog.at_level(logging.INFO, logger="swapstay.tests"):
        with correlation_context("req_abc"):
            logger.info("Swap request created", request_id="r-1", compatibility_score=88)

    record = caplog.records[-1]
    assert record.getMessage() == "Swap request created"
    assert record.correlation_id == "req_abc"
    assert record.request_id == "r-1"
    assert record.compatibility_score == 88


@pytest.mark.unit
def test_mask_sensitive_data():
    text = "Email me at jane.doe@stanford.edu or call +1 (650) 555-0134"

    masked = mask_sensitive_data(text)

    assert "jane.doe@stanford.edu" not in masked
    assert "555-0134" not in masked
    assert "[REDACTED_EMAIL]" in masked
    assert "[REDACTED_PHONE]" in masked


@pytest.mark.unit
def test_mask_sensitive_data_can_be_disabled(monkeypatch):
    monkeypatch.setattr(LoggingConfig, "LOG_MASK_SENSITIVE", False)

    assert mask_sensitive_data("jane@stanford.edu") == "jane@stanford.edu"


@pytest.mark.unit
def test_mask_user_id():
    long_id = "8f14e45fceea167a5a36dedd4bea2543"

    masked = mask_user_id(long_id)

    assert masked.startswith("8f14...")
    assert masked == mask_user_id(long_id)
    assert mask_user_id("short") == "short"
    assert mask_user_id(None) is None


@pytest.mark.unit
def test_sanitize_message_text_truncates(monkeypatch):
    monkeypatch.setattr(LoggingConfig, "LOG_MESSAGE_CONTENT", True)

    assert sanitize_message_text("a" * 50, max_length=10) == "a" * 10 + "..."
    assert sanitize_message_text(None) is None


@pytest.mark.unit
def test_sanitize_message_text_respects_content_flag(monkeypatch):
    monkeypatch.setattr(LoggingConfig, "LOG_MESSAGE_CONTENT", False)

    assert sanitize_message_text("Hi there") is None


@pytest.mark.unit
def test_log_timing_warns_on_slow_operations(caplog, monkeypatch):
    monkeypatch.setattr(LoggingConfig, "LOG_SLOW_OPERATION_THRESHOLD_MS", -1)
    logger = get_structured_logger("swapstay.tests.timing")

    with caplog.at_level(logging.DEBUG, logger="swapstay.tests.timing"):
        with log_timing("swap_requests.sweep", logger=logger):
            pass

    slow = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(slow) == 1
    assert slow[0].operation == "swap_requests.sweep"
    assert slow[0].processing_time_ms >= 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_timed_wraps_coroutines(caplog):
    logger = get_structured_logger("swapstay.tests.timed")

    @timed("tests.double", logger=logger)
    async def double(value):
        return value * 2

    with caplog.at_level(logging.DEBUG, logger="swapstay.tests.timed"):
        assert await double(21) == 42

    assert any(getattr(r, "operation", None) == "tests.double" for r in caplog.records)
    assert double.__name__ == "double"


@pytest.mark.unit
def test_timed_wraps_plain_functions():
    @timed()
    def add(a, b):
        return a + b

    assert add(2, 3) == 5


@pytest.mark.unit
def test_setup_logging_installs_one_handler(monkeypatch):
    monkeypatch.setattr(LoggingConfig, "LOG_FORMAT", "json")
    root = logging.getLogger()

    LoggingConfig.setup_logging(force=True)
    first = LoggingConfig._handler
    LoggingConfig.setup_logging(force=True)
    second = LoggingConfig._handler

    assert first is not second
    assert first not in root.handlers
    assert second in root.handlers
    assert type(second.formatter).__name__ == "JsonFormatter"


@pytest.mark.unit
@pytest.mark.parametrize("error,status,code", [
    (AuthenticationError("Authentication required"), 401, "unauthenticated"),
    (ValidationError("Missing required fields"), 400, "validation_error"),
    (NotFoundError("Request not found"), 404, "not_found"),
    (ConflictError("Cannot request your own listing"), 409, "conflict"),
    (ConflictError("Only the requester can cancel this request", status_code=403), 403, "conflict"),
    (StoreError("Failed to get listing"), 500, "store_error"),
    (DuplicatePendingRequestError("exists"), 500, "duplicate_pending_request"),
])
def test_error_status_and_body(error, status, code):
    assert error.status_code == status
    assert error.to_dict() == {"success": False, "error": code, "message": error.message}


@pytest.mark.unit
def test_state_error_carries_reason():
    error = StateError("Request has expired", reason=StateError.EXPIRED)

    assert error.status_code == 409
    assert error.is_expired
    assert error.to_dict()["reason"] == "expired"
    assert not StateError("done", reason=StateError.ALREADY_RESPONDED).is_expired


@pytest.mark.unit
def test_module_exposes_correlation_helpers():
    swap_logging.set_correlation_id("req_manual")
    try:
        assert swap_logging.get_correlation_id() == "req_manual"
    finally:
        swap_logging.set_correlation_id(None)
