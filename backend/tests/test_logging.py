import json
import logging

from booking_quotes.infra.logging import (
    RedactingJsonFormatter,
    clear_log_context,
    redact_pii,
    update_log_context,
)


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("booking_quotes.test", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_redact_pii():
    redacted = redact_pii("mail anna@example.com or call +46 70 123 45 67, Bearer abc.def")
    assert "anna@example.com" not in redacted
    assert "[REDACTED_EMAIL]" in redacted
    assert "[REDACTED_PHONE]" in redacted
    assert "Bearer [REDACTED_TOKEN]" in redacted


def test_formatter_merges_context_and_extra():
    update_log_context(request_id="req-1", tenant_id="tenant-a")
    try:
        line = RedactingJsonFormatter().format(
            _record("quote_computed", extra={"total_minor": 125000, "email": "x@example.com"})
        )
    finally:
        clear_log_context()
    payload = json.loads(line)
    assert payload["message"] == "quote_computed"
    assert payload["request_id"] == "req-1"
    assert payload["tenant_id"] == "tenant-a"
    assert payload["total_minor"] == 125000
    assert payload["email"] == "[REDACTED]"


def test_context_ignores_none_and_clears():
    merged = update_log_context(request_id="req-2", path=None)
    assert "path" not in merged
    clear_log_context()
    payload = json.loads(RedactingJsonFormatter().format(_record("request")))
    assert "request_id" not in payload
