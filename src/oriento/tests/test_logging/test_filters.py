import logging

from oriento.core.logging.filters import RedactFilter, RequestIdFilter, reset_request_id, set_request_id


def make_record():
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello %s", ("world",), None)


def test_request_id_filter_defaults_to_dash():
    rec = make_record()
    token = set_request_id(None)
    try:
        assert RequestIdFilter().filter(rec) is True
        assert rec.request_id == "-"
    finally:
        reset_request_id(token)


def test_request_id_filter_uses_contextvar():
    rec = make_record()
    token = set_request_id("abc-123")
    try:
        RequestIdFilter().filter(rec)
        assert rec.request_id == "abc-123"
    finally:
        reset_request_id(token)


def test_request_id_filter_respects_record_extra():
    rec = make_record()
    rec.request_id = "explicit"
    token = set_request_id("context-id")
    try:
        RequestIdFilter().filter(rec)
        assert rec.request_id == "explicit"
    finally:
        reset_request_id(token)


def test_redact_filter_masks_secrets():
    rec = make_record()
    rec.api_key = "AIza-secret"
    rec.Authorization = "Bearer abc"
    rec.conversation_id = "conv-1"

    assert RedactFilter().filter(rec) is True

    assert rec.api_key == RedactFilter.REDACTED
    assert rec.Authorization == RedactFilter.REDACTED
    assert rec.conversation_id == "conv-1"
