import json
import logging

from portal.obs.logging import JSONLogFormatter, bind_context, reset_context, sanitize_field


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("portal.test", logging.INFO, __file__, 1, "dashboard.ready", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_service_fields(settings):
    payload = json.loads(JSONLogFormatter(settings).format(_record(course="CS101")))

    assert payload["msg"] == "dashboard.ready"
    assert payload["level"] == "info"
    assert payload["service"] == settings.service_name
    assert payload["course"] == "CS101"


def test_formatter_redacts_sensitive_fields(settings):
    payload = json.loads(JSONLogFormatter(settings).format(_record(auth_token="abc", email="a@b.c")))

    assert payload["auth_token"] == "[redacted]"
    assert payload["email"] == "[redacted]"


def test_formatter_includes_bound_request_id(settings):
    tokens = bind_context(request_id="req-1", route="/assignments")
    try:
        payload = json.loads(JSONLogFormatter(settings).format(_record()))
    finally:
        reset_context(tokens)

    assert payload["request_id"] == "req-1"
    assert payload["route"] == "/assignments"


def test_sanitize_truncates_long_values():
    assert sanitize_field("description", "x" * 300).endswith("…")
    assert len(sanitize_field("ids", list(range(20)))) == 11
