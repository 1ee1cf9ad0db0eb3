"""
Tests for structured JSON logging.
"""

import json
import logging

from callrouting.shared.logging import (
    StructuredFormatter,
    bound_call,
    call_sid_var,
    current_log_fields,
    get_logger,
    log_with_context,
)


def _record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("callrouting.test", logging.INFO, "", 0, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_base_fields(self):
        payload = json.loads(StructuredFormatter().format(_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "callrouting.test"
        assert payload["message"] == "hello"
        assert "timestamp" in payload

    def test_extra_data_is_merged(self):
        record = _record(extra_data={"destination": "voicemail", "rule": "direct-voicemail"})
        payload = json.loads(StructuredFormatter().format(record))

        assert payload["destination"] == "voicemail"
        assert payload["rule"] == "direct-voicemail"

    def test_standard_extra_attributes(self):
        payload = json.loads(StructuredFormatter().format(_record(active_call_count=2)))
        assert payload["active_call_count"] == 2

    def test_call_sid_is_stamped(self):
        token = call_sid_var.set("CA123")
        try:
            payload = json.loads(StructuredFormatter().format(_record()))
        finally:
            call_sid_var.reset(token)
        assert payload["call_sid"] == "CA123"

    def test_no_call_sid_by_default(self):
        payload = json.loads(StructuredFormatter().format(_record()))
        assert "call_sid" not in payload


class TestLogWithContext:
    def test_emits_json_with_context(self, capsys):
        logger = get_logger("callrouting.test.context")
        log_with_context(logger, logging.INFO, "Call routing decided", destination="hangup")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["message"] == "Call routing decided"
        assert payload["destination"] == "hangup"

    def test_respects_level(self, capsys):
        logger = get_logger("callrouting.test.level")
        logger.setLevel(logging.WARNING)
        log_with_context(logger, logging.INFO, "suppressed")
        assert "suppressed" not in capsys.readouterr().out


class TestBoundCall:
    def test_call_sid_and_fields_are_stamped(self):
        with bound_call("CA42", rule="busy-check"):
            payload = json.loads(StructuredFormatter().format(_record()))

        assert payload["call_sid"] == "CA42"
        assert payload["rule"] == "busy-check"

    def test_bindings_are_released_on_exit(self):
        with bound_call("CA42", rule="busy-check"):
            pass

        assert call_sid_var.get() is None
        assert current_log_fields() == {}

    def test_nested_bindings_merge(self):
        with bound_call("CA1", tenant="acme"):
            with bound_call(rule="va-forward"):
                assert current_log_fields() == {"call_sid": "CA1", "tenant": "acme", "rule": "va-forward"}
            assert current_log_fields() == {"call_sid": "CA1", "tenant": "acme"}

    def test_released_when_block_raises(self):
        try:
            with bound_call("CA9"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert call_sid_var.get() is None

    def test_explicit_fields_win_over_bound_fields(self, capsys):
        logger = get_logger("callrouting.test.bound")
        with bound_call("CA7", rule="bound-rule"):
            log_with_context(logger, logging.INFO, "decided", rule="explicit-rule")

        payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert payload["call_sid"] == "CA7"
        assert payload["rule"] == "explicit-rule"
