"""
Unit tests for sensitive-key redaction
"""

import pytest

from sternlog.utils.redaction import (
    DEFAULT_REDACT_KEYS,
    REDACTED,
    RedactionProcessor,
    create_redaction_keys,
    mask_sensitive_data,
    parse_redact_keys,
)


class TestMaskSensitiveData:
    @pytest.mark.parametrize("key", sorted(DEFAULT_REDACT_KEYS))
    def test_default_keys_masked(self, key):
        assert mask_sensitive_data({key: "value"}) == {key: REDACTED}

    def test_nested_one_level(self):
        masked = mask_sensitive_data(
            {"request": {"cookie": "c", "path": "/login"}, "user": "u-1"}
        )
        assert masked == {
            "request": {"cookie": REDACTED, "path": "/login"},
            "user": "u-1",
        }

    def test_deeper_levels_untouched(self):
        data = {"a": {"b": {"password": "p"}}}
        assert mask_sensitive_data(data) == data

    def test_input_not_modified(self):
        data = {"password": "p", "nested": {"token": "t"}}
        mask_sensitive_data(data)
        assert data == {"password": "p", "nested": {"token": "t"}}

    def test_remove(self):
        masked = mask_sensitive_data(
            {"secret": "s", "nested": {"ssn": "1", "name": "n"}}, remove=True
        )
        assert masked == {"nested": {"name": "n"}}


class TestRedactionKeys:
    def test_custom_keys_merged_with_defaults(self):
        keys = create_redaction_keys(["pin", "password"])
        assert "pin" in keys
        assert DEFAULT_REDACT_KEYS <= keys

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, frozenset()),
            ("", frozenset()),
            (" pin , ,session_id", frozenset({"pin", "session_id"})),
        ],
    )
    def test_parse(self, value, expected):
        assert parse_redact_keys(value) == expected


class TestRedactionProcessor:
    def test_masks_event_dict(self):
        processor = RedactionProcessor(keys=["pin"], censor="***")
        event_dict = processor(None, "info", {"event": "login", "pin": "1234"})
        assert event_dict == {"event": "login", "pin": "***"}

    def test_event_never_redacted(self):
        processor = RedactionProcessor()
        assert processor(None, "info", {"event": "token refreshed"}) == {
            "event": "token refreshed"
        }
