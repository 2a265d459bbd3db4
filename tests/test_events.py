"""Unit tests for event decoding."""

import json
import sys
from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from stripehooks.core.events import EventType, WebhookEvent, decode_event, event_type_key
from stripehooks.core.exceptions import DecodeError


class TestEventType:
    def test_compares_equal_to_string_value(self) -> None:
        assert EventType.CHARGE_SUCCEEDED == "charge.succeeded"
        assert str(EventType.INVOICE_PAID) == "invoice.paid"

    def test_event_type_key(self) -> None:
        assert event_type_key(EventType.PAYOUT_PAID) == "payout.paid"
        assert event_type_key("radar.early_fraud_warning.created") == (
            "radar.early_fraud_warning.created"
        )


class TestDecodeEvent:
    def test_decodes_envelope(self, event_body) -> None:
        event = decode_event(event_body("charge.succeeded"))

        assert isinstance(event, WebhookEvent)
        assert event.id == "evt_123"
        assert event.type == "charge.succeeded"
        assert event.type == EventType.CHARGE_SUCCEEDED
        assert event.created == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert event.livemode is False
        assert event.api_version == "2023-10-16"
        assert event.object["id"] == "ch_123"
        assert event.raw_payload["object"] == "event"

    def test_accepts_str_payload(self, event_body) -> None:
        event = decode_event(event_body("invoice.paid").decode("utf-8"))

        assert event.type == "invoice.paid"

    def test_unknown_type_is_kept_as_string(self, event_body) -> None:
        event = decode_event(event_body("brand_new.vendor_feature"))

        assert event.type == "brand_new.vendor_feature"

    def test_minimal_envelope(self) -> None:
        event = decode_event(b'{"type": "charge.failed"}')

        assert event.id == "unknown"
        assert event.created is None
        assert event.object is None
        assert dict(event.data) == {}

    def test_event_is_immutable(self, event_body) -> None:
        event = decode_event(event_body())

        with pytest.raises(FrozenInstanceError):
            event.type = "invoice.paid"  # type: ignore[misc]
        with pytest.raises(TypeError):
            event.data["object"] = {}  # type: ignore[index]

    def test_invalid_json(self) -> None:
        with pytest.raises(DecodeError, match="Invalid JSON payload") as exc_info:
            decode_event(b"{not json")

        assert isinstance(exc_info.value.cause, json.JSONDecodeError)

    def test_invalid_utf8(self) -> None:
        with pytest.raises(DecodeError, match="Invalid JSON payload"):
            decode_event(b"\xff\xfe\xfa")

    def test_non_object_payload(self) -> None:
        with pytest.raises(DecodeError, match="must be a JSON object"):
            decode_event(b'["charge.succeeded"]')

    @pytest.mark.parametrize("body", [b'{"id": "evt_1"}', b'{"type": ""}', b'{"type": 42}'])
    def test_missing_or_invalid_type(self, body) -> None:
        with pytest.raises(DecodeError, match="'type'"):
            decode_event(body)

    def test_invalid_data_section(self) -> None:
        with pytest.raises(DecodeError, match="'data'"):
            decode_event(b'{"type": "charge.succeeded", "data": [1, 2]}')

    def test_deeply_nested_payload(self) -> None:
        with pytest.raises(DecodeError, match="Invalid JSON payload") as exc_info:
            decode_event(b"[" * 100000)

        assert isinstance(exc_info.value.cause, RecursionError)

    @pytest.mark.skipif(
        getattr(sys, "get_int_max_str_digits", lambda: 0)() == 0,
        reason="no integer string conversion limit",
    )
    def test_oversized_integer(self) -> None:
        body = '{"type": "charge.succeeded", "n": ' + "9" * 5000 + "}"

        with pytest.raises(DecodeError, match="Invalid JSON payload"):
            decode_event(body)

    @pytest.mark.parametrize("data", ['""', "0", "false", "[]"])
    def test_falsy_non_mapping_data_section(self, data) -> None:
        with pytest.raises(DecodeError, match="'data'"):
            decode_event('{"type": "charge.succeeded", "data": ' + data + "}")

    def test_null_data_section_is_empty(self) -> None:
        event = decode_event(b'{"type": "charge.succeeded", "data": null}')

        assert dict(event.data) == {}

    @pytest.mark.parametrize("created", ["1e300", "NaN", "-1e20"])
    def test_out_of_range_created(self, created) -> None:
        with pytest.raises(DecodeError, match="'created'"):
            decode_event('{"type": "charge.succeeded", "created": ' + created + "}")
