"""Unit tests for TransitionContext parsing and parse_instant."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pazproperty.application.services.transition_engine import (
    TransitionContext,
    parse_instant,
)
from pazproperty.domain.errors import ValidationError


class TestParseInstant:
    def test_z_suffix(self) -> None:
        assert parse_instant("2026-11-05T14:30:00Z") == datetime(
            2026, 11, 5, 14, 30, tzinfo=timezone.utc
        )

    def test_offset_converted_to_utc(self) -> None:
        parsed = parse_instant("2026-11-05T15:30:00+01:00")
        assert parsed == datetime(2026, 11, 5, 14, 30, tzinfo=timezone.utc)
        assert parsed.utcoffset() == timedelta(0)

    def test_naive_taken_as_utc(self) -> None:
        assert parse_instant("2026-11-05T14:30:00").tzinfo == timezone.utc

    def test_datetime_passthrough(self) -> None:
        value = datetime(2026, 1, 2, tzinfo=timezone.utc)
        assert parse_instant(value) == value

    def test_garbage(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_instant("tomorrow-ish", "appointment_at")
        assert exc_info.value.reason == "invalid_datetime"
        assert exc_info.value.fields == ["appointment_at"]


class TestTransitionContext:
    def test_empty(self) -> None:
        assert TransitionContext.from_mapping(None) == TransitionContext()
        assert TransitionContext.from_mapping({}) == TransitionContext()

    def test_camel_case_keys(self) -> None:
        context = TransitionContext.from_mapping(
            {
                "providerId": "p-1",
                "whenISO": "2026-11-05T14:30:00Z",
                "meetingNotes": "Gate code 1234",
                "quoteAmount": "480.50",
            }
        )
        assert context.provider_id == "p-1"
        assert context.appointment_at == datetime(2026, 11, 5, 14, 30, tzinfo=timezone.utc)
        assert context.meeting_notes == "Gate code 1234"
        assert context.quote_amount == Decimal("480.50")

    def test_legacy_provider_key(self) -> None:
        assert TransitionContext.from_mapping({"prestador_id": "p-9"}).provider_id == "p-9"

    def test_null_values_ignored(self) -> None:
        assert TransitionContext.from_mapping({"reason": None}) == TransitionContext()

    def test_unknown_key(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            TransitionContext.from_mapping({"status": "Resolved"})
        assert exc_info.value.reason == "unknown_fields"

    @pytest.mark.parametrize("amount", ["abc", "-5", "NaN", "Infinity"])
    def test_invalid_quote(self, amount: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            TransitionContext.from_mapping({"quote_amount": amount})
        assert exc_info.value.fields == ["quote_amount"]

    def test_quote_decision_keys(self) -> None:
        context = TransitionContext.from_mapping(
            {"quoteApproved": False, "quoteRejectionReason": "Too expensive"}
        )
        assert context.quote_approved is False
        assert context.quote_rejection_reason == "Too expensive"

    @pytest.mark.parametrize("flag", ["yes", 1, "true"])
    def test_quote_decision_must_be_boolean(self, flag: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            TransitionContext.from_mapping({"quote_approved": flag})
        assert exc_info.value.reason == "invalid_values"
        assert exc_info.value.fields == ["quote_approved"]
