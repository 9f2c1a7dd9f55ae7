"""
Unit tests for the CancellationIntent record.
"""

from datetime import datetime, timezone

import pytest

from cancellation.errors import InvalidStatusTransition
from cancellation.models import (
    CancellationIntent,
    CancellationPolicy,
    IntentStatus,
    parse_timestamp,
)


class TestNewIntent:

    def test_new_intent_is_pending_and_not_submitted(self):
        intent = CancellationIntent.new("booking-1", "Change of plans")

        assert intent.booking_id == "booking-1"
        assert intent.reason == "Change of plans"
        assert intent.status is IntentStatus.PENDING
        assert intent.submitted_to_backend is False
        assert intent.submitted_at is None
        assert intent.updated_at is None
        assert intent.requested_at.tzinfo is not None

    def test_new_intents_get_unique_ids(self):
        first = CancellationIntent.new("booking-1", "r")
        second = CancellationIntent.new("booking-1", "r")

        assert first.id != second.id

    def test_numeric_booking_id_is_stored_as_string(self):
        intent = CancellationIntent.new(42, "r")

        assert intent.booking_id == "42"


class TestSerialization:

    def test_to_dict_uses_persisted_schema(self):
        intent = CancellationIntent.new("booking-1", "Change of plans")

        data = intent.to_dict()

        assert set(data) == {"id", "bookingId", "reason", "requestedAt", "status", "submittedToBackend"}
        assert data["status"] == "pending"
        assert data["submittedToBackend"] is False

    def test_optional_timestamps_are_written_once_set(self):
        intent = CancellationIntent.new("booking-1", "r").as_submitted().with_status(IntentStatus.APPROVED)

        data = intent.to_dict()

        assert "submittedAt" in data
        assert "updatedAt" in data

    def test_round_trip_preserves_every_field(self):
        intent = CancellationIntent.new("booking-1", "r").as_submitted().with_status(IntentStatus.REJECTED)

        restored = CancellationIntent.from_dict(intent.to_dict())

        assert restored == intent

    def test_from_dict_accepts_legacy_document(self):
        legacy = {
            "id": "1718000000000",
            "bookingId": "665f1c",
            "reason": "User requested cancellation",
            "requestedAt": "2024-06-10T08:13:20.000Z",
            "status": "pending",
            "submittedToBackend": False,
        }

        intent = CancellationIntent.from_dict(legacy)

        assert intent.id == "1718000000000"
        assert intent.requested_at == datetime(2024, 6, 10, 8, 13, 20, tzinfo=timezone.utc)

    def test_from_dict_rejects_unknown_status(self):
        data = CancellationIntent.new("b", "r").to_dict()
        data["status"] = "withdrawn"

        with pytest.raises(ValueError):
            CancellationIntent.from_dict(data)

    def test_parse_timestamp_handles_empty(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None

    def test_timestamp_without_offset_is_utc(self):
        assert parse_timestamp("2024-06-10T08:13:20") == datetime(2024, 6, 10, 8, 13, 20, tzinfo=timezone.utc)

    @pytest.mark.parametrize("requested_at", [None, ""])
    def test_from_dict_requires_requested_at(self, requested_at):
        data = CancellationIntent.new("b", "r").to_dict()
        data["requestedAt"] = requested_at

        with pytest.raises(ValueError):
            CancellationIntent.from_dict(data)

    def test_from_dict_rejects_non_string_timestamp(self):
        data = CancellationIntent.new("b", "r").to_dict()
        data["requestedAt"] = 1718000000000

        with pytest.raises(TypeError):
            CancellationIntent.from_dict(data)


class TestStatusTransitions:

    def test_only_pending_is_non_terminal(self):
        assert IntentStatus.PENDING.is_terminal is False
        assert IntentStatus.APPROVED.is_terminal is True
        assert IntentStatus.REJECTED.is_terminal is True

    @pytest.mark.parametrize("target", [IntentStatus.APPROVED, IntentStatus.REJECTED])
    def test_pending_moves_to_terminal(self, target):
        intent = CancellationIntent.new("b", "r")

        updated = intent.with_status(target)

        assert updated.status is target
        assert updated.updated_at is not None
        assert updated.id == intent.id

    def test_same_status_is_a_no_op(self):
        approved = CancellationIntent.new("b", "r").with_status(IntentStatus.APPROVED)

        assert approved.with_status(IntentStatus.APPROVED) is approved

    @pytest.mark.parametrize("start,target", [
        (IntentStatus.APPROVED, IntentStatus.PENDING),
        (IntentStatus.APPROVED, IntentStatus.REJECTED),
        (IntentStatus.REJECTED, IntentStatus.PENDING),
        (IntentStatus.REJECTED, IntentStatus.APPROVED),
    ])
    def test_terminal_status_never_changes(self, start, target):
        intent = CancellationIntent.new("b", "r").with_status(start)

        with pytest.raises(InvalidStatusTransition):
            intent.with_status(target)

    def test_as_submitted_is_idempotent(self):
        submitted = CancellationIntent.new("b", "r").as_submitted()

        assert submitted.submitted_to_backend is True
        assert submitted.as_submitted() is submitted


class TestCancellationPolicy:

    def test_parses_camel_case_payload(self):
        policy = CancellationPolicy.model_validate({
            "canCancelDirectly": True,
            "requiresApproval": False,
            "cancellationFee": 15,
            "notice": "48 hours",
        })

        assert policy.can_cancel_directly is True
        assert policy.requires_approval is False
        assert policy.cancellation_fee == 15
        assert policy.notice == "48 hours"

    def test_default_requires_landlord_approval(self):
        policy = CancellationPolicy.default()

        assert policy.can_cancel_directly is False
        assert policy.requires_approval is True
        assert policy.cancellation_fee == 0
        assert "landlord" in policy.message
