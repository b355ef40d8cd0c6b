"""
Tests for Mind the Gap models

Test strategy:
1. Unit tests for individual components (models, calculations, validators)
2. Integration tests for flows (with in-memory storage and environments)
3. No real API calls in tests (use fakes)
"""

import pytest
from pydantic import ValidationError

from mindthegap.models import (
    Donation,
    DonationFields,
    Frequency,
    Household,
    HouseholdPayload,
    Message,
    MessageType,
    Snapshot,
    ValidationIssue,
    ValidationResult,
)
from tests.conftest import BASE_TIME, make_donation, make_fields


class TestDonationModels:
    """Tests for donation-related Pydantic models."""

    def test_donation_fields_strip_whitespace(self):
        """Charity names are stored without surrounding whitespace."""
        fields = DonationFields(charity_name="  Oxfam  ", amount=10, frequency="yearly")
        assert fields.charity_name == "Oxfam"
        assert fields.frequency == Frequency.YEARLY

    def test_donation_fields_reject_non_positive_amount(self):
        with pytest.raises(ValidationError):
            DonationFields(charity_name="Oxfam", amount=0, frequency="monthly")

    def test_donation_fields_reject_unknown_frequency(self):
        with pytest.raises(ValidationError):
            DonationFields(charity_name="Oxfam", amount=10, frequency="weekly")

    def test_donation_fields_reject_empty_name(self):
        with pytest.raises(ValidationError):
            DonationFields(charity_name="   ", amount=10, frequency="monthly")

    def test_donation_fields_annual_amount(self):
        assert make_fields(amount=25, frequency="quarterly").annual_amount == 100

    def test_donation_derives_annual_amount(self):
        """A supplied annual_amount is ignored and recomputed."""
        donation = Donation(
            id="d-1",
            charity_name="Red Cross",
            amount=100,
            frequency="monthly",
            annual_amount=5,
        )
        assert donation.annual_amount == 1200

    def test_donation_from_json_recomputes_annual_amount(self):
        donation = Donation.model_validate({
            "id": "d-1",
            "charity_name": "Red Cross",
            "amount": 50,
            "frequency": "quarterly",
            "annual_amount": 999999,
            "created_at": BASE_TIME.isoformat(),
        })
        assert donation.annual_amount == 200
        assert donation.created_at == BASE_TIME

    def test_donation_is_frozen(self):
        donation = make_donation()
        with pytest.raises(ValidationError):
            donation.amount = 5

    def test_with_fields_keeps_identity(self):
        donation = make_donation(donation_id="d-7")
        edited = donation.with_fields(make_fields("UNICEF", 300, "yearly"))
        assert edited.id == "d-7"
        assert edited.created_at == donation.created_at
        assert edited.charity_name == "UNICEF"
        assert edited.annual_amount == 300

    def test_to_fields(self):
        fields = make_donation(amount=40, frequency="quarterly").to_fields()
        assert fields.amount == 40
        assert fields.frequency == Frequency.QUARTERLY


class TestSnapshotModels:
    """Tests for snapshots and backend payloads."""

    def test_snapshot_accepts_camel_case(self):
        snapshot = Snapshot.model_validate({"annualIncome": 50000, "donations": []})
        assert snapshot.annual_income == 50000

    def test_snapshot_accepts_field_name(self):
        assert Snapshot(annual_income=10).annual_income == 10

    def test_snapshot_rejects_negative_income(self):
        with pytest.raises(ValidationError):
            Snapshot(annual_income=-1)

    def test_snapshot_is_empty(self):
        assert Snapshot().is_empty
        assert not Snapshot(annual_income=1).is_empty
        assert not Snapshot(donations=[make_donation()]).is_empty

    def test_snapshot_transport_dict(self):
        data = Snapshot(annual_income=50000, donations=[make_donation()]).to_transport_dict()
        assert data["annualIncome"] == 50000
        assert data["donations"][0]["annual_amount"] == 1200
        assert data["donations"][0]["frequency"] == "monthly"

    def test_household_payload_to_snapshot(self):
        payload = HouseholdPayload(
            household=Household(id="h-1", annual_income=30000),
            donations=[make_donation()],
        )
        snapshot = payload.to_snapshot()
        assert snapshot.annual_income == 30000
        assert len(snapshot.donations) == 1


class TestMessages:
    def test_message_requires_text(self):
        with pytest.raises(ValidationError):
            Message(type=MessageType.INFO, text="")


class TestValidationResult:
    """Tests for validation result models."""

    def test_validation_result_has_errors(self):
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be greater than zero",
                ),
                ValidationIssue(
                    field="charity_name",
                    issue_type="missing",
                    message="Charity name is required",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors
        assert result.error_count == 1
        assert len(result.issues_for("amount")) == 1
        assert result.issues_for("frequency") == []

    def test_validation_issue_rejects_unknown_severity(self):
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")
