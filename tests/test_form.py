#!/usr/bin/env python3
"""Tests for VehicleFormState and edit modes."""

from datetime import date

from leases import Creating, Currency, Editing, LengthUnit, VehicleFormState
from conftest import AVATAR, make_record


class TestFromRecord:
    """Tests for populating the form from a stored vehicle."""

    def test_copies_fields_as_text(self):
        record = make_record(length_unit=LengthUnit.METRIC, currency=Currency.EUR)
        form = VehicleFormState.from_record(record)
        assert form.name == "My car"
        assert form.starting == "20"
        assert form.allowed == "30000"
        assert form.lease_length == "36"
        assert form.fee == "0.25"
        assert form.start_date == date(2024, 1, 15)
        assert form.avatar == AVATAR
        assert form.length_unit == LengthUnit.METRIC
        assert form.currency == "EUR"

    def test_zero_values_become_empty(self):
        record = make_record(starting_mileage=0, allowed_mileage=0, overage_fee=0.0)
        form = VehicleFormState.from_record(record)
        assert form.starting == ""
        assert form.allowed == ""
        assert form.fee == ""


class TestBlank:
    """Tests for add-mode defaults."""

    def test_defaults(self):
        form = VehicleFormState.blank(date(2025, 6, 1))
        assert form.name == ""
        assert form.start_date == date(2025, 6, 1)
        assert form.avatar is None
        assert form.length_unit == LengthUnit.IMPERIAL
        assert form.currency == "USD"

    def test_for_mode(self):
        record = make_record()
        assert VehicleFormState.for_mode(Editing(record)).name == "My car"
        assert VehicleFormState.for_mode(Creating(), date(2025, 6, 1)).name == ""


class TestCanAttemptSave:
    """Tests for the Save button gating."""

    def test_enabled_when_required_fields_present(self, valid_form):
        assert valid_form.can_attempt_save

    def test_optional_fields_do_not_gate(self, valid_form):
        valid_form.allowed = ""
        valid_form.fee = ""
        assert valid_form.can_attempt_save

    def test_disabled_without_each_required_field(self, valid_form):
        for attr, empty in (("name", ""), ("starting", ""), ("lease_length", ""), ("avatar", None)):
            form = VehicleFormState(**{**valid_form.__dict__, attr: empty})
            assert not form.can_attempt_save, attr

    def test_empty_avatar_enables_save(self, valid_form):
        valid_form.avatar = b""
        assert valid_form.can_attempt_save

    def test_gating_is_coarse(self, valid_form):
        """Garbage text still enables Save; full validation rejects it later."""
        valid_form.starting = "abc"
        assert valid_form.can_attempt_save
