"""Shared fixtures for lease tests."""

from datetime import date

import pytest

from leases import VehicleFormState, VehicleRecord, VehicleStore

TODAY = date(2025, 6, 1)
AVATAR = b"\x89PNG\r\n\x1a\nfake-image-bytes"


def make_record(name="My car", **overrides) -> VehicleRecord:
    fields = dict(
        name=name,
        starting_mileage=20,
        allowed_mileage=30000,
        lease_length_months=36,
        lease_start_date=date(2024, 1, 15),
        overage_fee=0.25,
        avatar=AVATAR,
    )
    fields.update(overrides)
    return VehicleRecord(**fields)


@pytest.fixture
def valid_form():
    return VehicleFormState(
        name="My car",
        starting="20",
        allowed="30000",
        lease_length="36",
        fee="0.25",
        start_date=date(2024, 1, 15),
        avatar=AVATAR,
    )


@pytest.fixture
def store(tmp_path):
    return VehicleStore(tmp_path / "vehicles.yaml")


class FakeRefresher:
    def __init__(self):
        self.calls = 0

    def reload_all(self):
        self.calls += 1


class FailingStore:
    """Store whose writes always fail."""

    def __init__(self, records=None):
        self.records = records or []

    def fetch_all(self, include_removed=False):
        return list(self.records)

    def save(self, record):
        from leases import PersistenceFailure

        raise PersistenceFailure("Error: disk full")

    def save_all(self, records):
        from leases import PersistenceFailure

        raise PersistenceFailure("Error: disk full")
