"""Transient edit-form state and the add/edit mode it is submitted under."""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from .units import Currency, LengthUnit
from .vehicle import VehicleRecord


@dataclass
class Creating:
    """The form adds a new vehicle."""


@dataclass
class Editing:
    """The form edits an existing vehicle."""

    record: VehicleRecord


EditMode = Union[Creating, Editing]


def _number_text(value) -> str:
    # Zero is shown as an empty field so the placeholder is visible.
    return str(value) if value else ""


@dataclass
class VehicleFormState:
    """Raw field values as the user typed them."""

    name: str = ""
    starting: str = ""
    allowed: str = ""
    lease_length: str = ""
    fee: str = ""
    start_date: Optional[date] = None
    avatar: Optional[bytes] = None
    length_unit: LengthUnit = LengthUnit.IMPERIAL
    currency: str = Currency.USD.value

    @classmethod
    def blank(cls, today: Optional[date] = None) -> "VehicleFormState":
        """Defaults for adding a vehicle."""
        return cls(start_date=today or date.today())

    @classmethod
    def from_record(cls, record: VehicleRecord) -> "VehicleFormState":
        """Populate the form from a stored vehicle for editing."""
        return cls(
            name=record.name or "",
            starting=_number_text(record.starting_mileage),
            allowed=_number_text(record.allowed_mileage),
            lease_length=_number_text(record.lease_length_months),
            fee=_number_text(record.overage_fee),
            start_date=record.lease_start_date,
            avatar=record.avatar,
            length_unit=record.length_unit,
            currency=record.currency.value,
        )

    @classmethod
    def for_mode(cls, mode: EditMode, today: Optional[date] = None) -> "VehicleFormState":
        if isinstance(mode, Editing):
            return cls.from_record(mode.record)
        return cls.blank(today)

    @property
    def can_attempt_save(self) -> bool:
        """Whether the Save action should be enabled at all."""
        return bool(self.name and self.avatar is not None and self.starting and self.lease_length)
