"""VehicleRecord dataclass - one leased vehicle's terms."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional
import uuid

from dateutil.relativedelta import relativedelta

from .units import Currency, LengthUnit

MAX_LEASE_MONTHS = 120


def new_vehicle_id() -> str:
    return str(uuid.uuid4())


@dataclass
class VehicleRecord:
    """
    A leased vehicle as stored.

    allowed_mileage of 0 means the lease has no mileage limit, and an
    overage_fee of 0 means no fee was entered.
    """

    name: str
    starting_mileage: int
    lease_length_months: int
    lease_start_date: date
    avatar: Optional[bytes]
    allowed_mileage: int = 0
    overage_fee: float = 0.0
    length_unit: LengthUnit = LengthUnit.IMPERIAL
    currency: Currency = Currency.USD
    show_on_widget: bool = False
    removed: bool = False
    vehicle_id: str = field(default_factory=new_vehicle_id)

    @property
    def lease_end_date(self) -> date:
        """Date the lease term runs out."""
        return self.lease_start_date + relativedelta(months=self.lease_length_months)

    @property
    def has_mileage_limit(self) -> bool:
        return self.allowed_mileage > 0

    @property
    def has_overage_fee(self) -> bool:
        return self.overage_fee > 0

    def months_elapsed(self, as_of: Optional[date] = None) -> int:
        """Whole months of the lease used up as of a date, capped to the term."""
        as_of = as_of or date.today()
        if as_of <= self.lease_start_date:
            return 0
        delta = relativedelta(as_of, self.lease_start_date)
        months = delta.years * 12 + delta.months
        return min(months, self.lease_length_months)
