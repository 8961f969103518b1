"""Length unit and currency choices for a lease."""

from enum import Enum
from typing import Optional


class LengthUnit(Enum):
    """Unit the odometer and mileage allowance are expressed in."""

    IMPERIAL = "imperial"
    METRIC = "metric"

    @property
    def long_name(self) -> str:
        return "Miles" if self is LengthUnit.IMPERIAL else "Kilometers"

    @property
    def short_name(self) -> str:
        return "mi" if self is LengthUnit.IMPERIAL else "km"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "LengthUnit":
        """Parse a stored value, falling back to IMPERIAL when unknown."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.IMPERIAL


class Currency(Enum):
    """Supported currencies for the overage fee."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CNY = "CNY"
    JPY = "JPY"
    CAD = "CAD"

    @classmethod
    def default(cls) -> "Currency":
        return cls.USD

    @classmethod
    def from_value(cls, value: Optional[str]) -> "Currency":
        """Parse a stored code, falling back to USD when unknown."""
        try:
            return cls((value or "").upper())
        except ValueError:
            return cls.default()
