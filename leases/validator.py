"""
Validation and save workflow for the edit-vehicle form.

validate_vehicle() checks every field before anything is built, so a failed
save never leaves a record half updated. Checks run in a fixed order and the
first failure is the one reported.
"""

import dataclasses
import logging
import re
from datetime import date
from typing import Optional

from .errors import InvalidInput, LeaseError
from .form import EditMode, Editing, VehicleFormState
from .units import Currency
from .vehicle import MAX_LEASE_MONTHS, VehicleRecord

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def parse_int(text: str) -> Optional[int]:
    """Parse a plain integer; None if the text is not one."""
    if not _INT_RE.match(text or ""):
        return None
    return int(text)


def parse_decimal(text: str) -> Optional[float]:
    """Parse a plain decimal number; None if the text is not one."""
    if not _DECIMAL_RE.match(text or ""):
        return None
    return float(text)


def validate_vehicle(
    form: VehicleFormState, mode: EditMode, today: Optional[date] = None
) -> VehicleRecord:
    """
    Turn form input into a record ready to persist.

    Raises InvalidInput for the first field that fails. In edit mode the
    returned record is a new object carrying the existing id and widget flag;
    the existing record itself is not touched.
    """
    today = today or date.today()

    if not form.name:
        raise InvalidInput("Name is empty", "name")

    if form.allowed != "":
        allowed = parse_int(form.allowed)
        if allowed is None:
            raise InvalidInput("Allowed mileage is not a valid number", "allowed")
        if allowed < 0:
            raise InvalidInput("Allowed mileage should not be negative", "allowed")
    else:
        allowed = 0

    if form.fee != "":
        fee = parse_decimal(form.fee)
        if fee is None:
            raise InvalidInput("Fee is not a valid number", "fee")
        if fee < 0:
            raise InvalidInput("Fee should not be negative", "fee")
    else:
        fee = 0.0

    starting = parse_int(form.starting)
    if starting is None:
        raise InvalidInput("Starting mileage is not a valid number", "starting")
    if starting < 0:
        raise InvalidInput("Starting mileage should be larger than 0", "starting")

    lease_length = parse_int(form.lease_length)
    if lease_length is None:
        raise InvalidInput("Length of lease is not a valid number", "lease_length")
    if lease_length <= 0:
        raise InvalidInput("Length of lease should be larger than 0", "lease_length")
    if lease_length > MAX_LEASE_MONTHS:
        raise InvalidInput(
            "Sorry, a lease with a term longer than 10 years is not supported for now",
            "lease_length",
        )

    if form.avatar is None:
        raise InvalidInput("Please add a vehicle avatar", "avatar")

    start_date = form.start_date or today
    if start_date > today:
        raise InvalidInput("Lease start date cannot be in the future", "start_date")

    try:
        currency = Currency((form.currency or Currency.default().value).upper())
    except ValueError:
        raise InvalidInput(f"Unsupported currency: {form.currency}", "currency")

    fields = dict(
        name=form.name,
        starting_mileage=starting,
        allowed_mileage=allowed,
        lease_length_months=lease_length,
        lease_start_date=start_date,
        overage_fee=fee,
        avatar=form.avatar,
        length_unit=form.length_unit,
        currency=currency,
        removed=False,
    )
    if isinstance(mode, Editing):
        return dataclasses.replace(mode.record, **fields)
    return VehicleRecord(**fields)


def save_vehicle(
    form: VehicleFormState, mode: EditMode, store, today: Optional[date] = None
) -> VehicleRecord:
    """
    Validate the form and persist the result.

    Raises InvalidInput before any write, or PersistenceFailure if the store
    rejects it. In edit mode the caller's record is updated in place once the
    write has gone through, and that same object is returned.
    """
    record = validate_vehicle(form, mode, today)
    store.save(record)

    if isinstance(mode, Editing):
        for f in dataclasses.fields(record):
            setattr(mode.record, f.name, getattr(record, f.name))
        record = mode.record
    logger.info("Saved vehicle %s (%s)", record.vehicle_id, record.name)
    return record


def delete_vehicle(record: VehicleRecord, store) -> None:
    """Soft-delete a vehicle; the record stays in the store marked removed."""
    updated = dataclasses.replace(record, removed=True)
    store.save(updated)
    record.removed = True
    logger.info("Removed vehicle %s (%s)", record.vehicle_id, record.name)


def submit_vehicle_form(
    form: VehicleFormState,
    mode: EditMode,
    store,
    reporter,
    today: Optional[date] = None,
) -> Optional[VehicleRecord]:
    """
    Handle the Save action: save, or hand the failure to the reporter.

    Returns the saved record, or None when the save did not happen.
    """
    try:
        return save_vehicle(form, mode, store, today)
    except LeaseError as e:
        reporter.handle(e)
        return None
