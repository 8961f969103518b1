"""YAML file storage for vehicle records."""

import logging
import os
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml
from jsonschema import ValidationError, validate

from .errors import PersistenceFailure
from .units import Currency, LengthUnit
from .vehicle import VehicleRecord

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.yaml"


def load_schema() -> dict:
    """Load the JSON schema for the store file from schema.yaml."""
    with open(SCHEMA_PATH) as f:
        return yaml.safe_load(f)


def normalized_for_schema(data: Any) -> Any:
    """
    Copy of a loaded store document with YAML dates turned back into strings.

    SafeLoader reads an unquoted 2024-01-15 as a date; the schema checks the
    ISO text form.
    """
    if not isinstance(data, dict) or not isinstance(data.get("vehicles"), list):
        return data
    vehicles = []
    for row in data["vehicles"]:
        if isinstance(row, dict) and isinstance(row.get("leaseStartDate"), date):
            row = dict(row, leaseStartDate=row["leaseStartDate"].isoformat())
        vehicles.append(row)
    return dict(data, vehicles=vehicles)


def record_to_dict(record: VehicleRecord) -> Dict[str, Any]:
    """Serialize a VehicleRecord to the YAML dict format (camelCase keys)."""
    return {
        "id": record.vehicle_id,
        "name": record.name,
        "startingMileage": record.starting_mileage,
        "allowedMileage": record.allowed_mileage,
        "leaseLengthMonths": record.lease_length_months,
        "leaseStartDate": record.lease_start_date.isoformat(),
        "overageFee": record.overage_fee,
        "lengthUnit": record.length_unit.value,
        "currency": record.currency.value,
        "showOnWidget": record.show_on_widget,
        "removed": record.removed,
        "avatar": record.avatar,
    }


def record_from_dict(dct: Dict[str, Any]) -> VehicleRecord:
    """Parse a YAML dict into a VehicleRecord."""
    start = dct["leaseStartDate"]
    if not isinstance(start, date):
        start = date.fromisoformat(str(start))
    return VehicleRecord(
        vehicle_id=str(dct["id"]),
        name=dct["name"],
        starting_mileage=int(dct["startingMileage"]),
        allowed_mileage=int(dct.get("allowedMileage") or 0),
        lease_length_months=int(dct["leaseLengthMonths"]),
        lease_start_date=start,
        overage_fee=float(dct.get("overageFee") or 0),
        avatar=dct.get("avatar"),
        length_unit=LengthUnit.from_value(dct.get("lengthUnit")),
        currency=Currency.from_value(dct.get("currency")),
        show_on_widget=bool(dct.get("showOnWidget", False)),
        removed=bool(dct.get("removed", False)),
    )


class VehicleStore:
    """
    Vehicle records kept in a single YAML file.

    Every write rewrites the whole file through a temp file and os.replace,
    so a batch of records lands together or not at all.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._schema = load_schema()

    # ---------- Reading ----------
    def _load(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r") as fp:
                data = yaml.load(fp, Loader=yaml.SafeLoader)
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceFailure(f"Error: could not read {self.path}: {e}") from e

        if data is None:
            return []
        try:
            validate(instance=normalized_for_schema(data), schema=self._schema)
        except ValidationError as e:
            raise PersistenceFailure(
                f"Error: {self.path} is not a valid vehicle store: {e.message}"
            ) from e
        return data.get("vehicles") or []

    def fetch_all(self, include_removed: bool = False) -> List[VehicleRecord]:
        """All records in file order; soft-deleted ones only on request."""
        records = [record_from_dict(d) for d in self._load()]
        if include_removed:
            return records
        return [r for r in records if not r.removed]

    def get(self, vehicle_id: str) -> Optional[VehicleRecord]:
        """Find a record by id, including soft-deleted ones."""
        for record in self.fetch_all(include_removed=True):
            if record.vehicle_id == vehicle_id:
                return record
        return None

    # ---------- Writing ----------
    def _dump(self, rows: List[Dict[str, Any]]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w") as fp:
                yaml.dump(
                    {"vehicles": rows},
                    fp,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                    width=120,
                )
                fp.flush()
                os.fsync(fp.fileno())
            os.replace(tmp, self.path)
        except (OSError, yaml.YAMLError) as e:
            raise PersistenceFailure(f"Error: could not write {self.path}: {e}") from e

    def save_all(self, records: Iterable[VehicleRecord]) -> None:
        """
        Insert or replace several records in one write.

        Records are matched by id; unknown ids are appended in the order given.
        """
        rows = self._load()
        index_by_id = {row.get("id"): i for i, row in enumerate(rows)}
        count = 0
        for record in records:
            row = record_to_dict(record)
            if record.vehicle_id in index_by_id:
                rows[index_by_id[record.vehicle_id]] = row
            else:
                index_by_id[record.vehicle_id] = len(rows)
                rows.append(row)
            count += 1
        self._dump(rows)
        logger.debug("Wrote %d vehicle record(s) to %s", count, self.path)

    def save(self, record: VehicleRecord) -> None:
        """Insert or replace a single record."""
        self.save_all([record])
