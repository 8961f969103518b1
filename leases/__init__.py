"""
Vehicle lease tracking.

This package provides the records and workflows behind the lease screens:
- VehicleRecord: one leased vehicle's terms
- LengthUnit, Currency: unit and currency choices
- VehicleFormState, Creating, Editing: edit-form input and mode
- validate_vehicle, save_vehicle: the save workflow
- WidgetSelectionCoordinator: the single widget-vehicle selection
- VehicleStore: YAML file persistence
"""

from .errors import LeaseError, InvalidInput, PersistenceFailure
from .units import LengthUnit, Currency
from .vehicle import VehicleRecord, MAX_LEASE_MONTHS
from .form import VehicleFormState, Creating, Editing
from .validator import (
    validate_vehicle,
    save_vehicle,
    delete_vehicle,
    submit_vehicle_form,
)
from .widget import (
    NO_SELECTION,
    initial_widget_index,
    mark_widget_vehicle,
    WidgetSelectionCoordinator,
)
from .store import VehicleStore, load_schema
from .collaborators import (
    ConsoleReporter,
    RecordingReporter,
    StampFileRefresher,
    NullRefresher,
)

__all__ = [
    "LeaseError",
    "InvalidInput",
    "PersistenceFailure",
    "LengthUnit",
    "Currency",
    "VehicleRecord",
    "MAX_LEASE_MONTHS",
    "VehicleFormState",
    "Creating",
    "Editing",
    "validate_vehicle",
    "save_vehicle",
    "delete_vehicle",
    "submit_vehicle_form",
    "NO_SELECTION",
    "initial_widget_index",
    "mark_widget_vehicle",
    "WidgetSelectionCoordinator",
    "VehicleStore",
    "load_schema",
    "ConsoleReporter",
    "RecordingReporter",
    "StampFileRefresher",
    "NullRefresher",
]
