"""
Which vehicle the home-screen widget shows.

At most one record in the collection has show_on_widget set. Changing the
selection clears every other record's flag and writes the whole collection in
one store call before the widget is told to reload.
"""

import dataclasses
import logging
from typing import List, Optional, Sequence

from .errors import PersistenceFailure
from .vehicle import VehicleRecord

logger = logging.getLogger(__name__)

NO_SELECTION = -1


def initial_widget_index(records: Sequence[VehicleRecord]) -> int:
    """
    Index to preselect when the settings screen opens.

    The flagged record if there is one, else the first record, else
    NO_SELECTION for an empty collection.
    """
    index = 0 if records else NO_SELECTION
    for i, record in enumerate(records):
        if record.show_on_widget:
            index = i
    return index


def mark_widget_vehicle(
    records: Sequence[VehicleRecord], index: int
) -> List[VehicleRecord]:
    """Return copies of records with only records[index] flagged for the widget."""
    if index < 0 or index >= len(records):
        raise IndexError(f"Vehicle index {index} out of range (0..{len(records) - 1})")
    return [
        dataclasses.replace(record, show_on_widget=(i == index))
        for i, record in enumerate(records)
    ]


class WidgetSelectionCoordinator:
    """Persists widget selection changes and asks the widget to reload."""

    def __init__(self, store, reporter, refresher):
        self.store = store
        self.reporter = reporter
        self.refresher = refresher

    def initial_index(self) -> int:
        return initial_widget_index(self.store.fetch_all())

    def widget_vehicle(self) -> Optional[VehicleRecord]:
        """The record the widget displays, or None with no vehicles."""
        records = self.store.fetch_all()
        index = initial_widget_index(records)
        if index == NO_SELECTION:
            return None
        return records[index]

    def select(self, records: List[VehicleRecord], index: int) -> bool:
        """
        Show records[index] on the widget.

        records is the list the user picked from. The flag is cleared on every
        other stored record too, soft-deleted ones included, in the same
        write. On success the caller's records carry the new flags and the
        widget is reloaded once. A failed read or write goes to the reporter,
        the widget is not reloaded, and the in-memory records are left as they
        were.
        """
        if index < 0 or index >= len(records):
            raise IndexError(f"Vehicle index {index} out of range (0..{len(records) - 1})")
        target_id = records[index].vehicle_id
        try:
            collection = self.store.fetch_all(include_removed=True)
            stored_ids = {r.vehicle_id for r in collection}
            collection += [r for r in records if r.vehicle_id not in stored_ids]
            position = next(
                i for i, r in enumerate(collection) if r.vehicle_id == target_id
            )
            marked = mark_widget_vehicle(collection, position)
            self.store.save_all(marked)
        except PersistenceFailure as e:
            logger.error("Widget selection not saved: %s", e)
            self.reporter.handle(e)
            return False

        for record in records:
            record.show_on_widget = record.vehicle_id == target_id
        logger.info("Widget now shows %s (%s)", target_id, records[index].name)
        self.refresher.reload_all()
        return True
