#!/usr/bin/env python3
"""
CLI for tracking vehicle leases.

Commands:
  list    - List leased vehicles
  show    - Show one vehicle's lease terms
  add     - Add a vehicle
  edit    - Edit a vehicle's lease terms
  delete  - Remove a vehicle
  widget  - Show or change which vehicle the widget displays
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from leases import (
    ConsoleReporter,
    Creating,
    Editing,
    InvalidInput,
    LeaseError,
    LengthUnit,
    NO_SELECTION,
    StampFileRefresher,
    VehicleFormState,
    VehicleRecord,
    VehicleStore,
    WidgetSelectionCoordinator,
    initial_widget_index,
    submit_vehicle_form,
    validate_vehicle,
)
from leases import delete_vehicle as soft_delete
from leases import config

# =============================================================================
# Formatting helpers
# =============================================================================


def format_mileage(miles: int, unit: LengthUnit) -> str:
    """Format mileage with its unit."""
    return f"{miles:,} {unit.short_name}"


def format_allowed(record: VehicleRecord) -> str:
    """Format the mileage allowance; 0 means unlimited."""
    if not record.has_mileage_limit:
        return "unlimited"
    return format_mileage(record.allowed_mileage, record.length_unit)


def format_fee(record: VehicleRecord) -> str:
    """Format the overage fee per unit of distance."""
    if not record.has_overage_fee:
        return "-"
    return f"{record.overage_fee:g} {record.currency.value}/{record.length_unit.short_name}"


def make_vehicle_table(
    records: List[VehicleRecord], widget_index: int = NO_SELECTION
) -> List[List[str]]:
    """Convert vehicle records to table rows."""
    rows = []
    for i, record in enumerate(records):
        rows.append(
            [
                str(i),
                "*" if i == widget_index else "",
                record.name,
                format_mileage(record.starting_mileage, record.length_unit),
                format_allowed(record),
                f"{record.lease_length_months} mo",
                record.lease_start_date.isoformat(),
                record.lease_end_date.isoformat(),
                format_fee(record),
                "removed" if record.removed else "",
            ]
        )
    return rows


VEHICLE_HEADERS = [
    "#",
    "Widget",
    "Name",
    "Starting",
    "Allowed",
    "Term",
    "Start",
    "End",
    "Overage fee",
    "",
]


def parse_date_arg(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD argument; raises InvalidInput on bad input."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInput(f"Invalid date '{value}', expected YYYY-MM-DD", "start_date")


def read_avatar(path: Optional[Path]) -> Optional[bytes]:
    """Read an avatar image file; raises InvalidInput if it cannot be read."""
    if path is None:
        return None
    try:
        return path.read_bytes()
    except OSError as e:
        raise InvalidInput(f"Could not read avatar {path}: {e.strerror}", "avatar")


def apply_args(form: VehicleFormState, args) -> VehicleFormState:
    """Overlay command line values onto form state; unset options keep their value."""
    for attr, value in (
        ("name", args.name),
        ("starting", args.starting),
        ("allowed", args.allowed),
        ("lease_length", args.lease_length),
        ("fee", args.fee),
        ("currency", args.currency),
    ):
        if value is not None:
            setattr(form, attr, value)
    if args.unit is not None:
        form.length_unit = LengthUnit(args.unit)
    start_date = parse_date_arg(args.start_date)
    if start_date is not None:
        form.start_date = start_date
    avatar = read_avatar(args.avatar)
    if avatar is not None:
        form.avatar = avatar
    return form


def find_vehicle(store: VehicleStore, vehicle_id: str) -> Optional[VehicleRecord]:
    """Find by exact id, then by unique id prefix."""
    records = store.fetch_all(include_removed=True)
    for record in records:
        if record.vehicle_id == vehicle_id:
            return record
    matches = [r for r in records if r.vehicle_id.startswith(vehicle_id)]
    if len(matches) == 1:
        return matches[0]
    return None


# =============================================================================
# Commands
# =============================================================================


def cmd_list(args, store: VehicleStore):
    """List leased vehicles."""
    records = store.fetch_all(include_removed=args.all)
    if not records:
        print("No vehicles found.")
        return 0
    widget_index = initial_widget_index(store.fetch_all())
    if args.all:
        # Widget index refers to the active list; map it onto this one.
        active = store.fetch_all()
        widget_id = active[widget_index].vehicle_id if widget_index != NO_SELECTION else None
        widget_index = next(
            (i for i, r in enumerate(records) if r.vehicle_id == widget_id), NO_SELECTION
        )
    print(tabulate(make_vehicle_table(records, widget_index), headers=VEHICLE_HEADERS, tablefmt="simple"))
    return 0


def cmd_show(args, store: VehicleStore):
    """Show one vehicle's lease terms."""
    record = find_vehicle(store, args.vehicle_id)
    if record is None:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1

    elapsed = record.months_elapsed()
    rows = [
        ["ID", record.vehicle_id],
        ["Name", record.name],
        ["Starting mileage", format_mileage(record.starting_mileage, record.length_unit)],
        ["Allowed mileage", format_allowed(record)],
        ["Lease length", f"{record.lease_length_months} months"],
        ["Lease start", record.lease_start_date.isoformat()],
        ["Lease end", record.lease_end_date.isoformat()],
        ["Months elapsed", f"{elapsed} of {record.lease_length_months}"],
        ["Overage fee", format_fee(record)],
        ["Unit", record.length_unit.long_name],
        ["Currency", record.currency.value],
        ["On widget", "yes" if record.show_on_widget else "no"],
        ["Avatar", f"{len(record.avatar or b'')} bytes"],
    ]
    if record.removed:
        rows.append(["Status", "removed"])
    print(tabulate(rows, tablefmt="plain"))
    return 0


def _save(form, mode, args, store: VehicleStore):
    reporter = ConsoleReporter()
    if args.dry_run:
        try:
            record = validate_vehicle(form, mode)
        except InvalidInput as e:
            reporter.handle(e)
            return 1
        print(f"Would save vehicle: {record.name}")
        print("(dry run - no changes made)")
        return 0

    record = submit_vehicle_form(form, mode, store, reporter)
    if record is None:
        return 1
    print(f"Saved vehicle: {record.name} ({record.vehicle_id})")
    return 0


def cmd_add(args, store: VehicleStore):
    """Add a vehicle."""
    try:
        form = apply_args(VehicleFormState.blank(), args)
    except InvalidInput as e:
        ConsoleReporter().handle(e)
        return 1
    return _save(form, Creating(), args, store)


def cmd_edit(args, store: VehicleStore):
    """Edit a vehicle's lease terms."""
    record = find_vehicle(store, args.vehicle_id)
    if record is None:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1
    try:
        form = apply_args(VehicleFormState.from_record(record), args)
    except InvalidInput as e:
        ConsoleReporter().handle(e)
        return 1
    return _save(form, Editing(record), args, store)


def cmd_delete(args, store: VehicleStore):
    """Remove a vehicle (soft delete)."""
    record = find_vehicle(store, args.vehicle_id)
    if record is None or record.removed:
        print(f"Error: Unknown vehicle '{args.vehicle_id}'")
        return 1

    print(f"Removing vehicle: {record.name}")
    if args.dry_run:
        print("(dry run - no changes made)")
        return 0
    soft_delete(record, store)
    print("Vehicle removed.")
    return 0


def cmd_widget(args, store: VehicleStore):
    """Show or change which vehicle the widget displays."""
    coordinator = WidgetSelectionCoordinator(
        store, ConsoleReporter(), StampFileRefresher(config.widget_stamp_path(store.path))
    )
    records = store.fetch_all()
    if not records:
        print("No vehicles found.")
        return 0

    if args.index is None:
        current = initial_widget_index(records)
        print(f"Widget vehicle: {records[current].name}")
        print()
        rows = [[str(i), "*" if i == current else "", r.name] for i, r in enumerate(records)]
        print(tabulate(rows, headers=["#", "Widget", "Name"], tablefmt="simple"))
        return 0

    if args.index < 0 or args.index >= len(records):
        print(f"Error: Index {args.index} out of range (0..{len(records) - 1})")
        return 1
    if not coordinator.select(records, args.index):
        return 1
    print(f"Widget now shows: {records[args.index].name}")
    return 0


# =============================================================================
# Main
# =============================================================================


def add_form_arguments(parser: argparse.ArgumentParser):
    """Options shared by add and edit."""
    parser.add_argument("--name", type=str, help="Vehicle nickname")
    parser.add_argument("--starting", type=str, help="Odometer reading at lease start")
    parser.add_argument(
        "--allowed", type=str, help="Total mileage allowed (empty or 0 for unlimited)"
    )
    parser.add_argument("--lease-length", type=str, help="Lease length in months")
    parser.add_argument(
        "--start-date", type=str, help="Lease start date in YYYY-MM-DD format (default: today)"
    )
    parser.add_argument("--fee", type=str, help="Overage fee per mile/kilometer")
    parser.add_argument(
        "--unit", choices=[u.value for u in LengthUnit], help="Length unit"
    )
    parser.add_argument("--currency", type=str, help="Currency code (e.g., USD)")
    parser.add_argument("--avatar", type=Path, help="Path to a vehicle photo")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate without saving",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle lease tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list
  %(prog)s add --name "My car" --starting 20 --allowed 30000 \\
      --lease-length 36 --start-date 2024-01-15 --fee 0.25 --avatar car.png
  %(prog)s edit 3f2a --allowed 36000
  %(prog)s widget
  %(prog)s widget 1
  %(prog)s delete 3f2a
""",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=None,
        help="Path to the vehicle store file (default: $LEASETRACK_DATA or vehicles.yaml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log store activity")

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List leased vehicles")
    list_parser.add_argument("--all", action="store_true", help="Include removed vehicles")

    show_parser = subparsers.add_parser("show", help="Show one vehicle's lease terms")
    show_parser.add_argument("vehicle_id", type=str, help="Vehicle id or id prefix")

    add_parser = subparsers.add_parser("add", help="Add a vehicle")
    add_form_arguments(add_parser)

    edit_parser = subparsers.add_parser("edit", help="Edit a vehicle's lease terms")
    edit_parser.add_argument("vehicle_id", type=str, help="Vehicle id or id prefix")
    add_form_arguments(edit_parser)

    delete_parser = subparsers.add_parser("delete", help="Remove a vehicle")
    delete_parser.add_argument("vehicle_id", type=str, help="Vehicle id or id prefix")
    delete_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be removed without saving"
    )

    widget_parser = subparsers.add_parser(
        "widget", help="Show or change which vehicle the widget displays"
    )
    widget_parser.add_argument(
        "index", type=int, nargs="?", help="Index from 'widget' listing to show"
    )
    return parser


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "widget": cmd_widget,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = VehicleStore(args.data or config.data_path())
    try:
        return COMMANDS[args.command](args, store)
    except LeaseError as e:
        ConsoleReporter().handle(e)
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
