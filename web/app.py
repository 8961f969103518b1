"""Flask web application for the lease edit form and settings screen."""

from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from flask import Flask, abort, jsonify, request, send_file

from leases import (
    Creating,
    Editing,
    InvalidInput,
    LeaseError,
    LengthUnit,
    RecordingReporter,
    StampFileRefresher,
    VehicleFormState,
    VehicleRecord,
    VehicleStore,
    WidgetSelectionCoordinator,
    config,
    delete_vehicle,
    initial_widget_index,
    submit_vehicle_form,
)

FORM_FIELDS = ("name", "starting", "allowed", "lease_length", "fee", "currency")


def vehicle_json(record: VehicleRecord) -> dict:
    """JSON view of a record; the avatar is served separately."""
    return {
        "id": record.vehicle_id,
        "name": record.name,
        "startingMileage": record.starting_mileage,
        "allowedMileage": record.allowed_mileage,
        "leaseLengthMonths": record.lease_length_months,
        "leaseStartDate": record.lease_start_date.isoformat(),
        "leaseEndDate": record.lease_end_date.isoformat(),
        "overageFee": record.overage_fee,
        "lengthUnit": record.length_unit.value,
        "currency": record.currency.value,
        "showOnWidget": record.show_on_widget,
        "removed": record.removed,
        "hasAvatar": record.avatar is not None,
    }


def error_response(reporter: RecordingReporter):
    """400 for input the user can fix, 500 when the store failed."""
    status = 400 if all(isinstance(e, InvalidInput) for e in reporter.errors) else 500
    return jsonify({"errors": reporter.messages}), status


def form_from_request(form: VehicleFormState) -> VehicleFormState:
    """Overlay submitted fields onto form state; absent fields keep their value."""
    for attr in FORM_FIELDS:
        if attr in request.form:
            setattr(form, attr, request.form[attr].strip())
    if request.form.get("length_unit"):
        form.length_unit = LengthUnit.from_value(request.form["length_unit"])
    if request.form.get("start_date"):
        try:
            form.start_date = date.fromisoformat(request.form["start_date"])
        except ValueError:
            raise InvalidInput("Invalid lease start date, expected YYYY-MM-DD", "start_date")
    upload = request.files.get("avatar")
    if upload is not None and upload.filename:
        # An empty upload leaves the current photo in place.
        data = upload.read()
        if data:
            form.avatar = data
    return form


def create_app(
    data_path: Optional[Union[str, Path]] = None,
    stamp_path: Optional[Union[str, Path]] = None,
) -> Flask:
    app = Flask(__name__)
    app.secret_key = config.secret_key()

    store = VehicleStore(data_path or config.data_path())
    refresher = StampFileRefresher(stamp_path or config.widget_stamp_path(store.path))

    def get_or_404(vehicle_id: str) -> VehicleRecord:
        record = store.get(vehicle_id)
        if record is None:
            abort(404)
        return record

    @app.errorhandler(LeaseError)
    def handle_lease_error(e):
        reporter = RecordingReporter()
        reporter.handle(e)
        return error_response(reporter)

    @app.route("/vehicles")
    def list_vehicles():
        include_removed = request.args.get("all", "").lower() == "true"
        records = store.fetch_all(include_removed=include_removed)
        return jsonify({"vehicles": [vehicle_json(r) for r in records]})

    @app.route("/vehicles/<vehicle_id>")
    def vehicle_detail(vehicle_id: str):
        return jsonify(vehicle_json(get_or_404(vehicle_id)))

    @app.route("/vehicles/<vehicle_id>/avatar")
    def vehicle_avatar(vehicle_id: str):
        record = get_or_404(vehicle_id)
        if record.avatar is None:
            abort(404)
        return send_file(BytesIO(record.avatar), mimetype="image/png")

    @app.route("/vehicles", methods=["POST"])
    def add_vehicle():
        form = form_from_request(VehicleFormState.blank())
        reporter = RecordingReporter()
        record = submit_vehicle_form(form, Creating(), store, reporter)
        if record is None:
            return error_response(reporter)
        return jsonify(vehicle_json(record)), 201

    @app.route("/vehicles/<vehicle_id>", methods=["POST"])
    def edit_vehicle(vehicle_id: str):
        existing = get_or_404(vehicle_id)
        form = form_from_request(VehicleFormState.from_record(existing))
        reporter = RecordingReporter()
        record = submit_vehicle_form(form, Editing(existing), store, reporter)
        if record is None:
            return error_response(reporter)
        return jsonify(vehicle_json(record))

    @app.route("/vehicles/<vehicle_id>/delete", methods=["POST"])
    def remove_vehicle(vehicle_id: str):
        record = get_or_404(vehicle_id)
        delete_vehicle(record, store)
        return jsonify(vehicle_json(record))

    @app.route("/settings")
    def settings():
        records = store.fetch_all()
        return jsonify(
            {
                "vehicles": [{"index": i, "id": r.vehicle_id, "name": r.name} for i, r in enumerate(records)],
                "widgetIndex": initial_widget_index(records),
            }
        )

    @app.route("/settings/widget", methods=["POST"])
    def select_widget_vehicle():
        records = store.fetch_all()
        try:
            index = int(request.form.get("index", ""))
        except ValueError:
            return jsonify({"errors": ["Widget index is not a valid number"]}), 400
        if index < 0 or index >= len(records):
            return jsonify({"errors": [f"Vehicle index {index} out of range"]}), 400

        reporter = RecordingReporter()
        coordinator = WidgetSelectionCoordinator(store, reporter, refresher)
        if not coordinator.select(records, index):
            return error_response(reporter)
        return jsonify({"widgetIndex": index, "id": records[index].vehicle_id})

    return app


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    create_app().run(debug=True, host="0.0.0.0", port=5001)
