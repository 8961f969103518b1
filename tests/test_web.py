#!/usr/bin/env python3
"""Tests for the Flask lease app."""

from io import BytesIO

import pytest

from leases import VehicleStore
from web.app import create_app
from conftest import AVATAR, make_record


@pytest.fixture
def data(tmp_path):
    return tmp_path / "vehicles.yaml"


@pytest.fixture
def stamp(tmp_path):
    return tmp_path / ".widget-reload"


@pytest.fixture
def client(data, stamp):
    app = create_app(data_path=data, stamp_path=stamp)
    app.config["TESTING"] = True
    return app.test_client()


def vehicle_form(**overrides):
    form = {
        "name": "My car",
        "starting": "20",
        "allowed": "30000",
        "lease_length": "36",
        "fee": "0.25",
        "start_date": "2024-01-15",
        "length_unit": "metric",
        "currency": "EUR",
        "avatar": (BytesIO(AVATAR), "car.png"),
    }
    form.update(overrides)
    return {k: v for k, v in form.items() if v is not None}


class TestVehicleRoutes:
    """Tests for the edit-vehicle endpoints."""

    def test_add_vehicle(self, client, data):
        resp = client.post("/vehicles", data=vehicle_form(), content_type="multipart/form-data")
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["name"] == "My car"
        assert body["lengthUnit"] == "metric"
        assert body["currency"] == "EUR"
        assert body["leaseEndDate"] == "2027-01-15"
        [stored] = VehicleStore(data).fetch_all()
        assert stored.avatar == AVATAR

    def test_add_invalid_returns_400(self, client, data):
        resp = client.post(
            "/vehicles", data=vehicle_form(lease_length="121"), content_type="multipart/form-data"
        )
        assert resp.status_code == 400
        assert "longer than 10 years" in resp.get_json()["errors"][0]
        assert VehicleStore(data).fetch_all() == []

    def test_add_without_avatar(self, client):
        resp = client.post("/vehicles", data=vehicle_form(avatar=None), content_type="multipart/form-data")
        assert resp.status_code == 400
        assert resp.get_json()["errors"] == ["Please add a vehicle avatar"]

    def test_bad_start_date(self, client):
        resp = client.post(
            "/vehicles", data=vehicle_form(start_date="01/15/2024"), content_type="multipart/form-data"
        )
        assert resp.status_code == 400

    def test_list_and_detail(self, client, data):
        record = make_record()
        VehicleStore(data).save(record)
        listed = client.get("/vehicles").get_json()["vehicles"]
        assert [v["id"] for v in listed] == [record.vehicle_id]
        detail = client.get(f"/vehicles/{record.vehicle_id}").get_json()
        assert detail["hasAvatar"] is True
        assert client.get("/vehicles/missing").status_code == 404

    def test_avatar(self, client, data):
        record = make_record()
        VehicleStore(data).save(record)
        resp = client.get(f"/vehicles/{record.vehicle_id}/avatar")
        assert resp.status_code == 200
        assert resp.data == AVATAR

    def test_edit_keeps_unsent_fields(self, client, data):
        record = make_record()
        VehicleStore(data).save(record)
        resp = client.post(f"/vehicles/{record.vehicle_id}", data={"allowed": "45000"})
        assert resp.status_code == 200
        [stored] = VehicleStore(data).fetch_all()
        assert stored.allowed_mileage == 45000
        assert stored.name == "My car"
        assert stored.avatar == AVATAR

    def test_edit_with_empty_upload_keeps_avatar(self, client, data):
        record = make_record()
        VehicleStore(data).save(record)
        resp = client.post(
            f"/vehicles/{record.vehicle_id}",
            data={"avatar": (BytesIO(b""), "empty.png")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200
        assert VehicleStore(data).fetch_all()[0].avatar == AVATAR

    def test_edit_invalid_leaves_store(self, client, data):
        record = make_record()
        VehicleStore(data).save(record)
        resp = client.post(f"/vehicles/{record.vehicle_id}", data={"starting": "-5"})
        assert resp.status_code == 400
        assert VehicleStore(data).fetch_all()[0].starting_mileage == 20

    def test_delete(self, client, data):
        record = make_record()
        VehicleStore(data).save(record)
        resp = client.post(f"/vehicles/{record.vehicle_id}/delete")
        assert resp.status_code == 200
        assert resp.get_json()["removed"] is True
        assert client.get("/vehicles").get_json()["vehicles"] == []
        assert len(client.get("/vehicles?all=true").get_json()["vehicles"]) == 1

    def test_corrupt_store_returns_500(self, client, data):
        data.write_text("vehicles: [unclosed\n")
        resp = client.get("/vehicles")
        assert resp.status_code == 500
        assert "errors" in resp.get_json()


class TestSettingsRoutes:
    """Tests for the widget settings endpoints."""

    def test_settings_empty(self, client):
        body = client.get("/settings").get_json()
        assert body == {"vehicles": [], "widgetIndex": -1}

    def test_settings_preselects_flagged(self, client, data):
        records = [make_record("A"), make_record("B"), make_record("C", show_on_widget=True)]
        VehicleStore(data).save_all(records)
        body = client.get("/settings").get_json()
        assert body["widgetIndex"] == 2
        assert [v["name"] for v in body["vehicles"]] == ["A", "B", "C"]

    def test_select_widget_vehicle(self, client, data, stamp):
        VehicleStore(data).save_all([make_record("A"), make_record("B"), make_record("C")])
        resp = client.post("/settings/widget", data={"index": "1"})
        assert resp.status_code == 200
        assert [r.show_on_widget for r in VehicleStore(data).fetch_all()] == [False, True, False]
        assert stamp.exists()

    @pytest.mark.parametrize("index", ["x", "", "3", "-1"])
    def test_select_bad_index(self, client, data, stamp, index):
        VehicleStore(data).save_all([make_record("A"), make_record("B"), make_record("C")])
        resp = client.post("/settings/widget", data={"index": index})
        assert resp.status_code == 400
        assert not stamp.exists()
