"""
Tests for hostel/models/ontology.py and hostel/models/schemas.py
Covers: camelCase aliases, legacy key names, integrity check, tenant field validation
"""
import pytest
from datetime import date
from pydantic import ValidationError

from hostel.models.ontology import (
    DEFAULT_HOSTEL_NAME, Floor, HostelData, HostelSettings, Room, Tenant, default_hostel_data
)
from hostel.models.schemas import TenantFields


class TestDefaultData:

    def test_layout(self):
        data = default_hostel_data()

        assert [f.name for f in data.floors] == ["Ground Floor", "First Floor"]
        assert [(r.number, r.capacity) for r in data.rooms] == [
            ("101", 2), ("102", 3), ("201", 2), ("202", 1)
        ]
        assert data.tenants == []
        assert data.settings.hostel_name == DEFAULT_HOSTEL_NAME
        assert data.check_integrity() == []

    def test_fresh_copy_each_call(self):
        first = default_hostel_data()
        first.floors[0].name = "Changed"
        assert default_hostel_data().floors[0].name == "Ground Floor"


class TestAliases:

    def test_accepts_snake_and_camel(self):
        assert Room(id="r", number="1", floor_id="f", capacity=1) == \
            Room.model_validate({"id": "r", "number": "1", "floorId": "f", "capacity": 1})

    def test_legacy_list_keys(self):
        floor = Floor.model_validate({"id": "f1", "name": "G", "rooms": ["r1"]})
        room = Room.model_validate(
            {"id": "r1", "number": "1", "floorId": "f1", "capacity": 1, "tenants": ["t1"]}
        )
        assert floor.room_ids == ["r1"]
        assert room.tenant_ids == ["t1"]

    def test_record_uses_camel_case(self):
        record = Floor(id="f1", name="G", room_ids=["r1"]).model_dump(by_alias=True)
        assert record == {"id": "f1", "name": "G", "roomIds": ["r1"]}

    def test_settings_legacy_qr_key(self):
        settings = HostelSettings.model_validate({"customQrCode": "data:image/png;base64,AA=="})
        assert settings.custom_qr_image == "data:image/png;base64,AA=="
        assert settings.model_dump(by_alias=True)["customQrImage"] == "data:image/png;base64,AA=="

    def test_tenant_joining_date_parsed(self):
        tenant = Tenant.model_validate({
            "id": "t1", "name": "A", "mobile": "9876543210", "rent": 1,
            "joiningDate": "2024-02-29", "roomId": "r1",
        })
        assert tenant.joining_date == date(2024, 2, 29)


class TestIntegrity:

    def _data(self):
        return HostelData(
            floors=[Floor(id="f1", name="G", room_ids=["r1"])],
            rooms=[Room(id="r1", number="1", floor_id="f1", capacity=2, tenant_ids=["t1"])],
            tenants=[Tenant(id="t1", name="A", mobile="9876543210", rent=1,
                            joining_date=date(2024, 1, 1), room_id="r1")],
        )

    def test_consistent(self):
        assert self._data().check_integrity() == []

    def test_missing_floor(self):
        data = self._data()
        data.rooms[0].floor_id = "f9"
        assert any("missing floor" in p for p in data.check_integrity())

    def test_missing_room(self):
        data = self._data()
        data.tenants[0].room_id = "r9"
        assert any("missing room" in p for p in data.check_integrity())

    def test_forward_list_out_of_sync(self):
        data = self._data()
        data.floors[0].room_ids = []
        data.rooms[0].tenant_ids = ["t1", "t1"]
        problems = data.check_integrity()
        assert "floor f1 room list out of sync" in problems
        assert "room r1 tenant list out of sync" in problems

    def test_duplicate_ids(self):
        data = self._data()
        data.floors.append(Floor(id="f1", name="Copy"))
        assert "duplicate floor ids" in data.check_integrity()

    def test_rebuild_forward_lists(self):
        data = self._data()
        data.floors[0].room_ids = ["r1", "gone", "r1"]
        data.rooms[0].tenant_ids = []

        repaired = data.rebuild_forward_lists()

        assert len(repaired) == 2
        assert data.floors[0].room_ids == ["r1"]
        assert data.rooms[0].tenant_ids == ["t1"]
        assert data.check_integrity() == []

    def test_rebuild_consistent_is_noop(self):
        data = self._data()
        assert data.rebuild_forward_lists() == []
        assert data == self._data()

    def test_invalid_capacity(self):
        data = self._data()
        data.rooms[0].capacity = 0
        assert "room r1 has invalid capacity 0" in data.check_integrity()


class TestTenantFields:

    def test_valid(self):
        fields = TenantFields(name="  Ravi  ", mobile="9876543210", rent=5000,
                              joining_date="2024-01-01")
        assert fields.name == "Ravi"
        assert fields.joining_date == date(2024, 1, 1)

    def test_camel_case_input(self):
        fields = TenantFields.model_validate(
            {"name": "Ravi", "mobile": "9876543210", "rent": 0, "joiningDate": "2024-01-01"}
        )
        assert fields.joining_date == date(2024, 1, 1)

    def test_joining_date_defaults_to_today(self):
        fields = TenantFields(name="Ravi", mobile="9876543210", rent=1)
        assert fields.joining_date == date.today()

    @pytest.mark.parametrize("overrides", [
        {"name": "   "},
        {"mobile": "12345"},
        {"mobile": "98765432ab"},
        {"rent": -1},
        {"joining_date": "not-a-date"},
    ])
    def test_invalid(self, overrides):
        values = {"name": "Ravi", "mobile": "9876543210", "rent": 5000, "joining_date": "2024-01-01"}
        values.update(overrides)
        with pytest.raises(ValidationError):
            TenantFields(**values)
