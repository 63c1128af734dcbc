from datetime import time

from clinic.models import MasterSlot
from clinic.services.slot_service import DEFAULT_SLOT_TIMES, SlotService

from .conftest import make_staff

DEFAULT_LABELS = ["09:00", "09:20", "09:40", "10:00", "10:20", "10:40", "11:00", "11:20", "11:40"]

class TestSlotService:

    def test_default_template(self):
        """Nine 20-minute slots from 09:00 to 11:40."""
        assert [slot.strftime("%H:%M") for slot in DEFAULT_SLOT_TIMES] == DEFAULT_LABELS

    def test_reset_replaces_only_that_doctor(self, db_session, doctor):
        other = make_staff(db_session, "wilson")
        service = SlotService(db_session)
        service.add_slot(doctor.id, time(15, 0))
        service.add_slot(other.id, time(16, 0))

        slots = service.reset_to_defaults(doctor.id)

        assert [slot.slot_time for slot in slots] == list(DEFAULT_SLOT_TIMES)
        assert [slot.slot_time for slot in service.list_master_slots(other.id)] == [time(16, 0)]

    def test_reset_twice_keeps_nine(self, db_session, doctor):
        service = SlotService(db_session)
        service.reset_to_defaults(doctor.id)
        service.reset_to_defaults(doctor.id)

        count = db_session.query(MasterSlot).filter(MasterSlot.doctor_id == doctor.id).count()
        assert count == 9

class TestSlotEndpoints:

    def test_master_slots_without_doctor(self, client):
        response = client.get("/master-slots")
        assert response.status_code == 200
        assert response.json() == []

    def test_master_slots_ordered(self, client, doctor, admin_headers):
        for label in ["11:00", "09:20", "10:40"]:
            response = client.post(
                "/admin/add-slot", json={"time": label, "doctor_id": doctor.id}, headers=admin_headers
            )
            assert response.status_code == 200

        response = client.get("/master-slots", params={"doctor_id": doctor.id})
        assert [slot["slot_time"] for slot in response.json()] == ["09:20", "10:40", "11:00"]

    def test_add_slot_requires_login(self, client, doctor):
        response = client.post("/admin/add-slot", json={"time": "09:00", "doctor_id": doctor.id})
        assert response.status_code == 401

    def test_add_slot_unknown_doctor(self, client, admin_headers):
        response = client.post(
            "/admin/add-slot", json={"time": "09:00", "doctor_id": 999}, headers=admin_headers
        )
        assert response.status_code == 404

    def test_reset_slots(self, client, doctor, admin_headers):
        response = client.post(
            "/admin/reset-slots", json={"doctor_id": doctor.id}, headers=admin_headers
        )
        assert response.status_code == 200
        assert [slot["slot_time"] for slot in response.json()] == DEFAULT_LABELS

    def test_delete_slot(self, client, doctor, admin_headers):
        created = client.post(
            "/admin/add-slot", json={"time": "09:00", "doctor_id": doctor.id}, headers=admin_headers
        ).json()

        response = client.delete(f"/admin/delete-slot/{created['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert client.get("/master-slots", params={"doctor_id": doctor.id}).json() == []

    def test_delete_missing_slot(self, client, admin_headers):
        response = client.delete("/admin/delete-slot/999", headers=admin_headers)
        assert response.status_code == 404
