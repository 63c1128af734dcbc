from datetime import date

import pytest

from clinic.models import Appointment, AppointmentStatus, Patient

from .conftest import make_appointment

prescription_data = {
    "patient_id": "firebase-uid-1",
    "diagnosis": "Seasonal allergy",
    "medicines": [
        {"name": "Cetirizine", "dosage": "10mg", "frequency": "1-0-0", "duration": "5 days"},
        {"name": "Saline spray"}
    ],
    "notes": "Review if symptoms persist"
}

@pytest.fixture
def appointment(db_session, doctor):
    db_session.add(Patient(user_id="firebase-uid-1", name="Gregory Patient", gender="male"))
    db_session.commit()
    return make_appointment(db_session, doctor)

class TestPrescriptions:

    def test_prescribe_marks_done(self, client, db_session, appointment, admin_headers):
        """Writing a prescription closes the appointment."""
        response = client.post(
            "/admin/prescribe",
            json={**prescription_data, "appointment_id": appointment.id},
            headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

        db_session.expire_all()
        assert db_session.get(Appointment, appointment.id).status == AppointmentStatus.DONE

    def test_prescribe_twice_conflicts(self, client, appointment, admin_headers):
        payload = {**prescription_data, "appointment_id": appointment.id}
        client.post("/admin/prescribe", json=payload, headers=admin_headers)

        response = client.post("/admin/prescribe", json=payload, headers=admin_headers)
        assert response.status_code == 409

    def test_prescribe_unknown_appointment(self, client, admin_headers):
        response = client.post(
            "/admin/prescribe", json={**prescription_data, "appointment_id": 999}, headers=admin_headers
        )
        assert response.status_code == 404

    def test_medicines_validated(self, client, appointment, admin_headers):
        """Each medicine needs at least a name."""
        payload = {**prescription_data, "appointment_id": appointment.id, "medicines": [{"dosage": "5ml"}]}
        response = client.post("/admin/prescribe", json=payload, headers=admin_headers)
        assert response.status_code == 422

    def test_prescribe_requires_staff(self, client, appointment):
        response = client.post("/admin/prescribe", json={**prescription_data, "appointment_id": appointment.id})
        assert response.status_code == 401

    def test_prescription_by_appointment(self, client, doctor, appointment, admin_headers):
        client.post(
            "/admin/prescribe",
            json={**prescription_data, "appointment_id": appointment.id},
            headers=admin_headers
        )

        response = client.get(f"/admin/prescription-by-appt/{appointment.id}", headers=admin_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["diagnosis"] == "Seasonal allergy"
        assert data["medicines"][0]["name"] == "Cetirizine"
        assert data["medicines"][1] == {
            "name": "Saline spray", "dosage": None, "frequency": None, "duration": None
        }
        assert data["visit_date"] == "2024-06-02"
        assert data["patient_name"] == "Gregory Patient"
        assert data["patient_age"] == 42
        assert data["doctor_name"] == doctor.name
        assert data["gender"] == "male"

    def test_prescription_not_found(self, client, appointment, admin_headers):
        response = client.get(f"/admin/prescription-by-appt/{appointment.id}", headers=admin_headers)
        assert response.status_code == 404

    def test_history_newest_first(self, client, db_session, doctor, appointment, admin_headers):
        later = make_appointment(db_session, doctor, day=date(2024, 6, 9))
        for appt_id, diagnosis in [(appointment.id, "First visit"), (later.id, "Follow-up")]:
            client.post(
                "/admin/prescribe",
                json={**prescription_data, "appointment_id": appt_id, "diagnosis": diagnosis},
                headers=admin_headers
            )

        response = client.get("/patient/history/firebase-uid-1")
        assert response.status_code == 200
        assert [item["diagnosis"] for item in response.json()] == ["Follow-up", "First visit"]

    def test_history_empty(self, client):
        assert client.get("/patient/history/nobody").json() == []
