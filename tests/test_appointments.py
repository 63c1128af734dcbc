from datetime import date, time

from clinic.models import Appointment

from .conftest import make_appointment, make_staff

class TestAppointmentEndpoints:

    def test_admin_list_all_doctors(self, client, db_session, doctor, admin_headers):
        other = make_staff(db_session, "wilson")
        make_appointment(db_session, doctor)
        make_appointment(db_session, other, at=time(9, 20))

        response = client.get(
            "/admin/appointments", params={"date": "2024-06-02", "doctor_id": "all"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_admin_list_one_doctor(self, client, db_session, doctor, admin_headers):
        other = make_staff(db_session, "wilson")
        make_appointment(db_session, doctor)
        make_appointment(db_session, other, at=time(9, 20))

        response = client.get(
            "/admin/appointments", params={"date": "2024-06-02", "doctor_id": other.id}, headers=admin_headers
        )
        data = response.json()
        assert [item["doctor_id"] for item in data] == [other.id]
        assert data[0]["slot_time"] == "09:20"
        assert data[0]["status"] == "Pending"

    def test_admin_list_rejects_bad_filter(self, client, admin_headers):
        response = client.get(
            "/admin/appointments", params={"date": "2024-06-02", "doctor_id": "house"}, headers=admin_headers
        )
        assert response.status_code == 422

    def test_patient_appointments(self, client, db_session, doctor):
        make_appointment(db_session, doctor)
        make_appointment(db_session, doctor, day=date(2024, 6, 3))

        response = client.get(
            "/patient/appointments", params={"date": "2024-06-02", "patient_id": "firebase-uid-1"}
        )
        assert response.status_code == 200
        assert [item["date"] for item in response.json()] == ["2024-06-02"]

    def test_mark_done(self, client, db_session, doctor, admin_headers):
        appointment = make_appointment(db_session, doctor)

        response = client.put(f"/appointments/{appointment.id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "Done"

    def test_delete_frees_slot(self, client, db_session, doctor, admin_headers):
        appointment = make_appointment(db_session, doctor)

        response = client.delete(f"/appointments/{appointment.id}", headers=admin_headers)
        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.query(Appointment).count() == 0

    def test_delete_missing(self, client, admin_headers):
        assert client.delete("/appointments/999", headers=admin_headers).status_code == 404
