import unittest
from datetime import datetime, timezone
from unittest import mock

from api_client import DOCTOR, PATIENT, make_client
from fake_firestore import FakeFirestore, run_in_fake_transaction


def seed():
    return FakeFirestore({
        "doctors": {
            "dr1": {
                "name": "Dr. Mehta",
                "availability": [{"date": "2026-11-02", "time_slots": ["09:00"]}],
                "patients": ["p1"],
            },
        },
        "patients": {
            "p1": {"name": "Ravi", "mobile": "9000000001", "age": 34, "gender": "male",
                   "medical_history": [{"appointment_id": "a1", "doctor_id": "dr1", "symptoms": "fever",
                                        "date": "2026-11-01", "time": "10:00", "status": "Pending"}]},
        },
        "appointments": {
            "a1": {"patient_id": "p1", "doctor_id": "dr1", "symptoms": "fever", "date": "2026-11-01",
                   "time": "10:00", "status": "Pending",
                   "created_at": datetime(2026, 10, 10, tzinfo=timezone.utc)},
            "a2": {"patient_id": "p1", "doctor_id": "dr1", "symptoms": "follow-up", "date": "2026-10-20",
                   "time": "10:00", "status": "Completed",
                   "created_at": datetime(2026, 10, 1, tzinfo=timezone.utc)},
            "a3": {"patient_id": "p1", "doctor_id": "dr9", "symptoms": "other doctor", "date": "2026-11-01",
                   "time": "11:00", "status": "Pending",
                   "created_at": datetime(2026, 10, 11, tzinfo=timezone.utc)},
        },
    })


@mock.patch("app.core.firebase.run_in_transaction", run_in_fake_transaction)
class TestDoctorAvailability(unittest.TestCase):
    def setUp(self):
        self.db = seed()
        self.client = make_client(self.db, DOCTOR)

    def test_get(self):
        r = self.client.get("/doctors/me/availability")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), [{"date": "2026-11-02", "time_slots": ["09:00"]}])

    def test_add_merges_into_day(self):
        r = self.client.post("/doctors/me/availability", json={"date": "2026-11-02", "time_slots": ["08:30", "09:00"]})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), [{"date": "2026-11-02", "time_slots": ["08:30", "09:00"]}])
        self.assertEqual(self.db.data["doctors"]["dr1"]["availability"], r.json())

    def test_replace(self):
        r = self.client.put("/doctors/me/availability", json={"availability": [
            {"date": "2026-11-04", "time_slots": ["15:00"]},
            {"date": "2026-11-03", "time_slots": ["10:00", "10:00"]},
        ]})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), [
            {"date": "2026-11-03", "time_slots": ["10:00"]},
            {"date": "2026-11-04", "time_slots": ["15:00"]},
        ])

    def test_invalid_slot_rejected(self):
        r = self.client.post("/doctors/me/availability", json={"date": "2026-11-02", "time_slots": ["25:99"]})
        self.assertEqual(r.status_code, 422)

    def test_remove_slot(self):
        r = self.client.delete("/doctors/me/availability/2026-11-02/09:00")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), [])

    def test_remove_missing_slot(self):
        r = self.client.delete("/doctors/me/availability/2026-11-02/18:00")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json(), {"message": "Time slot not found"})

    def test_patient_cannot_edit(self):
        r = make_client(self.db, PATIENT).post(
            "/doctors/me/availability", json={"date": "2026-11-02", "time_slots": ["10:00"]}
        )
        self.assertEqual(r.status_code, 403)


@mock.patch("app.core.firebase.run_in_transaction", run_in_fake_transaction)
class TestDoctorAppointments(unittest.TestCase):
    def setUp(self):
        self.db = seed()
        self.client = make_client(self.db, DOCTOR)

    def test_list_own_with_patient(self):
        r = self.client.get("/doctors/me/appointments")
        self.assertEqual(r.status_code, 200)
        items = r.json()
        self.assertEqual([a["id"] for a in items], ["a1", "a2"])
        self.assertEqual(items[0]["patient"], {"id": "p1", "name": "Ravi", "mobile": "9000000001",
                                               "age": 34, "gender": "male"})

    def test_filter_by_status(self):
        r = self.client.get("/doctors/me/appointments", params={"status": "Completed"})
        self.assertEqual([a["id"] for a in r.json()], ["a2"])

    def test_confirm(self):
        r = self.client.patch("/doctors/me/appointments/a1", json={"status": "Confirmed"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["status"], "Confirmed")
        self.assertEqual(self.db.data["patients"]["p1"]["medical_history"][0]["status"], "Confirmed")

    def test_invalid_transition(self):
        r = self.client.patch("/doctors/me/appointments/a2", json={"status": "Confirmed"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {"message": "Cannot change status from Completed to Confirmed"})

    def test_not_my_appointment(self):
        r = self.client.patch("/doctors/me/appointments/a3", json={"status": "Confirmed"})
        self.assertEqual(r.status_code, 403)

    def test_unknown_status_value(self):
        r = self.client.patch("/doctors/me/appointments/a1", json={"status": "Teleported"})
        self.assertEqual(r.status_code, 422)

    def test_my_patients(self):
        r = self.client.get("/doctors/me/patients")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["items"], [{"id": "p1", "name": "Ravi", "mobile": "9000000001",
                                              "age": 34, "gender": "male"}])

    def test_my_patients_leaves_out_medical_history(self):
        self.db.data["patients"]["p1"]["address"] = "12 MG Road"
        r = self.client.get("/doctors/me/patients")
        patient = r.json()["items"][0]
        self.assertNotIn("medical_history", patient)
        self.assertNotIn("address", patient)


@mock.patch("app.core.firebase.run_in_transaction", run_in_fake_transaction)
class TestBookedSlotsStayClosed(unittest.TestCase):
    """A slot held by a Pending or Confirmed appointment never reopens."""

    def setUp(self):
        patcher = mock.patch("app.core.firebase.run_in_transaction", run_in_fake_transaction)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.db = seed()
        self.db.data["patients"]["p2"] = {"name": "Anita", "medical_history": []}
        self.doctor = make_client(self.db, DOCTOR)
        self.first = make_client(self.db, PATIENT)
        self.second = make_client(self.db, {"uid": "p2", "email": "anita@healthmail.in", "role": "patient"})

        r = self.first.post("/patients/appointments", json={
            "doctor_id": "dr1", "symptoms": "fever", "date": "2026-11-02", "time": "09:00",
        })
        self.assertEqual(r.status_code, 201)
        self.booked_id = r.json()["id"]

    def _book_second(self):
        return self.second.post("/patients/appointments", json={
            "doctor_id": "dr1", "symptoms": "headache", "date": "2026-11-02", "time": "09:00",
        })

    def _count_for_slot(self):
        return sum(
            1 for a in self.db.data["appointments"].values()
            if a["date"] == "2026-11-02" and a["time"] == "09:00"
        )

    def test_add_skips_booked_slot(self):
        r = self.doctor.post("/doctors/me/availability", json={"date": "2026-11-02", "time_slots": ["09:00", "09:30"]})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), [{"date": "2026-11-02", "time_slots": ["09:30"]}])

        self.assertEqual(self._book_second().status_code, 400)
        self.assertEqual(self._count_for_slot(), 1)

    def test_replace_skips_booked_slot(self):
        r = self.doctor.put("/doctors/me/availability", json={"availability": [
            {"date": "2026-11-02", "time_slots": ["09:00"]},
            {"date": "2026-11-03", "time_slots": ["11:00"]},
        ]})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), [{"date": "2026-11-03", "time_slots": ["11:00"]}])

        self.assertEqual(self._book_second().status_code, 400)
        self.assertEqual(self._count_for_slot(), 1)

    def test_confirmed_appointment_also_holds_slot(self):
        self.doctor.patch(f"/doctors/me/appointments/{self.booked_id}", json={"status": "Confirmed"})
        r = self.doctor.post("/doctors/me/availability", json={"date": "2026-11-02", "time_slots": ["09:00"]})
        self.assertEqual(r.json(), [])

    def test_cancelled_slot_can_be_reopened(self):
        self.first.post(f"/patients/appointments/{self.booked_id}/cancel")
        self.assertEqual(self.db.data["doctors"]["dr1"]["availability"],
                         [{"date": "2026-11-02", "time_slots": ["09:00"]}])
        self.assertEqual(self._book_second().status_code, 201)

    def test_cancel_keeps_slot_closed_while_another_booking_holds_it(self):
        self.db.data["appointments"]["dup"] = {
            "patient_id": "p2", "doctor_id": "dr1", "symptoms": "headache", "date": "2026-11-02",
            "time": "09:00", "status": "Confirmed",
            "created_at": datetime(2026, 10, 12, tzinfo=timezone.utc),
        }
        r = self.first.post(f"/patients/appointments/{self.booked_id}/cancel")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self.db.data["doctors"]["dr1"]["availability"], [])


if __name__ == '__main__':
    unittest.main()
