import asyncio
import os
import shutil
import tempfile
import unittest
from unittest import mock

from api_client import DOCTOR, PATIENT, make_client
from fake_firestore import FakeFirestore

from app.api.routes import reports
from app.core.config import settings
from app.core.errors import ConflictError
from app.services import profile_service


class StubUpload:
    """Upload whose reads are recorded."""

    def __init__(self, size=None, length=100):
        self.filename = "big.bin"
        self.size = size
        self.length = length
        self.requested = []

    async def read(self, size=-1):
        self.requested.append(size)
        n = self.length if size < 0 else min(size, self.length)
        return b"x" * n


class TestReportRoute(unittest.TestCase):
    def setUp(self):
        self.client = make_client(FakeFirestore(), PATIENT)
        self.upload_dir = tempfile.mkdtemp()
        patcher = mock.patch.object(settings, "UPLOAD_DIR", self.upload_dir)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(shutil.rmtree, self.upload_dir, ignore_errors=True)

    def test_analysis(self):
        r = self.client.post("/reports/analyze", files={"file": ("report.txt", b"\x00\x01\x02", "text/plain")})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["message"], "Analysis complete")
        self.assertEqual(body["analysis"]["shape"], [3])
        self.assertAlmostEqual(sum(body["analysis"]["result"]), 1.0)

    def test_temporary_file_removed(self):
        self.client.post("/reports/analyze", files={"file": ("report.pdf", b"%PDF", "application/pdf")})
        self.assertEqual(os.listdir(os.path.join(self.upload_dir, "reports")), [])

    def test_no_file(self):
        r = self.client.post("/reports/analyze")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {"error": "No file uploaded."})

    def test_too_large(self):
        with mock.patch.object(settings, "MAX_REPORT_BYTES", 4):
            r = self.client.post("/reports/analyze", files={"file": ("big.bin", b"12345", "application/octet-stream")})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {"error": "File too large."})

    def test_exactly_max_size_accepted(self):
        with mock.patch.object(settings, "MAX_REPORT_BYTES", 5):
            r = self.client.post("/reports/analyze", files={"file": ("ok.bin", b"12345", "application/octet-stream")})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["analysis"]["shape"], [5])

    def test_read_stops_past_limit(self):
        upload = StubUpload(size=None, length=1000)
        with mock.patch.object(settings, "MAX_REPORT_BYTES", 4):
            resp = asyncio.run(reports.analyze_report(file=upload, user=PATIENT))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(upload.requested, [5])

    def test_declared_size_rejected_without_reading(self):
        upload = StubUpload(size=10 ** 9)
        resp = asyncio.run(reports.analyze_report(file=upload, user=PATIENT))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(upload.requested, [])

    def test_processing_failure(self):
        with mock.patch("app.api.routes.reports.analyze_bytes", side_effect=ValueError("bad tensor")):
            r = self.client.post("/reports/analyze", files={"file": ("r.bin", b"abc", "application/octet-stream")})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"error": "Failed to process the uploaded report.", "details": "bad tensor"})
        self.assertEqual(os.listdir(os.path.join(self.upload_dir, "reports")), [])


class TestRegister(unittest.TestCase):
    def test_patient_registration(self):
        db = FakeFirestore()
        r = make_client(db, PATIENT).post("/auth/register", json={"name": "Ravi", "age": 34})
        self.assertEqual(r.status_code, 201)
        stored = db.data["patients"]["p1"]
        self.assertEqual(stored["name"], "Ravi")
        self.assertEqual(stored["email"], PATIENT["email"])
        self.assertEqual(stored["medical_history"], [])
        self.assertEqual(stored["role"], "patient")

    def test_doctor_registration(self):
        db = FakeFirestore()
        r = make_client(db, DOCTOR).post("/auth/register", json={
            "name": "Dr. Mehta", "specialization": "General Physician",
            "availability": [{"date": "2026-11-02", "time_slots": ["09:00"]}],
        })
        self.assertEqual(r.status_code, 201)
        stored = db.data["doctors"]["dr1"]
        self.assertEqual(stored["patients"], [])
        self.assertEqual(stored["availability"], [{"date": "2026-11-02", "time_slots": ["09:00"]}])

    def test_doctor_availability_normalized(self):
        db = FakeFirestore()
        r = make_client(db, DOCTOR).post("/auth/register", json={
            "name": "Dr. Mehta",
            "availability": [
                {"date": "2026-11-03", "time_slots": ["10:00"]},
                {"date": "2026-11-02", "time_slots": ["09:30"]},
                {"date": "2026-11-02", "time_slots": ["09:00", "09:30"]},
            ],
        })
        self.assertEqual(r.status_code, 201)
        self.assertEqual(db.data["doctors"]["dr1"]["availability"], [
            {"date": "2026-11-02", "time_slots": ["09:00", "09:30"]},
            {"date": "2026-11-03", "time_slots": ["10:00"]},
        ])

    def test_create_race_is_conflict(self):
        db = FakeFirestore()
        first = profile_service.register(db, "p1", "patient", {"name": "Ravi"})
        self.assertEqual(first["id"], "p1")
        with self.assertRaises(ConflictError):
            profile_service.register(db, "p1", "patient", {"name": "Ravi again"})
        self.assertEqual(db.data["patients"]["p1"]["name"], "Ravi")

    def test_duplicate_registration(self):
        db = FakeFirestore({"patients": {"p1": {"name": "Ravi"}}})
        r = make_client(db, PATIENT).post("/auth/register", json={"name": "Ravi"})
        self.assertEqual(r.status_code, 409)

    def test_no_role(self):
        r = make_client(FakeFirestore(), {"uid": "u1"}).post("/auth/register", json={"name": "X"})
        self.assertEqual(r.status_code, 403)

    def test_invalid_profile(self):
        r = make_client(FakeFirestore(), PATIENT).post("/auth/register", json={"name": ""})
        self.assertEqual(r.status_code, 422)

    def test_me(self):
        r = make_client(FakeFirestore(), DOCTOR).get("/auth/me")
        self.assertEqual(r.json(), {"uid": "dr1", "email": DOCTOR["email"], "role": "doctor"})


if __name__ == '__main__':
    unittest.main()
