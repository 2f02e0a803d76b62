"""
Manual smoke check against a running server.

    ID_TOKEN=<firebase id token of a patient> python scripts/verify_booking_flow.py
"""
import os
import sys

import requests
from dotenv import load_dotenv

load_dotenv()

BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8000")
ID_TOKEN = os.getenv("ID_TOKEN", "")

HEADERS = {"Authorization": f"Bearer {ID_TOKEN}"}


def fetch_doctors():
    print("\n--- Fetching doctors ---")
    r = requests.get(f"{BASE_URL}/patients/doctors", headers=HEADERS, timeout=10)
    if r.status_code != 200:
        print(f"❌ Failed to fetch doctors: {r.text}")
        return []
    doctors = r.json()
    for d in doctors:
        open_slots = sum(len(day["time_slots"]) for day in d.get("availability", []))
        print(f" - {d['id']} | {d.get('name')} | {d.get('specialization')} | {open_slots} open slots")
    return doctors


def book_first_open_slot(doctors):
    for d in doctors:
        for day in d.get("availability", []):
            if day["time_slots"]:
                payload = {
                    "doctor_id": d["id"],
                    "symptoms": "Smoke test: mild headache",
                    "date": day["date"],
                    "time": day["time_slots"][0],
                }
                print(f"\n--- Booking {payload['date']} {payload['time']} with {d.get('name')} ---")
                r = requests.post(f"{BASE_URL}/patients/appointments", json=payload, headers=HEADERS, timeout=10)
                print(r.status_code, r.text)
                return r.json() if r.status_code == 201 else None
    print("❌ No open slots found")
    return None


def list_appointments():
    print("\n--- My appointments ---")
    r = requests.get(f"{BASE_URL}/patients/appointments", headers=HEADERS, timeout=10)
    for a in r.json() if r.ok else []:
        doctor = (a.get("doctor") or {}).get("name")
        print(f" - {a['date']} {a['time']} | {doctor} | {a['status']}")


if __name__ == "__main__":
    if not ID_TOKEN:
        print("Set ID_TOKEN to a patient's Firebase ID token")
        sys.exit(1)

    docs = fetch_doctors()
    booked = book_first_open_slot(docs)
    list_appointments()

    if booked:
        print("\n--- Cancelling the smoke-test booking ---")
        r = requests.post(f"{BASE_URL}/patients/appointments/{booked['id']}/cancel", headers=HEADERS, timeout=10)
        print(r.status_code, r.text)
