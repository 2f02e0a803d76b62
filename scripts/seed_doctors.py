"""Seed demo doctors with a week of availability (skips existing ids)."""
from datetime import date, timedelta

import firebase_admin
from firebase_admin import credentials, firestore

if not firebase_admin._apps:
    cred = credentials.Certificate("app/core/firebase_key.json")
    firebase_admin.initialize_app(cred)

db = firestore.client()

SLOTS = ["09:00", "09:30", "10:00", "10:30", "11:00", "14:00", "14:30", "15:00"]

doctors = [
    {"id": "demo_dr_mehta", "name": "Dr. Asha Mehta", "specialization": "General Physician", "degree": "MBBS, MD", "experience_years": 12},
    {"id": "demo_dr_rao", "name": "Dr. Vikram Rao", "specialization": "Cardiologist", "degree": "MBBS, DM Cardiology", "experience_years": 18},
    {"id": "demo_dr_khan", "name": "Dr. Sara Khan", "specialization": "Dermatologist", "degree": "MBBS, DVD", "experience_years": 7},
]


def week_availability():
    today = date.today()
    return [
        {"date": (today + timedelta(days=i)).isoformat(), "time_slots": list(SLOTS)}
        for i in range(1, 8)
    ]


def seed():
    collection = db.collection("doctors")
    for d in doctors:
        ref = collection.document(d["id"])
        if ref.get().exists:
            print(f"Skipped {d['name']} (Exists)")
            continue
        data = {k: v for k, v in d.items() if k != "id"}
        ref.set({**data, "role": "doctor", "availability": week_availability(), "patients": []})
        print(f"Added {d['name']}")


if __name__ == "__main__":
    seed()
