"""Doctor profiles and availability management."""
from typing import Any, Dict, List

from app.core import firebase
from app.core.errors import NotFoundError
from app.services import availability as avail
from app.services.appointment_service import booked_slots

DOCTORS = "doctors"
PATIENTS = "patients"

# Never leave the backend
SENSITIVE_FIELDS = ("password", "token", "refresh_token", "client_secret")
PATIENT_SUMMARY_FIELDS = ("name", "mobile", "age", "gender")


def _public(doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    out = {k: v for k, v in data.items() if k not in SENSITIVE_FIELDS and k != "patients"}
    out["id"] = doc_id
    out["availability"] = data.get("availability") or []
    return out


def list_doctors(db) -> List[Dict[str, Any]]:
    """All doctors with their open slots, safe for patients to see."""
    return [_public(d.id, d.to_dict() or {}) for d in db.collection(DOCTORS).stream()]


def get_doctor(db, doctor_id: str) -> Dict[str, Any]:
    snap = db.collection(DOCTORS).document(doctor_id).get()
    if not snap.exists:
        raise NotFoundError("Doctor not found")
    return _public(doctor_id, snap.to_dict() or {})


def get_availability(db, doctor_id: str) -> List[Dict[str, Any]]:
    return get_doctor(db, doctor_id)["availability"]


def _edit_availability(transaction, db, doctor_id: str, edit) -> List[Dict[str, Any]]:
    """Slots held by Pending or Confirmed appointments are never (re)opened."""
    ref = db.collection(DOCTORS).document(doctor_id)
    snap = ref.get(transaction=transaction)
    if not snap.exists:
        raise NotFoundError("Doctor not found")

    current = (snap.to_dict() or {}).get("availability") or []
    taken = booked_slots(db, doctor_id, transaction)
    updated = avail.without_slots(edit(current), taken)
    transaction.update(ref, {"availability": updated})
    return updated


def replace_availability(db, doctor_id: str, days: List[Dict[str, Any]]):
    return firebase.run_in_transaction(
        db, _edit_availability, db, doctor_id, lambda _current: avail.normalize(days)
    )


def add_availability(db, doctor_id: str, date: str, time_slots: List[str]):
    return firebase.run_in_transaction(
        db, _edit_availability, db, doctor_id,
        lambda current: avail.add_slots(current, date, time_slots),
    )


def remove_availability_slot(db, doctor_id: str, date: str, time: str):
    def edit(current):
        if not avail.is_slot_available(current, date, time):
            raise NotFoundError("Time slot not found")
        return avail.remove_slot(current, date, time)

    return firebase.run_in_transaction(db, _edit_availability, db, doctor_id, edit)


def list_doctor_patients(db, doctor_id: str) -> List[Dict[str, Any]]:
    """Contact summary for each patient the doctor has seen; no medical history."""
    snap = db.collection(DOCTORS).document(doctor_id).get()
    if not snap.exists:
        raise NotFoundError("Doctor not found")

    out = []
    for patient_id in (snap.to_dict() or {}).get("patients") or []:
        p = db.collection(PATIENTS).document(patient_id).get()
        if p.exists:
            data = p.to_dict() or {}
            out.append({"id": patient_id, **{f: data.get(f) for f in PATIENT_SUMMARY_FIELDS}})
    return out
