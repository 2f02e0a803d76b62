"""Booking and appointment lifecycle.

A booking touches three documents: the new appointment, the patient's
medical history and the doctor's patient list / availability. They are
written in a single Firestore transaction so two patients racing for the
same slot cannot both get it.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set, Tuple

from app.core import firebase
from app.core.errors import (
    ForbiddenError,
    InvalidStatusTransition,
    NotFoundError,
    SlotUnavailableError,
)
from app.models.appointment import ALLOWED_TRANSITIONS, AppointmentStatus, BookingRequest
from app.services import availability as avail
from app.services.logger import log_debug

DOCTORS = "doctors"
PATIENTS = "patients"
APPOINTMENTS = "appointments"

# Statuses that hold a slot
ACTIVE_STATUSES = [AppointmentStatus.PENDING.value, AppointmentStatus.CONFIRMED.value]


def _now():
    return datetime.now(timezone.utc)


def booked_slots(db, doctor_id: str, transaction=None, exclude_id: Optional[str] = None) -> Set[Tuple[str, str]]:
    """(date, time) pairs held by the doctor's Pending or Confirmed appointments."""
    query = (
        db.collection(APPOINTMENTS)
        .where("doctor_id", "==", doctor_id)
        .where("status", "in", ACTIVE_STATUSES)
    )
    taken = set()
    for snap in query.stream(transaction=transaction):
        if snap.id == exclude_id:
            continue
        data = snap.to_dict() or {}
        taken.add((data.get("date"), data.get("time")))
    return taken


# -------------------------
# Booking
# -------------------------
def apply_booking(transaction, db, patient_id: str, req: BookingRequest) -> Dict[str, Any]:
    """Transaction body for a booking. All reads happen before any write."""
    doctor_ref = db.collection(DOCTORS).document(req.doctor_id)
    patient_ref = db.collection(PATIENTS).document(patient_id)

    doctor_snap = doctor_ref.get(transaction=transaction)
    if not doctor_snap.exists:
        raise NotFoundError("Doctor not found")

    doctor = doctor_snap.to_dict() or {}
    availability = doctor.get("availability") or []
    if not avail.is_slot_available(availability, req.date, req.time):
        raise SlotUnavailableError("Selected time slot is not available")

    patient_snap = patient_ref.get(transaction=transaction)
    if not patient_snap.exists:
        raise NotFoundError("Patient not found")
    patient = patient_snap.to_dict() or {}

    now = _now()
    appointment_ref = db.collection(APPOINTMENTS).document()
    appointment = {
        "patient_id": patient_id,
        "doctor_id": req.doctor_id,
        "symptoms": req.symptoms,
        "date": req.date,
        "time": req.time,
        "status": AppointmentStatus.PENDING.value,
        "created_at": now,
        "updated_at": now,
    }
    transaction.set(appointment_ref, appointment)

    history = list(patient.get("medical_history") or [])
    history.append({
        "appointment_id": appointment_ref.id,
        "doctor_id": req.doctor_id,
        "symptoms": req.symptoms,
        "date": req.date,
        "time": req.time,
        "status": AppointmentStatus.PENDING.value,
    })
    transaction.update(patient_ref, {"medical_history": history})

    patients = list(doctor.get("patients") or [])
    if patient_id not in patients:
        patients.append(patient_id)
    transaction.update(doctor_ref, {
        "patients": patients,
        "availability": avail.remove_slot(availability, req.date, req.time),
    })

    return {"id": appointment_ref.id, **appointment}


def book_appointment(db, patient_id: str, req: BookingRequest) -> Dict[str, Any]:
    appointment = firebase.run_in_transaction(db, apply_booking, db, patient_id, req)
    log_debug("appointment_booked", {
        "appointment_id": appointment["id"],
        "doctor_id": req.doctor_id,
        "patient_id": patient_id,
        "slot": f"{req.date} {req.time}",
    })
    return appointment


# -------------------------
# Status changes
# -------------------------
def apply_status_change(
    transaction,
    db,
    appointment_id: str,
    new_status: AppointmentStatus,
    doctor_id: Optional[str] = None,
    patient_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Move an appointment to `new_status`.

    Exactly one of doctor_id / patient_id identifies the caller, who must
    own the appointment. Cancelling gives the slot back to the doctor
    unless another active appointment still holds it.
    """
    appointment_ref = db.collection(APPOINTMENTS).document(appointment_id)
    snap = appointment_ref.get(transaction=transaction)
    if not snap.exists:
        raise NotFoundError("Appointment not found")

    appointment = snap.to_dict() or {}
    if doctor_id is not None and appointment.get("doctor_id") != doctor_id:
        raise ForbiddenError("Not authorized")
    if patient_id is not None and appointment.get("patient_id") != patient_id:
        raise ForbiddenError("Not authorized")

    current = AppointmentStatus(appointment.get("status", AppointmentStatus.PENDING.value))
    if new_status not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransition(
            f"Cannot change status from {current.value} to {new_status.value}"
        )

    patient_ref = db.collection(PATIENTS).document(appointment["patient_id"])
    doctor_ref = db.collection(DOCTORS).document(appointment["doctor_id"])
    patient_snap = patient_ref.get(transaction=transaction)
    doctor_snap = doctor_ref.get(transaction=transaction)

    restore_slot = False
    if new_status == AppointmentStatus.CANCELLED and doctor_snap.exists:
        taken = booked_slots(db, appointment["doctor_id"], transaction, exclude_id=appointment_id)
        restore_slot = (appointment["date"], appointment["time"]) not in taken

    now = _now()
    transaction.update(appointment_ref, {"status": new_status.value, "updated_at": now})

    if patient_snap.exists:
        history = []
        for entry in (patient_snap.to_dict() or {}).get("medical_history") or []:
            if entry.get("appointment_id") == appointment_id:
                entry = {**entry, "status": new_status.value}
            history.append(entry)
        transaction.update(patient_ref, {"medical_history": history})

    if restore_slot:
        availability = (doctor_snap.to_dict() or {}).get("availability") or []
        transaction.update(doctor_ref, {
            "availability": avail.add_slots(availability, appointment["date"], [appointment["time"]]),
        })

    return {**appointment, "id": appointment_id, "status": new_status.value, "updated_at": now}


def change_status(db, appointment_id: str, new_status: AppointmentStatus, **owner) -> Dict[str, Any]:
    updated = firebase.run_in_transaction(
        db, apply_status_change, db, appointment_id, new_status, **owner
    )
    log_debug("appointment_status_changed", {
        "appointment_id": appointment_id,
        "status": new_status.value,
    })
    return updated


# -------------------------
# Listings
# -------------------------
def _sort_newest_first(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(items, key=lambda a: a.get("created_at") or epoch, reverse=True)


def _lookup(db, collection: str, ids, fields) -> Dict[str, Optional[Dict[str, Any]]]:
    out = {}
    for doc_id in set(ids):
        snap = db.collection(collection).document(doc_id).get()
        if not snap.exists:
            out[doc_id] = None
            continue
        data = snap.to_dict() or {}
        out[doc_id] = {"id": doc_id, **{f: data.get(f) for f in fields}}
    return out


def list_patient_appointments(db, patient_id: str) -> List[Dict[str, Any]]:
    """Patient's appointments, newest first, with the doctor populated."""
    docs = db.collection(APPOINTMENTS).where("patient_id", "==", patient_id).stream()
    items = [{"id": d.id, **(d.to_dict() or {})} for d in docs]

    doctors = _lookup(db, DOCTORS, [a["doctor_id"] for a in items],
                      ("name", "specialization", "degree"))
    for a in items:
        a["doctor"] = doctors.get(a["doctor_id"])
    return _sort_newest_first(items)


def list_doctor_appointments(db, doctor_id: str, status: Optional[AppointmentStatus] = None):
    query = db.collection(APPOINTMENTS).where("doctor_id", "==", doctor_id)
    if status is not None:
        query = query.where("status", "==", status.value)
    items = [{"id": d.id, **(d.to_dict() or {})} for d in query.stream()]

    patients = _lookup(db, PATIENTS, [a["patient_id"] for a in items],
                       ("name", "mobile", "age", "gender"))
    for a in items:
        a["patient"] = patients.get(a["patient_id"])
    return _sort_newest_first(items)
