"""Patient-facing API routes.

Patients browse doctors with open slots, book and cancel appointments,
and keep their own profile up to date.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile

from app.api.deps import require_role
from app.core.config import settings
from app.core.firebase import get_db
from app.models.appointment import (
    Appointment,
    AppointmentStatus,
    BookingRequest,
    PatientAppointment,
)
from app.models.doctor import DoctorPublic
from app.models.patient import PatientProfile
from app.models.schemas import ProfileResponse
from app.services import appointment_service, doctor_service, profile_service

router = APIRouter(prefix="/patients", tags=["patients"])

patient_only = require_role(["patient"])


@router.get("/doctors", response_model=List[DoctorPublic])
async def list_doctors(user=Depends(patient_only), db=Depends(get_db)):
    """All doctors with their availability."""
    return doctor_service.list_doctors(db)


@router.post("/appointments", status_code=201, response_model=Appointment)
async def book_appointment(
    payload: BookingRequest = Body(...),
    user=Depends(patient_only),
    db=Depends(get_db),
):
    """
    Book a slot. 404 if the doctor is unknown, 400 if the slot is not in
    the doctor's availability (or was just taken by someone else).
    """
    return appointment_service.book_appointment(db, user["uid"], payload)


@router.get("/appointments", response_model=List[PatientAppointment])
async def my_appointments(user=Depends(patient_only), db=Depends(get_db)):
    return appointment_service.list_patient_appointments(db, user["uid"])


@router.post("/appointments/{appointment_id}/cancel", response_model=Appointment)
async def cancel_appointment(
    appointment_id: str,
    user=Depends(patient_only),
    db=Depends(get_db),
):
    return appointment_service.change_status(
        db, appointment_id, AppointmentStatus.CANCELLED, patient_id=user["uid"]
    )


@router.get("/profile", response_model=PatientProfile)
async def get_profile(user=Depends(patient_only), db=Depends(get_db)):
    return profile_service.get_patient(db, user["uid"])


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    name: Optional[str] = Form(None),
    mobile: Optional[str] = Form(None),
    age: Optional[int] = Form(None),
    gender: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    blood_group: Optional[str] = Form(None),
    emergency_contact: Optional[str] = Form(None),
    profile_img: Optional[UploadFile] = File(None),
    user=Depends(patient_only),
    db=Depends(get_db),
):
    """Fields left empty keep their stored value."""
    changes = {
        "name": name,
        "mobile": mobile,
        "age": age,
        "gender": gender,
        "address": address,
        "blood_group": blood_group,
        "emergency_contact": emergency_contact,
    }

    image = None
    if profile_img is not None and profile_img.filename:
        # One byte past the cap is enough to reject it
        image = await profile_img.read(settings.MAX_PROFILE_IMAGE_BYTES + 1)

    return profile_service.update_patient_profile(db, user["uid"], changes, image=image)
