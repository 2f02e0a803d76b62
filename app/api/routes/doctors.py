"""Doctor-facing routes: availability, appointments and patients."""
from typing import Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from app.api.deps import require_role
from app.core.firebase import get_db
from app.models.appointment import (
    Appointment,
    AppointmentStatus,
    DoctorAppointment,
    StatusUpdate,
)
from app.models.availability import AvailabilityUpdate, DayAvailability
from app.models.patient import PatientSummary
from app.services import appointment_service, doctor_service

router = APIRouter(prefix="/doctors/me", tags=["doctors"])

doctor_only = require_role(["doctor"])


@router.get("/availability", response_model=List[DayAvailability])
async def get_availability(user=Depends(doctor_only), db=Depends(get_db)):
    return doctor_service.get_availability(db, user["uid"])


@router.put("/availability", response_model=List[DayAvailability])
async def replace_availability(
    payload: AvailabilityUpdate = Body(...),
    user=Depends(doctor_only),
    db=Depends(get_db),
):
    """Replace the whole availability list. Booked slots are not in it any more."""
    days = [d.model_dump() for d in payload.availability]
    return doctor_service.replace_availability(db, user["uid"], days)


@router.post("/availability", response_model=List[DayAvailability])
async def add_availability(
    payload: DayAvailability = Body(...),
    user=Depends(doctor_only),
    db=Depends(get_db),
):
    return doctor_service.add_availability(db, user["uid"], payload.date, payload.time_slots)


@router.delete("/availability/{date}/{time}", response_model=List[DayAvailability])
async def remove_availability_slot(
    date: str,
    time: str,
    user=Depends(doctor_only),
    db=Depends(get_db),
):
    return doctor_service.remove_availability_slot(db, user["uid"], date, time)


@router.get("/appointments", response_model=List[DoctorAppointment])
async def my_appointments(
    status: Optional[AppointmentStatus] = None,
    user=Depends(doctor_only),
    db=Depends(get_db),
):
    return appointment_service.list_doctor_appointments(db, user["uid"], status=status)


@router.patch("/appointments/{appointment_id}", response_model=Appointment)
async def update_appointment_status(
    appointment_id: str,
    payload: StatusUpdate = Body(...),
    user=Depends(doctor_only),
    db=Depends(get_db),
):
    return appointment_service.change_status(
        db, appointment_id, payload.status, doctor_id=user["uid"]
    )


@router.get("/patients", response_model=Dict[str, List[PatientSummary]])
async def my_patients(user=Depends(doctor_only), db=Depends(get_db)):
    return {"items": doctor_service.list_doctor_patients(db, user["uid"])}
