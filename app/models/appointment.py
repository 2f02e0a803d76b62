from datetime import date as _date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .doctor import DoctorSummary
from .patient import PatientSummary


class AppointmentStatus(str, Enum):
    """Appointment status enum"""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# Terminal states map to an empty set
ALLOWED_TRANSITIONS = {
    AppointmentStatus.PENDING: {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CONFIRMED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
}


class BookingRequest(BaseModel):
    """Request to book an appointment"""
    doctor_id: str = Field(..., min_length=1)
    symptoms: str = Field("", max_length=2000)
    date: str
    time: str

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        v = v.strip()
        _date.fromisoformat(v)
        return v

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        v = v.strip()
        datetime.strptime(v, "%H:%M")
        return v


class StatusUpdate(BaseModel):
    status: AppointmentStatus


class Appointment(BaseModel):
    id: str
    patient_id: str
    doctor_id: str
    symptoms: Optional[str] = None
    date: str
    time: str
    status: AppointmentStatus = AppointmentStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PatientAppointment(Appointment):
    """Appointment as listed to its patient, with the doctor populated."""
    doctor: Optional[DoctorSummary] = None


class DoctorAppointment(Appointment):
    """Appointment as listed to its doctor, with the patient populated."""
    patient: Optional[PatientSummary] = None
