"""Pydantic models for doctor profiles stored in Firestore."""
from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional

from .availability import DayAvailability


class DoctorBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    mobile: Optional[str] = None
    specialization: Optional[str] = Field(None, max_length=100)
    degree: Optional[str] = Field(None, max_length=100)
    experience_years: Optional[int] = Field(None, ge=0)


class DoctorCreate(DoctorBase):
    availability: List[DayAvailability] = []


class DoctorPublic(DoctorBase):
    """Doctor as listed to patients (no credentials, no patient list)."""
    id: str
    availability: List[DayAvailability] = []


class DoctorSummary(BaseModel):
    """Doctor fields embedded into a patient's appointment listing."""
    id: str
    name: Optional[str] = None
    specialization: Optional[str] = None
    degree: Optional[str] = None
