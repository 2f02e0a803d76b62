"""Pydantic models for patient metadata stored in Firestore.

This is NOT an ML model. Use this for request/response validation.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional


class HistoryEntry(BaseModel):
    appointment_id: str
    doctor_id: str
    symptoms: Optional[str] = None
    date: str
    time: str
    status: str


class PatientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    mobile: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = None
    address: Optional[str] = None
    blood_group: Optional[str] = None
    emergency_contact: Optional[str] = None


class PatientProfile(PatientCreate):
    id: str
    profile_img: Optional[str] = None
    role: str = "patient"
    medical_history: List[HistoryEntry] = []


class PatientSummary(BaseModel):
    """Patient contact fields shown to doctors (appointments, patient list)."""
    id: str
    name: Optional[str] = None
    mobile: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
