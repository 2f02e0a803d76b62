"""Doctor availability: a list of days, each with bookable time slots."""
from datetime import date as _date, datetime
from typing import List

from pydantic import BaseModel, Field, field_validator


class DayAvailability(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    time_slots: List[str] = Field(default_factory=list, description="HH:MM, 24h")

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        v = v.strip()
        _date.fromisoformat(v)
        return v

    @field_validator("time_slots")
    @classmethod
    def validate_time_slots(cls, v: List[str]) -> List[str]:
        cleaned = set()
        for slot in v:
            slot = slot.strip()
            datetime.strptime(slot, "%H:%M")
            cleaned.add(slot)
        return sorted(cleaned)


class AvailabilityUpdate(BaseModel):
    availability: List[DayAvailability]
