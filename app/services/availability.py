"""Helpers over a doctor's `availability` field.

Availability is stored on the doctor document as a list of
`{"date": "YYYY-MM-DD", "time_slots": ["HH:MM", ...]}` dicts. All helpers
return new lists and never mutate their input.
"""
from typing import Any, Dict, Iterable, List

Availability = List[Dict[str, Any]]


def is_slot_available(availability: Availability, date: str, time: str) -> bool:
    """Linear scan for a day matching `date` that lists `time`."""
    return any(
        day.get("date") == date and time in (day.get("time_slots") or [])
        for day in availability or []
    )


def normalize(availability: Iterable[Dict[str, Any]]) -> Availability:
    """Merge duplicate dates, de-duplicate slots, drop empty days, sort by date."""
    merged: Dict[str, set] = {}
    for day in availability or []:
        date = day.get("date")
        if not date:
            continue
        merged.setdefault(date, set()).update(day.get("time_slots") or [])

    return [
        {"date": date, "time_slots": sorted(slots)}
        for date, slots in sorted(merged.items())
        if slots
    ]


def add_slots(availability: Availability, date: str, time_slots: Iterable[str]) -> Availability:
    return normalize(list(availability or []) + [{"date": date, "time_slots": list(time_slots)}])


def remove_slot(availability: Availability, date: str, time: str) -> Availability:
    out = []
    for day in availability or []:
        slots = list(day.get("time_slots") or [])
        if day.get("date") == date:
            slots = [s for s in slots if s != time]
        if slots:
            out.append({"date": day.get("date"), "time_slots": slots})
    return out


def without_slots(availability: Availability, taken) -> Availability:
    """Drop every (date, time) pair in `taken`; emptied days disappear."""
    out = []
    for day in availability or []:
        date = day.get("date")
        slots = [s for s in day.get("time_slots") or [] if (date, s) not in taken]
        if slots:
            out.append({"date": date, "time_slots": slots})
    return out
