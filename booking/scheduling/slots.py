"""Candidate slot generation and conflict filtering.

Times are naive wall-clock ``datetime.time`` values within a single day.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterable

from booking.core.errors import BookingValidationError
from booking.models.appointment import AppointmentStatus

SLOT_STRIDE_MINUTES = 30
SLOT_TIME_FORMAT = '%H:%M'

_ANCHOR_DATE = date(2000, 1, 1)


def _to_datetime(value: time) -> datetime:
    return datetime.combine(_ANCHOR_DATE, value)


def add_minutes(start: time, minutes: int) -> time:
    """Return ``start + minutes``; raises when the result would pass midnight."""
    end = _to_datetime(start) + timedelta(minutes=minutes)
    if end.date() != _ANCHOR_DATE:
        raise BookingValidationError('Appointment must end on the same day it starts.')
    return end.time()


def parse_slot_time(value: str) -> time:
    try:
        return datetime.strptime(value.strip(), SLOT_TIME_FORMAT).time()
    except (AttributeError, ValueError) as exc:
        raise BookingValidationError(f'Invalid time {value!r}; expected HH:mm.') from exc


def format_slot_time(value: time) -> str:
    return value.strftime(SLOT_TIME_FORMAT)


def overlaps(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    return start_a < end_b and end_a > start_b


def generate_candidate_slots(
    open_time: time,
    close_time: time,
    duration_minutes: int,
    stride_minutes: int = SLOT_STRIDE_MINUTES,
) -> list[time]:
    """Start times on a fixed stride whose ``start + duration`` fits before closing.

    The stride does not depend on the service duration. A slot ending exactly
    at ``close_time`` is included.
    """
    if duration_minutes <= 0:
        raise BookingValidationError('Duration must be positive.')

    slots: list[time] = []
    current = _to_datetime(open_time)
    closing = _to_datetime(close_time)
    duration = timedelta(minutes=duration_minutes)
    stride = timedelta(minutes=stride_minutes)

    while current + duration <= closing:
        slots.append(current.time())
        current += stride

    return slots


def active_appointments(appointments: Iterable) -> list:
    return [appointment for appointment in appointments if appointment.status != AppointmentStatus.CANCELLED]


def filter_available(candidate_slots: Iterable[time], existing_appointments: Iterable, duration_minutes: int) -> list[time]:
    blocking = active_appointments(existing_appointments)
    available: list[time] = []

    for slot_start in candidate_slots:
        slot_end = add_minutes(slot_start, duration_minutes)
        if not any(
            overlaps(slot_start, slot_end, appointment.start_time, appointment.end_time)
            for appointment in blocking
        ):
            available.append(slot_start)

    return available


def find_conflicts(start: time, end: time, appointments: Iterable, exclude_id: int | None = None) -> list:
    return [
        appointment
        for appointment in active_appointments(appointments)
        if appointment.id != exclude_id and overlaps(start, end, appointment.start_time, appointment.end_time)
    ]
