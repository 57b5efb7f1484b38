from datetime import date, datetime, time
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from booking.core import config
from booking.database import get_db
from booking.models.appointment import Appointment, AppointmentStatus
from booking.routes.common import booking_errors, current_time, ensure_database_ready
from booking.scheduling.lifecycle import AppointmentManager
from booking.scheduling.store import CalendarStore

router = APIRouter(tags=['appointments'])


def _normalize_optional_text(value: str | None, max_length: int, label: str) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > max_length:
        raise ValueError(f'{label} must be {max_length} characters or fewer.')

    return normalized


class CreateAppointmentRequest(BaseModel):
    customer_id: int
    business_id: int
    service_id: int
    date: date
    start_time: time
    duration_minutes: int | None = None
    notes: str | None = None

    @field_validator('start_time')
    @classmethod
    def validate_start_time(cls, value: time) -> time:
        return value.replace(second=0, microsecond=0)

    @field_validator('duration_minutes')
    @classmethod
    def validate_duration_minutes(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError('Duration must be positive.')
        return value

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return _normalize_optional_text(value, config.MAX_APPOINTMENT_NOTES_LENGTH, 'Notes')


class StatusUpdateRequest(BaseModel):
    status: AppointmentStatus


class CancelAppointmentRequest(BaseModel):
    reason: str | None = None

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        return _normalize_optional_text(value, config.MAX_CANCELLATION_REASON_LENGTH, 'Cancellation reason')


class RescheduleAppointmentRequest(BaseModel):
    date: date
    start_time: str


class AppointmentResponse(BaseModel):
    id: int
    customer_id: int
    business_id: int
    service_id: int
    service_name: str | None = None
    date: date
    start_time: time
    end_time: time
    duration_minutes: int
    price: Decimal
    status: AppointmentStatus
    notes: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    cancelled_at: datetime | None = None

    class Config:
        from_attributes = True


def to_response(appointment: Appointment) -> AppointmentResponse:
    response = AppointmentResponse.model_validate(appointment)
    if appointment.service is not None:
        response.service_name = appointment.service.name
    return response


def get_manager(db: Session) -> AppointmentManager:
    return AppointmentManager(CalendarStore(db), strict_transitions=config.STRICT_STATUS_TRANSITIONS)


@router.get('/available-slots', response_model=list[str])
def get_available_time_slots(
    business_id: int = Query(...),
    service_id: int = Query(...),
    on_date: date = Query(..., alias='date'),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    with booking_errors(db):
        return get_manager(db).get_available_time_slots(business_id, service_id, on_date)


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(data: CreateAppointmentRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    with booking_errors(db):
        appointment = get_manager(db).create_appointment(
            customer_id=data.customer_id,
            business_id=data.business_id,
            service_id=data.service_id,
            on_date=data.date,
            start_time=data.start_time,
            duration_minutes=data.duration_minutes,
            notes=data.notes,
            now=current_time(),
        )
        return to_response(appointment)


@router.get('', response_model=list[AppointmentResponse])
def list_appointments(
    customer_id: int | None = Query(default=None),
    business_id: int | None = Query(default=None),
    appointment_status: AppointmentStatus | None = Query(default=None, alias='status'),
    on_date: date | None = Query(default=None, alias='date'),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    with booking_errors(db):
        appointments = get_manager(db).list_appointments(
            customer_id=customer_id,
            business_id=business_id,
            status=appointment_status,
            on_date=on_date,
        )
        return [to_response(appointment) for appointment in appointments]


@router.get('/customer/{customer_id}/upcoming', response_model=list[AppointmentResponse])
def list_upcoming_customer_appointments(customer_id: int, db: Session = Depends(get_db)):
    with booking_errors(db):
        appointments = get_manager(db).upcoming_appointments(current_time().date(), customer_id=customer_id)
        return [to_response(appointment) for appointment in appointments]


@router.get('/customer/{customer_id}/past', response_model=list[AppointmentResponse])
def list_past_customer_appointments(customer_id: int, db: Session = Depends(get_db)):
    with booking_errors(db):
        appointments = get_manager(db).past_appointments(current_time().date(), customer_id=customer_id)
        return [to_response(appointment) for appointment in appointments]


@router.get('/business/{business_id}/upcoming', response_model=list[AppointmentResponse])
def list_upcoming_business_appointments(business_id: int, db: Session = Depends(get_db)):
    with booking_errors(db):
        appointments = get_manager(db).upcoming_appointments(current_time().date(), business_id=business_id)
        return [to_response(appointment) for appointment in appointments]


@router.get('/business/{business_id}/past', response_model=list[AppointmentResponse])
def list_past_business_appointments(business_id: int, db: Session = Depends(get_db)):
    with booking_errors(db):
        appointments = get_manager(db).past_appointments(current_time().date(), business_id=business_id)
        return [to_response(appointment) for appointment in appointments]


@router.get('/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(appointment_id: int, db: Session = Depends(get_db)):
    with booking_errors(db):
        return to_response(get_manager(db).get_appointment(appointment_id))


@router.patch('/{appointment_id}/status', response_model=AppointmentResponse)
def update_appointment_status(appointment_id: int, data: StatusUpdateRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    with booking_errors(db):
        appointment = get_manager(db).update_status(appointment_id, data.status, now=current_time())
        return to_response(appointment)


@router.patch('/{appointment_id}/cancel', response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: int,
    data: CancelAppointmentRequest | None = None,
    db: Session = Depends(get_db),
):
    ensure_database_ready()
    reason = data.reason if data is not None else None

    with booking_errors(db):
        appointment = get_manager(db).cancel(appointment_id, reason, now=current_time())
        return to_response(appointment)


@router.patch('/{appointment_id}/reschedule', response_model=AppointmentResponse)
def reschedule_appointment(appointment_id: int, data: RescheduleAppointmentRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    with booking_errors(db):
        appointment = get_manager(db).reschedule(appointment_id, data.date, data.start_time, now=current_time())
        return to_response(appointment)


@router.delete('/{appointment_id}')
def delete_appointment(appointment_id: int, db: Session = Depends(get_db)):
    ensure_database_ready()

    with booking_errors(db):
        get_manager(db).delete(appointment_id)
        return {'message': 'Appointment deleted successfully'}
