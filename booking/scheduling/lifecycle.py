"""Appointment lifecycle: booking, status changes, cancellation and rescheduling."""

import logging
from contextlib import ExitStack, contextmanager
from datetime import date, datetime, time
from threading import Lock

from sqlalchemy.exc import IntegrityError

from booking.core.errors import (
    BookingValidationError,
    NotFoundError,
    SlotConflictError,
    TransitionNotAllowedError,
)
from booking.models.appointment import Appointment, AppointmentStatus
from booking.scheduling.slots import (
    add_minutes,
    filter_available,
    find_conflicts,
    format_slot_time,
    generate_candidate_slots,
    parse_slot_time,
)
from booking.scheduling.store import CalendarStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.CANCELLED: frozenset({AppointmentStatus.PENDING}),
    AppointmentStatus.COMPLETED: frozenset(),
}

# (business_id, date) -> [lock, holders]; an entry lives only while someone holds or waits on it.
_day_locks: dict[tuple[int, date], list] = {}
_day_locks_guard = Lock()


@contextmanager
def _day_lock(business_id: int, on_date: date):
    key = (business_id, on_date)
    with _day_locks_guard:
        entry = _day_locks.get(key)
        if entry is None:
            entry = _day_locks[key] = [Lock(), 0]
        entry[1] += 1

    try:
        with entry[0]:
            yield
    finally:
        with _day_locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                del _day_locks[key]


@contextmanager
def hold_day_locks(business_id: int, *dates: date):
    """Serialise check-then-write sequences for a business on the given dates.

    Locks are taken in date order so two reschedules crossing the same pair of
    days cannot deadlock.
    """
    with ExitStack() as stack:
        for on_date in sorted(set(dates)):
            stack.enter_context(_day_lock(business_id, on_date))
        yield


def is_transition_allowed(current: AppointmentStatus, target: AppointmentStatus, strict: bool) -> bool:
    if not strict or current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


class AppointmentManager:
    """Sole writer of appointment state.

    ``now`` is passed into every write so the caller owns the clock.
    """

    def __init__(self, store: CalendarStore, strict_transitions: bool = False):
        self.store = store
        self.strict_transitions = strict_transitions

    def create_appointment(
        self,
        customer_id: int,
        business_id: int,
        service_id: int,
        on_date: date,
        start_time: time,
        now: datetime,
        duration_minutes: int | None = None,
        notes: str | None = None,
    ) -> Appointment:
        if on_date <= now.date():
            raise BookingValidationError('Date must be in the future.')
        if duration_minutes is not None and duration_minutes <= 0:
            raise BookingValidationError('Duration must be positive.')

        customer = self.store.resolve_customer(customer_id)
        business = self.store.resolve_business(business_id)
        service = self.store.resolve_service(service_id)

        if service.business_id != business.id:
            raise BookingValidationError('Service is not offered by this business.')

        if duration_minutes is None:
            duration_minutes = service.duration_minutes
        end_time = add_minutes(start_time, duration_minutes)

        with hold_day_locks(business.id, on_date):
            self._ensure_slot_free(business.id, on_date, start_time, end_time)

            appointment = Appointment(
                customer_id=customer.id,
                business_id=business.id,
                service_id=service.id,
                date=on_date,
                start_time=start_time,
                end_time=end_time,
                duration_minutes=duration_minutes,
                price=service.price,
                status=AppointmentStatus.PENDING,
                notes=notes,
                created_at=now,
            )
            appointment = self._commit(appointment)

        logger.info(
            'Created appointment %s for business %s on %s at %s',
            appointment.id, business.id, on_date, format_slot_time(start_time),
        )
        return appointment

    def get_appointment(self, appointment_id: int) -> Appointment:
        return self.store.get_appointment(appointment_id)

    def list_appointments(
        self,
        customer_id: int | None = None,
        business_id: int | None = None,
        status: AppointmentStatus | None = None,
        on_date: date | None = None,
    ) -> list[Appointment]:
        if customer_id is not None:
            self.store.resolve_customer(customer_id)
        if business_id is not None:
            self.store.resolve_business(business_id)
        return self.store.find_appointments(
            customer_id=customer_id,
            business_id=business_id,
            status=status,
            on_date=on_date,
        )

    def upcoming_appointments(
        self,
        today: date,
        customer_id: int | None = None,
        business_id: int | None = None,
    ) -> list[Appointment]:
        self._resolve_owner(customer_id, business_id)
        return self.store.find_upcoming(today, customer_id=customer_id, business_id=business_id)

    def past_appointments(
        self,
        today: date,
        customer_id: int | None = None,
        business_id: int | None = None,
    ) -> list[Appointment]:
        self._resolve_owner(customer_id, business_id)
        return self.store.find_past(today, customer_id=customer_id, business_id=business_id)

    def update_status(self, appointment_id: int, target: AppointmentStatus, now: datetime) -> Appointment:
        appointment = self.store.get_appointment(appointment_id)
        current = appointment.status

        if not is_transition_allowed(current, target, self.strict_transitions):
            raise TransitionNotAllowedError(f'Cannot change status from {current.value} to {target.value}.')

        with hold_day_locks(appointment.business_id, appointment.date):
            if current == AppointmentStatus.CANCELLED and target != AppointmentStatus.CANCELLED:
                self._ensure_slot_free(
                    appointment.business_id,
                    appointment.date,
                    appointment.start_time,
                    appointment.end_time,
                    exclude_id=appointment.id,
                )

            appointment.status = target
            appointment.updated_at = now
            if target == AppointmentStatus.CANCELLED and current != AppointmentStatus.CANCELLED:
                appointment.cancelled_at = now
            appointment = self._commit(appointment)

        logger.info('Appointment %s status %s -> %s', appointment.id, current.value, target.value)
        return appointment

    def cancel(self, appointment_id: int, reason: str | None, now: datetime) -> Appointment:
        appointment = self.store.get_appointment(appointment_id)

        # Re-cancelling overwrites the previous reason and timestamp.
        appointment.status = AppointmentStatus.CANCELLED
        appointment.cancelled_at = now
        appointment.cancellation_reason = reason
        appointment.updated_at = now
        appointment = self.store.save(appointment)

        logger.info('Cancelled appointment %s', appointment.id)
        return appointment

    def reschedule(self, appointment_id: int, new_date: date, new_start_time: str, now: datetime) -> Appointment:
        appointment = self.store.get_appointment(appointment_id)
        start_time = parse_slot_time(new_start_time)
        end_time = add_minutes(start_time, appointment.duration_minutes)

        with hold_day_locks(appointment.business_id, appointment.date, new_date):
            if appointment.status != AppointmentStatus.CANCELLED:
                self._ensure_slot_free(
                    appointment.business_id,
                    new_date,
                    start_time,
                    end_time,
                    exclude_id=appointment.id,
                )

            appointment.date = new_date
            appointment.start_time = start_time
            appointment.end_time = end_time
            appointment.updated_at = now
            appointment = self._commit(appointment)

        logger.info('Rescheduled appointment %s to %s at %s', appointment.id, new_date, new_start_time)
        return appointment

    def delete(self, appointment_id: int) -> None:
        appointment = self.store.get_appointment(appointment_id)
        self.store.delete(appointment)
        logger.info('Deleted appointment %s', appointment_id)

    def get_available_time_slots(self, business_id: int, service_id: int, on_date: date) -> list[str]:
        business = self.store.resolve_business(business_id)
        service = self.store.resolve_service(service_id)
        if service.business_id != business.id:
            raise BookingValidationError('Service is not offered by this business.')

        hours = self.store.find_business_hours(business.id, on_date.weekday())
        if hours is None:
            raise NotFoundError('Business hours not found for this day.')
        if not hours.is_open:
            return []

        existing = self.store.find_appointments_on(business.id, on_date)
        candidates = generate_candidate_slots(hours.open_time, hours.close_time, service.duration_minutes)
        available = filter_available(candidates, existing, service.duration_minutes)

        return [format_slot_time(slot) for slot in available]

    def _resolve_owner(self, customer_id: int | None, business_id: int | None) -> None:
        if customer_id is None and business_id is None:
            raise BookingValidationError('A customer or business is required.')
        if customer_id is not None:
            self.store.resolve_customer(customer_id)
        if business_id is not None:
            self.store.resolve_business(business_id)

    def _ensure_slot_free(
        self,
        business_id: int,
        on_date: date,
        start_time: time,
        end_time: time,
        exclude_id: int | None = None,
    ) -> None:
        existing = self.store.find_appointments_on(business_id, on_date)
        conflicts = find_conflicts(start_time, end_time, existing, exclude_id=exclude_id)
        if conflicts:
            logger.warning(
                'Slot %s-%s on %s for business %s overlaps appointment %s',
                format_slot_time(start_time), format_slot_time(end_time), on_date, business_id, conflicts[0].id,
            )
            raise SlotConflictError('This time overlaps an existing appointment.')

    def _commit(self, appointment: Appointment) -> Appointment:
        try:
            return self.store.save(appointment)
        except IntegrityError as exc:
            self.store.rollback()
            raise SlotConflictError('An appointment already exists for that start time.') from exc
