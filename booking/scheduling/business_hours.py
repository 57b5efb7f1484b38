"""Weekly operating hours for a business."""

import logging
from datetime import time

from booking.core.errors import BookingValidationError, NotFoundError, StateConflictError
from booking.models.business_hours import BusinessHours
from booking.scheduling.store import CalendarStore

logger = logging.getLogger(__name__)


def validate_hours(day_of_week: int, open_time: time | None, close_time: time | None, is_open: bool) -> None:
    if not 0 <= day_of_week <= 6:
        raise BookingValidationError('day_of_week must be an integer between 0 (Monday) and 6 (Sunday).')
    if not is_open:
        return
    if open_time is None or close_time is None:
        raise BookingValidationError('Open days need both an open and a close time.')
    if open_time > close_time:
        raise BookingValidationError('open_time cannot be later than close_time.')


class BusinessHoursManager:
    def __init__(self, store: CalendarStore):
        self.store = store

    def create(
        self,
        business_id: int,
        day_of_week: int,
        open_time: time | None,
        close_time: time | None,
        is_open: bool = True,
    ) -> BusinessHours:
        validate_hours(day_of_week, open_time, close_time, is_open)
        business = self.store.resolve_business(business_id)

        if self.store.find_business_hours(business.id, day_of_week) is not None:
            raise StateConflictError('Business hours for this day already exist.')

        hours = BusinessHours(
            business_id=business.id,
            day_of_week=day_of_week,
            open_time=open_time,
            close_time=close_time,
            is_open=is_open,
        )
        hours = self.store.save(hours)
        logger.info('Created hours %s for business %s day %s', hours.id, business.id, day_of_week)
        return hours

    def get(self, hours_id: int) -> BusinessHours:
        return self.store.get_business_hours(hours_id)

    def list_for_business(self, business_id: int) -> list[BusinessHours]:
        business = self.store.resolve_business(business_id)
        return self.store.list_business_hours(business.id)

    def get_for_day(self, business_id: int, day_of_week: int) -> BusinessHours:
        business = self.store.resolve_business(business_id)
        hours = self.store.find_business_hours(business.id, day_of_week)
        if hours is None:
            raise NotFoundError('Business hours not found for this day.')
        return hours

    def update(
        self,
        hours_id: int,
        day_of_week: int,
        open_time: time | None,
        close_time: time | None,
        is_open: bool,
    ) -> BusinessHours:
        validate_hours(day_of_week, open_time, close_time, is_open)
        hours = self.store.get_business_hours(hours_id)

        existing = self.store.find_business_hours(hours.business_id, day_of_week)
        if existing is not None and existing.id != hours.id:
            raise StateConflictError('Business hours for this day already exist.')

        hours.day_of_week = day_of_week
        hours.open_time = open_time
        hours.close_time = close_time
        hours.is_open = is_open
        return self.store.save(hours)

    def toggle_open(self, hours_id: int, is_open: bool) -> BusinessHours:
        hours = self.store.get_business_hours(hours_id)
        validate_hours(hours.day_of_week, hours.open_time, hours.close_time, is_open)
        hours.is_open = is_open
        return self.store.save(hours)

    def delete(self, hours_id: int) -> None:
        hours = self.store.get_business_hours(hours_id)
        self.store.delete(hours)
        logger.info('Deleted hours %s', hours_id)
