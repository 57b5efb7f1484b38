"""Fold a business's appointments over a date window into summary statistics.

Everything here is pure: the caller passes the appointments already scoped to
the business and window, plus the ``today`` used for the "appointments today"
count and for the canned windows.
"""

import calendar
import enum
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from pydantic import BaseModel

from booking.core.errors import BookingValidationError
from booking.models.appointment import AppointmentStatus

TOP_SERVICES_LIMIT = 5
REVENUE_STATUSES = frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED})


class WindowKind(str, enum.Enum):
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'
    YEARLY = 'yearly'


class ServiceStats(BaseModel):
    service_id: int
    service_name: str | None = None
    booking_count: int
    revenue: Decimal


class AnalyticsSummary(BaseModel):
    business_id: int
    business_name: str | None = None
    window_start: date
    window_end: date
    appointments_today: int
    total_in_period: int
    new_bookings: int
    cancelled: int
    revenue: Decimal
    daily_revenue: dict[str, Decimal]
    by_status: dict[str, int]
    top_services: list[ServiceStats]
    total_customers: int
    new_customers: int
    returning_customers: int


def daily_window(day: date) -> tuple[date, date]:
    return day, day


def weekly_window(today: date) -> tuple[date, date]:
    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=6)


def monthly_window(today: date) -> tuple[date, date]:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def yearly_window(today: date) -> tuple[date, date]:
    return date(today.year, 1, 1), date(today.year, 12, 31)


_WINDOWS = {
    WindowKind.DAILY: daily_window,
    WindowKind.WEEKLY: weekly_window,
    WindowKind.MONTHLY: monthly_window,
    WindowKind.YEARLY: yearly_window,
}


def window_for(kind: WindowKind, today: date) -> tuple[date, date]:
    return _WINDOWS[WindowKind(kind)](today)


def validate_window(window_start: date, window_end: date) -> None:
    if window_start > window_end:
        raise BookingValidationError('Window start must not be after window end.')


def _earns_revenue(appointment) -> bool:
    return appointment.status in REVENUE_STATUSES


def _created_in_window(appointment, window_start: date, window_end: date) -> bool:
    return window_start <= appointment.created_at.date() <= window_end


def _service_name(appointment) -> str | None:
    service = getattr(appointment, 'service', None)
    return service.name if service is not None else None


def top_services(appointments: list, limit: int = TOP_SERVICES_LIMIT) -> list[ServiceStats]:
    """Services ranked by booking count; ties keep first-seen order."""
    stats: dict[int, ServiceStats] = {}

    for appointment in appointments:
        entry = stats.get(appointment.service_id)
        if entry is None:
            entry = stats[appointment.service_id] = ServiceStats(
                service_id=appointment.service_id,
                service_name=_service_name(appointment),
                booking_count=0,
                revenue=Decimal('0'),
            )
        entry.booking_count += 1
        if _earns_revenue(appointment):
            entry.revenue += appointment.price

    ranked = sorted(stats.values(), key=lambda entry: entry.booking_count, reverse=True)
    return ranked[:limit]


def aggregate(business, appointments: Iterable, window_start: date, window_end: date, today: date) -> AnalyticsSummary:
    validate_window(window_start, window_end)
    appointments = list(appointments)

    revenue = sum((a.price for a in appointments if _earns_revenue(a)), Decimal('0'))

    daily_revenue: dict[str, Decimal] = {}
    current = window_start
    while current <= window_end:
        daily_revenue[current.isoformat()] = Decimal('0')
        current += timedelta(days=1)
    for appointment in appointments:
        key = appointment.date.isoformat()
        if key in daily_revenue and _earns_revenue(appointment):
            daily_revenue[key] += appointment.price

    by_status = {status.value: 0 for status in AppointmentStatus}
    for appointment in appointments:
        by_status[AppointmentStatus(appointment.status).value] += 1

    created_in_window = [a for a in appointments if _created_in_window(a, window_start, window_end)]
    customer_ids = {a.customer_id for a in appointments}
    new_customer_ids = {a.customer_id for a in created_in_window}

    return AnalyticsSummary(
        business_id=business.id,
        business_name=business.name,
        window_start=window_start,
        window_end=window_end,
        appointments_today=sum(1 for a in appointments if a.date == today),
        total_in_period=len(appointments),
        new_bookings=len(created_in_window),
        cancelled=sum(1 for a in appointments if a.status == AppointmentStatus.CANCELLED),
        revenue=revenue,
        daily_revenue=daily_revenue,
        by_status=by_status,
        top_services=top_services(appointments),
        total_customers=len(customer_ids),
        new_customers=len(new_customer_ids),
        returning_customers=len(customer_ids - new_customer_ids),
    )
