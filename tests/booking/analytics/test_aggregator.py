from datetime import date, datetime, time
from decimal import Decimal
from types import SimpleNamespace

import pytest

from booking.analytics.aggregator import (
    WindowKind,
    aggregate,
    daily_window,
    monthly_window,
    top_services,
    weekly_window,
    window_for,
    yearly_window,
)
from booking.core.errors import BookingValidationError
from booking.models.appointment import AppointmentStatus

BUSINESS = SimpleNamespace(id=1, name='Downtown Hair Salon')
WEEK_START = date(2026, 1, 5)
WEEK_END = date(2026, 1, 11)
TODAY = date(2026, 1, 7)


def _appointment(
    id: int,
    on_date: date,
    status: AppointmentStatus,
    price: str,
    customer_id: int,
    service_id: int = 10,
    created_at: datetime = datetime(2026, 1, 6, 9, 0),
    service_name: str = 'Colour',
):
    return SimpleNamespace(
        id=id,
        date=on_date,
        start_time=time(9, 0),
        status=status,
        price=Decimal(price),
        customer_id=customer_id,
        service_id=service_id,
        service=SimpleNamespace(id=service_id, name=service_name),
        created_at=created_at,
    )


@pytest.fixture
def week_appointments():
    return [
        _appointment(1, date(2026, 1, 5), AppointmentStatus.CONFIRMED, '80.00', customer_id=100),
        _appointment(2, date(2026, 1, 7), AppointmentStatus.COMPLETED, '25.00', customer_id=101,
                     service_id=11, service_name='Trim', created_at=datetime(2025, 12, 20, 10, 0)),
        _appointment(3, date(2026, 1, 7), AppointmentStatus.PENDING, '80.00', customer_id=102),
        _appointment(4, date(2026, 1, 9), AppointmentStatus.CANCELLED, '25.00', customer_id=101,
                     service_id=11, service_name='Trim', created_at=datetime(2025, 12, 21, 10, 0)),
        _appointment(5, date(2026, 1, 9), AppointmentStatus.CONFIRMED, '80.00', customer_id=100),
    ]


def test_aggregate_counts_and_revenue(week_appointments) -> None:
    summary = aggregate(BUSINESS, week_appointments, WEEK_START, WEEK_END, TODAY)

    assert summary.business_id == 1
    assert summary.business_name == 'Downtown Hair Salon'
    assert summary.appointments_today == 2
    assert summary.total_in_period == 5
    assert summary.new_bookings == 3
    assert summary.cancelled == 1
    assert summary.revenue == Decimal('185.00')


def test_daily_revenue_covers_every_day_and_sums_to_revenue(week_appointments) -> None:
    summary = aggregate(BUSINESS, week_appointments, WEEK_START, WEEK_END, TODAY)

    assert list(summary.daily_revenue) == [
        '2026-01-05', '2026-01-06', '2026-01-07', '2026-01-08', '2026-01-09', '2026-01-10', '2026-01-11',
    ]
    assert summary.daily_revenue['2026-01-05'] == Decimal('80.00')
    assert summary.daily_revenue['2026-01-06'] == Decimal('0')
    assert summary.daily_revenue['2026-01-07'] == Decimal('25.00')
    assert sum(summary.daily_revenue.values(), Decimal('0')) == summary.revenue


def test_by_status_lists_all_statuses_and_sums_to_total(week_appointments) -> None:
    summary = aggregate(BUSINESS, week_appointments[:3], WEEK_START, WEEK_END, TODAY)

    assert summary.by_status == {'PENDING': 1, 'CONFIRMED': 1, 'CANCELLED': 0, 'COMPLETED': 1}
    assert sum(summary.by_status.values()) == summary.total_in_period


def test_customer_stats_split_new_and_returning(week_appointments) -> None:
    summary = aggregate(BUSINESS, week_appointments, WEEK_START, WEEK_END, TODAY)

    assert summary.total_customers == 3
    assert summary.new_customers == 2
    assert summary.returning_customers == 1
    assert summary.total_customers == summary.new_customers + summary.returning_customers


def test_top_services_ranked_by_count_with_revenue(week_appointments) -> None:
    summary = aggregate(BUSINESS, week_appointments, WEEK_START, WEEK_END, TODAY)

    assert [(s.service_id, s.service_name, s.booking_count, s.revenue) for s in summary.top_services] == [
        (10, 'Colour', 3, Decimal('160.00')),
        (11, 'Trim', 2, Decimal('25.00')),
    ]


def test_top_services_keeps_first_seen_order_on_ties_and_limits_to_five() -> None:
    appointments = [
        _appointment(i, WEEK_START, AppointmentStatus.PENDING, '10.00', customer_id=i, service_id=sid)
        for i, sid in enumerate([7, 3, 9, 1, 5, 8, 3])
    ]

    ranked = top_services(appointments)

    assert [s.service_id for s in ranked] == [3, 7, 9, 1, 5]


def test_aggregate_empty_window() -> None:
    summary = aggregate(BUSINESS, [], TODAY, TODAY, TODAY)

    assert summary.total_in_period == 0
    assert summary.revenue == Decimal('0')
    assert summary.daily_revenue == {'2026-01-07': Decimal('0')}
    assert summary.top_services == []
    assert summary.total_customers == summary.new_customers == summary.returning_customers == 0


def test_aggregate_rejects_inverted_window() -> None:
    with pytest.raises(BookingValidationError):
        aggregate(BUSINESS, [], WEEK_END, WEEK_START, TODAY)


def test_canned_windows() -> None:
    assert daily_window(TODAY) == (TODAY, TODAY)
    assert weekly_window(TODAY) == (WEEK_START, WEEK_END)
    assert weekly_window(date(2026, 1, 11)) == (WEEK_START, WEEK_END)
    assert monthly_window(date(2024, 2, 14)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert yearly_window(TODAY) == (date(2026, 1, 1), date(2026, 12, 31))
    assert window_for(WindowKind.MONTHLY, TODAY) == (date(2026, 1, 1), date(2026, 1, 31))
    assert window_for('weekly', TODAY) == (WEEK_START, WEEK_END)
