from datetime import date, datetime, time

import pytest
from fastapi import HTTPException

from booking.routes.analytics_routes import (
    get_business_analytics,
    get_business_analytics_for_period,
    get_business_daily_analytics,
    get_business_monthly_analytics,
)
from booking.routes.listing_routes import get_business_listing
from booking.scheduling.lifecycle import AppointmentManager
from booking.scheduling.store import CalendarStore


@pytest.fixture(autouse=True)
def fixed_clock(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('booking.routes.analytics_routes.current_time', lambda: datetime(2026, 1, 12, 8, 0))


@pytest.fixture
def booked(booking_db, salon):
    manager = AppointmentManager(CalendarStore(booking_db))
    appointment = manager.create_appointment(
        customer_id=salon['customer'].id,
        business_id=salon['business'].id,
        service_id=salon['trim'].id,
        on_date=date(2026, 1, 12),
        start_time=time(9, 0),
        now=datetime(2026, 1, 11, 18, 0),
    )
    return salon, appointment


def test_default_analytics_is_weekly(booking_db, booked) -> None:
    salon, _ = booked

    summary = get_business_analytics(salon['business'].id, db=booking_db)

    assert (summary.window_start, summary.window_end) == (date(2026, 1, 12), date(2026, 1, 18))
    assert summary.appointments_today == 1
    assert summary.new_bookings == 0
    assert summary.by_status['PENDING'] == 1


def test_daily_and_monthly_routes(booking_db, booked) -> None:
    salon, _ = booked

    daily = get_business_daily_analytics(salon['business'].id, on_date=None, db=booking_db)
    monthly = get_business_monthly_analytics(salon['business'].id, db=booking_db)

    assert daily.total_in_period == 1
    assert monthly.new_bookings == 1
    assert monthly.new_customers == 1


def test_inverted_period_maps_to_422(booking_db, booked) -> None:
    salon, _ = booked

    with pytest.raises(HTTPException) as exception_info:
        get_business_analytics_for_period(
            salon['business'].id,
            start_date=date(2026, 2, 1),
            end_date=date(2026, 1, 1),
            db=booking_db,
        )

    assert exception_info.value.status_code == 422


def test_analytics_for_missing_business_maps_to_404(booking_db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_business_analytics(999, db=booking_db)

    assert exception_info.value.status_code == 404


def test_listing_route_derives_category(booking_db, salon) -> None:
    listing = get_business_listing(salon['business'].id, db=booking_db)

    assert listing.name == 'Downtown Hair Salon'
    assert listing.category == 'Beauty'
