from datetime import time

import pytest

from booking.core.errors import BookingValidationError, NotFoundError, StateConflictError
from booking.scheduling.business_hours import BusinessHoursManager
from booking.scheduling.store import CalendarStore


@pytest.fixture
def hours_manager(booking_db) -> BusinessHoursManager:
    return BusinessHoursManager(CalendarStore(booking_db))


def test_create_business_hours_for_new_weekday(hours_manager, salon) -> None:
    hours = hours_manager.create(salon['business'].id, 1, time(10, 0), time(18, 0))

    assert hours.id is not None
    assert hours.day_of_week == 1
    assert hours.is_open is True
    assert [h.day_of_week for h in hours_manager.list_for_business(salon['business'].id)] == [0, 1, 6]


def test_create_duplicate_weekday_raises_state_conflict(hours_manager, salon) -> None:
    with pytest.raises(StateConflictError) as exception_info:
        hours_manager.create(salon['business'].id, 0, time(8, 0), time(16, 0))

    assert exception_info.value.detail == 'Business hours for this day already exist.'


def test_create_for_missing_business_raises_not_found(hours_manager) -> None:
    with pytest.raises(NotFoundError):
        hours_manager.create(999, 2, time(9, 0), time(17, 0))


@pytest.mark.parametrize(
    ('day_of_week', 'open_time', 'close_time', 'is_open'),
    [
        (7, time(9, 0), time(17, 0), True),
        (-1, time(9, 0), time(17, 0), True),
        (2, time(17, 0), time(9, 0), True),
        (2, None, time(17, 0), True),
    ],
)
def test_create_rejects_invalid_hours(hours_manager, salon, day_of_week, open_time, close_time, is_open) -> None:
    with pytest.raises(BookingValidationError):
        hours_manager.create(salon['business'].id, day_of_week, open_time, close_time, is_open)


def test_closed_day_does_not_need_times(hours_manager, salon) -> None:
    hours = hours_manager.create(salon['business'].id, 5, None, None, is_open=False)

    assert hours.is_open is False


def test_get_for_day_distinguishes_missing_hours(hours_manager, salon) -> None:
    assert hours_manager.get_for_day(salon['business'].id, 0).open_time == time(9, 0)

    with pytest.raises(NotFoundError) as exception_info:
        hours_manager.get_for_day(salon['business'].id, 3)

    assert exception_info.value.detail == 'Business hours not found for this day.'


def test_update_cannot_move_onto_taken_weekday(hours_manager, salon) -> None:
    tuesday = hours_manager.create(salon['business'].id, 1, time(9, 0), time(17, 0))

    with pytest.raises(StateConflictError):
        hours_manager.update(tuesday.id, 0, time(9, 0), time(17, 0), True)

    updated = hours_manager.update(tuesday.id, 2, time(8, 0), time(12, 0), True)
    assert (updated.day_of_week, updated.open_time, updated.close_time) == (2, time(8, 0), time(12, 0))


def test_toggle_open_and_delete(hours_manager, salon) -> None:
    monday = hours_manager.get_for_day(salon['business'].id, 0)

    closed = hours_manager.toggle_open(monday.id, False)
    assert closed.is_open is False

    hours_manager.delete(monday.id)
    with pytest.raises(NotFoundError):
        hours_manager.get(monday.id)


def test_reopening_a_day_without_times_is_rejected(hours_manager, salon) -> None:
    sunday = hours_manager.get_for_day(salon['business'].id, 6)

    with pytest.raises(BookingValidationError):
        hours_manager.toggle_open(sunday.id, True)
