from datetime import time

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from booking.database import get_db
from booking.routes.common import booking_errors
from booking.scheduling.business_hours import BusinessHoursManager
from booking.scheduling.store import CalendarStore

router = APIRouter(tags=['business-hours'])


class BusinessHoursRequest(BaseModel):
    day_of_week: int
    open_time: time | None = None
    close_time: time | None = None
    is_open: bool = True

    @field_validator('day_of_week')
    @classmethod
    def validate_day_of_week(cls, value: int) -> int:
        if not 0 <= value <= 6:
            raise ValueError('day_of_week must be an integer between 0 (Monday) and 6 (Sunday).')
        return value


class CreateBusinessHoursRequest(BusinessHoursRequest):
    business_id: int


class ToggleOpenRequest(BaseModel):
    is_open: bool


class BusinessHoursResponse(BaseModel):
    id: int
    business_id: int
    day_of_week: int
    open_time: time | None = None
    close_time: time | None = None
    is_open: bool

    class Config:
        from_attributes = True


def get_manager(db: Session) -> BusinessHoursManager:
    return BusinessHoursManager(CalendarStore(db))


@router.post('', response_model=BusinessHoursResponse, status_code=status.HTTP_201_CREATED)
def create_business_hours(data: CreateBusinessHoursRequest, db: Session = Depends(get_db)):
    with booking_errors(db):
        return get_manager(db).create(
            business_id=data.business_id,
            day_of_week=data.day_of_week,
            open_time=data.open_time,
            close_time=data.close_time,
            is_open=data.is_open,
        )


@router.get('/business/{business_id}', response_model=list[BusinessHoursResponse])
def list_business_hours(business_id: int, db: Session = Depends(get_db)):
    with booking_errors(db):
        return get_manager(db).list_for_business(business_id)


@router.get('/business/{business_id}/day/{day_of_week}', response_model=BusinessHoursResponse)
def get_business_hours_for_day(business_id: int, day_of_week: int, db: Session = Depends(get_db)):
    with booking_errors(db):
        return get_manager(db).get_for_day(business_id, day_of_week)


@router.get('/{hours_id}', response_model=BusinessHoursResponse)
def get_business_hours(hours_id: int, db: Session = Depends(get_db)):
    with booking_errors(db):
        return get_manager(db).get(hours_id)


@router.put('/{hours_id}', response_model=BusinessHoursResponse)
def update_business_hours(hours_id: int, data: BusinessHoursRequest, db: Session = Depends(get_db)):
    with booking_errors(db):
        return get_manager(db).update(
            hours_id,
            day_of_week=data.day_of_week,
            open_time=data.open_time,
            close_time=data.close_time,
            is_open=data.is_open,
        )


@router.patch('/{hours_id}/open', response_model=BusinessHoursResponse)
def toggle_business_hours_open(hours_id: int, data: ToggleOpenRequest, db: Session = Depends(get_db)):
    with booking_errors(db):
        return get_manager(db).toggle_open(hours_id, data.is_open)


@router.delete('/{hours_id}')
def delete_business_hours(hours_id: int, db: Session = Depends(get_db)):
    with booking_errors(db):
        get_manager(db).delete(hours_id)
        return {'message': 'Business hours deleted successfully'}
