from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from booking.analytics.aggregator import AnalyticsSummary, WindowKind
from booking.analytics.service import AnalyticsService
from booking.database import get_db
from booking.routes.common import booking_errors, current_time
from booking.scheduling.store import CalendarStore

router = APIRouter(tags=['business-analytics'])


def _window_analytics(business_id: int, kind: WindowKind, db: Session) -> AnalyticsSummary:
    with booking_errors(db):
        return AnalyticsService(CalendarStore(db)).get_analytics(business_id, today=current_time().date(), kind=kind)


@router.get('/{business_id}', response_model=AnalyticsSummary)
def get_business_analytics(business_id: int, db: Session = Depends(get_db)):
    return _window_analytics(business_id, WindowKind.WEEKLY, db)


@router.get('/{business_id}/period', response_model=AnalyticsSummary)
def get_business_analytics_for_period(
    business_id: int,
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
):
    with booking_errors(db):
        return AnalyticsService(CalendarStore(db)).get_analytics_for_period(
            business_id,
            start_date,
            end_date,
            today=current_time().date(),
        )


@router.get('/{business_id}/daily', response_model=AnalyticsSummary)
def get_business_daily_analytics(
    business_id: int,
    on_date: date | None = Query(default=None, alias='date'),
    db: Session = Depends(get_db),
):
    today = current_time().date()

    with booking_errors(db):
        return AnalyticsService(CalendarStore(db)).get_daily_analytics(business_id, on_date or today, today=today)


@router.get('/{business_id}/weekly', response_model=AnalyticsSummary)
def get_business_weekly_analytics(business_id: int, db: Session = Depends(get_db)):
    return _window_analytics(business_id, WindowKind.WEEKLY, db)


@router.get('/{business_id}/monthly', response_model=AnalyticsSummary)
def get_business_monthly_analytics(business_id: int, db: Session = Depends(get_db)):
    return _window_analytics(business_id, WindowKind.MONTHLY, db)


@router.get('/{business_id}/yearly', response_model=AnalyticsSummary)
def get_business_yearly_analytics(business_id: int, db: Session = Depends(get_db)):
    return _window_analytics(business_id, WindowKind.YEARLY, db)
