from datetime import date

from booking.analytics.aggregator import AnalyticsSummary, WindowKind, aggregate, validate_window, window_for
from booking.core.errors import BookingValidationError
from booking.scheduling.store import CalendarStore


class AnalyticsService:
    """Loads a business's appointments for a window and aggregates them."""

    def __init__(self, store: CalendarStore):
        self.store = store

    def get_analytics(
        self,
        business_id: int,
        today: date,
        kind: WindowKind | None = WindowKind.WEEKLY,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> AnalyticsSummary:
        if start_date is not None or end_date is not None:
            if start_date is None or end_date is None:
                raise BookingValidationError('Both start_date and end_date are required for a custom period.')
            window_start, window_end = start_date, end_date
        elif kind is not None:
            window_start, window_end = window_for(kind, today)
        else:
            raise BookingValidationError('A window kind or an explicit date range is required.')

        return self.get_analytics_for_period(business_id, window_start, window_end, today)

    def get_analytics_for_period(
        self,
        business_id: int,
        window_start: date,
        window_end: date,
        today: date,
    ) -> AnalyticsSummary:
        validate_window(window_start, window_end)
        business = self.store.resolve_business(business_id)
        appointments = self.store.find_appointments_between(business.id, window_start, window_end)
        return aggregate(business, appointments, window_start, window_end, today)

    def get_daily_analytics(self, business_id: int, day: date, today: date) -> AnalyticsSummary:
        return self.get_analytics_for_period(business_id, day, day, today)
