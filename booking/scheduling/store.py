"""SQLAlchemy-backed calendar store used by the scheduling core."""

from datetime import date

from sqlalchemy.orm import Session

from booking.core.errors import NotFoundError
from booking.models.appointment import Appointment, AppointmentStatus
from booking.models.business import Business, Customer
from booking.models.business_hours import BusinessHours
from booking.models.service import Service


class CalendarStore:
    """Narrow read/write interface over the booking tables.

    Lookups named ``resolve_*`` raise ``NotFoundError``; ``find_*`` lookups
    return ``None`` or an empty list.
    """

    def __init__(self, db: Session):
        self.db = db

    def resolve_business(self, business_id: int) -> Business:
        business = self.db.get(Business, business_id)
        if business is None:
            raise NotFoundError('Business not found.')
        return business

    def resolve_customer(self, customer_id: int) -> Customer:
        customer = self.db.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError('Customer not found.')
        return customer

    def resolve_service(self, service_id: int) -> Service:
        service = self.db.get(Service, service_id)
        if service is None:
            raise NotFoundError('Service not found.')
        return service

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.db.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFoundError('Appointment not found.')
        return appointment

    def get_business_hours(self, hours_id: int) -> BusinessHours:
        hours = self.db.get(BusinessHours, hours_id)
        if hours is None:
            raise NotFoundError('Business hours not found.')
        return hours

    def find_business_hours(self, business_id: int, day_of_week: int) -> BusinessHours | None:
        return self.db.query(BusinessHours).filter(
            BusinessHours.business_id == business_id,
            BusinessHours.day_of_week == day_of_week,
        ).first()

    def list_business_hours(self, business_id: int) -> list[BusinessHours]:
        return self.db.query(BusinessHours).filter(
            BusinessHours.business_id == business_id,
        ).order_by(BusinessHours.day_of_week.asc()).all()

    def find_appointments_on(self, business_id: int, on_date: date) -> list[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.business_id == business_id,
            Appointment.date == on_date,
        ).order_by(Appointment.start_time.asc()).all()

    def find_appointments_between(self, business_id: int, start_date: date, end_date: date) -> list[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.business_id == business_id,
            Appointment.date >= start_date,
            Appointment.date <= end_date,
        ).order_by(Appointment.date.asc(), Appointment.start_time.asc(), Appointment.id.asc()).all()

    def find_appointments(
        self,
        customer_id: int | None = None,
        business_id: int | None = None,
        status: AppointmentStatus | None = None,
        on_date: date | None = None,
    ) -> list[Appointment]:
        query = self.db.query(Appointment)

        if customer_id is not None:
            query = query.filter(Appointment.customer_id == customer_id)
        if business_id is not None:
            query = query.filter(Appointment.business_id == business_id)
        if status is not None:
            query = query.filter(Appointment.status == status)
        if on_date is not None:
            query = query.filter(Appointment.date == on_date)

        return query.order_by(Appointment.date.asc(), Appointment.start_time.asc()).all()

    def find_upcoming(self, today: date, customer_id: int | None = None, business_id: int | None = None) -> list[Appointment]:
        query = self._owned_by(customer_id, business_id).filter(Appointment.date >= today)
        return query.order_by(Appointment.date.asc(), Appointment.start_time.asc()).all()

    def find_past(self, today: date, customer_id: int | None = None, business_id: int | None = None) -> list[Appointment]:
        query = self._owned_by(customer_id, business_id).filter(Appointment.date < today)
        return query.order_by(Appointment.date.desc(), Appointment.start_time.desc()).all()

    def _owned_by(self, customer_id: int | None, business_id: int | None):
        query = self.db.query(Appointment)
        if customer_id is not None:
            query = query.filter(Appointment.customer_id == customer_id)
        if business_id is not None:
            query = query.filter(Appointment.business_id == business_id)
        return query

    def save(self, instance):
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    def delete(self, instance) -> None:
        self.db.delete(instance)
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
