"""Appointment model definitions."""

import enum

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Time, text
from sqlalchemy.orm import relationship
from booking.database import Base
from booking.models.business import Business, Customer
from booking.models.service import Service


class AppointmentStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


ACTIVE_SLOT_CONDITION = text("status != 'CANCELLED'")


class Appointment(Base):
    """A booked appointment with price and duration snapshotted from its service."""
    __tablename__ = "appointments"
    __table_args__ = (
        Index(
            "uq_appointments_active_slot",
            "business_id",
            "date",
            "start_time",
            unique=True,
            sqlite_where=ACTIVE_SLOT_CONDITION,
            postgresql_where=ACTIVE_SLOT_CONDITION,
        ),
    )

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    status = Column(Enum(AppointmentStatus, native_enum=False, length=16), nullable=False)
    notes = Column(String)
    cancellation_reason = Column(String)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime)
    cancelled_at = Column(DateTime)

    customer = relationship(Customer)
    business = relationship(Business)
    service = relationship(Service)
