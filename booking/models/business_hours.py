"""Business hours model definitions."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Time, UniqueConstraint
from booking.database import Base


class BusinessHours(Base):
    """Operating hours for one weekday (0 = Monday ... 6 = Sunday)."""
    __tablename__ = "business_hours"
    __table_args__ = (
        UniqueConstraint("business_id", "day_of_week", name="uq_business_hours_day"),
    )

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)
    open_time = Column(Time)
    close_time = Column(Time)
    is_open = Column(Boolean, default=True, nullable=False)
