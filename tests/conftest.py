import os
from datetime import datetime, time
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from booking.database import Base  # noqa: E402
from booking.models.appointment import Appointment  # noqa: E402
from booking.models.business import Business, Customer  # noqa: E402
from booking.models.business_hours import BusinessHours  # noqa: E402
from booking.models.service import Service  # noqa: E402

BOOKING_TABLES = [
    Business.__table__,
    Customer.__table__,
    Service.__table__,
    BusinessHours.__table__,
    Appointment.__table__,
]


@pytest.fixture
def booking_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=BOOKING_TABLES)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=list(reversed(BOOKING_TABLES)))


@pytest.fixture
def salon(booking_db):
    """A business open Monday 09:00-12:00 with a 90 minute and a 30 minute service."""
    business = Business(name='Downtown Hair Salon', description='Cuts and colour')
    customer = Customer(email='ada@example.com', first_name='Ada', last_name='Lovelace')
    other_customer = Customer(email='grace@example.com', first_name='Grace', last_name='Hopper')
    booking_db.add_all([business, customer, other_customer])
    booking_db.commit()

    colour = Service(business_id=business.id, name='Colour', duration_minutes=90, price=Decimal('80.00'))
    trim = Service(business_id=business.id, name='Trim', duration_minutes=30, price=Decimal('25.00'))
    monday = BusinessHours(business_id=business.id, day_of_week=0, open_time=time(9, 0), close_time=time(12, 0))
    sunday = BusinessHours(business_id=business.id, day_of_week=6, open_time=None, close_time=None, is_open=False)
    booking_db.add_all([colour, trim, monday, sunday])
    booking_db.commit()

    return {
        'business': business,
        'customer': customer,
        'other_customer': other_customer,
        'colour': colour,
        'trim': trim,
    }


@pytest.fixture
def now() -> datetime:
    # A Wednesday; the following Monday is 2026-01-12.
    return datetime(2026, 1, 7, 8, 30)
