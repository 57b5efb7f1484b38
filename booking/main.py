import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from booking.core import config
from booking.database import Base, engine, ensure_appointment_schema
from booking.models import appointment, business, business_hours, service  # noqa: F401
from booking.routes import analytics_routes, appointment_routes, business_hours_routes, listing_routes

logging.basicConfig(level=config.LOG_LEVEL)
config.validate_runtime_config()

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_appointment_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Booking API Running'}


app.include_router(appointment_routes.router, prefix='/appointments')
app.include_router(business_hours_routes.router, prefix='/business-hours')
app.include_router(analytics_routes.router, prefix='/business-analytics')
app.include_router(listing_routes.router, prefix='/listings')
