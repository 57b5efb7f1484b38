from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from booking.database import get_db
from booking.listing import determine_category
from booking.routes.common import booking_errors
from booking.scheduling.store import CalendarStore

router = APIRouter(tags=['listings'])


class BusinessListingResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    category: str


@router.get('/{business_id}', response_model=BusinessListingResponse)
def get_business_listing(business_id: int, db: Session = Depends(get_db)):
    with booking_errors(db):
        business = CalendarStore(db).resolve_business(business_id)
        return BusinessListingResponse(
            id=business.id,
            name=business.name,
            description=business.description,
            category=determine_category(business.name, business.description),
        )
