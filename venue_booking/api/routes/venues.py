from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from venue_booking.db.session import get_db
from venue_booking.core.dependencies import require_role
from venue_booking.models.enums import UserRole
from venue_booking.models.user import User
from venue_booking.schemas.venue import VenueCreate, VenueOut
from venue_booking.schemas.hall import (
    BlockedDateCreate,
    BlockedDateOut,
    HallCalendarOut,
    HallCreate,
    HallOut,
    HallUpdate,
)
from venue_booking.services import availability, venue_service

router = APIRouter(tags=["Venues & Halls"])

manager = require_role(UserRole.VENUE_HOLDER, UserRole.ADMIN)


# =====================================================================
# VENUES
# =====================================================================
@router.post("/venues/", response_model=VenueOut, status_code=status.HTTP_201_CREATED)
def create_venue(data: VenueCreate, user: User = Depends(manager), db: Session = Depends(get_db)):
    return venue_service.create_venue(db, user, data)


@router.get("/venues/", response_model=list[VenueOut])
def list_venues(city: Optional[str] = None, featured: bool = False, db: Session = Depends(get_db)):
    return venue_service.list_venues(db, city=city, featured=featured)


@router.get("/venues/{venue_id}", response_model=VenueOut)
def get_venue(venue_id: int, db: Session = Depends(get_db)):
    return venue_service.get_venue(db, venue_id)


# =====================================================================
# HALLS  (Owner or Admin for writes)
# =====================================================================
@router.get("/venues/{venue_id}/halls", response_model=list[HallOut])
def list_halls(venue_id: int, db: Session = Depends(get_db)):
    venue_service.get_venue(db, venue_id)
    return venue_service.list_halls(db, venue_id)


@router.post("/venues/{venue_id}/halls", response_model=HallOut, status_code=status.HTTP_201_CREATED)
def create_hall(venue_id: int, data: HallCreate, user: User = Depends(manager), db: Session = Depends(get_db)):
    return venue_service.create_hall(db, user, venue_id, data)


@router.get("/halls/{hall_id}", response_model=HallOut)
def get_hall(hall_id: int, db: Session = Depends(get_db)):
    return venue_service.get_hall(db, hall_id)


@router.patch("/halls/{hall_id}", response_model=HallOut)
def update_hall(hall_id: int, data: HallUpdate, user: User = Depends(manager), db: Session = Depends(get_db)):
    return venue_service.update_hall(db, user, hall_id, data)


@router.delete("/halls/{hall_id}")
def delete_hall(hall_id: int, user: User = Depends(manager), db: Session = Depends(get_db)):
    venue_service.delete_hall(db, user, hall_id)
    return {"message": "Hall deleted successfully"}


# =====================================================================
# AVAILABILITY
# =====================================================================
@router.get("/halls/{hall_id}/booked-dates", response_model=HallCalendarOut)
def booked_dates(hall_id: int, db: Session = Depends(get_db)):
    venue_service.get_hall(db, hall_id)
    return availability.get_booked_dates(db, hall_id)


@router.get("/halls/{hall_id}/blocked-dates", response_model=list[BlockedDateOut])
def list_blocked_dates(hall_id: int, user: User = Depends(manager), db: Session = Depends(get_db)):
    hall = venue_service.get_hall(db, hall_id)
    venue_service.ensure_can_manage(user, hall.venue)
    return availability.list_blocked_dates(db, hall.id)


@router.post("/halls/{hall_id}/blocked-dates", response_model=BlockedDateOut,
             status_code=status.HTTP_201_CREATED)
def add_blocked_date(hall_id: int, data: BlockedDateCreate, user: User = Depends(manager),
                     db: Session = Depends(get_db)):
    hall = venue_service.get_hall(db, hall_id)
    venue_service.ensure_can_manage(user, hall.venue)
    return availability.add_blocked_date(db, hall, data.date, data.reason)


@router.delete("/halls/blocked-dates/{blocked_id}")
def remove_blocked_date(blocked_id: int, user: User = Depends(manager), db: Session = Depends(get_db)):
    blocked = availability.get_blocked_date(db, blocked_id)
    venue_service.ensure_can_manage(user, blocked.hall.venue)
    availability.remove_blocked_date(db, blocked)
    return {"message": "Date unblocked"}
