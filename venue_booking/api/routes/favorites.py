from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from venue_booking.db.session import get_db
from venue_booking.core.dependencies import get_current_principal
from venue_booking.models.user import User
from venue_booking.schemas.venue import FavoriteOut, FavoriteToggleOut
from venue_booking.services import favorites

router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get("/", response_model=list[FavoriteOut])
def my_favorites(user: User = Depends(get_current_principal), db: Session = Depends(get_db)):
    return favorites.list_favorites(db, user)


# Saves the venue, or removes it when it is already saved
@router.post("/{venue_id}", response_model=FavoriteToggleOut)
def toggle_favorite(venue_id: int, user: User = Depends(get_current_principal), db: Session = Depends(get_db)):
    favorited = favorites.toggle_favorite(db, user, venue_id)
    return {"venue_id": venue_id, "favorited": favorited}
