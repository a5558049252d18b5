from venue_booking.core.logging_config import get_logger
from venue_booking.models.favorite import Favorite
from venue_booking.models.venue import VENUE_ACTIVE, Venue
from venue_booking.services.venue_service import get_venue

logger = get_logger()


def list_favorites(db, user):
    # suspended venues stay saved but are hidden until reinstated
    return db.query(Favorite).join(Venue, Favorite.venue_id == Venue.id).filter(
        Favorite.user_id == user.id,
        Venue.status == VENUE_ACTIVE,
    ).order_by(Favorite.created_at.desc(), Favorite.id.desc()).all()


def toggle_favorite(db, user, venue_id: int) -> bool:
    """Save the venue for ``user``, or unsave it if already saved. Returns the new state."""
    venue = get_venue(db, venue_id)

    favorite = db.query(Favorite).filter(
        Favorite.user_id == user.id,
        Favorite.venue_id == venue.id,
    ).first()

    if favorite:
        db.delete(favorite)
        db.commit()
        logger.info(f"Favorite Removed | User={user.id} | Venue={venue.id}")
        return False

    db.add(Favorite(user_id=user.id, venue_id=venue.id))
    db.commit()
    logger.info(f"Favorite Added | User={user.id} | Venue={venue.id}")
    return True
