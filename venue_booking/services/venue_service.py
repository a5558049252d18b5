from venue_booking.core.exceptions import NotFound, Unauthorized, ValidationError
from venue_booking.core.logging_config import get_logger
from venue_booking.models.enums import NotificationType, UserRole
from venue_booking.models.hall import Hall
from venue_booking.models.user import User
from venue_booking.models.venue import VENUE_ACTIVE, Venue
from venue_booking.services.notifications import dispatch, enqueue_notification

logger = get_logger()


def ensure_can_manage(actor, venue):
    if actor.role == UserRole.ADMIN:
        return
    if venue.owner_user_id != actor.id:
        raise Unauthorized("You do not own this venue")


def ensure_approved(actor):
    if actor.role == UserRole.VENUE_HOLDER and not actor.approved:
        raise Unauthorized("Your account is pending admin approval. You cannot list venues yet.")


def validate_hall_terms(capacity, price, deposit_percentage, balance_due_days):
    errors = {}
    if capacity is not None and capacity < 1:
        errors["capacity"] = "must be >= 1"
    if price is not None and price < 0:
        errors["price"] = "must be >= 0"
    if deposit_percentage is not None and not 1 <= deposit_percentage <= 100:
        errors["deposit_percentage"] = "must be between 1 and 100"
    if balance_due_days is not None and balance_due_days < 0:
        errors["balance_due_days"] = "must be >= 0"

    if errors:
        raise ValidationError("Invalid hall configuration", fields=errors)


# =====================================================================
# VENUES
# =====================================================================
def create_venue(db, actor, data) -> Venue:
    if actor.role == UserRole.VENUE_HOLDER:
        ensure_approved(actor)
        owner_id = actor.id
        created_by_admin = False
    elif actor.role == UserRole.ADMIN:
        owner = db.query(User).filter(User.id == data.owner_user_id).first() if data.owner_user_id else None
        if not owner or owner.role != UserRole.VENUE_HOLDER:
            raise ValidationError(
                "Admins must create venues on behalf of an existing venue holder",
                fields={"owner_user_id": "must reference a venue_holder"},
            )
        owner_id = owner.id
        created_by_admin = True
    else:
        raise Unauthorized("Only venue holders and admins can create venues")

    venue = Venue(
        owner_user_id=owner_id,
        created_by_admin=created_by_admin,
        title=data.title,
        description=data.description,
        address=data.address,
        city=data.city,
        state=data.state,
        type=data.type,
    )
    db.add(venue)
    db.commit()
    db.refresh(venue)

    log = logger.bind(log_type="admin") if created_by_admin else logger
    log.info(f"Venue Created | Id={venue.id} | Owner={owner_id} | By={actor.email}")
    return venue


def get_venue(db, venue_id: int, active_only: bool = True) -> Venue:
    query = db.query(Venue).filter(Venue.id == venue_id)
    if active_only:
        query = query.filter(Venue.status == VENUE_ACTIVE)
    venue = query.first()
    if not venue:
        raise NotFound("Venue not found")
    return venue


def list_venues(db, city: str | None = None, featured: bool = False):
    query = db.query(Venue).filter(Venue.status == VENUE_ACTIVE)
    if city:
        query = query.filter(Venue.city.ilike(city))
    if featured:
        query = query.filter(Venue.featured == True)  # noqa: E712
    return query.order_by(Venue.featured.desc(), Venue.id).all()


def list_all_venues(db):
    return db.query(Venue).order_by(Venue.id).all()


def moderate_venue(db, admin, venue_id: int, changes: dict) -> Venue:
    """Apply an admin's verified / featured / status change to a venue."""
    venue = get_venue(db, venue_id, active_only=False)
    newly_verified = changes.get("verified") and not venue.verified

    for field, value in changes.items():
        setattr(venue, field, value)

    notification = None
    if newly_verified:
        notification = enqueue_notification(
            db,
            venue.owner_user_id,
            NotificationType.VENUE_VERIFIED,
            "Venue Verified",
            f"{venue.title} has been verified by our team.",
            link_url=f"/venue/{venue.id}",
        )
    db.commit()
    db.refresh(venue)

    logger.bind(log_type="admin").info(
        f"Venue Moderated | Admin={admin.email} | Venue={venue.id} | {changes}"
    )
    dispatch([notification])
    return venue


# =====================================================================
# HALLS
# =====================================================================
def get_hall(db, hall_id: int) -> Hall:
    hall = db.query(Hall).filter(Hall.id == hall_id, Hall.deleted == False).first()  # noqa: E712
    if not hall:
        raise NotFound("Hall not found")
    return hall


def list_halls(db, venue_id: int):
    return db.query(Hall).filter(
        Hall.venue_id == venue_id,
        Hall.deleted == False  # noqa: E712
    ).order_by(Hall.id).all()


def create_hall(db, actor, venue_id: int, data) -> Hall:
    venue = get_venue(db, venue_id, active_only=False)
    ensure_can_manage(actor, venue)
    ensure_approved(actor)
    validate_hall_terms(data.capacity, data.price, data.deposit_percentage, data.balance_due_days)

    hall = Hall(
        venue_id=venue.id,
        name=data.name,
        description=data.description,
        capacity=data.capacity,
        price=data.price,
        deposit_percentage=data.deposit_percentage,
        balance_due_days=data.balance_due_days,
    )
    db.add(hall)
    db.commit()
    db.refresh(hall)

    logger.info(f"Hall Created | Id={hall.id} | Venue={venue.id} | By={actor.email}")
    return hall


def update_hall(db, actor, hall_id: int, data) -> Hall:
    hall = get_hall(db, hall_id)
    ensure_can_manage(actor, hall.venue)

    changes = data.model_dump(exclude_unset=True)
    validate_hall_terms(
        changes.get("capacity"),
        changes.get("price"),
        changes.get("deposit_percentage"),
        changes.get("balance_due_days"),
    )

    # Terms apply to new bookings; existing amounts are fixed at request time
    for field, value in changes.items():
        setattr(hall, field, value)

    db.commit()
    db.refresh(hall)

    logger.info(f"Hall Updated | Id={hall.id} | Fields={sorted(changes)} | By={actor.email}")
    return hall


def delete_hall(db, actor, hall_id: int):
    hall = get_hall(db, hall_id)
    ensure_can_manage(actor, hall.venue)

    hall.deleted = True
    db.commit()
    logger.info(f"Hall Deleted | Id={hall.id} | By={actor.email}")
