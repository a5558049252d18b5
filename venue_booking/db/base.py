# Import every model so relationships resolve and metadata is complete
from venue_booking.db.session import Base  # noqa: F401
from venue_booking.models.user import User  # noqa: F401
from venue_booking.models.venue import Venue  # noqa: F401
from venue_booking.models.hall import Hall  # noqa: F401
from venue_booking.models.hall_blocked_date import HallBlockedDate  # noqa: F401
from venue_booking.models.booking import Booking  # noqa: F401
from venue_booking.models.notification import Notification  # noqa: F401
from venue_booking.models.message import Message  # noqa: F401
from venue_booking.models.favorite import Favorite  # noqa: F401
from venue_booking.models.review import Review  # noqa: F401
