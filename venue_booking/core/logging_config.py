from loguru import logger
import os

from venue_booking.core.config import LOG_DIR

# Create folder if missing
if not os.path.exists(LOG_DIR):
    os.makedirs(LOG_DIR)

# Remove default handler
logger.remove()

LOG_FORMAT = "{time} | {level} | {message}"


def _channel(name: str):
    return lambda record: record["extra"].get("log_type") == name


# General application log
logger.add(
    f"{LOG_DIR}/app.log",
    rotation="1 week",
    retention="4 weeks",
    level="INFO",
    enqueue=True,
    format=LOG_FORMAT
)

# Booking lifecycle logs
logger.add(
    f"{LOG_DIR}/bookings.log",
    rotation="1 week",
    retention="4 weeks",
    level="INFO",
    enqueue=True,
    filter=_channel("booking"),
    format=LOG_FORMAT
)

# Payment logs
logger.add(
    f"{LOG_DIR}/payments.log",
    rotation="1 week",
    retention="4 weeks",
    level="INFO",
    enqueue=True,
    filter=_channel("payment"),
    format=LOG_FORMAT
)

# Admin activity and override logs
logger.add(
    f"{LOG_DIR}/admin.log",
    rotation="1 week",
    retention="4 weeks",
    level="INFO",
    enqueue=True,
    filter=_channel("admin"),
    format=LOG_FORMAT
)

# Expiry sweep logs
logger.add(
    f"{LOG_DIR}/expiry.log",
    rotation="1 week",
    retention="4 weeks",
    level="INFO",
    enqueue=True,
    filter=_channel("expiry"),
    format=LOG_FORMAT
)

# Error logs
logger.add(
    f"{LOG_DIR}/errors.log",
    rotation="1 week",
    retention="8 weeks",
    level="ERROR",
    enqueue=True,
)


def get_logger():
    return logger
