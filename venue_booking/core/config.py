"""
Application configuration, read from the environment (.env supported).
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/venue_booking.db")

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Redis (optional, caching is skipped when unset)
REDIS_URL = os.getenv("REDIS_URL")
BOOKED_DATES_CACHE_TTL = int(os.getenv("BOOKED_DATES_CACHE_TTL", "60"))

# Razorpay
RAZORPAY_KEY_ID = os.getenv("RAZORPAY_KEY_ID", "")
RAZORPAY_KEY_SECRET = os.getenv("RAZORPAY_KEY_SECRET", "")
PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "NGN")

# Logging
LOG_DIR = os.getenv("LOG_DIR", "logs")

# Booking expiry sweep
EXPIRY_LOOKAHEAD_HOURS = int(os.getenv("EXPIRY_LOOKAHEAD_HOURS", "6"))
PAYMENT_WINDOW_HOURS = int(os.getenv("PAYMENT_WINDOW_HOURS", "24"))


class Settings:
    PROJECT_NAME: str = "Venue Booking API"
    VERSION: str = "1.0.0"
    DATABASE_URL = DATABASE_URL
    JWT_SECRET = JWT_SECRET
    JWT_ALGORITHM = JWT_ALGORITHM
    ACCESS_TOKEN_EXPIRE_MINUTES = ACCESS_TOKEN_EXPIRE_MINUTES
    REDIS_URL = REDIS_URL
    BOOKED_DATES_CACHE_TTL = BOOKED_DATES_CACHE_TTL
    RAZORPAY_KEY_ID = RAZORPAY_KEY_ID
    RAZORPAY_KEY_SECRET = RAZORPAY_KEY_SECRET
    PAYMENT_CURRENCY = PAYMENT_CURRENCY
    LOG_DIR = LOG_DIR
    EXPIRY_LOOKAHEAD_HOURS = EXPIRY_LOOKAHEAD_HOURS
    PAYMENT_WINDOW_HOURS = PAYMENT_WINDOW_HOURS


settings = Settings()
