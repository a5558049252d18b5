from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import venue_booking.db.base  # noqa: F401  (registers every model)
from venue_booking.api.routes import auth, venues, bookings, notifications
from venue_booking.api.routes import admin_panel, admin_analytics
from venue_booking.api.routes import favorites, reviews
from venue_booking.core.config import settings
from venue_booking.core.exceptions import BookingError

# ⭐ Import logging system
from venue_booking.core.logging_config import get_logger

logger = get_logger()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="API for venue booking: halls, booking lifecycle, payments, notifications and admin moderation"
)


# ⭐ Request Logging Middleware
@app.middleware("http")
async def log_requests(request, call_next):
    logger.info(f"REQUEST: {request.method} {request.url}")

    try:
        response = await call_next(request)
        logger.info(f"RESPONSE: {response.status_code} {request.url}")
        return response

    except Exception as e:
        logger.error(f"ERROR: {request.url} -> {str(e)}")
        raise e


# ⭐ Typed failures → stable JSON shape
@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    logger.info(f"REJECTED: {request.method} {request.url} -> {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = {
        ".".join(str(part) for part in err["loc"] if part != "body"): err["msg"]
        for err in exc.errors()
    }
    return JSONResponse(
        status_code=422,
        content={"kind": "validation_error", "detail": "Invalid request", "fields": fields},
    )


# ⭐ CORS (important for frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Can restrict later for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------- ROUTERS REGISTER ORDER MATTERS --------
app.include_router(auth.router)
app.include_router(venues.router)
app.include_router(bookings.router)
app.include_router(notifications.router)
app.include_router(favorites.router)
app.include_router(reviews.router)
app.include_router(admin_panel.router)
app.include_router(admin_analytics.router)


@app.get("/", tags=["Root"])
def root():
    return {"message": "Backend running successfully"}
