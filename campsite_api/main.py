"""Camping Thailand: FastAPI application."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from campsite_api.config import get_settings
from campsite_api.database import Base, SessionLocal, engine
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from campsite_api.models import (  # noqa: F401
    Profile, Province, Campsite, CampsiteType, Amenity, CampsitePhoto, AccommodationType,
    NearbyAttraction, Review, ReviewPhoto, ReviewHelpful, ReviewReport, Booking, BookingAccommodation, Wishlist, Inquiry,
    OwnerRequest, AnalyticsEvent, ModerationLog, Notification,
)
from campsite_api.routers import (
    admin, auth, bookings, campsites, dashboard, inquiries, map, notifications, provinces, reviews, search, wishlist,
)
from campsite_api.seed import seed_reference_data

settings = get_settings()
log = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        details.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "details": details},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


app.include_router(auth.router)
app.include_router(provinces.router)
app.include_router(search.router)
app.include_router(map.router)
app.include_router(campsites.router)
app.include_router(reviews.router)
app.include_router(wishlist.router)
app.include_router(inquiries.router)
app.include_router(bookings.router)
app.include_router(dashboard.router)
app.include_router(admin.router)
app.include_router(notifications.router)

Path(settings.media_root).mkdir(parents=True, exist_ok=True)
app.mount(settings.media_url, StaticFiles(directory=settings.media_root), name="media")

_scheduler = None


@app.on_event("startup")
def startup():
    global _scheduler
    if settings.mailgun_api_key and settings.mailgun_domain:
        from_addr = settings.mailgun_from_email or ""
        from_domain = from_addr.split("@")[-1].lower() if "@" in from_addr else ""
        send_domain = (settings.mailgun_domain or "").strip().lower()
        if from_domain and send_domain and from_domain != send_domain:
            print(f"[Mailgun] WARNING: from={from_addr} does not match domain={settings.mailgun_domain}. Emails may not be delivered!")
            print(f"[Mailgun] Fix: in .env set MAILGUN_FROM_EMAIL=noreply@{settings.mailgun_domain} then restart")
        else:
            print(f"[Mailgun] App using domain={settings.mailgun_domain} from={from_addr or '(none)'}")
    else:
        print("[Mailgun] Not configured - emails will be skipped; set MAILGUN_API_KEY and MAILGUN_DOMAIN in .env and restart")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_reference_data(db)
    finally:
        db.close()

    if settings.scheduler_enabled:
        from apscheduler.schedulers.background import BackgroundScheduler
        from campsite_api.services.notification_cleanup import run_notification_cleanup_job

        _scheduler = BackgroundScheduler()
        _scheduler.add_job(run_notification_cleanup_job, "cron", hour=3, minute=0)
        _scheduler.start()
        log.info("Scheduler started: notification cleanup daily at 03:00.")


@app.on_event("shutdown")
def shutdown():
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)


@app.get("/")
def root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
