"""
Main application entry point - FastAPI app instance and configuration.
Run with: uvicorn app.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import configure_logging
from app.routers import auth, users, events, calendar, members, family_calendars, meal_plans
from app.routers import google_auth

configure_logging(settings.LOG_LEVEL)

# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
app = FastAPI(
    title=settings.APP_NAME,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
# The wall display and the phone app are served from other origins.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# auth.router: /auth/register, /auth/login
# users.router: /users/me
# events.router: /events CRUD (local events, mirrored to Google)
# calendar.router: /calendar merged events + week/day layouts
# members.router: /members CRUD
# family_calendars.router: /family-calendars CRUD
# meal_plans.router: /meal-plans CRUD
# google_auth.router: /auth/google OAuth + calendar selection
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(events.router)
app.include_router(calendar.router)
app.include_router(members.router)
app.include_router(family_calendars.router)
app.include_router(meal_plans.router)
app.include_router(google_auth.router)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
@app.get("/health", tags=["health"])
def health_check():
    """
    Liveness probe. Does not touch the database or any feed.

    Returns:
        {"status": "ok"}
    """
    return {"status": "ok"}
