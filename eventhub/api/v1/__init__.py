"""API v1 router initialization."""

from fastapi import APIRouter

from eventhub.api.v1.activities import router as activities_router
from eventhub.api.v1.auth import router as auth_router
from eventhub.api.v1.companies import router as companies_router
from eventhub.api.v1.events import router as events_router
from eventhub.api.v1.users import router as users_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["Auth"])
router.include_router(users_router, prefix="/users", tags=["Users"])
router.include_router(companies_router, prefix="/companies", tags=["Companies"])
router.include_router(events_router, prefix="/events", tags=["Events"])
router.include_router(activities_router, prefix="/activities", tags=["Activities"])
