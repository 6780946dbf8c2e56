from fastapi import APIRouter

from iotlock.mock_api.routes import auth, devices, health, notifications, uploads, visits

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/api/auth", tags=["auth"])
api_router.include_router(visits.router, prefix="/api/visits", tags=["visits"])
api_router.include_router(devices.router, prefix="/api", tags=["devices"])
api_router.include_router(notifications.router, prefix="/api", tags=["notifications"])
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(uploads.images_router, tags=["uploads"])
