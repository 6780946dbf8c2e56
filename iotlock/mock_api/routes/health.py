from fastapi import APIRouter, Depends

from iotlock.core.config import Settings
from iotlock.mock_api.deps import get_settings_dep

router = APIRouter()


@router.get("/health")
def health(settings: Settings = Depends(get_settings_dep)):
    return {
        "status": "ok",
        "apiKeyRequired": bool(settings.API_KEY),
        "environment": settings.ENVIRONMENT,
    }
