# stockmeta/api/v1/endpoints/health.py
from fastapi import APIRouter

from stockmeta.core.config import settings

router = APIRouter()


@router.get("/", summary="Health check")
async def health_root():
    return {
        "status": "ok",
        "vision_configured": bool(settings.OPENAI_API_KEY),
        "model": settings.OPENAI_MODEL,
    }
