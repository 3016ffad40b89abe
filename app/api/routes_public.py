"""
Public service routes
"""

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "storage": settings.STORAGE_BACKEND}
