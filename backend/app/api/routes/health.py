"""Health check routes"""

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root():
    return {"message": "Welcome to the GEO Visibility Analyzer", "status": "running"}


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "GEO Visibility Analyzer",
        "version": "1.0.0"
    }
