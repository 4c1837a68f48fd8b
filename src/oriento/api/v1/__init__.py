from fastapi import APIRouter

from .oriento import router as oriento_router

api_router = APIRouter()
api_router.include_router(oriento_router, prefix="/oriento", tags=["oriento"])

__all__ = ["api_router"]
