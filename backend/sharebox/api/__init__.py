"""API router aggregator."""
from fastapi import APIRouter

from sharebox.api.routes import admin, auth, files

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(files.router)
api_router.include_router(admin.router)

__all__ = ["api_router"]
