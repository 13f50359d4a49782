"""
API Router

Aggregates all API routes (mounted under /api).
"""
from fastapi import APIRouter
from pdc_pro.api import auth, inspections

# Create main API router
api_router = APIRouter()

# Include sub-routers
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Auth"]
)

api_router.include_router(
    inspections.router,
    prefix="/inspections",
    tags=["Inspections"]
)
