"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from school_results.api.v1.endpoints import health, results

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(results.router, prefix="", tags=["Results"])
