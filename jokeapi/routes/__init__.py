"""API routes."""

from fastapi import APIRouter

from jokeapi.routes import admin, jokes

api_router = APIRouter()

# Public joke endpoints
api_router.include_router(jokes.router, tags=["jokes"])

# Admin endpoints (cache management)
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
