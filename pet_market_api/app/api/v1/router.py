"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When new domains are introduced, update this file to include their
routers.
"""

from fastapi import APIRouter

from .endpoints import (
    admin,
    auth,
    conversations,
    health,
    messages,
    pets,
)

router = APIRouter()

# ``health`` defines its own ``/health`` and ``/seed`` paths.
router.include_router(health.router, tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(pets.router, prefix="/pets", tags=["pets"])
router.include_router(messages.router, prefix="/messages", tags=["messages"])
router.include_router(conversations.router, prefix="/conversations", tags=["messages"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
