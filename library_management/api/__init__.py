"""API routes."""
from fastapi import APIRouter

from library_management.api.books import router as books_router
from library_management.api.libraries import router as libraries_router
from library_management.api.loans import router as loans_router
from library_management.api.members import router as members_router

# Create main API router
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(libraries_router)
api_router.include_router(books_router)
api_router.include_router(members_router)
api_router.include_router(loans_router)

__all__ = ["api_router"]
