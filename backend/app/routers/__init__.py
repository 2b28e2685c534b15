"""API Routers for Nyumba Rentals."""

from app.routers.rentals import router as rentals_router

__all__ = [
    "rentals_router",
]
