"""Pydantic schemas for Nyumba Rentals API."""

from app.schemas.rental import *
