"""SQLAlchemy models for the rental tables owned by the managed backend."""

from app.models.user import Profile
from app.models.property import Property, PropertyUnit
from app.models.tenant import Tenant, RentPayment

__all__ = [
    "Profile",
    "Property",
    "PropertyUnit",
    "Tenant",
    "RentPayment",
]
