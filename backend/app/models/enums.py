"""Enumeration types for the rental domain model."""

from enum import Enum


class ApprovalStatus(str, Enum):
    """Admin approval status of a listed property."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PricePeriod(str, Enum):
    """Billing period of a listed price."""
    PER_NIGHT = "per_night"
    PER_WEEK = "per_week"
    PER_MONTH = "per_month"
    PER_YEAR = "per_year"


class PropertyUnitStatus(str, Enum):
    """Lifecycle status of a sub-unit row."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class TenantStatus(str, Enum):
    """Status of a tenancy."""
    ACTIVE = "active"
    ENDED = "ended"
    EVICTED = "evicted"


class RentPaymentStatus(str, Enum):
    """Status of a monthly rent payment row."""
    PENDING = "pending"
    PAID = "paid"
    PARTIAL = "partial"
    LATE = "late"
    WAIVED = "waived"


class UnitOccupancy(str, Enum):
    """Derived occupancy of a rental unit."""
    RENTED = "rented"
    VACANT = "vacant"


class PaymentStatus(str, Enum):
    """Derived payment classification of a tenant's latest rent payment."""
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"
