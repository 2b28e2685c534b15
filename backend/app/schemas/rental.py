"""Rental schemas: raw rows as fetched and the derived dashboard view model."""

from datetime import date
from typing import Optional

from pydantic import Field, field_validator

from app.schemas.base import BaseSchema, Identifier, ViewSchema
from app.models.enums import PaymentStatus, UnitOccupancy

ALL_PROPERTIES_ID = "all"
ALL_PROPERTIES_NAME = "All Properties"


# ---------------------------------------------------------------------------
# Raw rows
# ---------------------------------------------------------------------------


class PropertyRow(BaseSchema):
    """A property row owned by the requesting host."""

    id: Identifier
    host_id: Optional[Identifier] = None
    title: str = ""
    location: str = ""
    property_type: Optional[str] = None
    price: Optional[float] = None
    price_period: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    images: list[str] = Field(default_factory=list)
    is_multi_unit: bool = False
    status: str = "approved"

    @field_validator("images", mode="before")
    @classmethod
    def none_images_to_empty(cls, v):
        return v or []

    @field_validator("is_multi_unit", mode="before")
    @classmethod
    def none_flag_to_false(cls, v):
        return bool(v)


class PropertyUnitRow(BaseSchema):
    """A sub-unit row of a multi-unit property."""

    id: Identifier
    property_id: Identifier
    unit_name: str = ""
    unit_number: Optional[str] = None
    unit_type: Optional[str] = None
    floor_number: Optional[int] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    price: Optional[float] = None
    price_period: Optional[str] = None
    is_available: bool = True
    images: list[str] = Field(default_factory=list)
    status: str = "active"

    @field_validator("images", mode="before")
    @classmethod
    def none_images_to_empty(cls, v):
        return v or []

    @field_validator("is_available", mode="before")
    @classmethod
    def none_availability_to_available(cls, v):
        return True if v is None else v

    @field_validator("unit_number", mode="before")
    @classmethod
    def unit_number_as_text(cls, v):
        return None if v is None else str(v)


class TenantProfile(BaseSchema):
    """Profile fields joined onto a tenant row."""

    id: Optional[Identifier] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class TenantRow(BaseSchema):
    """A tenancy against one of the host's properties."""

    id: Identifier
    property_id: Identifier
    user_id: Optional[Identifier] = None
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    monthly_rent: Optional[float] = None
    status: str = "active"
    user: Optional[TenantProfile] = None


class RentPaymentRow(BaseSchema):
    """One month of rent for a tenant."""

    id: Identifier
    tenant_id: Identifier
    payment_month: Optional[date] = None
    status: str = "pending"
    amount_due: Optional[float] = None
    amount_paid: Optional[float] = None


# ---------------------------------------------------------------------------
# Derived view model
# ---------------------------------------------------------------------------


class TenantSummary(ViewSchema):
    """Tenant occupying a rental unit, with their derived payment status."""

    id: str
    name: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    lease_start: Optional[date] = None
    lease_end: Optional[date] = None
    payment_status: PaymentStatus = PaymentStatus.PAID


class RentalUnit(ViewSchema):
    """A rentable unit: a whole single-unit property or one sub-unit."""

    id: str
    name: str
    unit_number: Optional[str] = None
    property_id: str
    property_title: str
    property_type: str
    unit_type: str
    location: str
    rent: float = 0
    price_period: str
    status: UnitOccupancy
    is_multi_unit: bool
    tenant: Optional[TenantSummary] = None
    bedrooms: int = 0
    bathrooms: int = 0
    floor_number: Optional[int] = None
    image: Optional[str] = None


class UnitStats(ViewSchema):
    """Summary counts over a unit list."""

    total: int = 0
    rented: int = 0
    vacant: int = 0
    monthly_income: float = 0
    overdue_count: int = 0
    pending_count: int = 0


class PropertyOption(ViewSchema):
    """Drop-down option for filtering units by property."""

    id: str
    name: str


class RentalPropertySummary(ViewSchema):
    """Per-property occupancy and income, projected from the unit list."""

    property_id: str
    title: str
    location: str
    total_units: int
    rented_units: int
    vacant_units: int
    monthly_income: float
    potential_income: float
    occupancy_rate: float
    has_overdue_payments: bool
    has_pending_payments: bool


class PortfolioStats(ViewSchema):
    """Portfolio totals across all of a host's properties."""

    total_properties: int = 0
    total_units: int = 0
    rented_units: int = 0
    vacant_units: int = 0
    monthly_income: float = 0
    potential_income: float = 0
    overdue_payments: int = 0
    pending_payments: int = 0
    occupancy_rate: float = 0


class RentalDashboard(ViewSchema):
    """Everything the rental units page renders from one fetch."""

    units: list[RentalUnit] = Field(default_factory=list)
    properties: list[PropertyOption] = Field(
        default_factory=lambda: [PropertyOption(id=ALL_PROPERTIES_ID, name=ALL_PROPERTIES_NAME)]
    )
    stats: UnitStats = Field(default_factory=UnitStats)
    error: Optional[str] = None


# ---------------------------------------------------------------------------
# API responses
# ---------------------------------------------------------------------------


class RentalUnitsResponse(ViewSchema):
    """Unit list (optionally filtered) with full-list statistics."""

    units: list[RentalUnit]
    properties: list[PropertyOption]
    stats: UnitStats


class RentalPropertiesResponse(ViewSchema):
    """Per-property summaries with portfolio totals."""

    properties: list[RentalPropertySummary]
    stats: PortfolioStats
