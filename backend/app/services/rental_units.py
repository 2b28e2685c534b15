"""
Rental unit view model.

Joins a host's properties, sub-units, tenants and rent payments into one list
of rentable units, then projects that list into:
- unit statistics for the units page
- property filter options
- per-property summaries and portfolio totals for the rental overview

Everything here is pure and synchronous. Rows are expected to be pre-scoped to
one host and pre-ordered by the data source (properties by title, payments by
payment month descending); nothing is re-sorted.
"""

from typing import Iterable, Optional, Sequence

from app.models.enums import (
    PaymentStatus,
    PricePeriod,
    PropertyUnitStatus,
    RentPaymentStatus,
    TenantStatus,
    UnitOccupancy,
)
from app.schemas.rental import (
    ALL_PROPERTIES_ID,
    ALL_PROPERTIES_NAME,
    PortfolioStats,
    PropertyOption,
    PropertyRow,
    PropertyUnitRow,
    RentalPropertySummary,
    RentalUnit,
    RentPaymentRow,
    TenantRow,
    TenantSummary,
    UnitStats,
)

DEFAULT_PROPERTY_TYPE = "Apartment"
DEFAULT_PRICE_PERIOD = PricePeriod.PER_MONTH.value
DEFAULT_SUB_UNIT_TYPE = "room"
SINGLE_UNIT_TYPE = "property"
UNKNOWN_TENANT_NAME = "Unknown Tenant"
ACTIVE_SUB_UNIT_STATUS = PropertyUnitStatus.ACTIVE.value


def _amount(value: Optional[float]) -> float:
    """Rent amount with missing and negative values treated as zero."""
    if not value or value < 0:
        return 0.0
    return float(value)


def find_active_tenant(tenants: Iterable[TenantRow], property_id: str) -> Optional[TenantRow]:
    """First active tenant of a property."""
    for tenant in tenants:
        if tenant.property_id == property_id and tenant.status == TenantStatus.ACTIVE.value:
            return tenant
    return None


def find_latest_payment(payments: Iterable[RentPaymentRow], tenant_id: str) -> Optional[RentPaymentRow]:
    """First payment of a tenant; payments arrive newest month first."""
    for payment in payments:
        if payment.tenant_id == tenant_id:
            return payment
    return None


def resolve_payment_status(payment: Optional[RentPaymentRow]) -> PaymentStatus:
    """Classify a tenant by their latest payment row.

    A tenant with no payment rows yet counts as paid.
    """
    if payment is None:
        return PaymentStatus.PAID
    if payment.status == RentPaymentStatus.LATE.value:
        return PaymentStatus.OVERDUE
    if payment.status == RentPaymentStatus.PENDING.value:
        return PaymentStatus.PENDING
    return PaymentStatus.PAID


def _tenant_summary(
    tenant: TenantRow, payments: Sequence[RentPaymentRow]
) -> TenantSummary:
    profile = tenant.user
    return TenantSummary(
        id=tenant.id,
        name=(profile.name if profile else None) or UNKNOWN_TENANT_NAME,
        phone=(profile.phone if profile else None) or None,
        avatar_url=(profile.avatar_url if profile else None) or None,
        lease_start=tenant.lease_start_date,
        lease_end=tenant.lease_end_date,
        payment_status=resolve_payment_status(find_latest_payment(payments, tenant.id)),
    )


def _sub_unit_to_rental_unit(
    prop: PropertyRow,
    unit: PropertyUnitRow,
    tenant: Optional[TenantRow],
    payments: Sequence[RentPaymentRow],
) -> RentalUnit:
    # Tenants are linked to the parent property, not to a specific sub-unit.
    # Every occupied room of the property therefore shows the same tenant.
    occupied = not unit.is_available
    return RentalUnit(
        id=unit.id,
        name=unit.unit_name,
        unit_number=unit.unit_number or None,
        property_id=prop.id,
        property_title=prop.title,
        property_type=prop.property_type or DEFAULT_PROPERTY_TYPE,
        unit_type=unit.unit_type or DEFAULT_SUB_UNIT_TYPE,
        location=prop.location,
        rent=_amount(unit.price),
        price_period=unit.price_period or DEFAULT_PRICE_PERIOD,
        status=UnitOccupancy.RENTED if occupied else UnitOccupancy.VACANT,
        is_multi_unit=True,
        tenant=_tenant_summary(tenant, payments) if occupied and tenant else None,
        bedrooms=unit.bedrooms or 1,
        bathrooms=unit.bathrooms or 1,
        floor_number=unit.floor_number or None,
        image=(unit.images[0] if unit.images else None) or (prop.images[0] if prop.images else None),
    )


def _property_to_rental_unit(
    prop: PropertyRow,
    tenant: Optional[TenantRow],
    payments: Sequence[RentPaymentRow],
) -> RentalUnit:
    return RentalUnit(
        id=prop.id,
        name=prop.title,
        property_id=prop.id,
        property_title=prop.title,
        property_type=prop.property_type or DEFAULT_PROPERTY_TYPE,
        unit_type=SINGLE_UNIT_TYPE,
        location=prop.location,
        rent=_amount(prop.price),
        price_period=prop.price_period or DEFAULT_PRICE_PERIOD,
        status=UnitOccupancy.RENTED if tenant else UnitOccupancy.VACANT,
        is_multi_unit=False,
        tenant=_tenant_summary(tenant, payments) if tenant else None,
        bedrooms=prop.bedrooms or 0,
        bathrooms=prop.bathrooms or 1,
        image=prop.images[0] if prop.images else None,
    )


def build_rental_units(
    properties: Sequence[PropertyRow],
    property_units: Sequence[PropertyUnitRow],
    tenants: Sequence[TenantRow],
    payments: Sequence[RentPaymentRow],
) -> list[RentalUnit]:
    """Build the rentable unit list for a host.

    Single-unit properties, and multi-unit properties without any active
    sub-unit rows, become one unit each. Multi-unit properties with active
    sub-units become one unit per sub-unit.

    Args:
        properties: Host's properties in display order
        property_units: Sub-unit rows for those properties
        tenants: Tenant rows for those properties (profile joined as ``user``)
        payments: Rent payments for those tenants, newest month first

    Returns:
        Units in property order, then sub-unit order within a property
    """
    units_by_property: dict[str, list[PropertyUnitRow]] = {}
    for unit in property_units:
        if unit.status != ACTIVE_SUB_UNIT_STATUS:
            continue
        units_by_property.setdefault(unit.property_id, []).append(unit)

    result: list[RentalUnit] = []
    for prop in properties:
        tenant = find_active_tenant(tenants, prop.id)
        sub_units = units_by_property.get(prop.id, [])

        if prop.is_multi_unit and sub_units:
            for unit in sub_units:
                result.append(_sub_unit_to_rental_unit(prop, unit, tenant, payments))
        else:
            result.append(_property_to_rental_unit(prop, tenant, payments))

    return result


def compute_unit_stats(units: Iterable[RentalUnit]) -> UnitStats:
    """Reduce a unit list to its summary counts in a single pass."""
    total = 0
    rented = 0
    monthly_income = 0.0
    overdue = 0
    pending = 0

    for unit in units:
        total += 1
        if unit.status == UnitOccupancy.RENTED:
            rented += 1
            monthly_income += unit.rent
        if unit.tenant is not None:
            if unit.tenant.payment_status == PaymentStatus.OVERDUE:
                overdue += 1
            elif unit.tenant.payment_status == PaymentStatus.PENDING:
                pending += 1

    return UnitStats(
        total=total,
        rented=rented,
        vacant=total - rented,
        monthly_income=monthly_income,
        overdue_count=overdue,
        pending_count=pending,
    )


def all_properties_option() -> PropertyOption:
    return PropertyOption(id=ALL_PROPERTIES_ID, name=ALL_PROPERTIES_NAME)


def build_property_options(properties: Iterable[PropertyRow]) -> list[PropertyOption]:
    """The ``all`` option followed by one option per distinct property."""
    options = [all_properties_option()]
    seen: set[str] = set()
    for prop in properties:
        if prop.id in seen:
            continue
        seen.add(prop.id)
        options.append(PropertyOption(id=prop.id, name=prop.title))
    return options


def filter_units(
    units: Iterable[RentalUnit],
    property_id: Optional[str] = None,
    status: Optional[UnitOccupancy] = None,
) -> list[RentalUnit]:
    """Units matching a property option and/or an occupancy status."""
    result = []
    for unit in units:
        if property_id and property_id != ALL_PROPERTIES_ID and unit.property_id != property_id:
            continue
        if status is not None and unit.status != status:
            continue
        result.append(unit)
    return result


def _occupancy_rate(rented: int, total: int) -> float:
    return round(rented / total * 100, 1) if total else 0.0


def summarize_properties(units: Iterable[RentalUnit]) -> list[RentalPropertySummary]:
    """Group units by property into occupancy and income summaries."""
    grouped: dict[str, list[RentalUnit]] = {}
    for unit in units:
        grouped.setdefault(unit.property_id, []).append(unit)

    summaries = []
    for property_id, prop_units in grouped.items():
        first = prop_units[0]
        rented = [u for u in prop_units if u.status == UnitOccupancy.RENTED]
        tenants = [u.tenant for u in rented if u.tenant is not None]
        summaries.append(RentalPropertySummary(
            property_id=property_id,
            title=first.property_title,
            location=first.location,
            total_units=len(prop_units),
            rented_units=len(rented),
            vacant_units=len(prop_units) - len(rented),
            monthly_income=sum(u.rent for u in rented),
            potential_income=sum(u.rent for u in prop_units),
            occupancy_rate=_occupancy_rate(len(rented), len(prop_units)),
            has_overdue_payments=any(t.payment_status == PaymentStatus.OVERDUE for t in tenants),
            has_pending_payments=any(t.payment_status == PaymentStatus.PENDING for t in tenants),
        ))
    return summaries


def compute_portfolio_stats(units: Sequence[RentalUnit]) -> PortfolioStats:
    """Portfolio totals; counts agree with ``compute_unit_stats`` on the same units."""
    unit_stats = compute_unit_stats(units)
    summaries = summarize_properties(units)
    return PortfolioStats(
        total_properties=len(summaries),
        total_units=unit_stats.total,
        rented_units=unit_stats.rented,
        vacant_units=unit_stats.vacant,
        monthly_income=unit_stats.monthly_income,
        potential_income=sum(s.potential_income for s in summaries),
        overdue_payments=unit_stats.overdue_count,
        pending_payments=unit_stats.pending_count,
        occupancy_rate=_occupancy_rate(unit_stats.rented, unit_stats.total),
    )
