"""Row factories and an in-memory rental data source for tests."""

import asyncio
from datetime import date
from typing import Optional, Sequence

from app.schemas.rental import PropertyRow, PropertyUnitRow, RentPaymentRow, TenantProfile, TenantRow
from app.services.rental_data import RentalDataError

HOST_ID = "host-1"


def make_property(id: str, title: str, **fields) -> PropertyRow:
    data = {
        "id": id,
        "host_id": HOST_ID,
        "title": title,
        "location": "Dar es Salaam",
        "property_type": "Apartment",
        "price": 0,
        "price_period": "per_month",
        "is_multi_unit": False,
        "status": "approved",
    }
    data.update(fields)
    return PropertyRow(**data)


def make_sub_unit(id: str, property_id: str, **fields) -> PropertyUnitRow:
    data = {
        "id": id,
        "property_id": property_id,
        "unit_name": f"Room {id}",
        "is_available": True,
        "status": "active",
    }
    data.update(fields)
    return PropertyUnitRow(**data)


def make_tenant(
    id: str,
    property_id: str,
    name: Optional[str] = "Asha Mwakyusa",
    **fields,
) -> TenantRow:
    data = {
        "id": id,
        "property_id": property_id,
        "user_id": f"user-{id}",
        "lease_start_date": date(2026, 1, 1),
        "lease_end_date": date(2026, 12, 31),
        "monthly_rent": 0,
        "status": "active",
        "user": TenantProfile(id=f"user-{id}", name=name, phone="+255700000001"),
    }
    data.update(fields)
    return TenantRow(**data)


def make_payment(id: str, tenant_id: str, status: str, payment_month: date = date(2026, 10, 1)) -> RentPaymentRow:
    return RentPaymentRow(id=id, tenant_id=tenant_id, status=status, payment_month=payment_month)


class FakeRentalDataSource:
    """In-memory rental data source that behaves like the real queries.

    Records the order of stage calls and how many were in flight at once.
    """

    def __init__(
        self,
        properties: Sequence[PropertyRow] = (),
        property_units: Sequence[PropertyUnitRow] = (),
        tenants: Sequence[TenantRow] = (),
        payments: Sequence[RentPaymentRow] = (),
        fail_stage: Optional[str] = None,
        delay: float = 0,
    ):
        self.properties = list(properties)
        self.property_units = list(property_units)
        self.tenants = list(tenants)
        self.payments = list(payments)
        self.fail_stage = fail_stage
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _enter(self, stage: str) -> None:
        self.calls.append(stage)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if self.fail_stage == stage:
                raise RentalDataError(stage, f"{stage} unavailable")
        finally:
            self.in_flight -= 1

    async def fetch_properties(self, host_id: str) -> list[PropertyRow]:
        await self._enter("properties")
        return [p for p in self.properties if p.host_id == host_id and p.status == "approved"]

    async def fetch_property_units(self, property_ids: Sequence[str]) -> list[PropertyUnitRow]:
        await self._enter("property_units")
        return [u for u in self.property_units if u.property_id in property_ids and u.status == "active"]

    async def fetch_tenants(self, property_ids: Sequence[str]) -> list[TenantRow]:
        await self._enter("tenants")
        return [t for t in self.tenants if t.property_id in property_ids]

    async def fetch_payments(self, tenant_ids: Sequence[str]) -> list[RentPaymentRow]:
        await self._enter("rent_payments")
        rows = [p for p in self.payments if p.tenant_id in tenant_ids]
        return sorted(rows, key=lambda p: p.payment_month or date.min, reverse=True)


def seeded_source(**kwargs) -> FakeRentalDataSource:
    """A host with one let house and a hostel with one of three rooms let."""
    return FakeRentalDataSource(
        properties=[
            make_property("p-beach", "Beach House", price=500000),
            make_property("p-city", "City Hostel", is_multi_unit=True, property_type="Hostel"),
        ],
        property_units=[
            make_sub_unit("u-a", "p-city", unit_name="Room A", price=100000, is_available=False),
            make_sub_unit("u-b", "p-city", unit_name="Room B", price=80000),
            make_sub_unit("u-c", "p-city", unit_name="Room C", price=80000),
        ],
        tenants=[
            make_tenant("t-beach", "p-beach", name="Asha Mwakyusa", monthly_rent=500000),
            make_tenant("t-city", "p-city", name="Juma Ali", monthly_rent=100000),
        ],
        payments=[
            make_payment("pay-1", "t-beach", "pending"),
            make_payment("pay-2", "t-city", "late"),
            make_payment("pay-3", "t-city", "paid", payment_month=date(2026, 9, 1)),
        ],
        **kwargs,
    )
