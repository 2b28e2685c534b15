"""
Rental fetch pipeline.

Stages:
1. Properties for the host
2. Sub-units and tenants for those properties, concurrently
3. Rent payments for those tenants

Any stage failure aborts the fetch; ``load_rental_dashboard`` is the boundary
that turns it into an empty dashboard carrying an error message.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from app.schemas.rental import (
    PortfolioStats,
    PropertyOption,
    PropertyRow,
    PropertyUnitRow,
    RentalDashboard,
    RentalPropertySummary,
    RentalUnit,
    RentPaymentRow,
    TenantRow,
    UnitStats,
)
from app.services.rental_data import RentalDataError, RentalDataSource
from app.services.rental_units import (
    build_property_options,
    build_rental_units,
    compute_portfolio_stats,
    compute_unit_stats,
    summarize_properties,
)

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch units"
NOT_AUTHENTICATED_MESSAGE = "User not authenticated"


@dataclass
class RentalSnapshot:
    """Raw rows for one host, fetched together."""

    properties: list[PropertyRow] = field(default_factory=list)
    property_units: list[PropertyUnitRow] = field(default_factory=list)
    tenants: list[TenantRow] = field(default_factory=list)
    payments: list[RentPaymentRow] = field(default_factory=list)


async def _join_all(*coros):
    """Run coroutines as tasks; if one fails, cancel and await the rest."""
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def fetch_rental_snapshot(source: RentalDataSource, host_id: str) -> RentalSnapshot:
    """Run the staged fetch for a host."""
    properties = await source.fetch_properties(host_id)
    if not properties:
        return RentalSnapshot()

    property_ids = [p.id for p in properties]
    property_units, tenants = await _join_all(
        source.fetch_property_units(property_ids),
        source.fetch_tenants(property_ids),
    )

    payments: list[RentPaymentRow] = []
    if tenants:
        payments = await source.fetch_payments([t.id for t in tenants])

    logger.debug(
        f"[RENTALS] host={host_id} properties={len(properties)} "
        f"sub_units={len(property_units)} tenants={len(tenants)} payments={len(payments)}"
    )
    return RentalSnapshot(
        properties=list(properties),
        property_units=list(property_units),
        tenants=list(tenants),
        payments=list(payments),
    )


def build_dashboard(snapshot: RentalSnapshot) -> RentalDashboard:
    units = build_rental_units(
        snapshot.properties,
        snapshot.property_units,
        snapshot.tenants,
        snapshot.payments,
    )
    return RentalDashboard(
        units=units,
        properties=build_property_options(snapshot.properties),
        stats=compute_unit_stats(units),
    )


async def load_rental_dashboard(source: RentalDataSource, host_id: str) -> RentalDashboard:
    """Fetch and build a host's dashboard, resetting to empty on failure."""
    try:
        snapshot = await fetch_rental_snapshot(source, host_id)
    except RentalDataError as e:
        logger.error(f"[RENTALS] Fetch failed for host {host_id} at {e.stage}: {e.message}")
        return RentalDashboard(error=e.message or FETCH_FAILED_MESSAGE)
    except Exception as e:
        logger.exception(f"[RENTALS] Unexpected fetch failure for host {host_id}: {e}")
        return RentalDashboard(error=FETCH_FAILED_MESSAGE)

    return build_dashboard(snapshot)


class HostRentalView:
    """Rental units state for one host, refreshed on demand.

    Each fetch replaces the previous state wholesale. Overlapping fetches are
    not fenced; whichever completes last wins.
    """

    def __init__(self, source: RentalDataSource):
        self.source = source
        self.host_id: Optional[str] = None
        self.loading = False
        self._dashboard = RentalDashboard()

    @property
    def units(self) -> list[RentalUnit]:
        return self._dashboard.units

    @property
    def properties(self) -> list[PropertyOption]:
        return self._dashboard.properties

    @property
    def stats(self) -> UnitStats:
        return self._dashboard.stats

    @property
    def error(self) -> Optional[str]:
        return self._dashboard.error

    @property
    def dashboard(self) -> RentalDashboard:
        return self._dashboard

    @property
    def property_summaries(self) -> list[RentalPropertySummary]:
        return summarize_properties(self._dashboard.units)

    @property
    def portfolio(self) -> PortfolioStats:
        return compute_portfolio_stats(self._dashboard.units)

    async def fetch(self, host_id: Optional[str]) -> RentalDashboard:
        """Load units for a host. Without a host the state resets to an error."""
        if not host_id:
            self._dashboard = RentalDashboard(error=NOT_AUTHENTICATED_MESSAGE)
            return self._dashboard

        self.host_id = host_id
        self.loading = True
        try:
            self._dashboard = await load_rental_dashboard(self.source, host_id)
        finally:
            self.loading = False
        return self._dashboard

    async def refresh(self) -> RentalDashboard:
        return await self.fetch(self.host_id)

    def get_unit_by_id(self, unit_id: str) -> Optional[RentalUnit]:
        for unit in self._dashboard.units:
            if unit.id == unit_id:
                return unit
        return None

