"""
Rental data sources.

The rental pipeline talks to the managed backend only through the
``RentalDataSource`` interface. Two implementations exist:

- ``SQLRentalDataSource``: direct Postgres access through async SQLAlchemy
- ``SupabaseRentalDataSource``: the Supabase REST (PostgREST) API over httpx,
  authenticated as the calling user so row-level security applies

Both translate backend failures into ``RentalDataError``.
"""

import logging
import uuid
from typing import AsyncGenerator, Optional, Protocol, Sequence, TypeVar

import httpx
from fastapi import Depends
from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

from app.core.config import DataSourceKind, get_settings
from app.core.security import AuthenticatedUser, get_current_host
from app.models.enums import ApprovalStatus, PropertyUnitStatus
from app.models.property import Property, PropertyUnit
from app.models.tenant import RentPayment, Tenant
from app.schemas.rental import PropertyRow, PropertyUnitRow, RentPaymentRow, TenantRow

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=BaseModel)

TENANT_PROFILE_EMBED = "user:profiles!tenants_user_id_fkey(id,name,phone,avatar_url)"


class RentalDataError(Exception):
    """A query against the managed backend failed."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        self.message = message
        super().__init__(f"{stage}: {message}")


class RentalDataSource(Protocol):
    """Query operations the rental pipeline needs from the backend."""

    async def fetch_properties(self, host_id: str) -> list[PropertyRow]:
        """Approved properties owned by the host, ordered by title."""
        ...

    async def fetch_property_units(self, property_ids: Sequence[str]) -> list[PropertyUnitRow]:
        """Active sub-units of the given properties."""
        ...

    async def fetch_tenants(self, property_ids: Sequence[str]) -> list[TenantRow]:
        """Tenants of the given properties with their profile joined."""
        ...

    async def fetch_payments(self, tenant_ids: Sequence[str]) -> list[RentPaymentRow]:
        """Rent payments of the given tenants, newest payment month first."""
        ...


def _as_uuids(stage: str, ids: Sequence[str]) -> list[uuid.UUID]:
    try:
        return [uuid.UUID(str(value)) for value in ids]
    except ValueError as e:
        raise RentalDataError(stage, f"Invalid identifier: {e}") from e


class SQLRentalDataSource:
    """Rental queries against Postgres through async SQLAlchemy.

    Each query runs in its own session so independent stages can be awaited
    concurrently without sharing an ``AsyncSession``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _fetch(
        self,
        stage: str,
        statement: Select,
        schema: type[RowT],
    ) -> list[RowT]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                return [schema.model_validate(obj) for obj in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"[RENTALS] {stage} query failed: {e}")
            raise RentalDataError(stage, "Database query failed") from e
        except ValidationError as e:
            logger.error(f"[RENTALS] {stage} rows did not validate: {e}")
            raise RentalDataError(stage, "Unexpected row shape") from e

    async def fetch_properties(self, host_id: str) -> list[PropertyRow]:
        (host_uuid,) = _as_uuids("properties", [host_id])
        statement = (
            select(Property)
            .where(
                Property.host_id == host_uuid,
                Property.status == ApprovalStatus.APPROVED.value,
            )
            .order_by(Property.title.asc())
        )
        return await self._fetch("properties", statement, PropertyRow)

    async def fetch_property_units(self, property_ids: Sequence[str]) -> list[PropertyUnitRow]:
        if not property_ids:
            return []
        statement = select(PropertyUnit).where(
            PropertyUnit.property_id.in_(_as_uuids("property_units", property_ids)),
            PropertyUnit.status == PropertyUnitStatus.ACTIVE.value,
        )
        return await self._fetch("property_units", statement, PropertyUnitRow)

    async def fetch_tenants(self, property_ids: Sequence[str]) -> list[TenantRow]:
        if not property_ids:
            return []
        statement = (
            select(Tenant)
            .options(selectinload(Tenant.user))
            .where(Tenant.property_id.in_(_as_uuids("tenants", property_ids)))
        )
        return await self._fetch("tenants", statement, TenantRow)

    async def fetch_payments(self, tenant_ids: Sequence[str]) -> list[RentPaymentRow]:
        if not tenant_ids:
            return []
        statement = (
            select(RentPayment)
            .where(RentPayment.tenant_id.in_(_as_uuids("rent_payments", tenant_ids)))
            .order_by(RentPayment.payment_month.desc())
        )
        return await self._fetch("rent_payments", statement, RentPaymentRow)


def _in_filter(values: Sequence[str]) -> str:
    return "in.(" + ",".join(str(v) for v in values) + ")"


class SupabaseRentalDataSource:
    """Rental queries against the Supabase REST API."""

    def __init__(
        self,
        rest_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=rest_url,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {access_token or api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _fetch(
        self,
        stage: str,
        table: str,
        params: dict[str, str],
        schema: type[RowT],
    ) -> list[RowT]:
        try:
            response = await self.client.get(f"/{table}", params=params)
            response.raise_for_status()
            rows = response.json()
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.warning(f"[RENTALS] {stage} request failed: {e.response.status_code} {message}")
            raise RentalDataError(stage, message) from e
        except httpx.HTTPError as e:
            logger.error(f"[RENTALS] {stage} request error: {e}")
            raise RentalDataError(stage, "Could not reach the rental data service") from e
        except ValueError as e:
            raise RentalDataError(stage, "Malformed response from the rental data service") from e

        try:
            return [schema.model_validate(row) for row in rows or []]
        except ValidationError as e:
            logger.error(f"[RENTALS] {stage} rows did not validate: {e}")
            raise RentalDataError(stage, "Unexpected row shape") from e

    async def fetch_properties(self, host_id: str) -> list[PropertyRow]:
        params = {
            "select": "*",
            "host_id": f"eq.{host_id}",
            "status": f"eq.{ApprovalStatus.APPROVED.value}",
            "order": "title.asc",
        }
        return await self._fetch("properties", "properties", params, PropertyRow)

    async def fetch_property_units(self, property_ids: Sequence[str]) -> list[PropertyUnitRow]:
        if not property_ids:
            return []
        params = {
            "select": "*",
            "property_id": _in_filter(property_ids),
            "status": f"eq.{PropertyUnitStatus.ACTIVE.value}",
        }
        return await self._fetch("property_units", "property_units", params, PropertyUnitRow)

    async def fetch_tenants(self, property_ids: Sequence[str]) -> list[TenantRow]:
        if not property_ids:
            return []
        params = {
            "select": f"*,{TENANT_PROFILE_EMBED}",
            "property_id": _in_filter(property_ids),
        }
        return await self._fetch("tenants", "tenants", params, TenantRow)

    async def fetch_payments(self, tenant_ids: Sequence[str]) -> list[RentPaymentRow]:
        if not tenant_ids:
            return []
        params = {
            "select": "*",
            "tenant_id": _in_filter(tenant_ids),
            "order": "payment_month.desc",
        }
        return await self._fetch("rent_payments", "rent_payments", params, RentPaymentRow)


def _error_message(response: httpx.Response) -> str:
    """PostgREST error message, falling back to the HTTP reason."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"


async def get_rental_data_source(
    current_user: AuthenticatedUser = Depends(get_current_host),
) -> AsyncGenerator[RentalDataSource, None]:
    """FastAPI dependency selecting the configured rental data source."""
    settings = get_settings()

    if settings.data_source == DataSourceKind.SUPABASE:
        source = SupabaseRentalDataSource(
            rest_url=settings.supabase_rest_url,
            api_key=settings.supabase_anon_key or "",
            access_token=current_user.access_token,
            timeout=settings.supabase_timeout_seconds,
        )
        try:
            yield source
        finally:
            await source.aclose()
    else:
        from app.core.database import async_session_factory
        yield SQLRentalDataSource(async_session_factory)
