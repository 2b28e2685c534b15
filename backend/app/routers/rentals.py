"""Rental units router for hosts."""

import io
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from app.core.security import AuthenticatedUser, get_current_host
from app.models.enums import UnitOccupancy
from app.schemas.rental import (
    RentalDashboard,
    RentalPropertiesResponse,
    RentalUnit,
    RentalUnitsResponse,
)
from app.services.rental_data import RentalDataSource, get_rental_data_source
from app.services.rental_pipeline import load_rental_dashboard
from app.services.rental_units import (
    compute_portfolio_stats,
    compute_unit_stats,
    filter_units,
    summarize_properties,
)
from app.services.report_export import RentalReportExporter, ReportFormat, get_report_exporter

router = APIRouter(prefix="/rentals", tags=["rentals"])

REPORT_TITLE = "Rental Units Report"


async def _load_dashboard(source: RentalDataSource, host: AuthenticatedUser) -> RentalDashboard:
    dashboard = await load_rental_dashboard(source, host.uid)
    if dashboard.error:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=dashboard.error,
        )
    return dashboard


@router.get("/units", response_model=RentalUnitsResponse)
async def list_rental_units(
    property_id: Optional[str] = Query(default=None),
    occupancy: Optional[UnitOccupancy] = Query(default=None, alias="status"),
    source: RentalDataSource = Depends(get_rental_data_source),
    current_user: AuthenticatedUser = Depends(get_current_host),
):
    """
    List the host's rentable units.

    Filters apply to the unit list only; stats always cover every unit.
    """
    dashboard = await _load_dashboard(source, current_user)
    return RentalUnitsResponse(
        units=filter_units(dashboard.units, property_id=property_id, status=occupancy),
        properties=dashboard.properties,
        stats=dashboard.stats,
    )


@router.get("/units/export")
async def export_rental_units(
    format: ReportFormat = Query(default=ReportFormat.CSV),
    property_id: Optional[str] = Query(default=None),
    source: RentalDataSource = Depends(get_rental_data_source),
    current_user: AuthenticatedUser = Depends(get_current_host),
    exporter: RentalReportExporter = Depends(get_report_exporter),
):
    """Download the host's units as CSV, XLSX or PDF."""
    dashboard = await _load_dashboard(source, current_user)
    if property_id:
        units = filter_units(dashboard.units, property_id=property_id)
        dashboard = dashboard.model_copy(
            update={"units": units, "stats": compute_unit_stats(units)}
        )

    content = exporter.render(format, dashboard, REPORT_TITLE)
    filename = f"rental-units-{date.today().isoformat()}.{format.extension}"
    headers = {"Content-Disposition": f"attachment; filename={filename}"}

    return StreamingResponse(io.BytesIO(content), media_type=format.media_type, headers=headers)


@router.get("/units/{unit_id}", response_model=RentalUnit)
async def get_rental_unit(
    unit_id: str,
    source: RentalDataSource = Depends(get_rental_data_source),
    current_user: AuthenticatedUser = Depends(get_current_host),
):
    """Get a single unit by its id."""
    dashboard = await _load_dashboard(source, current_user)
    for unit in dashboard.units:
        if unit.id == unit_id:
            return unit

    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Unit not found",
    )


@router.get("/properties", response_model=RentalPropertiesResponse)
async def list_rental_properties(
    source: RentalDataSource = Depends(get_rental_data_source),
    current_user: AuthenticatedUser = Depends(get_current_host),
):
    """Per-property occupancy and income with portfolio totals."""
    dashboard = await _load_dashboard(source, current_user)
    return RentalPropertiesResponse(
        properties=summarize_properties(dashboard.units),
        stats=compute_portfolio_stats(dashboard.units),
    )
