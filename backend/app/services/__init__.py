"""Services for Nyumba Rentals."""

from app.services.rental_data import (
    RentalDataError,
    RentalDataSource,
    SQLRentalDataSource,
    SupabaseRentalDataSource,
    get_rental_data_source,
)
from app.services.rental_pipeline import (
    HostRentalView,
    RentalSnapshot,
    fetch_rental_snapshot,
    load_rental_dashboard,
)
from app.services.report_export import RentalReportExporter, ReportFormat, get_report_exporter

__all__ = [
    "RentalDataError",
    "RentalDataSource",
    "SQLRentalDataSource",
    "SupabaseRentalDataSource",
    "get_rental_data_source",
    "HostRentalView",
    "RentalSnapshot",
    "fetch_rental_snapshot",
    "load_rental_dashboard",
    "RentalReportExporter",
    "ReportFormat",
    "get_report_exporter",
]
