"""Test rental report rendering."""
import csv
import io
from datetime import datetime, timezone

import pytest
from openpyxl import load_workbook

from app.schemas.rental import RentalDashboard
from app.services.rental_pipeline import RentalSnapshot, build_dashboard
from app.services.report_export import RentalReportExporter, ReportFormat
from tests.factories import seeded_source

GENERATED_AT = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def dashboard():
    source = seeded_source()
    return build_dashboard(RentalSnapshot(
        properties=source.properties,
        property_units=source.property_units,
        tenants=source.tenants,
        payments=source.payments,
    ))


@pytest.fixture
def exporter():
    return RentalReportExporter(currency="TZS", max_pdf_rows=2)


def test_report_format_metadata():
    assert ReportFormat.CSV.media_type == "text/csv"
    assert ReportFormat.PDF.media_type == "application/pdf"
    assert ReportFormat.XLSX.extension == "xlsx"


def test_csv_report(exporter, dashboard):
    content = exporter.to_csv(dashboard, "Rental Units Report", generated_at=GENERATED_AT)
    rows = list(csv.reader(io.StringIO(content.decode("utf-8"))))

    assert rows[0] == ["Rental Units Report"]
    assert rows[1] == ["Generated", "2026-10-19 08:30 UTC"]
    assert ["Total Units", "4"] in rows
    assert ["Monthly Income", "TZS 600,000"] in rows

    header_index = rows.index([]) + 1
    assert rows[header_index][0] == "Unit"
    units = rows[header_index + 1:]
    assert len(units) == 4
    beach = units[0]
    assert beach[0] == "Beach House"
    assert beach[5] == "rented"
    assert beach[6] == "Asha Mwakyusa"
    assert beach[8] == "pending"


def test_xlsx_report(exporter, dashboard):
    content = exporter.to_xlsx(dashboard, "Rental Units Report", generated_at=GENERATED_AT)
    wb = load_workbook(io.BytesIO(content))

    assert wb.sheetnames == ["Summary", "Units"]
    summary = {row[0]: row[1] for row in wb["Summary"].iter_rows(min_row=4, values_only=True)}
    assert summary["Rented"] == "2"
    assert summary["Overdue Payments"] == "1"

    unit_rows = list(wb["Units"].iter_rows(values_only=True))
    assert unit_rows[0][0] == "Unit"
    assert len(unit_rows) == 5
    assert unit_rows[1][9] == 500000


def test_pdf_report(exporter, dashboard):
    content = exporter.to_pdf(dashboard, "Rental Units Report", generated_at=GENERATED_AT)
    assert content.startswith(b"%PDF")


def test_pdf_report_for_empty_dashboard(exporter):
    content = exporter.to_pdf(RentalDashboard(), "Rental Units Report")
    assert content.startswith(b"%PDF")


def test_render_dispatch(exporter, dashboard):
    assert exporter.render(ReportFormat.CSV, dashboard, "Report").startswith(b"Report")
    assert exporter.render(ReportFormat.PDF, dashboard, "Report").startswith(b"%PDF")
    # xlsx files are zip archives
    assert exporter.render(ReportFormat.XLSX, dashboard, "Report").startswith(b"PK")
