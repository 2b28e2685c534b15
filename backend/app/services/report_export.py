"""
Rental report export.

Renders a host's rental dashboard as a downloadable report:
- CSV for spreadsheets and imports
- XLSX workbook with a summary sheet and a unit sheet
- PDF with a summary table and the unit table
"""

import csv
import io
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.core.config import get_settings
from app.schemas.rental import RentalDashboard, RentalUnit

UNIT_COLUMNS = [
    "Unit",
    "Unit Number",
    "Property",
    "Type",
    "Location",
    "Status",
    "Tenant",
    "Phone",
    "Payment Status",
    "Rent",
    "Period",
]


class ReportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"
    PDF = "pdf"

    @property
    def media_type(self) -> str:
        return {
            ReportFormat.CSV: "text/csv",
            ReportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            ReportFormat.PDF: "application/pdf",
        }[self]

    @property
    def extension(self) -> str:
        return self.value


class RentalReportExporter:
    """Renders rental unit reports in CSV, XLSX and PDF."""

    def __init__(self, currency: str = "TZS", max_pdf_rows: int = 200):
        self.currency = currency
        self.max_pdf_rows = max_pdf_rows
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=20,
            spaceAfter=6,
            alignment=TA_LEFT,
            textColor=colors.HexColor('#1a1a2e'),
        ))
        self.styles.add(ParagraphStyle(
            name='ReportMeta',
            parent=self.styles['Normal'],
            fontSize=9,
            spaceAfter=12,
            textColor=colors.HexColor('#666666'),
        ))
        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=self.styles['Heading2'],
            fontSize=13,
            spaceBefore=14,
            spaceAfter=8,
            textColor=colors.HexColor('#1a1a2e'),
        ))

    def render(self, fmt: ReportFormat, dashboard: RentalDashboard, title: str) -> bytes:
        if fmt == ReportFormat.CSV:
            return self.to_csv(dashboard, title)
        if fmt == ReportFormat.XLSX:
            return self.to_xlsx(dashboard, title)
        if fmt == ReportFormat.PDF:
            return self.to_pdf(dashboard, title)
        raise ValueError(f"Unsupported report format: {fmt}")

    # -- shared rows ----------------------------------------------------------

    def _money(self, amount: float) -> str:
        return f"{self.currency} {amount:,.0f}"

    def summary_rows(self, dashboard: RentalDashboard) -> List[List[str]]:
        stats = dashboard.stats
        return [
            ["Total Units", str(stats.total)],
            ["Rented", str(stats.rented)],
            ["Vacant", str(stats.vacant)],
            ["Monthly Income", self._money(stats.monthly_income)],
            ["Overdue Payments", str(stats.overdue_count)],
            ["Pending Payments", str(stats.pending_count)],
        ]

    def unit_row(self, unit: RentalUnit) -> list:
        tenant = unit.tenant
        return [
            unit.name,
            unit.unit_number or "",
            unit.property_title,
            unit.unit_type,
            unit.location,
            unit.status.value,
            tenant.name if tenant else "",
            (tenant.phone or "") if tenant else "",
            tenant.payment_status.value if tenant else "",
            unit.rent,
            unit.price_period,
        ]

    # -- formats --------------------------------------------------------------

    def to_csv(
        self,
        dashboard: RentalDashboard,
        title: str,
        generated_at: Optional[datetime] = None,
    ) -> bytes:
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow([title])
        writer.writerow(["Generated", _timestamp(generated_at)])
        for row in self.summary_rows(dashboard):
            writer.writerow(row)
        writer.writerow([])

        writer.writerow(UNIT_COLUMNS)
        for unit in dashboard.units:
            writer.writerow(self.unit_row(unit))

        return output.getvalue().encode("utf-8")

    def to_xlsx(
        self,
        dashboard: RentalDashboard,
        title: str,
        generated_at: Optional[datetime] = None,
    ) -> bytes:
        wb = Workbook()
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="1A1A2E", end_color="1A1A2E", fill_type="solid")

        summary = wb.active
        summary.title = "Summary"
        summary.append([title])
        summary["A1"].font = Font(bold=True, size=14)
        summary.append(["Generated", _timestamp(generated_at)])
        summary.append([])
        for label, value in self.summary_rows(dashboard):
            summary.append([label, value])
        summary.column_dimensions["A"].width = 22
        summary.column_dimensions["B"].width = 24

        units = wb.create_sheet("Units")
        units.append(UNIT_COLUMNS)
        for cell in units[1]:
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")
        for unit in dashboard.units:
            units.append(self.unit_row(unit))
        for column_cells in units.columns:
            width = max(len(str(c.value)) if c.value is not None else 0 for c in column_cells)
            units.column_dimensions[column_cells[0].column_letter].width = min(width + 2, 40)
        units.freeze_panes = "A2"

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    def to_pdf(
        self,
        dashboard: RentalDashboard,
        title: str,
        generated_at: Optional[datetime] = None,
    ) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=landscape(A4),
            rightMargin=0.5*inch,
            leftMargin=0.5*inch,
            topMargin=0.5*inch,
            bottomMargin=0.5*inch,
            title=title,
        )

        story = []
        story.append(Paragraph(title, self.styles['ReportTitle']))
        story.append(Paragraph(f"Generated: {_timestamp(generated_at)}", self.styles['ReportMeta']))

        story.append(Paragraph("SUMMARY", self.styles['SectionHeader']))
        story.append(HRFlowable(width="100%", thickness=1, color=colors.HexColor('#e0e0e0')))
        summary_table = Table(self.summary_rows(dashboard), colWidths=[2*inch, 2.5*inch], hAlign='LEFT')
        summary_table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('TEXTCOLOR', (0, 0), (0, -1), colors.HexColor('#666666')),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ]))
        story.append(summary_table)
        story.append(Spacer(1, 0.2*inch))

        story.append(Paragraph("UNITS", self.styles['SectionHeader']))
        story.append(HRFlowable(width="100%", thickness=1, color=colors.HexColor('#e0e0e0')))

        shown = dashboard.units[:self.max_pdf_rows]
        if shown:
            data = [UNIT_COLUMNS]
            for unit in shown:
                row = self.unit_row(unit)
                row[9] = self._money(unit.rent)
                data.append([str(v) for v in row])

            unit_table = Table(data, repeatRows=1)
            unit_table.setStyle(TableStyle([
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('FONTSIZE', (0, 0), (-1, -1), 8),
                ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1a1a2e')),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
                ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
                ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#e0e0e0')),
                ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f9f9f9')]),
            ]))
            story.append(unit_table)
            if len(dashboard.units) > len(shown):
                story.append(Spacer(1, 0.1*inch))
                story.append(Paragraph(
                    f"Showing {len(shown)} of {len(dashboard.units)} units.",
                    self.styles['ReportMeta'],
                ))
        else:
            story.append(Paragraph("No units found.", self.styles['Normal']))

        doc.build(story)
        return buffer.getvalue()


def _timestamp(value: Optional[datetime]) -> str:
    return (value or datetime.now(timezone.utc)).strftime("%Y-%m-%d %H:%M UTC")


def get_report_exporter() -> RentalReportExporter:
    """Get report exporter configured from settings."""
    settings = get_settings()
    return RentalReportExporter(
        currency=settings.report_currency,
        max_pdf_rows=settings.report_max_pdf_rows,
    )
