"""
Export Service Module
=====================

CSV and PDF exports of volunteers, incidents and inventory.

The export builds rows with the same columns for both formats; the PDF
is a single landscape table rendered with reportlab.
"""

import csv
import io
from dataclasses import dataclass
from datetime import date, datetime, UTC
from typing import Any, Callable, Dict, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, LETTER, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.orm import Session

from civil_defence.core.config import settings
from civil_defence.core.enums import ExportFormat, ExportResource
from civil_defence.core.logging import get_logger
from civil_defence.models.incident import Incident
from civil_defence.models.inventory import InventoryItem
from civil_defence.models.user import User
from civil_defence.models.volunteer import Volunteer
from civil_defence.services.incident_service import IncidentService
from civil_defence.services.inventory_service import InventoryService
from civil_defence.services.volunteer_service import VolunteerService

logger = get_logger(__name__)


class ExportError(Exception):
    """Raised when an export document cannot be produced."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


@dataclass
class ExportDocument:
    content: bytes
    media_type: str
    filename: str


def _fmt_date(value: Optional[date]) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def _text(value: Any) -> str:
    return "" if value is None else str(value)


# ==========================================
# ROW BUILDERS
# ==========================================

def volunteer_row(v: Volunteer) -> Dict[str, str]:
    return {
        "Full Name": _text(v.full_name),
        "Email": _text(v.email),
        "Phone": _text(v.phone),
        "District": _text(v.district),
        "Status": _text(v.status),
        "Date of Birth": _fmt_date(v.date_of_birth),
        "Address": _text(v.address),
        "Ex-Serviceman": "Yes" if v.is_ex_serviceman else "No",
        "Service History": _text(v.service_history),
        "Skills": ", ".join(v.skills or []),
        "Qualifications": _text(v.qualifications),
        "Emergency Contact": _text(v.emergency_contact),
        "Emergency Phone": _text(v.emergency_phone),
        "Created At": _fmt_date(v.created_at),
    }


def incident_row(i: Incident) -> Dict[str, str]:
    return {
        "Title": _text(i.title),
        "Description": _text(i.description),
        "Location": _text(i.location),
        "District": _text(i.district),
        "Severity": _text(i.severity),
        "Status": _text(i.status),
        "Reported By": _text(i.reported_by),
        "Created At": _fmt_date(i.created_at),
    }


def inventory_row(item: InventoryItem) -> Dict[str, str]:
    return {
        "Name": _text(item.name),
        "Description": _text(item.description),
        "Category": _text(item.category),
        "Quantity": str(item.quantity or 0),
        "Condition": _text(item.condition),
        "Location": _text(item.location),
        "District": _text(item.district),
        "Last Inspection": _fmt_date(item.last_inspection),
    }


EXPORT_COLUMNS: Dict[ExportResource, List[str]] = {
    ExportResource.VOLUNTEERS: [
        "Full Name", "Email", "Phone", "District", "Status", "Date of Birth", "Address",
        "Ex-Serviceman", "Service History", "Skills", "Qualifications",
        "Emergency Contact", "Emergency Phone", "Created At",
    ],
    ExportResource.INCIDENTS: [
        "Title", "Description", "Location", "District", "Severity", "Status",
        "Reported By", "Created At",
    ],
    ExportResource.INVENTORY: [
        "Name", "Description", "Category", "Quantity", "Condition", "Location",
        "District", "Last Inspection",
    ],
}

# Subset shown in the PDF table
PDF_COLUMNS: Dict[ExportResource, List[str]] = {
    ExportResource.VOLUNTEERS: ["Full Name", "Phone", "District", "Status", "Skills", "Created At"],
    ExportResource.INCIDENTS: ["Title", "Location", "District", "Severity", "Status", "Created At"],
    ExportResource.INVENTORY: ["Name", "Category", "Quantity", "Condition", "District", "Last Inspection"],
}


# ==========================================
# RENDERERS
# ==========================================

def render_csv(rows: List[Dict[str, str]], headers: List[str]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=headers, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


class PDFTableRenderer:
    """
    Renders export rows as a titled PDF table.
    """

    PAGE_SIZES = {
        "A4": A4,
        "LETTER": LETTER,
    }

    def __init__(self) -> None:
        self._styles: dict[str, ParagraphStyle] | None = None

    def _get_page_size(self) -> tuple[float, float]:
        return landscape(self.PAGE_SIZES.get(settings.PDF_PAGE_SIZE.upper(), A4))

    def _get_styles(self) -> dict[str, ParagraphStyle]:
        if self._styles is None:
            sample_styles = getSampleStyleSheet()
            self._styles = {
                "title": sample_styles["Heading1"],
                "normal": sample_styles["Normal"],
                "cell": ParagraphStyle("cell", parent=sample_styles["Normal"], fontSize=8, leading=10),
            }
        return self._styles

    def _build_header(self, title: str, subtitle: str):
        styles = self._get_styles()
        return [
            Paragraph(title, styles["title"]),
            Paragraph(subtitle, styles["normal"]),
            Spacer(1, 0.3 * inch),
        ]

    def _build_table(self, rows: List[Dict[str, str]], columns: List[str]) -> Table:
        styles = self._get_styles()
        data = [columns]
        for row in rows:
            data.append([Paragraph(escape(row.get(col, "")), styles["cell"]) for col in columns])

        table = Table(data, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1f3a5f")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 8),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f2f4f7")]),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        return table

    def render(self, title: str, rows: List[Dict[str, str]], columns: List[str]) -> bytes:
        buffer = io.BytesIO()
        subtitle = (
            f"{settings.STATE_NAME} Civil Defence | "
            f"Generated {datetime.now(UTC).strftime('%Y-%m-%d %H:%M UTC')} | "
            f"{len(rows)} record(s)"
        )

        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=self._get_page_size(),
                leftMargin=0.5 * inch,
                rightMargin=0.5 * inch,
                topMargin=0.5 * inch,
                bottomMargin=0.5 * inch,
                title=title,
            )
            elements = self._build_header(title, subtitle)
            if rows:
                elements.append(self._build_table(rows, columns))
            else:
                elements.append(Paragraph("No records found.", self._get_styles()["normal"]))
            doc.build(elements)
        except Exception as e:
            logger.error("PDF export failed", extra={"title": title, "error": str(e)})
            raise ExportError("Failed to render PDF export", original_error=e) from e

        return buffer.getvalue()


# ==========================================
# EXPORT ENTRY POINT
# ==========================================

def _load_rows(
    db: Session,
    current_user: User,
    resource: ExportResource,
    district: Optional[str],
) -> List[Dict[str, str]]:
    loaders: Dict[ExportResource, Callable[[], List[Dict[str, str]]]] = {
        ExportResource.VOLUNTEERS: lambda: [
            volunteer_row(v)
            for v in VolunteerService(db).list_volunteers(current_user, district=district)
        ],
        ExportResource.INCIDENTS: lambda: [
            incident_row(i)
            for i in IncidentService(db).list_incidents(current_user, district=district)
        ],
        ExportResource.INVENTORY: lambda: [
            inventory_row(item)
            for item in InventoryService(db).list_items(current_user, district=district)
        ],
    }
    return loaders[resource]()


def export_records(
    db: Session,
    current_user: User,
    resource: ExportResource,
    fmt: ExportFormat,
    district: Optional[str] = None,
) -> ExportDocument:
    """
    Export the records an admin can see.

    Args:
        db: Database session
        current_user: Admin requesting the export
        resource: What to export
        fmt: csv or pdf
        district: Optional district filter (scoped as for listing)

    Returns:
        ExportDocument with bytes, media type and download filename
    """
    rows = _load_rows(db, current_user, resource, district)
    stamp = datetime.now(UTC).strftime("%Y%m%d")
    basename = f"{resource.value}_{stamp}"

    if fmt == ExportFormat.CSV:
        content = render_csv(rows, EXPORT_COLUMNS[resource])
        document = ExportDocument(content, "text/csv; charset=utf-8", f"{basename}.csv")
    else:
        title = f"{resource.value.title()} Report"
        content = PDFTableRenderer().render(title, rows, PDF_COLUMNS[resource])
        document = ExportDocument(content, "application/pdf", f"{basename}.pdf")

    logger.info(
        "Records exported",
        extra={"resource": resource.value, "format": fmt.value, "rows": len(rows)}
    )
    return document

