"""Report export routes: CSV, JSON and Excel"""
import io
import logging
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from ..contract.routes import api
from ..services.aggregation import AggregationReporter, to_csv
from ..utils.auth import require_gov_admin
from ..utils.scope import build_scope_match

router = APIRouter(tags=["Reports"])
logger = logging.getLogger(__name__)

# Store will be injected
store = None


def init_db(document_store):
    global store
    store = document_store


REPORT_FIELDS = {
    "teachers": ["id", "user_id", "school_id", "subject", "assigned_classes"],
    "students": ["id", "user_id", "school_id", "grade", "marks", "attendance_rate", "scholarship_eligible"],
    "complaints": ["id", "school_id", "title", "status", "created_at", "ai_classification"],
}
REPORT_TYPES = ("schools", *REPORT_FIELDS)

# Excel styling
HEADER_FILL = PatternFill(start_color="1E3A5F", end_color="1E3A5F", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
DATA_FONT = Font(size=10)
THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)


def _excel_value(value):
    if isinstance(value, (list, dict)):
        return ", ".join(str(v) for v in value) if isinstance(value, list) else str(value)
    if isinstance(value, datetime):
        # openpyxl rejects timezone-aware datetimes
        return value.replace(tzinfo=None)
    return value


def style_excel_sheet(ws, headers, start_row=1):
    """Write a styled header row and size columns to their content"""
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=start_row, column=col, value=header)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = Alignment(horizontal='center', vertical='center')
        cell.border = THIN_BORDER

    for col in range(1, len(headers) + 1):
        max_length = len(str(headers[col - 1]))
        for row in range(start_row + 1, ws.max_row + 1):
            cell_value = ws.cell(row=row, column=col).value
            if cell_value is not None:
                max_length = max(max_length, len(str(cell_value)))
        ws.column_dimensions[get_column_letter(col)].width = min(max_length + 2, 50)


def add_data_rows(ws, data, start_row=2):
    """Add data rows to Excel sheet"""
    for row_idx, row_data in enumerate(data, start_row):
        for col_idx, value in enumerate(row_data, 1):
            cell = ws.cell(row=row_idx, column=col_idx, value=_excel_value(value))
            cell.font = DATA_FONT
            cell.border = THIN_BORDER
            cell.alignment = Alignment(horizontal='center' if isinstance(value, (int, float)) else 'left')


def build_workbook(title: str, rows: List[dict]) -> io.BytesIO:
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]  # Excel sheet name limit

    if rows:
        headers = list(rows[0].keys())
        add_data_rows(ws, [[row.get(h) for h in headers] for row in rows])
        style_excel_sheet(ws, headers)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output


async def _district_school_ids(district: Optional[str]) -> Optional[List[int]]:
    if not district:
        return None
    schools = await store.find("schools", build_scope_match(district=district), fields=["id"])
    return [s["id"] for s in schools]


async def fetch_report_rows(report_type: str, district: Optional[str] = None) -> List[dict]:
    """Rows for one report type; unknown types yield no rows"""
    if report_type == "schools":
        return await AggregationReporter(store).schools_summary(district)

    fields = REPORT_FIELDS.get(report_type)
    if fields is None:
        return []

    query = build_scope_match(school_ids=await _district_school_ids(district))
    docs = await store.find(report_type, query, fields=fields)
    return [{f: doc.get(f) for f in fields} for doc in docs]


@router.get(api.reports.export.path)
async def export_report(
    type: str = Query("schools"),
    format: Literal["csv", "json", "xlsx"] = Query("csv"),
    district: Optional[str] = Query(None),
    current_user: dict = Depends(require_gov_admin),
):
    """Export schools, teachers, students or complaints"""
    rows = await fetch_report_rows(type, district)
    name = type if type in REPORT_TYPES else "report"
    logger.info("Report export type=%s format=%s district=%s rows=%d by %s",
                type, format, district, len(rows), current_user["username"])

    if format == "json":
        return rows

    if format == "xlsx":
        return StreamingResponse(
            build_workbook(name, rows),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": f"attachment; filename={name}.xlsx"}
        )

    return Response(
        content=to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={name}.csv"}
    )
