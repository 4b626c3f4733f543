from __future__ import annotations

import csv
from datetime import datetime
from io import BytesIO
from typing import Dict, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import LongTable, Paragraph, SimpleDocTemplate, Spacer, TableStyle

from ev_core.data import EV_TYPE, MAKE
from ev_core.export import EXPORT_BASENAME, EmptyExportError
from ev_core.filters import ALL, FilterCriteria


XLSX_SHEET_NAME = "EV Data"
REPORT_BASENAME = "ev_data_report"
REPORT_TITLE = "Electric Vehicle Dataset Report"
REPORT_HEADER_COLOR = colors.Color(30 / 255, 144 / 255, 1)

# fmt -> (media type, file base name)
EXPORT_FORMATS: Dict[str, Tuple[str, str]] = {
    "csv": ("text/csv", EXPORT_BASENAME),
    "xlsx": ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", EXPORT_BASENAME),
    "pdf": ("application/pdf", REPORT_BASENAME),
}


def _grid_frame(grid: Sequence[Sequence[str]]) -> pd.DataFrame:
    if len(grid) < 2:
        raise EmptyExportError()
    header, body = list(grid[0]), [list(r) for r in grid[1:]]
    return pd.DataFrame(body, columns=header, dtype=object)


def to_csv_bytes(grid: Sequence[Sequence[str]]) -> bytes:
    """Plain header line, every data cell quoted, records joined by "\\n" without a trailing newline."""
    frame = _grid_frame(grid)
    body = frame.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    if body.endswith("\n"):
        body = body[:-1]
    return (",".join(str(c) for c in frame.columns) + "\n" + body).encode("utf-8")


def to_xlsx_bytes(grid: Sequence[Sequence[str]], sheet_name: str = XLSX_SHEET_NAME) -> bytes:
    frame = _grid_frame(grid)
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=sheet_name, index=False)
    return buf.getvalue()


def report_lines(criteria: Optional[FilterCriteria] = None, generated: Optional[datetime] = None) -> List[str]:
    criteria = criteria or FilterCriteria()
    generated = generated or datetime.now()
    make = criteria.equality_filters.get(MAKE, ALL)
    ev_type = criteria.equality_filters.get(EV_TYPE, ALL)
    return [
        REPORT_TITLE,
        f"Generated: {generated:%Y-%m-%d %H:%M:%S}",
        f"Filters -> Make: {make}, Type: {ev_type}, Search: {criteria.search_text or 'None'}",
    ]


def to_pdf_bytes(
    grid: Sequence[Sequence[str]],
    criteria: Optional[FilterCriteria] = None,
    generated: Optional[datetime] = None,
) -> bytes:
    """Landscape A4 report: title, generation time, filter summary, then the table."""
    if len(grid) < 2:
        raise EmptyExportError()

    buf = BytesIO()
    pagesize = landscape(A4)
    doc = SimpleDocTemplate(
        buf, pagesize=pagesize, leftMargin=20, rightMargin=20, topMargin=30, bottomMargin=30, title=REPORT_TITLE
    )
    styles = getSampleStyleSheet()
    title, *meta = report_lines(criteria, generated)
    story = [Paragraph(escape(title), styles["Title"])]
    story += [Paragraph(escape(line), styles["Normal"]) for line in meta]
    story.append(Spacer(1, 12))

    n_cols = max(1, len(grid[0]))
    col_width = (pagesize[0] - doc.leftMargin - doc.rightMargin) / n_cols
    table = LongTable([list(r) for r in grid], colWidths=[col_width] * n_cols, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("BACKGROUND", (0, 0), (-1, 0), REPORT_HEADER_COLOR),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    story.append(table)
    doc.build(story)
    return buf.getvalue()


def export_bytes(fmt: str, grid: Sequence[Sequence[str]], criteria: Optional[FilterCriteria] = None) -> bytes:
    if fmt == "csv":
        return to_csv_bytes(grid)
    if fmt == "xlsx":
        return to_xlsx_bytes(grid)
    if fmt == "pdf":
        return to_pdf_bytes(grid, criteria)
    raise KeyError(fmt)
