"""XLSX export of weighing listings.

Header row and column order are consumed by downstream spreadsheets and must
not change.
"""

import io
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from weights import to_number

SHEET_TITLE = "Weighings"
NO_SUPPLIER = "-"

# (header, width)
COLUMNS = [
    ("Date", 12),
    ("Car", 15),
    ("Supplier", 20),
    ("Gross", 10),
    ("Tare Count", 10),
    ("Tare Weight", 12),
    ("Tare Total", 12),
    ("Net", 10),
    ("Operator", 20),
]
HEADERS = [header for header, _ in COLUMNS]


def weighing_row(w) -> list:
    return [
        w.created_at.date().isoformat(),
        w.car_number,
        w.supplier_name or NO_SUPPLIER,
        to_number(w.gross_weight),
        w.tare_count,
        to_number(w.tare_weight),
        to_number(w.tare_total),
        to_number(w.net_weight),
        w.operator_email,
    ]


def build_workbook(weighings: Iterable) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for idx, (_, width) in enumerate(COLUMNS, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width

    for w in weighings:
        ws.append(weighing_row(w))
    return wb


def export_weighings_xlsx(weighings: Iterable) -> bytes:
    output = io.BytesIO()
    build_workbook(weighings).save(output)
    return output.getvalue()
