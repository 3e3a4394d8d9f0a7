"""Download routes: spreadsheet listing and per-weighing invoice."""

import io

from flask import current_app, request, send_file

from modules.weighings.query import build_query, parse_filter
from modules.weighings.service import get_weighing, run_query
from permissions import ANY_ROLE, role_required

from . import bp
from .invoice import DOCX_MIMETYPE, render_invoice
from .spreadsheet import export_weighings_xlsx

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(data: bytes, mimetype: str, filename: str):
    return send_file(io.BytesIO(data), mimetype=mimetype, as_attachment=True, download_name=filename)


@bp.route("/export/excel", methods=["GET"])
@role_required(ANY_ROLE)
def export_excel():
    # тот же фильтр, что и у списка, но без пагинации
    rows = run_query(build_query(parse_filter(request.args)))
    current_app.logger.info("Exporting %d weighings to xlsx", len(rows))
    return _attachment(export_weighings_xlsx(rows), XLSX_MIMETYPE, "weighings.xlsx")


@bp.route("/weighings/<int:weighing_id>/invoice.docx", methods=["GET"])
@role_required(ANY_ROLE)
def invoice(weighing_id: int):
    weighing = get_weighing(weighing_id)
    data = render_invoice(weighing, current_app.config["INVOICE_TEMPLATE_PATH"])
    return _attachment(data, DOCX_MIMETYPE, f"invoice_{weighing.car_number}.docx")
