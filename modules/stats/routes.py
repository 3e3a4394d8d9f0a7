"""HTTP routes for summary statistics."""

from flask import jsonify, request
from sqlalchemy import select

from extensions import db
from modules.suppliers.models import Supplier
from modules.weighings.models import Weighing
from modules.weighings.query import build_criteria, parse_filter
from permissions import ANY_ROLE, role_required

from . import bp
from .aggregation import SummaryRow, summarize, summary_payload


def load_summary_rows(criteria):
    stmt = (
        select(Weighing.created_at, Weighing.gross_weight, Weighing.net_weight, Supplier.name)
        .outerjoin(Supplier, Weighing.supplier_id == Supplier.id)
        .where(*criteria)
    )
    return [SummaryRow(*row) for row in db.session.execute(stmt)]


@bp.route("/summary", methods=["GET"])
@role_required(ANY_ROLE)
def summary():
    # сводка фильтруется только по датам
    criteria = build_criteria(parse_filter(request.args, dates_only=True))
    return jsonify(summary_payload(summarize(load_summary_rows(criteria))))
