"""Weighing operations: create, read, list, partial update, delete."""

import logging
from typing import Any, Dict, Mapping

from sqlalchemy.orm import joinedload

from errors import NotFound, ValidationError
from modules.suppliers.models import suppliers
from store import Repository

from .models import Weighing, merge_fields, validate_weighing, with_totals
from .query import WeighingQuery, build_query, parse_filter, parse_pagination

logger = logging.getLogger(__name__)

weighings = Repository(Weighing, label="Weighing")

RESOLVED = (joinedload(Weighing.supplier), joinedload(Weighing.created_by))


def _ensure_supplier(fields: Dict[str, Any]) -> None:
    supplier_id = fields.get("supplier_id")
    if supplier_id is not None and suppliers.find_by_id(supplier_id) is None:
        raise NotFound("Supplier not found")


def create_weighing(payload: Mapping, creator) -> Weighing:
    fields = validate_weighing(payload)
    _ensure_supplier(fields)
    fields = with_totals(fields)
    weighing = weighings.create(created_by_id=creator.id, **fields)
    logger.info(
        "Weighing %s recorded by user %s: car=%s net=%s",
        weighing.id, creator.id, weighing.car_number, weighing.net_weight,
    )
    return weighing


def get_weighing(weighing_id: int) -> Weighing:
    return weighings.get_or_raise(weighing_id)


def run_query(query: WeighingQuery):
    window = query.window
    return weighings.find_many(
        query.criteria,
        query.order_by,
        skip=window.skip if window else None,
        take=window.take if window else None,
        options=RESOLVED,
    )


def list_weighings(args: Mapping) -> dict:
    pagination = parse_pagination(args)
    query = build_query(parse_filter(args), pagination)
    items = run_query(query)
    total = weighings.count(query.criteria)
    return {
        "items": [w.to_dict() for w in items],
        "total": total,
        "page": pagination.page,
        "pageSize": pagination.page_size,
    }


def update_weighing(weighing_id: int, payload: Mapping) -> Weighing:
    """
    Partial update. Totals are re-derived from the stored values merged with
    the supplied ones, never from the supplied fields alone.
    """
    changes = validate_weighing(payload, partial=True)
    if not changes and payload:
        raise ValidationError({"body": ["No updatable fields supplied"]})

    existing = weighings.get_or_raise(weighing_id)
    _ensure_supplier(changes)
    derived = with_totals(merge_fields(existing, changes))
    changes["tare_total"] = derived["tare_total"]
    changes["net_weight"] = derived["net_weight"]
    return weighings.update(weighing_id, changes)


def delete_weighing(weighing_id: int) -> None:
    weighings.delete(weighing_id)
