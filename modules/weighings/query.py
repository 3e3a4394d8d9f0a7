"""Translate list/export/stats query strings into store criteria.

Only clauses for filters that are present are added. ``from``/``to`` values
that cannot be parsed are ignored rather than rejected; this leniency is
intentional (garbled date input narrows nothing instead of failing the
request). Results are always ordered newest first.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Mapping, Optional

from errors import ValidationError

from .models import INTEGER_MAX, Weighing

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class WeighingFilter:
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    supplier_id: Optional[int] = None
    car_number: Optional[str] = None


@dataclass(frozen=True)
class Pagination:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def take(self) -> int:
        return self.page_size


@dataclass(frozen=True)
class WeighingQuery:
    """Predicate conjunction + ordering + optional pagination window."""

    criteria: List = field(default_factory=list)
    order_by: List = field(default_factory=list)
    window: Optional[Pagination] = None


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """ISO-8601 date or datetime -> naive UTC; ``None`` if absent or unparsable."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Ignoring unparsable date filter %r", value)
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _int_arg(args: Mapping, key: str, default: int, low: int, high: Optional[int] = None) -> int:
    raw = args.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({key: ["Expected an integer"]}, message="Invalid query") from None
    if value < low or (high is not None and value > high):
        bounds = f">= {low}" if high is None else f"between {low} and {high}"
        raise ValidationError({key: [f"Must be {bounds}"]}, message="Invalid query")
    return value


def parse_filter(args: Mapping, dates_only: bool = False) -> WeighingFilter:
    date_from = parse_timestamp(args.get("from"))
    date_to = parse_timestamp(args.get("to"))
    if dates_only:
        return WeighingFilter(date_from=date_from, date_to=date_to)

    supplier_id = None
    raw_supplier = args.get("supplierId")
    if raw_supplier:
        try:
            supplier_id = int(raw_supplier)
        except (TypeError, ValueError):
            supplier_id = None
        if supplier_id is None or abs(supplier_id) > INTEGER_MAX:
            raise ValidationError({"supplierId": ["Expected a supplier id"]}, message="Invalid query")

    return WeighingFilter(
        date_from=date_from,
        date_to=date_to,
        supplier_id=supplier_id,
        car_number=args.get("carNumber") or None,
    )


def parse_pagination(args: Mapping) -> Pagination:
    return Pagination(
        page=_int_arg(args, "page", DEFAULT_PAGE, low=1, high=INTEGER_MAX),
        page_size=_int_arg(args, "pageSize", DEFAULT_PAGE_SIZE, low=1, high=MAX_PAGE_SIZE),
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_criteria(flt: WeighingFilter) -> List:
    criteria = []
    if flt.date_from is not None:
        criteria.append(Weighing.created_at >= flt.date_from)
    if flt.date_to is not None:
        criteria.append(Weighing.created_at <= flt.date_to)
    if flt.supplier_id is not None:
        criteria.append(Weighing.supplier_id == flt.supplier_id)
    if flt.car_number:
        criteria.append(Weighing.car_number.ilike(f"%{_escape_like(flt.car_number)}%", escape="\\"))
    return criteria


def build_query(flt: WeighingFilter, window: Optional[Pagination] = None) -> WeighingQuery:
    return WeighingQuery(
        criteria=build_criteria(flt),
        order_by=[Weighing.created_at.desc(), Weighing.id.desc()],
        window=window,
    )
