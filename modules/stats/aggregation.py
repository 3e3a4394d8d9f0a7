"""Summary statistics over a set of weighings.

Works on plain rows so it can be fed from any query (or a list in tests)::

    SummaryRow(created_at, gross_weight, net_weight, supplier_name)

Sums are exact ``Decimal`` sums; conversion to JSON numbers is left to
``summary_payload``.
"""

from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, NamedTuple, Optional

from weights import ZERO, to_number

TOP_SUPPLIERS_LIMIT = 10
# длинное тире только в статистике; XLSX и DOCX пишут ASCII "-"
UNKNOWN_SUPPLIER = "—"


class SummaryRow(NamedTuple):
    created_at: datetime
    gross_weight: Decimal
    net_weight: Decimal
    supplier_name: Optional[str]


@dataclass
class Bucket:
    cars: int = 0
    net: Decimal = ZERO

    def add(self, net_weight: Decimal) -> None:
        self.cars += 1
        self.net += net_weight


@dataclass
class Summary:
    total_cars: int
    total_gross: Decimal
    total_net: Decimal
    daily_series: List[dict]
    top_suppliers: List[dict]


def summarize(rows: Iterable[SummaryRow], limit: int = TOP_SUPPLIERS_LIMIT) -> Summary:
    total_cars = 0
    total_gross = ZERO
    total_net = ZERO
    by_date: "OrderedDict[str, Bucket]" = OrderedDict()
    by_supplier: "OrderedDict[str, Bucket]" = OrderedDict()

    for row in rows:
        total_cars += 1
        total_gross += row.gross_weight
        total_net += row.net_weight

        day = row.created_at.date().isoformat()
        by_date.setdefault(day, Bucket()).add(row.net_weight)

        name = row.supplier_name if row.supplier_name is not None else UNKNOWN_SUPPLIER
        by_supplier.setdefault(name, Bucket()).add(row.net_weight)

    # YYYY-MM-DD: строковый порядок == хронологический
    daily_series = [
        {"date": day, "cars": b.cars, "net": b.net}
        for day, b in sorted(by_date.items(), key=lambda item: item[0])
    ]
    # sorted() стабилен: при равном net остаётся порядок первого появления
    ranked = sorted(by_supplier.items(), key=lambda item: item[1].net, reverse=True)
    top_suppliers = [
        {"supplierName": name, "cars": b.cars, "net": b.net}
        for name, b in ranked[:limit]
    ]
    return Summary(total_cars, total_gross, total_net, daily_series, top_suppliers)


def summary_payload(summary: Summary) -> dict:
    return {
        "totals": {
            "totalCars": summary.total_cars,
            "totalNet": to_number(summary.total_net),
            "totalGross": to_number(summary.total_gross),
        },
        "dailySeries": [dict(d, net=to_number(d["net"])) for d in summary.daily_series],
        "topSuppliers": [dict(s, net=to_number(s["net"])) for s in summary.top_suppliers],
    }
