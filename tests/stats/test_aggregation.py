from datetime import datetime
from decimal import Decimal

from modules.stats.aggregation import UNKNOWN_SUPPLIER, SummaryRow, summarize, summary_payload


def _row(day, net, supplier=None, gross=None, hour=12):
    net = Decimal(net)
    return SummaryRow(datetime(2024, 5, day, hour, 0), Decimal(gross) if gross else net, net, supplier)


def test_empty_input():
    summary = summarize([])
    assert summary.total_cars == 0
    assert summary.total_gross == 0
    assert summary.total_net == 0
    assert summary.daily_series == []
    assert summary.top_suppliers == []
    assert summary_payload(summary) == {
        "totals": {"totalCars": 0, "totalNet": 0, "totalGross": 0},
        "dailySeries": [],
        "topSuppliers": [],
    }


def test_totals_are_exact():
    rows = [_row(1, "0.100", gross="0.200") for _ in range(3)]
    summary = summarize(rows)
    assert summary.total_cars == 3
    assert summary.total_net == Decimal("0.300")
    assert summary.total_gross == Decimal("0.600")


def test_daily_series_sorted_ascending():
    rows = [_row(3, "10"), _row(1, "5", hour=23), _row(3, "2", hour=0), _row(2, "1")]
    assert summarize(rows).daily_series == [
        {"date": "2024-05-01", "cars": 1, "net": Decimal("5")},
        {"date": "2024-05-02", "cars": 1, "net": Decimal("1")},
        {"date": "2024-05-03", "cars": 2, "net": Decimal("12")},
    ]


def test_top_suppliers_sorted_by_net_descending():
    rows = [_row(1, "50", "A"), _row(1, "30", "B"), _row(1, "80", "C")]
    top = summarize(rows).top_suppliers
    assert [s["net"] for s in top] == [Decimal("80"), Decimal("50"), Decimal("30")]
    assert [s["supplierName"] for s in top] == ["C", "A", "B"]


def test_ties_keep_first_seen_order():
    rows = [_row(1, "10", "Zeta"), _row(1, "10", "Alpha"), _row(1, "10", "Mid")]
    assert [s["supplierName"] for s in summarize(rows).top_suppliers] == ["Zeta", "Alpha", "Mid"]


def test_top_suppliers_limited_to_ten():
    rows = [_row(1, str(n), f"S{n}") for n in range(1, 16)]
    top = summarize(rows).top_suppliers
    assert len(top) == 10
    assert top[0]["supplierName"] == "S15"
    assert top[-1]["supplierName"] == "S6"


def test_missing_supplier_goes_to_unknown_bucket():
    rows = [_row(1, "5"), _row(2, "7"), _row(2, "1", "Agro")]
    top = summarize(rows).top_suppliers
    assert top[0] == {"supplierName": UNKNOWN_SUPPLIER, "cars": 2, "net": Decimal("12")}


def test_negative_net_is_summed_as_is():
    summary = summarize([_row(1, "-10", "A"), _row(1, "4", "A")])
    assert summary.total_net == Decimal("-6")
    assert summary_payload(summary)["topSuppliers"] == [{"supplierName": "A", "cars": 2, "net": -6}]


def test_unknown_bucket_label_differs_from_document_dash():
    from modules.export.invoice import NO_SUPPLIER

    assert UNKNOWN_SUPPLIER == "—"
    assert NO_SUPPLIER == "-"
