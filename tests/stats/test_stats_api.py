from datetime import datetime

from modules.stats.aggregation import UNKNOWN_SUPPLIER


def test_summary_requires_login(client):
    assert client.get("/api/stats/summary").status_code == 401


def test_summary_empty(client, login):
    login("viewer")
    body = client.get("/api/stats/summary").get_json()
    assert body == {
        "totals": {"totalCars": 0, "totalNet": 0, "totalGross": 0},
        "dailySeries": [],
        "topSuppliers": [],
    }


def test_summary_with_date_range(client, login, make_supplier, make_weighing):
    agro = make_supplier("Agro")
    make_weighing(gross="1000.000", tare_count=2, tare_weight="25.500", supplier_id=agro,
                  created_at=datetime(2024, 5, 1, 9, 0))
    make_weighing(gross="500.250", tare_count=0, tare_weight="0", created_at=datetime(2024, 5, 2, 9, 0))
    make_weighing(gross="700.000", tare_count=1, tare_weight="100", supplier_id=agro,
                  created_at=datetime(2024, 6, 1, 9, 0))
    login("viewer")

    body = client.get("/api/stats/summary?from=2024-05-01&to=2024-05-31").get_json()
    assert body["totals"] == {"totalCars": 2, "totalNet": 1449.25, "totalGross": 1500.25}
    assert body["dailySeries"] == [
        {"date": "2024-05-01", "cars": 1, "net": 949},
        {"date": "2024-05-02", "cars": 1, "net": 500.25},
    ]
    assert body["topSuppliers"] == [
        {"supplierName": "Agro", "cars": 1, "net": 949},
        {"supplierName": UNKNOWN_SUPPLIER, "cars": 1, "net": 500.25},
    ]

    # supplierId не влияет на сводку
    everything = client.get(f"/api/stats/summary?supplierId={agro + 1}&from=junk").get_json()
    assert everything["totals"]["totalCars"] == 3
