import io
import zipfile
from datetime import datetime

from openpyxl import load_workbook


def test_excel_export_follows_list_filters_and_order(client, login, make_supplier, make_weighing):
    agro = make_supplier("Agro")
    make_weighing(car_number="OLD-1", supplier_id=agro, created_at=datetime(2024, 5, 1, 9, 0))
    make_weighing(car_number="NEW-2", created_at=datetime(2024, 5, 2, 9, 0))
    make_weighing(car_number="ZZZ-3", created_at=datetime(2024, 5, 3, 9, 0))
    login("viewer")

    resp = client.get("/api/export/excel?carNumber=-")
    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert "weighings.xlsx" in resp.headers["Content-Disposition"]

    ws = load_workbook(io.BytesIO(resp.data)).active
    rows = list(ws.iter_rows(values_only=True))
    assert len(rows) == 4
    assert [r[1] for r in rows[1:]] == ["ZZZ-3", "NEW-2", "OLD-1"]
    assert rows[3][2] == "Agro"
    assert rows[3][8] == "operator@local"

    filtered = load_workbook(io.BytesIO(client.get("/api/export/excel?carNumber=new").data)).active
    assert filtered.max_row == 2


def test_excel_export_requires_login(client):
    assert client.get("/api/export/excel").status_code == 401


def test_invoice_download(client, login, make_weighing):
    weighing_id = make_weighing(car_number="A123BC")
    login("viewer")
    resp = client.get(f"/api/weighings/{weighing_id}/invoice.docx")
    assert resp.status_code == 200
    assert "invoice_A123BC.docx" in resp.headers["Content-Disposition"]
    with zipfile.ZipFile(io.BytesIO(resp.data)) as zf:
        xml = zf.read("word/document.xml").decode("utf-8")
    assert "Car: A123BC" in xml
    assert "Supplier: -" in xml
    assert "Operator: operator@local" in xml
    assert "{{" not in xml


def test_invoice_errors_are_distinct(client, app, login, make_weighing, template_path):
    weighing_id = make_weighing()
    login("viewer")
    template_path.unlink()

    missing_record = client.get("/api/weighings/4242/invoice.docx")
    assert missing_record.status_code == 404
    assert missing_record.get_json()["code"] == "NOT_FOUND"

    missing_template = client.get(f"/api/weighings/{weighing_id}/invoice.docx")
    assert missing_template.status_code == 500
    assert missing_template.get_json()["code"] == "TEMPLATE_ERROR"
