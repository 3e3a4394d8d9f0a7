# tests/conftest.py
import os
import sys
from datetime import datetime
from decimal import Decimal

import pytest
from werkzeug.security import generate_password_hash

# чтобы import create_app работал при запуске из корня
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app  # noqa: E402
from config import TestingConfig  # noqa: E402
from extensions import db  # noqa: E402
from models import Role, User  # noqa: E402
from modules.export.invoice import build_default_template  # noqa: E402
from modules.suppliers.models import Supplier  # noqa: E402
from modules.weighings.models import Weighing, derive_totals  # noqa: E402

PASSWORD = "Secret123!"


@pytest.fixture()
def template_path(tmp_path):
    path = tmp_path / "invoice_template.docx"
    path.write_bytes(build_default_template())
    return path


@pytest.fixture()
def app(tmp_path, template_path):
    app = create_app(
        TestingConfig,
        UPLOAD_FOLDER=str(tmp_path / "uploads"),
        INVOICE_TEMPLATE_PATH=str(template_path),
        API_PUBLIC_URL="http://testserver",
    )
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def users(app):
    """One user per role; returns ``{role: id}``."""
    ids = {}
    with app.app_context():
        for role in Role:
            user = User(
                email=f"{role.value}@local",
                password_hash=generate_password_hash(PASSWORD),
                role=role.value,
            )
            db.session.add(user)
            db.session.commit()
            ids[role.value] = user.id
    return ids


@pytest.fixture()
def login(client, users):
    """``login("admin")`` authenticates the test client as that role."""

    def _login(role: str) -> int:
        with client.session_transaction() as session:
            session["_user_id"] = str(users[role])
            session["_fresh"] = True
        return users[role]

    return _login


@pytest.fixture()
def make_supplier(app):
    def _make(name: str) -> int:
        with app.app_context():
            supplier = Supplier(name=name)
            db.session.add(supplier)
            db.session.commit()
            return supplier.id

    return _make


@pytest.fixture()
def make_weighing(app, users):
    """Insert a weighing directly (bypassing the API) with an explicit timestamp."""

    def _make(
        car_number="A123BC",
        gross="1000.000",
        tare_count=2,
        tare_weight="25.500",
        supplier_id=None,
        created_at=None,
        created_by=None,
    ) -> int:
        gross = Decimal(gross)
        tare_weight = Decimal(tare_weight)
        tare_total, net_weight = derive_totals(gross, tare_count, tare_weight)
        with app.app_context():
            weighing = Weighing(
                car_number=car_number,
                supplier_id=supplier_id,
                gross_weight=gross,
                tare_count=tare_count,
                tare_weight=tare_weight,
                tare_total=tare_total,
                net_weight=net_weight,
                created_by_id=created_by or users["operator"],
                created_at=created_at or datetime(2024, 5, 1, 8, 30, 0),
            )
            db.session.add(weighing)
            db.session.commit()
            return weighing.id

    return _make
