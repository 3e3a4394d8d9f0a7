"""Weighing record model, derivation rule and input validation.

A weighing is one pass of a vehicle over the gate scale::

    tare_total = tare_count * tare_weight
    net_weight = gross_weight - tare_total

Both derived values are recomputed from the *merged* input set on every
create and update. ``net_weight`` may go negative when the containers weigh
more than the load; that is kept as-is.
"""

from decimal import Decimal
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

from errors import ValidationError
from extensions import db
from models import utcnow
from weights import WEIGHT_MAX, to_number, to_weight

CAR_NUMBER_MAX_LENGTH = 50
# INTEGER-колонки (tare_count, id): 32 бита со знаком
INTEGER_MAX = 2**31 - 1

# JSON key -> column
FIELD_NAMES = {
    "carNumber": "car_number",
    "supplierId": "supplier_id",
    "grossWeight": "gross_weight",
    "tareCount": "tare_count",
    "tareWeight": "tare_weight",
    "photoUrl": "photo_url",
    "note": "note",
}
DERIVATION_INPUTS = ("gross_weight", "tare_count", "tare_weight")


class Weighing(db.Model):
    __tablename__ = "weighings"

    id = db.Column(db.Integer, primary_key=True)
    car_number = db.Column(db.String(CAR_NUMBER_MAX_LENGTH), nullable=False, index=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey("suppliers.id"), index=True)

    # Весы: всё в Decimal, шаг 0.001
    gross_weight = db.Column(db.Numeric(12, 3), nullable=False)
    tare_count = db.Column(db.Integer, nullable=False, default=0)
    tare_weight = db.Column(db.Numeric(12, 3), nullable=False)
    tare_total = db.Column(db.Numeric(12, 3), nullable=False)
    net_weight = db.Column(db.Numeric(12, 3), nullable=False)

    photo_url = db.Column(db.String(1024))
    note = db.Column(db.Text)

    created_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    # optimistic lock for the fetch -> merge -> derive -> persist sequence
    version = db.Column(db.Integer, nullable=False)

    supplier = db.relationship("Supplier", back_populates="weighings")
    created_by = db.relationship("User")

    __mapper_args__ = {"version_id_col": version}

    @property
    def supplier_name(self) -> Optional[str]:
        return self.supplier.name if self.supplier is not None else None

    @property
    def operator_email(self) -> Optional[str]:
        return self.created_by.email if self.created_by is not None else None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "carNumber": self.car_number,
            "supplierId": self.supplier_id,
            "supplier": {"id": self.supplier.id, "name": self.supplier.name} if self.supplier else None,
            "grossWeight": to_number(self.gross_weight),
            "tareCount": self.tare_count,
            "tareWeight": to_number(self.tare_weight),
            "tareTotal": to_number(self.tare_total),
            "netWeight": to_number(self.net_weight),
            "photoUrl": self.photo_url,
            "note": self.note,
            "createdById": self.created_by_id,
            "createdBy": {"id": self.created_by.id, "email": self.created_by.email} if self.created_by else None,
            "createdAt": self.created_at.isoformat() + "Z" if self.created_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Weighing {self.id}: {self.car_number}>"


def derive_totals(gross_weight: Decimal, tare_count: int, tare_weight: Decimal) -> Tuple[Decimal, Decimal]:
    """Return ``(tare_total, net_weight)``; exact for Decimal inputs."""
    tare_total = tare_count * tare_weight
    net_weight = gross_weight - tare_total
    return tare_total, net_weight


def merge_fields(existing: Weighing, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Existing derivation inputs overridden by whatever ``changes`` supplies."""
    merged = {name: getattr(existing, name) for name in DERIVATION_INPUTS}
    merged.update({k: v for k, v in changes.items() if k in DERIVATION_INPUTS})
    return merged


def with_totals(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Add ``tare_total``/``net_weight`` computed from a complete input set."""
    tare_total, net_weight = derive_totals(
        fields["gross_weight"], fields["tare_count"], fields["tare_weight"]
    )
    if abs(tare_total) > WEIGHT_MAX or abs(net_weight) > WEIGHT_MAX:
        raise ValidationError({"tareTotal": [f"Derived weight must not exceed {WEIGHT_MAX}"]})
    return dict(fields, tare_total=tare_total, net_weight=net_weight)


# ---------- Валидация входа ----------

def _car_number(value) -> str:
    if not isinstance(value, str):
        raise ValueError("Expected a string")
    if not 1 <= len(value) <= CAR_NUMBER_MAX_LENGTH:
        raise ValueError(f"Must be 1-{CAR_NUMBER_MAX_LENGTH} characters")
    return value


def _supplier_id(value) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("Expected a supplier id")
    try:
        supplier_id = int(value)
    except (TypeError, ValueError):
        raise ValueError("Expected a supplier id") from None
    if not 1 <= supplier_id <= INTEGER_MAX:
        raise ValueError("Expected a supplier id")
    return supplier_id


def _tare_count(value) -> int:
    if isinstance(value, bool):
        raise ValueError("Expected an integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise ValueError("Expected an integer")
    if value < 0:
        raise ValueError("Must be greater than or equal to 0")
    if value > INTEGER_MAX:
        raise ValueError(f"Must not exceed {INTEGER_MAX}")
    return value


def _photo_url(value) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Expected a URL")
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid url")
    return value


def _note(value) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Expected a string")
    return value


def validate_weighing(payload: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Parse a camelCase JSON body into column values.

    All offending fields are reported together in one ``ValidationError``.
    With ``partial=True`` absent keys are left out of the result.
    """
    cleaned: Dict[str, Any] = {}
    errors: Dict[str, list] = {}

    def take(key, parser, required=True):
        if key not in payload:
            if required and not partial:
                errors.setdefault(key, []).append("Required")
            return
        try:
            cleaned[FIELD_NAMES[key]] = parser(payload[key])
        except ValidationError as exc:
            for field, messages in exc.fields.items():
                errors.setdefault(field, []).extend(messages)
        except ValueError as exc:
            errors.setdefault(key, []).append(str(exc))

    take("carNumber", _car_number)
    take("supplierId", _supplier_id, required=False)
    take("grossWeight", lambda v: to_weight(v, "grossWeight"))
    take("tareCount", _tare_count)
    take("tareWeight", lambda v: to_weight(v, "tareWeight"))
    take("photoUrl", _photo_url, required=False)
    take("note", _note, required=False)

    if "gross_weight" in cleaned and cleaned["gross_weight"] <= 0:
        errors.setdefault("grossWeight", []).append("Must be greater than 0")
    if "tare_weight" in cleaned and cleaned["tare_weight"] < 0:
        errors.setdefault("tareWeight", []).append("Must be greater than or equal to 0")

    if errors:
        raise ValidationError(errors)
    return cleaned
