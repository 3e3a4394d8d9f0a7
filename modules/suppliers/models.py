"""SQLAlchemy models and domain operations for suppliers."""

import logging

from errors import Conflict, ValidationError
from extensions import db
from models import utcnow
from store import Repository

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 255


class Supplier(db.Model):
    """A party delivering goods through the gate. Names are unique (case-sensitive)."""

    __tablename__ = "suppliers"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(NAME_MAX_LENGTH), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    weighings = db.relationship("Weighing", back_populates="supplier", lazy="dynamic")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Supplier {self.name}>"


suppliers = Repository(Supplier, label="Supplier")


def validate_supplier_name(payload: dict) -> str:
    name = payload.get("name")
    if not isinstance(name, str):
        raise ValidationError({"name": ["Expected a string"]})
    if not 1 <= len(name) <= NAME_MAX_LENGTH:
        raise ValidationError({"name": [f"Must be 1-{NAME_MAX_LENGTH} characters"]})
    return name


# ---------- Доменные операции ----------

def list_suppliers():
    return suppliers.find_many(order_by=[Supplier.name.asc()])


def create_supplier(payload: dict) -> Supplier:
    name = validate_supplier_name(payload)
    try:
        return suppliers.create(name=name)
    except Conflict:
        raise Conflict("Supplier with this name already exists") from None


def rename_supplier(supplier_id: int, payload: dict) -> Supplier:
    name = validate_supplier_name(payload)
    try:
        return suppliers.update(supplier_id, {"name": name})
    except Conflict:
        raise Conflict("Supplier with this name already exists") from None


def delete_supplier(supplier_id: int) -> None:
    """Hard delete, refused while any weighing still references the supplier."""
    supplier = suppliers.get_or_raise(supplier_id)
    in_use = supplier.weighings.count()
    if in_use:
        logger.warning("Refusing to delete supplier %s: %d weighings reference it", supplier_id, in_use)
        raise Conflict(
            "Supplier is referenced by existing weighings",
            details={"weighings": in_use},
        )
    suppliers.delete(supplier_id)
