"""Shared SQLAlchemy models."""

import enum
from datetime import datetime, timezone

from flask_login import UserMixin

from extensions import db


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every ``DateTime`` column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Role(str, enum.Enum):
    """Closed set of roles a principal can hold."""

    ADMIN = "admin"
    OPERATOR = "operator"
    VIEWER = "viewer"


class User(UserMixin, db.Model):
    """Represents an authenticated application user."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=Role.VIEWER.value)  # admin, operator, viewer
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email, "role": self.role}

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<User {self.email}>"
