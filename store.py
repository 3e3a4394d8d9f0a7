"""Generic repository over the relational store.

The rest of the code talks to the database only through ``Repository``:
``find_by_id``, ``find_many``, ``count``, ``create``, ``update`` and
``delete``. Driver and ORM failures are classified into ``StoreErrorKind``
here and translated into the application error taxonomy at this boundary.
"""

import enum
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from errors import Conflict, NotFound, StoreError
from extensions import db

logger = logging.getLogger(__name__)

# SQLSTATE codes (PostgreSQL) and message fragments (SQLite)
_UNIQUE_SQLSTATE = "23505"
_FOREIGN_KEY_SQLSTATE = "23503"


class StoreErrorKind(enum.Enum):
    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    RECORD_NOT_FOUND = "record_not_found"
    STALE_RECORD = "stale_record"
    OTHER = "other"


def classify_store_error(exc: BaseException) -> StoreErrorKind:
    """Map a driver/ORM exception onto ``StoreErrorKind``."""
    if isinstance(exc, NoResultFound):
        return StoreErrorKind.RECORD_NOT_FOUND
    if isinstance(exc, StaleDataError):
        return StoreErrorKind.STALE_RECORD
    if isinstance(exc, IntegrityError):
        orig = getattr(exc, "orig", None)
        sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
        text = str(orig or exc).upper()
        if sqlstate == _UNIQUE_SQLSTATE or "UNIQUE" in text:
            return StoreErrorKind.UNIQUE_VIOLATION
        if sqlstate == _FOREIGN_KEY_SQLSTATE or "FOREIGN KEY" in text:
            return StoreErrorKind.FOREIGN_KEY_VIOLATION
    return StoreErrorKind.OTHER


class Repository:
    """Store interface for one mapped model."""

    def __init__(self, model, label: Optional[str] = None) -> None:
        self.model = model
        self.label = label or model.__name__

    # ------------------------------------------------------------------ reads
    def find_by_id(self, record_id) -> Optional[Any]:
        return db.session.get(self.model, record_id)

    def get_or_raise(self, record_id):
        record = self.find_by_id(record_id)
        if record is None:
            raise NotFound(f"{self.label} not found")
        return record

    def find_many(
        self,
        criteria: Iterable = (),
        order_by: Sequence = (),
        skip: Optional[int] = None,
        take: Optional[int] = None,
        options: Sequence = (),
    ) -> List[Any]:
        stmt = select(self.model).where(*criteria).order_by(*order_by)
        if options:
            stmt = stmt.options(*options)
        if skip:
            stmt = stmt.offset(skip)
        if take is not None:
            stmt = stmt.limit(take)
        return list(db.session.scalars(stmt))

    def count(self, criteria: Iterable = ()) -> int:
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        return db.session.scalar(stmt) or 0

    # ----------------------------------------------------------------- writes
    def create(self, **fields):
        record = self.model(**fields)
        with self.translate_errors():
            db.session.add(record)
            db.session.commit()
        logger.info("Created %s id=%s", self.label, record.id)
        return record

    def update(self, record_id, fields: Dict[str, Any]):
        """Apply ``fields`` to the stored record as one unit of work."""
        record = self.get_or_raise(record_id)
        with self.translate_errors(record_id):
            for name, value in fields.items():
                setattr(record, name, value)
            db.session.commit()
        logger.info("Updated %s id=%s fields=%s", self.label, record_id, sorted(fields))
        return record

    def delete(self, record_id) -> None:
        """Hard delete; a missing identifier is ``NotFound``, never a no-op."""
        with self.translate_errors(record_id):
            deleted = db.session.query(self.model).filter_by(id=record_id).delete(
                synchronize_session="fetch"
            )
            if not deleted:
                db.session.rollback()
                raise NotFound(f"{self.label} not found")
            db.session.commit()
        logger.info("Deleted %s id=%s", self.label, record_id)

    # ---------------------------------------------------------------- errors
    @contextmanager
    def translate_errors(self, record_id=None):
        """Roll back and translate store failures raised inside the block."""
        try:
            yield
        except (NotFound, Conflict):
            raise
        except SQLAlchemyError as exc:
            db.session.rollback()
            kind = classify_store_error(exc)
            logger.warning("%s store failure (%s): %s", self.label, kind.value, exc)
            if kind is StoreErrorKind.UNIQUE_VIOLATION:
                raise Conflict(f"{self.label} already exists") from exc
            if kind is StoreErrorKind.FOREIGN_KEY_VIOLATION:
                raise Conflict(f"{self.label} is referenced by other records") from exc
            if kind is StoreErrorKind.RECORD_NOT_FOUND:
                raise NotFound(f"{self.label} not found") from exc
            if kind is StoreErrorKind.STALE_RECORD:
                if record_id is not None and not self.count([self.model.id == record_id]):
                    raise NotFound(f"{self.label} not found") from exc
                raise Conflict(f"{self.label} was modified concurrently") from exc
            raise StoreError() from exc
