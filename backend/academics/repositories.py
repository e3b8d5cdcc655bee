"""Generic persistence object used by the course context.

`Repo` executes exactly one statement (or one insert/update/delete
followed by a commit) per call. Reads return SQLModel objects; writes
take a `Change` or a record and return an `Ok`/`Err` result, rolling
the session back when the database rejects the write.
"""

import logging
import re
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from .changes import Change
from .models import utcnow
from .results import Err, Ok, Result

logger = logging.getLogger("academics.repositories")

_NOT_NULL_RE = re.compile(r"NOT NULL constraint failed: \w+\.(\w+)")


class Repo:
    """Single-statement CRUD execution over a `Session`."""
    def __init__(self, session: Session):
        self.session = session

    def all(self, statement) -> List:
        """Return every row produced by `statement`."""
        return list(self.session.exec(statement).all())

    def one(self, statement) -> Optional[object]:
        """Return the single row produced by `statement` or `None`.

        More than one row raises `MultipleResultsFound`; that is a query
        bug, not a lookup outcome.
        """
        return self.session.exec(statement).one_or_none()

    def insert(self, change: Change) -> Result:
        """Persist the record behind a valid `change`."""
        change.action = "insert"
        return self._write(change)

    def update(self, change: Change) -> Result:
        """Apply a valid `change` to its already persisted record."""
        change.action = "update"
        return self._write(change)

    def delete(self, record) -> Result:
        """Delete `record`'s row.

        The row is re-read by primary key first so that deleting a
        record whose row is already gone fails instead of silently
        succeeding.
        """
        model = type(record)
        persisted = self.session.get(model, record.id) if record.id is not None else None
        if persisted is None:
            logger.warning("delete_missing %s id=%s", model.__name__, record.id)
            return Err(f"{model.__name__} row {record.id} does not exist")
        try:
            self.session.delete(persisted)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("delete_failed %s id=%s: %s", model.__name__, record.id, exc)
            return Err(str(exc))
        return Ok(persisted)

    def _write(self, change: Change) -> Result:
        if not change.valid:
            return Err(change)
        record = change.apply()
        if change.action == "update" and change.changes:
            record.updated_at = utcnow()
        try:
            self.session.add(record)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("%s_failed %s: %s", change.action, type(record).__name__, exc.orig)
            field, message = _constraint_error(record, change, exc)
            return Err(change.add_error(field, message))
        self.session.refresh(record)
        return Ok(record)


def _constraint_error(record, change: Change, exc: IntegrityError):
    """Map a database constraint failure onto a field error."""
    text = str(exc.orig)
    if "FOREIGN KEY" in text.upper():
        fk_columns = [c.name for c in type(record).__table__.columns if c.foreign_keys]
        touched = [c for c in fk_columns if c in change.changes] or fk_columns
        if touched:
            return touched[0], "does not exist"
    match = _NOT_NULL_RE.search(text)
    if match:
        return match.group(1), "can't be blank"
    return "__all__", "violates a database constraint"
