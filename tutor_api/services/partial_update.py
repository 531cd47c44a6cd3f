"""Sparse updates for editable records.

A request names only the fields it wants to change. ``build_partial_update``
turns that sparse mapping into an ``UPDATE`` touching exactly those columns
plus ``updated_at``. Values are bound to columns by name, so there is no
positional placeholder list to keep in step with the SET clause.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session
from sqlalchemy.sql import ColumnElement
from sqlalchemy.sql.dml import Update

from tutor_api.core.errors import BadRequestError, NotFoundError, ValidationError
from tutor_api.database import utcnow

logger = logging.getLogger(__name__)

TIMESTAMP_FIELD = "updated_at"


@dataclass(frozen=True)
class PartialUpdate:
    model: type
    values: dict[str, Any]

    @property
    def changed_fields(self) -> list[str]:
        return [name for name in self.values if name != TIMESTAMP_FIELD]

    def statement(self, *criteria: ColumnElement[bool]) -> Update:
        return update(self.model).where(*criteria).values(**self.values)


def build_partial_update(
    model: type,
    changes: Mapping[str, Any],
    allowed: Iterable[str],
    now: datetime | None = None,
) -> PartialUpdate:
    """Validate a sparse change set against ``model`` and freeze it.

    Args:
        model: Mapped class whose table is updated.
        changes: Field name to new value, for present fields only.
        allowed: Fields a caller may change.
        now: Timestamp written to ``updated_at``; defaults to the current time.

    Raises:
        ValidationError: A field is not editable, or a required column would be set to null.
        BadRequestError: Nothing to change.
    """
    allowed = tuple(allowed)
    unknown = sorted(set(changes) - set(allowed))
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")

    columns = model.__table__.c
    values: dict[str, Any] = {}
    for name in allowed:
        if name not in changes:
            continue
        value = changes[name]
        if value is None and not columns[name].nullable:
            raise ValidationError(f"Field '{name}' cannot be null")
        values[name] = value

    if not values:
        raise BadRequestError("No fields to update")

    values[TIMESTAMP_FIELD] = now or utcnow()
    return PartialUpdate(model=model, values=values)


def apply_partial_update(
    db: Session,
    partial: PartialUpdate,
    *criteria: ColumnElement[bool],
    not_found_message: str = "Resource not found",
):
    """Run the update, commit, and return the row as now stored."""
    result = db.execute(partial.statement(*criteria).execution_options(synchronize_session=False))
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(not_found_message)
    db.commit()

    logger.info("Updated %s fields: %s", partial.model.__tablename__, ", ".join(partial.changed_fields))

    refreshed = db.scalars(
        select(partial.model).where(*criteria).execution_options(populate_existing=True)
    ).one_or_none()
    if refreshed is None:
        raise NotFoundError(not_found_message)
    return refreshed
