"""Conditional updates used to claim one-shot alert flags."""

from __future__ import annotations

from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session


def claim_alert_flag(
    session: Session,
    model: type,
    entity_id: int,
    flag: str,
    *,
    extra_values: dict[str, Any] | None = None,
) -> bool:
    """Flip ``flag`` from false to true for ``entity_id``.

    The flag is only written when it is still false, so of two overlapping
    sweeps only one sees ``rowcount == 1`` and goes on to notify.
    """

    column = getattr(model, flag)
    values: dict[str, Any] = {flag: True}
    if extra_values:
        values.update(extra_values)
    statement = (
        update(model)
        .where(model.id == entity_id)
        .where(column.is_(False))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = session.execute(statement)
    return result.rowcount == 1


__all__ = ["claim_alert_flag"]
