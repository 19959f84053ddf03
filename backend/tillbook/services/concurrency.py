# Overview: Atomic state transitions for status-driven records.

from __future__ import annotations

from ..extensions import db


def compare_and_set(model, entity_id: int, expected_statuses, values: dict, *criteria) -> bool:
    """
    Move a row to a new state only if it is still in one of the expected states.

    Runs a single ``UPDATE ... WHERE id = :id AND status IN (...)`` so two
    concurrent callers cannot both pass the state check. Extra ``criteria``
    are ANDed into the same WHERE clause. Returns True when exactly one row
    changed. The caller owns commit/rollback.
    """
    updated = (
        db.session.query(model)
        .filter(model.id == entity_id, model.status.in_(tuple(expected_statuses)), *criteria)
        .update(values, synchronize_session=False)
    )
    return updated == 1
