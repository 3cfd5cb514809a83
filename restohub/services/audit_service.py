"""Audit log helpers."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from restohub.models import AuditLog, Customer, Staff


def log_action(
    db: Session,
    *,
    actor: Staff | Customer | str | None,
    action_type: str,
    sale_id: int | None = None,
    before_snapshot: dict[str, Any] | None = None,
    after_snapshot: dict[str, Any] | None = None,
) -> None:
    """Queue an audit row on the session; the caller commits."""
    actor_type = "system"
    actor_identifier = "system"
    actor_id = None
    if isinstance(actor, Staff):
        actor_type, actor_id, actor_identifier = "staff", actor.id, actor.email
    elif isinstance(actor, Customer):
        actor_type, actor_id, actor_identifier = "customer", actor.id, actor.email
    elif isinstance(actor, str):
        actor_type, actor_identifier = "gateway", actor

    db.add(
        AuditLog(
            actor_type=actor_type,
            actor_id=actor_id,
            actor_identifier=actor_identifier,
            action_type=action_type,
            sale_id=sale_id,
            before_snapshot=before_snapshot,
            after_snapshot=after_snapshot,
        )
    )
