"""
Audit stamping for audited entities.

A ``before_flush`` listener fills the audit columns of every
:class:`~clean_api.domain.entities.BaseEntity` the session is about to write.
The acting user is read from ``session.info["actor"]``.
"""

from datetime import datetime, timezone

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from ..domain.entities import SYSTEM_ACTOR, BaseEntity
from ..logging_config import get_logger

logger = get_logger(__name__)

PROTECTED_FIELDS = ("date_created", "created_by")


class AuditingSession(Session):
    """Session class whose flushes stamp audit columns."""


def current_actor(session: Session) -> str:
    return session.info.get("actor") or SYSTEM_ACTOR


def _restore_creation_fields(entity: BaseEntity) -> None:
    state = inspect(entity)
    for field in PROTECTED_FIELDS:
        history = state.attrs[field].history
        if not history.has_changes():
            continue
        original = history.deleted[0] if history.deleted else None
        setattr(entity, field, original)


@event.listens_for(AuditingSession, "before_flush")
def stamp_audit_fields(session: Session, flush_context, instances) -> None:
    """
    Stamp creation and modification audit fields before a flush.

    New entities receive ``date_created``/``created_by``. Modified entities
    receive ``date_modified``/``modified_by`` and keep their creation fields.
    Deleted entities are removed without stamping.
    """
    actor = current_actor(session)
    now = datetime.now(timezone.utc)

    for entity in session.new:
        if isinstance(entity, BaseEntity):
            entity.date_created = now
            entity.created_by = actor

    for entity in session.dirty:
        if not isinstance(entity, BaseEntity):
            continue
        if not session.is_modified(entity, include_collections=False):
            continue
        _restore_creation_fields(entity)
        entity.date_modified = now
        entity.modified_by = actor
        logger.debug(
            "Stamped modified entity",
            entity=type(entity).__name__,
            entity_id=entity.id,
            actor=actor,
        )
