"""Persistence layer: unit of work, audit stamping and seed data."""

from .audit import AuditingSession, stamp_audit_fields
from .unit_of_work import UnitOfWork

__all__ = ["AuditingSession", "UnitOfWork", "stamp_audit_fields"]
