"""Persistence operations for incidents and honeypot events.

Both tables are append-only: rows are inserted once and never updated.
The only deletion path is `apply_retention`, which does nothing unless a
retention bound is configured.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import FlushError

from config import settings
from models import Incident, HoneypotEvent

logger = logging.getLogger(__name__)

HONEYPOT_READ_CAP = 50


class DuplicateKeyError(Exception):
    """Raised when a record with the same identifier is already stored."""


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    # SQLite DateTime columns are naive; everything is stored as UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _insert(db: Session, record):
    db.add(record)
    try:
        db.commit()
    except (IntegrityError, FlushError) as e:
        db.rollback()
        raise DuplicateKeyError(f"{type(record).__name__} {record.id} already exists") from e
    db.refresh(record)
    return record


def insert_incident(db: Session, incident: Incident) -> Incident:
    return _insert(db, incident)


def insert_event(db: Session, event: HoneypotEvent) -> HoneypotEvent:
    return _insert(db, event)


def list_incidents(db: Session):
    return db.query(Incident).order_by(Incident.created_at.desc()).all()


def list_recent_events(db: Session, limit: int = HONEYPOT_READ_CAP):
    limit = max(0, min(limit, HONEYPOT_READ_CAP))
    return (
        db.query(HoneypotEvent)
        .order_by(HoneypotEvent.created_at.desc())
        .limit(limit)
        .all()
    )


def apply_retention(db: Session, incident_days=None, honeypot_max_rows=None):
    """Drop rows outside the configured retention window.

    Returns a ``(incidents_removed, events_removed)`` tuple.
    """
    if incident_days is None:
        incident_days = settings.INCIDENT_RETENTION_DAYS
    if honeypot_max_rows is None:
        honeypot_max_rows = settings.HONEYPOT_MAX_ROWS

    incidents_removed = events_removed = 0
    if incident_days is not None:
        cutoff = utcnow() - timedelta(days=incident_days)
        incidents_removed = (
            db.query(Incident)
            .filter(Incident.created_at < cutoff)
            .delete(synchronize_session=False)
        )
    if honeypot_max_rows is not None:
        keep = (
            db.query(HoneypotEvent.id)
            .order_by(HoneypotEvent.created_at.desc())
            .limit(honeypot_max_rows)
            .subquery()
        )
        events_removed = (
            db.query(HoneypotEvent)
            .filter(HoneypotEvent.id.not_in(select(keep.c.id)))
            .delete(synchronize_session=False)
        )
    db.commit()
    if incidents_removed or events_removed:
        logger.info(
            f"Retention sweep removed {incidents_removed} incidents, {events_removed} honeypot events"
        )
    return incidents_removed, events_removed
