"""Incident ingest service and its HTTP routes."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool  # type: ignore

import store
from database import get_db
from models import Incident
from schemas import IncidentCreate, IncidentKind, IncidentResponse, WriteAck

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/incidents", tags=["incidents"])


def record_incident(db: Session, kind, target: str, risk_score: int, patterns: List[str]) -> Incident:
    incident = Incident(
        id=store.new_id(),
        kind=IncidentKind(kind).value,
        target=target,
        created_at=store.utcnow(),
        risk_score=risk_score,
        patterns=patterns,
    )
    store.insert_incident(db, incident)
    logger.info(f"Incident recorded {incident.id} | {incident.kind} | risk={risk_score}")
    return incident


def _readable(incident: Incident) -> bool:
    try:
        patterns = incident.patterns
    except ValueError as e:
        logger.warning(f"Skipping incident {incident.id}: undecodable patterns ({e})")
        return False
    if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
        logger.warning(f"Skipping incident {incident.id}: patterns is not a list of labels")
        return False
    return True


def list_incidents(db: Session) -> List[Incident]:
    """Newest first. A broken store yields an empty list, never an error;
    rows with a corrupt patterns blob are logged and left out."""
    try:
        incidents = store.list_incidents(db)
    except SQLAlchemyError as e:
        logger.error(f"Failed to list incidents: {e}")
        return []
    return [incident for incident in incidents if _readable(incident)]


@router.get("", response_model=List[IncidentResponse])
async def get_incidents(db: Session = Depends(get_db)):
    return await run_in_threadpool(list_incidents, db)


@router.post("", response_model=WriteAck)
async def create_incident(incident: IncidentCreate, db: Session = Depends(get_db)):
    if incident.id or incident.timestamp:
        logger.debug("Ignoring client-supplied id/timestamp on incident")
    try:
        db_incident = await run_in_threadpool(
            record_incident, db, incident.kind, incident.target,
            incident.risk_score, incident.patterns,
        )
    except store.DuplicateKeyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return WriteAck(id=db_incident.id)
