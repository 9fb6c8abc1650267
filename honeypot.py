"""Honeypot intelligence log: records what was extracted from flagged
interactions and serves the most recent entries for the threat feed."""

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool  # type: ignore

import store
from database import get_db
from models import HoneypotEvent
from schemas import HoneypotEventCreate, HoneypotEventResponse, WriteAck

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/honeypot", tags=["honeypot"])


def _save_event(db: Session, scam_type: str, intel_json: str, incident_id: Optional[str]) -> HoneypotEvent:
    event = HoneypotEvent(
        id=store.new_id(),
        scam_type=scam_type,
        intel_extracted=intel_json,
        created_at=store.utcnow(),
        incident_id=incident_id,
    )
    store.insert_event(db, event)
    # Log every capture
    logger.info(f"Honeypot event {event.id} | {scam_type} | incident={incident_id}")
    return event


def record_event(db: Session, scam_type: str, extracted_intel: Dict[str, Any],
                 incident_id: Optional[str] = None) -> HoneypotEvent:
    return _save_event(db, scam_type, json.dumps(extracted_intel), incident_id)


def list_raw_events(db: Session) -> List[HoneypotEvent]:
    try:
        return store.list_recent_events(db)
    except SQLAlchemyError as e:
        logger.error(f"Failed to list honeypot events: {e}")
        return []


def list_recent_events(db: Session) -> List[Dict[str, Any]]:
    """Up to 50 events, newest first, with the intel blob parsed."""
    return [
        {
            "id": event.id,
            "scam_type": event.scam_type,
            "extracted_intel": event.extracted_intel,
            "timestamp": event.created_at,
            "incident_id": event.incident_id,
        }
        for event in list_raw_events(db)
    ]


@router.get("", response_model=List[HoneypotEventResponse])
async def get_honeypot_events(db: Session = Depends(get_db)):
    return await run_in_threadpool(list_raw_events, db)


@router.post("", response_model=WriteAck)
async def create_honeypot_event(event: HoneypotEventCreate, db: Session = Depends(get_db)):
    try:
        db_event = await run_in_threadpool(
            _save_event, db, event.scam_type, event.intel_extracted, event.incident_id
        )
    except store.DuplicateKeyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return WriteAck(id=db_event.id)
