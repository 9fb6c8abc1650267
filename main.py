import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool  # type: ignore

from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import status

import aggregates
import store
from config import settings
from database import SessionLocal, get_db, init_db
from guidance import recovery_guide
from honeypot import router as honeypot_router, list_recent_events
from incidents import router as incidents_router, list_incidents
from schemas import IncidentResponse


def setup_logging():
    handlers = [logging.StreamHandler()]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE))
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


setup_logging()
logger = logging.getLogger(__name__)

init_db()


def _apply_retention():
    db = SessionLocal()
    try:
        store.apply_retention(db)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await run_in_threadpool(_apply_retention)
    yield


app = FastAPI(title="CyberGuard Backend", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Update this with your frontend URL in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Validation Error | {request.url.path} | {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors())},
    )


# Add error handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


# Add status endpoint to check API health
@app.get("/status")
async def check_status():
    return {"status": "operational"}


def _incident_records(db: Session):
    return [
        IncidentResponse.model_validate(incident).model_dump(by_alias=True, mode="json")
        for incident in list_incidents(db)
    ]


@app.get("/api/summary")
async def get_summary(db: Session = Depends(get_db)):
    records = await run_in_threadpool(_incident_records, db)
    return aggregates.dashboard_summary(records)


@app.get("/api/intelligence")
async def get_intelligence(db: Session = Depends(get_db)):
    records = await run_in_threadpool(_incident_records, db)
    events = await run_in_threadpool(list_recent_events, db)
    return aggregates.intelligence_report(records, events)


@app.get("/api/recovery")
async def get_recovery():
    return recovery_guide()


app.include_router(incidents_router)
app.include_router(honeypot_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
