import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IncidentKind(str, Enum):
    website = "website"
    audio = "audio"


def _round_score(value):
    """Gemini sends scores as JSON numbers; keep them integral."""
    if isinstance(value, float):
        return int(round(value))
    return value


# --- Incidents ---

class IncidentCreate(BaseModel):
    # id/timestamp from older clients are accepted and ignored
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    timestamp: Optional[str] = None
    kind: IncidentKind = Field(..., alias="type")
    target: str
    risk_score: int = Field(..., alias="riskScore", ge=0, le=100)
    patterns: List[str] = Field(default_factory=list)

    @field_validator("risk_score", mode="before")
    @classmethod
    def _coerce_score(cls, value):
        return _round_score(value)


class IncidentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    kind: IncidentKind = Field(..., alias="type")
    target: str
    created_at: datetime = Field(..., alias="timestamp")
    risk_score: int = Field(..., alias="riskScore")
    patterns: List[str]


# --- Honeypot events ---

class HoneypotEventCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    timestamp: Optional[str] = None
    scam_type: str
    intel_extracted: Union[str, Dict[str, Any]]
    incident_id: Optional[str] = None

    @field_validator("intel_extracted", mode="before")
    @classmethod
    def _serialize_intel(cls, value):
        if isinstance(value, dict):
            return json.dumps(value)
        return value


class HoneypotEventResponse(BaseModel):
    """Raw event row; intel_extracted stays a JSON string for the caller to parse."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    scam_type: str
    intel_extracted: str
    created_at: datetime = Field(..., alias="timestamp")
    incident_id: Optional[str] = None


class WriteAck(BaseModel):
    status: str = "ok"
    id: str


# --- Analysis gateway verdicts ---

class WebsiteVerdict(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["Safe", "Suspicious", "Fake"]
    risk_score: int = Field(..., alias="riskScore", ge=0, le=100)
    reasons: List[str]
    details: str

    @field_validator("risk_score", mode="before")
    @classmethod
    def _coerce_score(cls, value):
        return _round_score(value)

    @property
    def flagged(self) -> bool:
        return self.status != "Safe"


class AudioVerdict(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scam_probability: int = Field(..., alias="scamProbability", ge=0, le=100)
    is_scam: bool = Field(..., alias="isScam")
    alerts: List[str]
    explanation: str

    @field_validator("scam_probability", mode="before")
    @classmethod
    def _coerce_score(cls, value):
        return _round_score(value)

    @property
    def flagged(self) -> bool:
        return self.is_scam


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatReply(BaseModel):
    content: str
