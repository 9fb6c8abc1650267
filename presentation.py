"""Dashboard state: active view, cached incidents, per-form state and the
analysis flows that tie the gateway to the ingest and honeypot services.

Writes made by the session are tracked as PendingWrite entries tagged
pending, committed or failed. A failed incident write stays visible to the
session as a failed entry and is never merged into the incident list read
back from the backend.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

import aggregates
from config import settings
from gateway import GatewayError
from intel import AUDIO_SCAM_TYPE, WEBSITE_SCAM_TYPE, audio_intel, website_intel
from schemas import ChatTurn

logger = logging.getLogger(__name__)

LIVE_CALL_TARGET = "Live Call Analysis"

GREETING = (
    "Hello. I'm CyberGuard Support. I'm here to help you navigate any cyber safety concerns "
    "or support you if you've been a victim of a scam. How are you feeling right now, "
    "and how can I assist you?"
)
CHAT_FALLBACK = (
    "I'm sorry, I'm having trouble connecting right now. "
    "Please try again or contact our helpline."
)


class StoreWriteFailure(Exception):
    pass


class View(str, Enum):
    dashboard = "dashboard"
    website_scan = "website-scan"
    audio_scan = "audio-scan"
    intelligence = "intelligence"
    recovery = "recovery"
    chat = "chat"


class WriteState(str, Enum):
    pending = "pending"
    committed = "committed"
    failed = "failed"


@dataclass
class PendingWrite:
    incident: Dict[str, Any]
    state: WriteState = WriteState.pending
    error: Optional[str] = None


@dataclass
class FormState:
    text: str = ""
    busy: bool = False
    verdict: Any = None
    error: Optional[str] = None


class ApiClient:
    """Thin HTTP client for the incident and honeypot endpoints."""

    def __init__(self, base_url: Optional[str] = None, session=None, timeout: Optional[int] = None):
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout or settings.API_TIMEOUT

    def _url(self, path):
        return f"{self.base_url}{path}"

    def _get(self, path) -> List[Dict[str, Any]]:
        try:
            response = self.session.get(self._url(path), timeout=self.timeout)
            if response.status_code >= 400:
                logger.error(f"GET {path} answered {response.status_code}: {response.text}")
                return []
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"GET {path} failed: {e}")
            return []

    def _post(self, path, payload) -> Dict[str, Any]:
        # Status is checked by hand so requests and httpx sessions behave alike
        try:
            response = self.session.post(self._url(path), json=payload, timeout=self.timeout)
            if response.status_code >= 400:
                raise StoreWriteFailure(f"POST {path} answered {response.status_code}: {response.text}")
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise StoreWriteFailure(f"POST {path} failed: {e}") from e

    def list_incidents(self):
        return self._get("/api/incidents")

    def list_honeypot_events(self):
        return self._get("/api/honeypot")

    def record_incident(self, kind: str, target: str, risk_score: int, patterns: List[str]) -> str:
        ack = self._post("/api/incidents", {
            "type": kind,
            "target": target,
            "riskScore": risk_score,
            "patterns": patterns,
        })
        return ack["id"]

    def record_event(self, scam_type: str, intel: Dict[str, Any], incident_id: Optional[str] = None) -> str:
        ack = self._post("/api/honeypot", {
            "scam_type": scam_type,
            "intel_extracted": intel,
            "incident_id": incident_id,
        })
        return ack["id"]


class Workspace:
    def __init__(self, gateway, client: Optional[ApiClient] = None):
        self.gateway = gateway
        self.client = client or ApiClient()
        self.active_view = View.dashboard
        self.incidents: List[Dict[str, Any]] = []
        self.events: List[Dict[str, Any]] = []
        self.writes: List[PendingWrite] = []
        self.forms = {View.website_scan: FormState(), View.audio_scan: FormState(), View.chat: FormState()}
        self.chat: List[ChatTurn] = [ChatTurn(role="assistant", content=GREETING)]
        self.recording = False
        self.interim_transcript = ""
        self.refresh()

    # --- navigation and cache ---

    def select(self, view):
        self.active_view = View(view)
        if self.active_view in (View.dashboard, View.intelligence):
            self.refresh()

    def refresh(self):
        self.incidents = self.client.list_incidents()
        self.events = self.client.list_honeypot_events()

    @property
    def failed_writes(self) -> List[PendingWrite]:
        return [w for w in self.writes if w.state == WriteState.failed]

    def dashboard(self):
        summary = aggregates.dashboard_summary(self.incidents)
        summary["failed_writes"] = [w.incident for w in self.failed_writes]
        return summary

    def intelligence(self):
        return aggregates.intelligence_report(self.incidents, self.events)

    # --- ingest ---

    def _ingest(self, kind, target, risk_score, patterns, scam_type, intel) -> PendingWrite:
        write = PendingWrite(incident={
            "type": kind, "target": target, "riskScore": risk_score, "patterns": list(patterns),
        })
        self.writes.append(write)
        try:
            incident_id = self.client.record_incident(kind, target, risk_score, list(patterns))
        except StoreWriteFailure as e:
            logger.error(f"Incident not persisted, kept in session only: {e}")
            write.state = WriteState.failed
            write.error = str(e)
            return write

        write.state = WriteState.committed
        write.incident["id"] = incident_id
        try:
            self.client.record_event(scam_type, intel, incident_id)
        except StoreWriteFailure as e:
            logger.warning(f"Honeypot event dropped for incident {incident_id}: {e}")
        self.refresh()
        return write

    # --- analysis flows ---

    def submit_website(self, url: str):
        form = self.forms[View.website_scan]
        form.text = url
        if not url.strip() or form.busy:
            return None

        form.busy = True
        form.verdict = None
        form.error = None
        try:
            verdict = self.gateway.analyze_website(url)
        except GatewayError as e:
            logger.error(f"Website analysis failed: {e}")
            form.error = "Analysis failed. Please try again."
            return None
        finally:
            form.busy = False

        form.verdict = verdict
        if verdict.flagged:
            self._ingest("website", url, verdict.risk_score, verdict.reasons,
                         WEBSITE_SCAM_TYPE, website_intel(url, verdict))
        return verdict

    def start_recording(self):
        form = self.forms[View.audio_scan]
        form.text = ""
        form.verdict = None
        form.error = None
        self.interim_transcript = ""
        self.recording = True

    def feed_transcript(self, final: str = "", interim: str = ""):
        """Accept output from the speech-to-text producer."""
        self.forms[View.audio_scan].text += final
        self.interim_transcript = interim

    def stop_recording(self):
        self.recording = False

    def analyze_transcript(self):
        form = self.forms[View.audio_scan]
        transcript = form.text + self.interim_transcript
        if not transcript.strip() or form.busy:
            return None

        form.busy = True
        form.verdict = None
        form.error = None
        try:
            verdict = self.gateway.analyze_transcript(transcript)
        except GatewayError as e:
            logger.error(f"Transcript analysis failed: {e}")
            form.error = "Analysis failed. Please try again."
            return None
        finally:
            form.busy = False

        form.verdict = verdict
        if verdict.flagged:
            self._ingest("audio", LIVE_CALL_TARGET, verdict.scam_probability, verdict.alerts,
                         AUDIO_SCAM_TYPE, audio_intel(transcript, verdict))
        return verdict

    # --- support chat ---

    def send_chat(self, message: str):
        form = self.forms[View.chat]
        if not message.strip() or form.busy:
            return None

        prior_turns = list(self.chat)
        self.chat.append(ChatTurn(role="user", content=message))
        form.busy = True
        form.error = None
        form.text = ""
        try:
            reply = self.gateway.chat(message, prior_turns)
        except GatewayError as e:
            logger.error(f"Support chat failed: {e}")
            # Drop the unanswered turn so the transcript keeps alternating roles
            self.chat.pop()
            form.text = message
            form.error = "Support chat is unavailable right now."
            return None
        finally:
            form.busy = False

        turn = ChatTurn(role="assistant", content=reply.content or CHAT_FALLBACK)
        self.chat.append(turn)
        return turn
