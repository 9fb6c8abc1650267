"""Honeypot intelligence snapshots taken from flagged verdicts.

Shared by the dashboard, which builds them, and the honeypot log, which
stores them.
"""

from typing import Any, Dict

from schemas import AudioVerdict, WebsiteVerdict

WEBSITE_SCAM_TYPE = "Phishing"
AUDIO_SCAM_TYPE = "Audio Fraud"
EXCERPT_LIMIT = 200


def website_intel(url: str, verdict: WebsiteVerdict) -> Dict[str, Any]:
    return {"url": url, "reasons": verdict.reasons, "details": verdict.details}


def audio_intel(transcript: str, verdict: AudioVerdict) -> Dict[str, Any]:
    return {
        "alerts": verdict.alerts,
        "explanation": verdict.explanation,
        "transcript": transcript[:EXCERPT_LIMIT],
    }
