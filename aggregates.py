"""Dashboard and threat-intelligence aggregates.

Input records are plain mappings shaped like the API payloads:
incidents carry ``type``, ``target``, ``timestamp``, ``riskScore`` and
``patterns``; honeypot events carry ``scam_type``, ``intel_extracted``
(string or already-parsed mapping) and ``timestamp``.
"""

import json
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

KIND_LABELS = {"website": "Phishing", "audio": "Audio Fraud"}

INCIDENT_COLUMNS = ["id", "type", "target", "timestamp", "riskScore", "patterns"]


def risk_level(score: float) -> str:
    if score < 30:
        return "Low"
    elif score < 70:
        return "Medium"
    return "High"


def _frame(incidents: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(list(incidents), columns=INCIDENT_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601")
    df["riskScore"] = pd.to_numeric(df["riskScore"])
    return df.sort_values("timestamp", ascending=False)


def _today() -> date:
    return datetime.now(timezone.utc).date()


def dashboard_summary(incidents: Iterable[Dict[str, Any]], today: Optional[date] = None) -> Dict[str, Any]:
    today = today or _today()
    df = _frame(incidents)
    if df.empty:
        return {
            "total": 0,
            "today": 0,
            "by_kind": {kind: 0 for kind in KIND_LABELS},
            "average_risk": 0.0,
            "max_risk": 0,
            "risk_level": "Low",
            "recent": [],
        }

    by_kind = df["type"].value_counts()
    average = float(df["riskScore"].mean())
    recent = df.head(5).copy()
    recent["timestamp"] = recent["timestamp"].map(lambda ts: ts.isoformat())
    return {
        "total": int(len(df)),
        "today": int((df["timestamp"].dt.date == today).sum()),
        "by_kind": {kind: int(by_kind.get(kind, 0)) for kind in KIND_LABELS},
        "average_risk": round(average, 1),
        "max_risk": int(df["riskScore"].max()),
        "risk_level": risk_level(average),
        "recent": recent.to_dict(orient="records"),
    }


def threat_distribution(incidents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    counts = _frame(incidents)["type"].value_counts()
    return [{"name": label, "value": int(counts.get(kind, 0))} for kind, label in KIND_LABELS.items()]


def weekly_trend(incidents: Iterable[Dict[str, Any]], today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Detections per day over the last seven days, oldest first."""
    today = today or _today()
    days = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
    df = _frame(incidents)
    per_day = df["timestamp"].dt.date.value_counts()
    return [
        {"name": day.strftime("%a"), "date": day.isoformat(), "attempts": int(per_day.get(day, 0))}
        for day in days
    ]


def top_patterns(incidents: Iterable[Dict[str, Any]], n: int = 10) -> List[Dict[str, Any]]:
    df = _frame(incidents)
    patterns = df["patterns"].explode().dropna()
    if patterns.empty:
        return []
    counts = patterns.value_counts().head(n)
    return [{"pattern": pattern, "count": int(count)} for pattern, count in counts.items()]


def _parse_intel(value) -> Dict[str, Any]:
    if isinstance(value, dict):
        return value
    try:
        intel = json.loads(value)
    except (TypeError, ValueError):
        return {"raw": value}
    return intel if isinstance(intel, dict) else {"raw": value}


def honeypot_feed(events: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    feed = []
    for event in events:
        intel = event.get("extracted_intel", event.get("intel_extracted"))
        feed.append({
            "id": event.get("id"),
            "scam_type": event.get("scam_type"),
            "timestamp": event.get("timestamp"),
            "incident_id": event.get("incident_id"),
            "intel": _parse_intel(intel),
        })
    by_type = pd.Series([e["scam_type"] for e in feed], dtype="object").value_counts()
    return {
        "events": feed,
        "by_scam_type": {str(k): int(v) for k, v in by_type.items()},
    }


def intelligence_report(incidents: List[Dict[str, Any]], events: List[Dict[str, Any]],
                        today: Optional[date] = None) -> Dict[str, Any]:
    patterns = top_patterns(incidents)
    return {
        "distribution": threat_distribution(incidents),
        "trend": weekly_trend(incidents, today),
        "top_patterns": patterns,
        "patterns_extracted": sum(p["count"] for p in patterns),
        "honeypot": honeypot_feed(events),
    }
