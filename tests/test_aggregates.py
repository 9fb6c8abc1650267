from datetime import date

import aggregates

TODAY = date(2026, 10, 16)  # a Friday


def incident(ts, kind="website", score=50, patterns=()):
    return {"id": ts, "type": kind, "target": "t", "timestamp": ts, "riskScore": score, "patterns": list(patterns)}


def test_empty_summary():
    summary = aggregates.dashboard_summary([], today=TODAY)
    assert summary["total"] == 0
    assert summary["risk_level"] == "Low"
    assert summary["recent"] == []


def test_summary_counts_and_risk_level():
    incidents = [
        incident("2026-10-16T08:00:00", "website", 95),
        incident("2026-10-16T09:30:00.250000", "audio", 80),
        incident("2026-10-10T12:00:00", "website", 70),
    ]
    summary = aggregates.dashboard_summary(incidents, today=TODAY)

    assert summary["total"] == 3
    assert summary["today"] == 2
    assert summary["by_kind"] == {"website": 2, "audio": 1}
    assert summary["max_risk"] == 95
    assert summary["average_risk"] == 81.7
    assert summary["risk_level"] == "High"
    assert [r["riskScore"] for r in summary["recent"]] == [80, 95, 70]


def test_recent_is_limited_to_five():
    incidents = [incident(f"2026-10-0{d}T10:00:00") for d in range(1, 9)]
    recent = aggregates.dashboard_summary(incidents, today=TODAY)["recent"]
    assert len(recent) == 5
    assert recent[0]["timestamp"].startswith("2026-10-08")


def test_risk_level_bands():
    assert aggregates.risk_level(0) == "Low"
    assert aggregates.risk_level(29.9) == "Low"
    assert aggregates.risk_level(30) == "Medium"
    assert aggregates.risk_level(69) == "Medium"
    assert aggregates.risk_level(70) == "High"


def test_distribution_uses_real_counts():
    assert aggregates.threat_distribution([]) == [
        {"name": "Phishing", "value": 0},
        {"name": "Audio Fraud", "value": 0},
    ]
    counts = aggregates.threat_distribution([incident("2026-10-16T08:00:00", "audio")])
    assert counts[1] == {"name": "Audio Fraud", "value": 1}


def test_weekly_trend_covers_last_seven_days():
    incidents = [
        incident("2026-10-16T08:00:00"),
        incident("2026-10-16T22:00:00"),
        incident("2026-10-10T12:00:00"),
        incident("2026-10-01T12:00:00"),
    ]
    trend = aggregates.weekly_trend(incidents, today=TODAY)

    assert [d["date"] for d in trend][0] == "2026-10-10"
    assert trend[-1] == {"name": "Fri", "date": "2026-10-16", "attempts": 2}
    assert trend[0]["attempts"] == 1
    assert sum(d["attempts"] for d in trend) == 3


def test_top_patterns():
    incidents = [
        incident("2026-10-16T08:00:00", patterns=["urgency", "no SSL"]),
        incident("2026-10-15T08:00:00", patterns=["urgency"]),
        incident("2026-10-14T08:00:00"),
    ]
    assert aggregates.top_patterns(incidents) == [
        {"pattern": "urgency", "count": 2},
        {"pattern": "no SSL", "count": 1},
    ]
    assert aggregates.top_patterns([incident("2026-10-14T08:00:00")]) == []


def test_honeypot_feed_parses_intel():
    feed = aggregates.honeypot_feed([
        {"id": "1", "scam_type": "Phishing", "intel_extracted": '{"url": "http://a.test"}', "timestamp": "x"},
        {"id": "2", "scam_type": "Phishing", "intel_extracted": "garbled", "timestamp": "y"},
        {"id": "3", "scam_type": "Audio Fraud", "extracted_intel": {"alerts": []}, "timestamp": "z"},
    ])
    assert [e["intel"] for e in feed["events"]] == [{"url": "http://a.test"}, {"raw": "garbled"}, {"alerts": []}]
    assert feed["by_scam_type"] == {"Phishing": 2, "Audio Fraud": 1}


def test_honeypot_feed_wraps_non_object_intel():
    feed = aggregates.honeypot_feed([
        {"id": "1", "scam_type": "Phishing", "intel_extracted": '["a", "b"]', "timestamp": "x"},
        {"id": "2", "scam_type": "Phishing", "intel_extracted": "42", "timestamp": "y"},
    ])
    assert [e["intel"] for e in feed["events"]] == [{"raw": '["a", "b"]'}, {"raw": "42"}]
