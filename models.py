import json

from sqlalchemy import Column, Integer, String, Text, DateTime
from database import Base


class Incident(Base):
    __tablename__ = "incidents"

    id = Column(String, primary_key=True)
    kind = Column("type", String, nullable=False)          # website, audio
    target = Column(String, nullable=False)
    created_at = Column("timestamp", DateTime, nullable=False)
    risk_score = Column("riskScore", Integer, nullable=False)
    patterns_json = Column("patterns", Text, nullable=False, default="[]")

    @property
    def patterns(self):
        return json.loads(self.patterns_json or "[]")

    @patterns.setter
    def patterns(self, value):
        self.patterns_json = json.dumps(list(value or []))


class HoneypotEvent(Base):
    __tablename__ = "honeypot_events"

    id = Column(String, primary_key=True)
    scam_type = Column(String, nullable=False)
    intel_extracted = Column(Text, nullable=False)
    created_at = Column("timestamp", DateTime, nullable=False)
    # Incident that produced this event; plain column, not an enforced foreign key
    incident_id = Column(String, nullable=True)

    @property
    def extracted_intel(self):
        try:
            intel = json.loads(self.intel_extracted)
        except (TypeError, ValueError):
            return {"raw": self.intel_extracted}
        return intel if isinstance(intel, dict) else {"raw": self.intel_extracted}
