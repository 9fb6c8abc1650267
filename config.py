import os
from dotenv import load_dotenv

load_dotenv()


def _optional_int(name):
    value = os.getenv(name)
    return int(value) if value else None


class Config:
    DATABASE_URL = os.getenv("CYBERGUARD_DATABASE_URL", "sqlite:///./cyberguard.db")

    # Gemini analysis gateway
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_TIMEOUT_SECONDS = int(os.getenv("GEMINI_TIMEOUT_SECONDS", 30))

    # Backend as seen by the dashboard
    API_URL = os.getenv("CYBERGUARD_API_URL", "http://localhost:8000")
    API_TIMEOUT = int(os.getenv("CYBERGUARD_API_TIMEOUT", 10))

    LOG_LEVEL = os.getenv("CYBERGUARD_LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("CYBERGUARD_LOG_FILE", "")

    # Retention is off unless configured
    INCIDENT_RETENTION_DAYS = _optional_int("CYBERGUARD_INCIDENT_RETENTION_DAYS")
    HONEYPOT_MAX_ROWS = _optional_int("CYBERGUARD_HONEYPOT_MAX_ROWS")

settings = Config()
