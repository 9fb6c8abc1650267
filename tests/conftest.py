import os
import tempfile

# Point the module-level engine at a throwaway database before anything imports config
_tmpdir = tempfile.mkdtemp(prefix="cyberguard-tests-")
os.environ["CYBERGUARD_DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'import.db')}"
os.environ["GEMINI_API_KEY"] = ""

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from database import get_db, init_db
from main import app
from presentation import ApiClient
from schemas import AudioVerdict, ChatReply, WebsiteVerdict


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'cyberguard.db'}", connect_args={"check_same_thread": False}
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def lenient_client(client):
    """Same app and database as ``client``, but server errors come back as
    responses instead of being re-raised in the test."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def api(client):
    return ApiClient(base_url="http://testserver", session=client)


class FakeGateway:
    """Deterministic stand-in for the Gemini gateway."""

    def __init__(self, website=None, audio=None, reply="", error=None):
        self.website = website
        self.audio = audio
        self.reply = reply
        self.error = error
        self.calls = []

    def analyze_website(self, url):
        self.calls.append(("website", url))
        if self.error:
            raise self.error
        return WebsiteVerdict.model_validate(self.website)

    def analyze_transcript(self, transcript):
        self.calls.append(("audio", transcript))
        if self.error:
            raise self.error
        return AudioVerdict.model_validate(self.audio)

    def chat(self, message, prior_turns):
        self.calls.append(("chat", message, list(prior_turns)))
        if self.error:
            raise self.error
        return ChatReply(content=self.reply)


class BrokenWrites:
    """Wraps a test client; POSTs to the given paths fail at the network level."""

    def __init__(self, client, *paths):
        self.client = client
        self.paths = paths

    def get(self, url, **kwargs):
        return self.client.get(url, **kwargs)

    def post(self, url, **kwargs):
        if any(url.endswith(path) for path in self.paths):
            raise requests.ConnectionError(f"connection refused: {url}")
        return self.client.post(url, **kwargs)

