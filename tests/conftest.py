import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.db.base import Base
from app.db.session import build_engine, close_session, get_db
from app.main import app
from app.services import chat_responder, emotion_analyzer
from app.storage import Storage, ensure_demo_user


class FakeOpenAI:
    """Stands in for call_openai. Offline (raises) unless a response is set."""

    def __init__(self):
        self.response = None
        self.error = RuntimeError("OpenAI unreachable")
        self.calls = []

    def reply_with(self, text):
        self.response = text
        self.error = None

    def fail_with(self, error):
        self.response = None
        self.error = error

    def __call__(self, system_prompt, messages, temperature, max_tokens=None, json_mode=False):
        self.calls.append({
            "system_prompt": system_prompt,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "json_mode": json_mode,
        })
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def fake_openai(monkeypatch):
    fake = FakeOpenAI()
    monkeypatch.setattr(emotion_analyzer, "call_openai", fake)
    monkeypatch.setattr(chat_responder, "call_openai", fake)
    return fake


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    db = factory()
    ensure_demo_user(Storage(db), settings.DEMO_USER_NAME, settings.DEMO_USER_EMAIL)
    db.close()

    yield factory
    engine.dispose()


@pytest.fixture
def storage(session_factory):
    db = session_factory()
    yield Storage(db)
    db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            close_session(db)

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
