import json
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="vocabmaster-tests-")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR}/test.db"
os.environ["JWT_COOKIE_CSRF_PROTECT"] = "false"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["DICTIONARY_CACHE_DELAY"] = "0"

import httpx
import pytest
from fastapi.testclient import TestClient

from core.database import Base, SessionLocal, engine, init_db
from main import app
from models.user import User
from services.dictionary_service import DictionaryApiClient
from services.word_status_service import WordStatusCache


DICTIONARY_PAYLOADS = {
    "abandon": [
        {
            "word": "abandon",
            "phonetic": "/əˈbændən/",
            "phonetics": [{"text": "/əˈbændən/", "audio": "https://example.test/abandon.mp3"}],
            "meanings": [
                {
                    "partOfSpeech": "verb",
                    "definitions": [
                        {
                            "definition": "To give up or relinquish control of.",
                            "example": "They abandoned the ship.",
                            "synonyms": ["desert"],
                            "antonyms": [],
                        }
                    ],
                }
            ],
        }
    ],
    "cat": [
        {
            "word": "cat",
            "phonetics": [{"text": "/kæt/"}],
            "meanings": [{"partOfSpeech": "noun", "definitions": [{"definition": "A small domesticated feline."}]}],
        }
    ],
    "dog": [
        {
            "word": "dog",
            "phonetics": [],
            "meanings": [{"partOfSpeech": "noun", "definitions": [{"definition": "A domesticated canine."}]}],
        }
    ],
}


class FakeDictionaryApi:
    """Stands in for the remote dictionary through an httpx mock transport."""

    def __init__(self, payloads=None):
        self.payloads = dict(DICTIONARY_PAYLOADS if payloads is None else payloads)
        self.calls: list[str] = []
        self.fail_with: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        word = request.url.path.rsplit("/", 1)[-1]
        self.calls.append(word)
        if self.fail_with is not None:
            raise self.fail_with
        payload = self.payloads.get(word)
        if payload is None:
            return httpx.Response(404, json={"title": "No Definitions Found"})
        return httpx.Response(200, content=json.dumps(payload).encode())

    def client(self) -> DictionaryApiClient:
        return DictionaryApiClient(
            base_url="https://dictionary.test/api/v2/entries/en/",
            timeout=5,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def db_session():
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def cache():
    return WordStatusCache(ttl_minutes=15)


@pytest.fixture
def fake_api():
    return FakeDictionaryApi()


@pytest.fixture
def make_user(db_session):
    def _make_user(name: str, role: str = "user") -> User:
        entity = User(name=name, password_hash="not-a-real-hash", role=role)
        db_session.add(entity)
        db_session.commit()
        db_session.refresh(entity)
        return entity

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user("learner")


@pytest.fixture
def client(db_session, fake_api):
    app.state.word_status_cache = WordStatusCache(ttl_minutes=15)
    app.state.dictionary_client = fake_api.client()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(client):
    def _login(name: str = "alice", password: str = "Secret123!") -> dict[str, str]:
        response = client.post("/api/account/register", json={"name": name, "password": password})
        assert response.status_code == 201, response.text
        response = client.post("/api/account/login", json={"name": name, "password": password})
        assert response.status_code == 200, response.text
        # authenticate with the bearer header only so several users can share one client
        client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
